#!/usr/bin/env python3
"""
Session management module for the barista chatbot.

Each chat session remembers the last menu context (Food/Drink) and drink
sub-category it resolved, so a follow-up like "what about tea" can inherit
what the previous turn was about. State lives in process memory only and is
lost on restart.

Concurrency contract:
    ``SessionStore.lock(session_id)`` hands out one of a fixed set of mutex
    shards, chosen by hashing the session id. The controller holds that lock
    for the whole turn, so turns of the same session run one at a time and
    never interleave their read/write of the remembered context. Turns of
    different sessions only contend when their ids land on the same shard.
    Without the lock two concurrent turns of one session would race and the
    last ``put`` would win.

Eviction:
    Every ``get`` or ``put`` refreshes the entry's timestamp and moves it to
    the back, so the map stays ordered by last use. Entries idle for longer
    than ``ttl_seconds`` are dropped on access and by a sweep on every
    ``put``; past ``max_entries`` the least recently used entry is evicted.
"""

from __future__ import annotations

import threading
import time
import zlib
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Callable, Iterator, List, Optional

from ..schemas.dialogue import Context, SubCategory
from .config import Config


@dataclass
class SessionState:
    session_id: str
    last_context: Optional[Context] = None
    last_sub_category: Optional[SubCategory] = None
    updated_at: float = field(default_factory=time.monotonic)


class SessionStore:
    """Keyed in-memory store for per-conversation context."""

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        lock_shards: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl_seconds: Idle time after which a session is forgotten
            max_entries: Upper bound on remembered sessions
            lock_shards: Number of per-session mutex shards
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else Config.SESSION_TTL_SECONDS
        self.max_entries = max_entries if max_entries is not None else Config.SESSION_MAX_ENTRIES
        shards = lock_shards if lock_shards is not None else Config.SESSION_LOCK_SHARDS
        self._clock = clock
        self._sessions: "OrderedDict[str, SessionState]" = OrderedDict()
        # Guards the OrderedDict itself; shard locks serialize whole turns
        self._mutex = threading.Lock()
        self._shards: List[threading.Lock] = [threading.Lock() for _ in range(max(1, shards))]

    def __len__(self) -> int:
        with self._mutex:
            self._sweep()
            return len(self._sessions)

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        """Hold the mutex shard owning ``session_id`` for the duration of a turn."""
        shard = self._shards[zlib.crc32(session_id.encode("utf-8")) % len(self._shards)]
        with shard:
            yield

    def get(self, session_id: str) -> Optional[SessionState]:
        """
        Retrieve a copy of the session state.

        Returns:
            The state, or None when unknown or expired
        """
        with self._mutex:
            state = self._sessions.get(session_id)
            if state is None:
                return None
            if self._expired(state):
                del self._sessions[session_id]
                return None
            state.updated_at = self._clock()
            self._sessions.move_to_end(session_id)
            return replace(state)

    def put(self, session_id: str, state: SessionState) -> None:
        """Store ``state`` under ``session_id``, evicting stale or surplus sessions."""
        with self._mutex:
            stored = replace(state, session_id=session_id, updated_at=self._clock())
            self._sessions[session_id] = stored
            self._sessions.move_to_end(session_id)
            self._sweep()
            while len(self._sessions) > self.max_entries:
                self._sessions.popitem(last=False)

    def get_or_create(self, session_id: str) -> SessionState:
        """Return the session, creating an empty one on first sight."""
        state = self.get(session_id)
        if state is None:
            state = SessionState(session_id=session_id, updated_at=self._clock())
            self.put(session_id, state)
        return state

    def remember(
        self,
        session_id: str,
        context: Optional[Context],
        sub_category: Optional[SubCategory],
    ) -> SessionState:
        """Write back resolved values; None never erases what is already known."""
        state = self.get(session_id) or SessionState(session_id=session_id)
        if context is not None:
            state.last_context = context
        if sub_category is not None:
            state.last_sub_category = sub_category
        self.put(session_id, state)
        return state

    def clear(self, session_id: str) -> bool:
        with self._mutex:
            return self._sessions.pop(session_id, None) is not None

    def _expired(self, state: SessionState) -> bool:
        return (self._clock() - state.updated_at) > self.ttl_seconds

    def _sweep(self) -> None:
        # Front to back is least to most recently used; stop at the first live one
        while self._sessions:
            oldest_id, oldest = next(iter(self._sessions.items()))
            if not self._expired(oldest):
                break
            del self._sessions[oldest_id]
