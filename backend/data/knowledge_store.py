"""Fuzzy-matched canned answers for questions the catalog cannot answer.

Entries pair a list of tag phrases with a response. Static entries come from
``raw/knowledge.json``; ``rebuild`` adds one entry per menu item, available
art piece and workshop read from the catalog, then swaps the new index in
whole, so searches never see a half-built index.

A tag matches when every one of its words appears in the message, allowing
small typos per word ("wifii" still finds "wifi"). A message that merely
shares one word with a tag does not match.
"""
import json
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from rapidfuzz import fuzz, process, utils

from ..app.config import Config
from ..app.postprocess import format_price
from ..schemas.io_models import ArtItem, CatalogItem, RankedMatch, Workshop
from ..utils.logger import get_logger

logger = get_logger("knowledge")


class KnowledgeIndexUnavailable(Exception):
    """Raised when searching before any index has been built."""


@dataclass
class KnowledgeEntry:
    tags: List[str]
    response: str
    topic: str = ""


def _words(text: str) -> Tuple[str, ...]:
    return tuple(utils.default_process(text).split())


@dataclass
class _Index:
    entries: List[KnowledgeEntry]
    phrases: List[str] = field(default_factory=list)
    words: List[Tuple[str, ...]] = field(default_factory=list)
    owners: List[int] = field(default_factory=list)

    @classmethod
    def build(cls, entries: Sequence[KnowledgeEntry]) -> "_Index":
        index = cls(entries=list(entries))
        for i, entry in enumerate(index.entries):
            for tag in dict.fromkeys(t.strip().lower() for t in entry.tags if t and t.strip()):
                words = _words(tag)
                if not words:
                    continue
                index.phrases.append(tag)
                index.words.append(words)
                index.owners.append(i)
        return index


def load_static_entries(path: str) -> List[KnowledgeEntry]:
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    return [KnowledgeEntry(tags=list(e["tags"]), response=e["response"], topic=e.get("topic", "")) for e in raw]


def menu_entries(items: Sequence[CatalogItem]) -> List[KnowledgeEntry]:
    entries = []
    for item in items:
        response = f"The {item.name} ({format_price(item.price)}) is a {item.category}."
        if item.tags:
            response += f" It's {', '.join(item.tags[:3])}."
        if item.caffeine_level:
            response += f" Caffeine level: {item.caffeine_level}."
        entries.append(KnowledgeEntry(tags=[item.name.lower()], response=response, topic=f"menu:{item.id}"))
    return entries


def art_entries(items: Sequence[ArtItem]) -> List[KnowledgeEntry]:
    entries = []
    for item in items:
        if not item.available:
            continue
        title, artist = item.title.lower(), item.artist.lower()
        entries.append(KnowledgeEntry(
            tags=[title, f"{title} by {artist}"],
            response=(
                f'"{item.title}" by {item.artist} is available in our gallery for '
                f"{format_price(item.price)}. It's a stunning piece for any collection."
            ),
            topic=f"art:{item.id}",
        ))
    return entries


def workshop_entries(workshops: Sequence[Workshop]) -> List[KnowledgeEntry]:
    entries = []
    for w in workshops:
        response = f"{w.title} is an upcoming workshop on {w.datetime}"
        response += f" for {format_price(w.price)}" if w.price > 0 else " (free)"
        if w.sold_out:
            response += ". Currently SOLD OUT."
        else:
            response += f". {w.remaining} seats available out of {w.seats} total."
        entries.append(KnowledgeEntry(
            tags=[w.title.lower()],
            response=response,
            topic=f"workshop:{w.id}",
        ))
    return entries


class KnowledgeBase:
    def __init__(self, path: Optional[str] = None, score_cutoff: Optional[float] = None):
        self.path = path or Config.KNOWLEDGE_FILE
        self.score_cutoff = Config.KNOWLEDGE_SCORE_CUTOFF if score_cutoff is None else score_cutoff
        self._index: Optional[_Index] = None
        self._build_lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self._index is not None

    @property
    def size(self) -> int:
        index = self._index
        return len(index.entries) if index is not None else 0

    def rebuild(self, catalog=None) -> int:
        """
        Build a fresh index from the static file plus the catalog, then swap it in.

        Args:
            catalog: Optional CatalogStore; without one only static entries are indexed

        Returns:
            Number of entries in the new index
        """
        with self._build_lock:
            entries = load_static_entries(self.path)
            if catalog is not None:
                entries += menu_entries(catalog.list_menu_items())
                entries += art_entries(catalog.list_art_items(available_only=True))
                entries += workshop_entries(catalog.list_workshops())
            self._index = _Index.build(entries)
        logger.info(f"Knowledge index built with {len(entries)} entries")
        return len(entries)

    def search(self, text: str, limit: int = 5) -> List[RankedMatch]:
        """Best-first matches for ``text``, one per entry, at or above the score cutoff."""
        index = self._index
        if index is None:
            raise KnowledgeIndexUnavailable("knowledge index has not been built yet")
        query = _words(text or "")
        if not query or not index.phrases:
            return []

        best: Dict[int, Tuple[float, int, str]] = {}
        for phrase, words, owner in zip(index.phrases, index.words, index.owners):
            score = self._phrase_score(words, query)
            if score is None:
                continue
            # Longer phrases are more specific, so they win ties
            rank = (score, len(words), phrase)
            if owner not in best or rank[:2] > best[owner][:2]:
                best[owner] = rank
        ordered = sorted(best.items(), key=lambda kv: kv[1][:2], reverse=True)
        return [
            RankedMatch(response=index.entries[owner].response, score=score, matched=phrase)
            for owner, (score, _, phrase) in ordered[:limit]
        ]

    def _phrase_score(self, words: Sequence[str], query: Sequence[str]) -> Optional[float]:
        """Mean per-word similarity when every tag word has a close word in the query."""
        scores = []
        for word in words:
            hit = process.extractOne(word, query, scorer=fuzz.ratio, score_cutoff=self.score_cutoff)
            if hit is None:
                return None
            scores.append(hit[1])
        return sum(scores) / len(scores)
