"""Merge this turn's signals with the session's remembered context."""
from typing import Optional

from ..app.session import SessionState, SessionStore
from ..schemas.dialogue import Context, ResolvedContext, Signals


def resolve_context(signals: Signals, session: Optional[SessionState]) -> ResolvedContext:
    """Resolve the active Food/Drink context and drink sub-category for a turn.

    Explicit words win, a follow-up inherits from the session, and an energy
    need forces Drink last so ``source == "tired"`` stays distinguishable
    from an inherited Drink.
    """
    context = None
    source = None
    if signals.current_context is not None:
        context = signals.current_context
        source = "explicit"
    elif signals.is_follow_up and session is not None and session.last_context is not None:
        context = session.last_context
        source = "inherited"

    sub_category = signals.sub_category
    if sub_category is None and signals.is_follow_up and session is not None:
        sub_category = session.last_sub_category

    if signals.is_tired:
        context = Context.drink
        source = "tired"

    return ResolvedContext(context=context, sub_category=sub_category, source=source)


def remember_context(store: SessionStore, session_id: Optional[str], resolved: ResolvedContext) -> None:
    """Persist a turn's resolution; stateless turns (no session id) write nothing."""
    if not session_id:
        return
    store.remember(session_id, resolved.context, resolved.sub_category)
