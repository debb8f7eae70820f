"""Controller / Orchestrator: one pass per chat turn through a fixed fallback chain.

1. Catalog path (Art, Workshop, or Menu when its gate fires); rows found -> reply, remember context.
2. Menu tried with a price sort and nothing found -> fixed no-match reply.
3. Menu tried without a price sort, or no catalog gate fired -> knowledge fallback.
4. Message mentions "menu" -> menu hint.
5. Otherwise -> default help.

A catalog failure or timeout at any point ends the turn with the apology reply.
"""
import enum
import random
from dataclasses import dataclass
from typing import Optional

from ..agents.art_agent import ArtAgent
from ..agents.knowledge_agent import KnowledgeAgent
from ..agents.menu_agent import MenuAgent
from ..agents.workshop_agent import WorkshopAgent
from ..data.catalog import CatalogQueryError, CatalogStore
from ..data.knowledge_store import KnowledgeBase
from ..nlu.context_resolver import remember_context, resolve_context
from ..nlu.rules import classify
from ..schemas.dialogue import Domain, ResolvedContext, Signals
from ..schemas.io_models import AgentResult
from ..utils.logger import get_logger
from ..utils.security import mask_pii
from .postprocess import APOLOGY_REPLY, DEFAULT_HELP_REPLY, MENU_HINT_REPLY, NO_MATCH_REPLY
from .query_builder import should_query_menu
from .session import SessionStore

logger = get_logger()


class Stage(str, enum.Enum):
    catalog = "catalog"
    no_match = "no_match"
    knowledge = "knowledge"
    menu_hint = "menu_hint"
    default_help = "default_help"
    apology = "apology"


@dataclass(frozen=True)
class TurnResult:
    reply: str
    stage: Stage
    domain: Domain
    agent: Optional[str] = None


class Controller:
    def __init__(
        self,
        catalog: Optional[CatalogStore] = None,
        knowledge: Optional[KnowledgeBase] = None,
        sessions: Optional[SessionStore] = None,
        rng: Optional[random.Random] = None,
    ):
        self.catalog = catalog or CatalogStore()
        self.knowledge = knowledge or KnowledgeBase()
        self.sessions = sessions or SessionStore()
        self.menu_agent = MenuAgent(self.catalog)
        self.art_agent = ArtAgent(self.catalog, rng)
        self.workshop_agent = WorkshopAgent(self.catalog)
        self.knowledge_agent = KnowledgeAgent(self.knowledge)

    def handle_turn(self, message: str, session_id: Optional[str] = None) -> TurnResult:
        """
        Produce the reply for one chat message.

        Args:
            message: Raw user text
            session_id: Conversation key; None runs the turn statelessly

        Returns:
            TurnResult with the reply and the stage that produced it
        """
        message = message or ""
        if not session_id:
            return self._turn(message, None)
        # Same-session turns run one at a time
        with self.sessions.lock(session_id):
            return self._turn(message, session_id)

    def _turn(self, message: str, session_id: Optional[str]) -> TurnResult:
        logger.info(f"[WORKFLOW] 1. Controller received message: '{mask_pii(message)}' (session={session_id})")
        signals = classify(message)
        session = self.sessions.get_or_create(session_id) if session_id else None
        resolved = resolve_context(signals, session)
        domain = signals.domain
        context = resolved.context.value if resolved.context else None
        sub_category = resolved.sub_category.value if resolved.sub_category else None
        logger.info(
            f"[WORKFLOW] 2. Domain={domain.value} context={context} "
            f"sub_category={sub_category} source={resolved.source}"
        )

        try:
            result = self._catalog_path(message, signals, resolved)
        except CatalogQueryError as e:
            logger.warning(f"[WORKFLOW] Catalog unavailable, apologising: {e}")
            return TurnResult(APOLOGY_REPLY, Stage.apology, domain)

        if result is not None and result.found:
            remember_context(self.sessions, session_id, resolved)
            logger.info(f"[WORKFLOW] 3. {result.agent} agent answered with {result.rows} row(s)")
            return TurnResult(result.reply, Stage.catalog, domain, result.agent)

        if result is not None and domain is Domain.menu and signals.is_price_sort:
            logger.info("[WORKFLOW] 3. Price-sorted menu query found nothing")
            return TurnResult(NO_MATCH_REPLY, Stage.no_match, domain, result.agent)

        logger.info("[WORKFLOW] 3. Trying knowledge fallback")
        fallback = self.knowledge_agent.handle(message, signals, resolved)
        if fallback.found:
            return TurnResult(fallback.reply, Stage.knowledge, domain, fallback.agent)

        if "menu" in message.lower():
            return TurnResult(MENU_HINT_REPLY, Stage.menu_hint, domain)
        return TurnResult(DEFAULT_HELP_REPLY, Stage.default_help, domain)

    def _catalog_path(self, message: str, signals: Signals, resolved: ResolvedContext) -> Optional[AgentResult]:
        """Run the catalog agent for the turn's domain; None when no catalog gate fired."""
        if signals.domain is Domain.art:
            return self.art_agent.handle(message, signals, resolved)
        if signals.domain is Domain.workshop:
            return self.workshop_agent.handle(message, signals, resolved)
        if should_query_menu(signals, resolved):
            return self.menu_agent.handle(message, signals, resolved)
        return None
