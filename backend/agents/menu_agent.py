"""Menu Agent: builds the menu query for a turn and phrases the rows it gets back."""
from ..app.postprocess import compose_menu_reply
from ..app.query_builder import build_menu_query
from ..data.catalog import CatalogStore
from ..schemas.dialogue import ResolvedContext, Signals
from ..schemas.io_models import AgentResult
from ..utils.logger import get_logger
from .base_agent import BaseAgent

logger = get_logger()


class MenuAgent(BaseAgent):
    name = "menu"

    def __init__(self, catalog: CatalogStore):
        self.catalog = catalog

    def handle(self, message: str, signals: Signals, resolved: ResolvedContext) -> AgentResult:
        spec = build_menu_query(signals, resolved)
        logger.info(
            f"[WORKFLOW] Menu query: clauses={[type(c).__name__ for c in spec.clauses]} "
            f"order={spec.order_by.value} limit={spec.limit}"
        )
        items = self.catalog.list_menu_items(spec)
        facts = {"order_by": spec.order_by.value, "limit": spec.limit, "items": [i.id for i in items]}
        if not items:
            return self._empty("menu_recommendation", facts)
        return self._ok("menu_recommendation", compose_menu_reply(items, signals, resolved), len(items), facts)
