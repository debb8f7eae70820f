"""Workshop Agent: lists every workshop with remaining seats."""
from ..app.postprocess import compose_workshop_listing
from ..data.catalog import CatalogStore
from ..schemas.dialogue import ResolvedContext, Signals
from ..schemas.io_models import AgentResult
from .base_agent import BaseAgent


class WorkshopAgent(BaseAgent):
    name = "workshop"

    def __init__(self, catalog: CatalogStore):
        self.catalog = catalog

    def handle(self, message: str, signals: Signals, resolved: ResolvedContext) -> AgentResult:
        workshops = self.catalog.list_workshops()
        if not workshops:
            return self._empty("workshops")
        facts = {"sold_out": [w.id for w in workshops if w.sold_out]}
        return self._ok("workshops", compose_workshop_listing(workshops), len(workshops), facts)
