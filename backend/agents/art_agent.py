"""Art Agent: lists the gallery, or picks one piece when asked for a suggestion or a price extreme."""
import random
from typing import Optional

from ..app.postprocess import compose_art_listing, compose_art_pick, pick_art
from ..data.catalog import CatalogStore
from ..schemas.dialogue import ResolvedContext, Signals
from ..schemas.io_models import AgentResult
from .base_agent import BaseAgent


class ArtAgent(BaseAgent):
    name = "art"

    def __init__(self, catalog: CatalogStore, rng: Optional[random.Random] = None):
        self.catalog = catalog
        self.rng = rng or random.Random()

    def handle(self, message: str, signals: Signals, resolved: ResolvedContext) -> AgentResult:
        items = self.catalog.list_art_items(available_only=True)
        if not items:
            return self._empty("art")
        if signals.is_rec_trigger or signals.is_price_sort:
            piece = pick_art(items, signals, self.rng)
            return self._ok("art_pick", compose_art_pick(piece, signals), len(items), {"picked": piece.id})
        return self._ok("art_listing", compose_art_listing(items), len(items))
