"""Knowledge Agent: answers from the fuzzy knowledge base (story, hours, wifi, items by name...)."""
from ..data.knowledge_store import KnowledgeBase, KnowledgeIndexUnavailable
from ..schemas.dialogue import ResolvedContext, Signals
from ..schemas.io_models import AgentResult
from ..utils.logger import get_logger
from .base_agent import BaseAgent

logger = get_logger()


class KnowledgeAgent(BaseAgent):
    name = "knowledge"

    def __init__(self, knowledge: KnowledgeBase):
        self.knowledge = knowledge

    def handle(self, message: str, signals: Signals = None, resolved: ResolvedContext = None) -> AgentResult:
        try:
            matches = self.knowledge.search(message)
        except KnowledgeIndexUnavailable as e:
            logger.warning(f"[WORKFLOW] Knowledge fallback skipped: {e}")
            return self._empty("knowledge", {"unavailable": True})
        if not matches:
            return self._empty("knowledge")
        top = matches[0]
        return self._ok("knowledge", top.response, len(matches), {"matched": top.matched, "score": top.score})
