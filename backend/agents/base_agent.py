"""BaseAgent interface for all agents."""
from abc import ABC, abstractmethod
from typing import Any, Dict

from ..schemas.dialogue import ResolvedContext, Signals
from ..schemas.io_models import AgentResult


class BaseAgent(ABC):
    name: str = "base"

    @abstractmethod
    def handle(self, message: str, signals: Signals, resolved: ResolvedContext) -> AgentResult:
        """Answer one turn; ``reply`` stays None when the agent found nothing."""
        ...

    def _ok(self, intent: str, reply: str, rows: int, facts: Dict[str, Any] = None) -> AgentResult:
        return AgentResult(agent=self.name, intent=intent, reply=reply, rows=rows, facts=facts or {})

    def _empty(self, intent: str, facts: Dict[str, Any] = None) -> AgentResult:
        return AgentResult(agent=self.name, intent=intent, rows=0, facts=facts or {})
