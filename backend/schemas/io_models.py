"""Pydantic models for API I/O and the read-only catalog views used by agents."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = ""
    session_id: Optional[str] = Field(default=None, alias="sessionId")

class ChatResponse(BaseModel):
    reply: str

class SessionCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")

class SessionCreateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    created: bool

class CatalogItem(BaseModel):
    id: str
    name: str
    category: str
    price: float
    caffeine_level: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

class ArtItem(BaseModel):
    id: str
    title: str
    artist: str
    price: float
    available: bool

class Workshop(BaseModel):
    id: str
    title: str
    datetime: str
    seats: int
    booked: int
    price: float

    @property
    def remaining(self) -> int:
        return self.seats - self.booked

    @property
    def sold_out(self) -> bool:
        return self.remaining <= 0

class RankedMatch(BaseModel):
    response: str
    score: float
    matched: str

class AgentResult(BaseModel):
    agent: str
    intent: str
    reply: Optional[str] = None
    rows: int = 0
    facts: Dict[str, Any] = Field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.reply is not None
