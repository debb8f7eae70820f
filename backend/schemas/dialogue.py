"""Value types shared by the classifier, the context resolver and the query builder."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Optional


class Domain(str, enum.Enum):
    art = "Art"
    workshop = "Workshop"
    menu = "Menu"


class Context(str, enum.Enum):
    food = "Food"
    drink = "Drink"


class SubCategory(str, enum.Enum):
    tea = "Tea"
    coffee = "Coffee"
    shake = "Shake"


@dataclass(frozen=True)
class Signals:
    """Everything the classifier could read off one message."""

    is_art: bool = False
    is_workshop: bool = False
    is_rec_trigger: bool = False
    is_cheapest: bool = False
    is_expensive: bool = False
    is_tired: bool = False
    is_follow_up: bool = False
    current_context: Optional[Context] = None
    sub_category: Optional[SubCategory] = None
    flavor_keywords: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_price_sort(self) -> bool:
        return self.is_cheapest or self.is_expensive

    @property
    def domain(self) -> Domain:
        if self.is_art:
            return Domain.art
        if self.is_workshop:
            return Domain.workshop
        return Domain.menu


@dataclass(frozen=True)
class ResolvedContext:
    context: Optional[Context] = None
    sub_category: Optional[SubCategory] = None
    # explicit | inherited | tired | None
    source: Optional[str] = None
