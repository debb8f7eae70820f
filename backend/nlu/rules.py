"""Rule-based intent classifier: keyword vocabularies evaluated into a Signals bundle."""
from typing import FrozenSet, Iterable, Optional, Tuple

from ..schemas.dialogue import Context, Signals, SubCategory

ART      = ("art", "gallery", "painting", "artist", "piece")
WORKSHOP = ("workshop", "class", "learn", "course")
REC_TRIGGER = ("suggest", "recommend", "good", "want", "like", "try", "need", "ordering", "have")
TIRED    = ("tired", "sleepy", "wake", "energy", "caffeine", "buzz")
FOLLOW_UP = ("then", "what about", "how about", "and")
CHEAPEST = ("cheap", "lowest", "least")
EXPENSIVE = ("expensive", "highest", "most")
FLAVORS  = ("strong", "sweet", "cold", "hot", "fruity", "milky", "creamy", "chocolate", "spicy", "savory")

FOOD  = ("food", "eat", "snack", "side", "hungry", "meal", "bite", "bagel", "croissant", "pizza", "fries", "nuggets")
DRINK = ("drink", "beverage", "thirsty", "sip")

# Checked in this order; the first family that matches wins.
SUB_CATEGORIES: Tuple[Tuple[SubCategory, Tuple[str, ...]], ...] = (
    (SubCategory.tea, ("tea",)),
    (SubCategory.shake, ("shake",)),
    (SubCategory.coffee, ("coffee", "latte", "espresso", "americano", "mocha", "cappuccino", "brew", "frappe")),
)


def _contains_any(text: str, vocab: Iterable[str]) -> bool:
    return any(word in text for word in vocab)


def _matching(text: str, vocab: Iterable[str]) -> FrozenSet[str]:
    return frozenset(word for word in vocab if word in text)


def _sub_category(text: str) -> Optional[SubCategory]:
    for sub, words in SUB_CATEGORIES:
        if _contains_any(text, words):
            return sub
    return None


def _current_context(text: str, sub: Optional[SubCategory]) -> Optional[Context]:
    # A named drink family is the strongest hint; otherwise food words beat generic drink words
    if sub is not None:
        return Context.drink
    if _contains_any(text, FOOD):
        return Context.food
    if _contains_any(text, DRINK):
        return Context.drink
    return None


def classify(text: str) -> Signals:
    """Turn a raw chat message into a Signals bundle.

    Every flag is plain substring containment against the vocabularies above,
    so "classic" counts as a workshop word and "start" as an art word. Callers
    that care about priority read ``Signals.domain`` (Art > Workshop > Menu);
    when both price words are present ``is_cheapest`` is the one honoured.
    """
    t = (text or "").lower()
    sub = _sub_category(t)
    return Signals(
        is_art=_contains_any(t, ART),
        is_workshop=_contains_any(t, WORKSHOP),
        is_rec_trigger=_contains_any(t, REC_TRIGGER),
        is_cheapest=_contains_any(t, CHEAPEST),
        is_expensive=_contains_any(t, EXPENSIVE),
        is_tired=_contains_any(t, TIRED),
        is_follow_up=_contains_any(t, FOLLOW_UP),
        current_context=_current_context(t, sub),
        sub_category=sub,
        flavor_keywords=_matching(t, FLAVORS),
    )
