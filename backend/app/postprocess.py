#!/usr/bin/env python3
"""
Response composition for the barista chatbot.

Turns catalog rows into the short, friendly replies the chat widget shows,
and holds the fixed strings used by the fallback stages.
"""

import random
import re
from typing import List, Optional, Sequence

from ..schemas.dialogue import ResolvedContext, Signals
from ..schemas.io_models import ArtItem, CatalogItem, Workshop
from .config import Config

NO_MATCH_REPLY = "Sorry, I couldn't find any items matching those criteria."
MENU_HINT_REPLY = (
    "You can browse everything on our Menu page, or just tell me what you're in "
    "the mood for, like a coffee, a tea, a shake or a snack!"
)
DEFAULT_HELP_REPLY = (
    "I'm the Rabuste barista! Ask me to suggest a drink or a snack, find the cheapest "
    "or most premium item, pick something when you're tired, show our art gallery, "
    "or list upcoming workshops."
)
APOLOGY_REPLY = "I'm having a little trouble reaching the menu right now. Please try again in a moment! ☕"

MAX_TAGS = 3


def format_price(value: float, symbol: Optional[str] = None) -> str:
    """Render a price with the currency symbol; whole amounts drop the decimals."""
    symbol = Config.CURRENCY_SYMBOL if symbol is None else symbol
    amount = float(value)
    if amount.is_integer():
        return f"{symbol}{int(amount)}"
    return f"{symbol}{amount:.2f}"


def format_response(response: str) -> str:
    """Collapse whitespace on each line and drop spaces before punctuation."""
    lines = []
    for line in response.splitlines():
        line = re.sub(r'[ \t]+', ' ', line).strip()
        line = re.sub(r' +([,.!?;:])', r'\1', line)
        lines.append(line)
    return "\n".join(lines).strip()


def _label(resolved: ResolvedContext) -> str:
    return resolved.context.value.lower() if resolved.context is not None else "item"


def compose_menu_reply(items: Sequence[CatalogItem], signals: Signals, resolved: ResolvedContext) -> str:
    """
    Phrase a successful menu lookup.

    Args:
        items: Rows returned by the catalog (at least one)
        signals: Classifier output for the turn
        resolved: Context the query was built from

    Returns:
        Reply text
    """
    if not items:
        raise ValueError("compose_menu_reply needs at least one item")
    top = items[0]
    price = format_price(top.price)

    if signals.is_tired:
        caffeine = top.caffeine_level or "plenty of"
        return format_response(
            f"Need an energy boost? Try the {top.name} ({price}) - it packs {caffeine} caffeine to wake you right up!"
        )

    if signals.is_price_sort:
        label = _label(resolved)
        if signals.is_cheapest:
            return format_response(f"The cheapest {label} is {top.name} at {price}.")
        return format_response(f"Our most premium {label} is {top.name} at {price}.")

    reply = f"I suggest {top.name} ({price})."
    tags = top.tags[:MAX_TAGS]
    if tags:
        reply += f" It's {', '.join(tags)}."
    others = [i.name for i in items[1:]]
    if others:
        reply += f" Also worth a try: {', '.join(others)}."
    return format_response(reply)


def compose_art_listing(items: Sequence[ArtItem]) -> str:
    lines = ["Here's what's hanging in our gallery right now:"]
    lines += [f"{a.title} — {a.artist} — {format_price(a.price)}" for a in items]
    return "\n".join(lines)


def pick_art(items: Sequence[ArtItem], signals: Signals, rng: Optional[random.Random] = None) -> ArtItem:
    """Cheapest or priciest piece on a price trigger (cheapest first), otherwise a random one."""
    if not items:
        raise ValueError("pick_art needs at least one item")
    if signals.is_cheapest:
        return min(items, key=lambda a: (a.price, a.id))
    if signals.is_expensive:
        return max(items, key=lambda a: (a.price, a.id))
    return (rng or random).choice(list(items))


def compose_art_pick(item: ArtItem, signals: Signals) -> str:
    price = format_price(item.price)
    if signals.is_cheapest:
        return f'Our most affordable piece is "{item.title}" by {item.artist} at {price}.'
    if signals.is_expensive:
        return f'Our most premium piece is "{item.title}" by {item.artist} at {price}.'
    return f'You might love "{item.title}" by {item.artist} ({price}). It\'s available in our gallery right now!'


def compose_workshop_listing(workshops: Sequence[Workshop]) -> str:
    lines: List[str] = ["Upcoming workshops:"]
    for w in workshops:
        seats = "SOLD OUT" if w.sold_out else f"{w.remaining} seats left"
        price = "Free" if w.price <= 0 else format_price(w.price)
        lines.append(f"{w.title} — {w.datetime} — {price} — {seats}")
    return "\n".join(lines)
