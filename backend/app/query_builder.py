"""Turn classified signals plus resolved context into a menu QuerySpec."""
from typing import List

from ..data.query_spec import (
    CaffeineIn,
    ExcludeFood,
    FlavorAny,
    FoodOnly,
    OrderBy,
    QuerySpec,
    SubCategoryIs,
)
from ..schemas.dialogue import Context, Domain, ResolvedContext, Signals

DEFAULT_LIMIT = 3


def should_query_menu(signals: Signals, resolved: ResolvedContext) -> bool:
    """Gate for attempting a menu query at all."""
    if signals.domain is not Domain.menu:
        return False
    return any((
        signals.is_rec_trigger,
        signals.is_price_sort,
        signals.is_follow_up,
        resolved.context is not None,
        signals.is_tired,
    ))


def build_menu_query(signals: Signals, resolved: ResolvedContext) -> QuerySpec:
    """
    Build the menu query as a precedence chain.

    Energy need pins one high-caffeine pick, the context filter narrows to
    food or drinks (and a drink family), a price sort pins one row ordered by
    price, flavors add an ORed tag clause, and otherwise three random rows.

    Raises:
        ValueError: when called for an Art or Workshop turn
    """
    if signals.domain is not Domain.menu:
        raise ValueError(f"No menu query for {signals.domain.value} turns")

    clauses: List = []
    order_by = OrderBy.random
    limit = DEFAULT_LIMIT

    if signals.is_tired:
        clauses.append(CaffeineIn())
        limit = 1

    if resolved.context is Context.food:
        clauses.append(FoodOnly())
    elif resolved.context is Context.drink:
        clauses.append(ExcludeFood())
        if resolved.sub_category is not None:
            clauses.append(SubCategoryIs(resolved.sub_category))

    if signals.is_price_sort:
        limit = 1
        order_by = OrderBy.price_asc if signals.is_cheapest else OrderBy.price_desc

    if signals.flavor_keywords:
        clauses.append(FlavorAny(signals.flavor_keywords))

    return QuerySpec(clauses=tuple(clauses), order_by=order_by, limit=limit)
