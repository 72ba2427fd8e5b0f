"""
Property Search Query Builder

Turns optional search criteria and a result limit into a parameterized
PostgreSQL query. Pure and synchronous: nothing here touches the database.

Usage:
    from lightbnb.db.search import build_property_search_query

    plan = build_property_search_query({"city": "Toronto"}, limit=5)
    rows = executor.execute(plan.template, plan.params)
"""

import numbers
from typing import Any, Callable, List, NamedTuple, Optional

from ..core.exceptions import InvalidLimitError
from ..core.logger import get_logger
from .models import QueryPlan, SearchCriteria

logger = get_logger(__name__)

DEFAULT_LIMIT = 10

_PROPERTY_SEARCH_BASE = (
    "SELECT properties.*, avg(property_reviews.rating) AS average_rating\n"
    "FROM properties\n"
    "JOIN property_reviews ON properties.id = property_reviews.property_id"
)


class _FilterRule(NamedTuple):
    field: str
    clause: str  # one "{}" slot for the placeholder
    to_param: Optional[Callable[[Any], Any]] = None


# Clause order is fixed so identical criteria always yield identical SQL.
PROPERTY_FILTER_RULES = (
    _FilterRule("city", "properties.city LIKE {}", lambda city: f"%{city}%"),
    _FilterRule("minimum_rating", "property_reviews.rating >= {}"),
    _FilterRule("minimum_price_per_night", "properties.cost_per_night > {}"),
    _FilterRule("maximum_price_per_night", "properties.cost_per_night < {}"),
    _FilterRule("owner_id", "properties.owner_id = {}"),
)


class ParamSink:
    """Collects params and hands out PostgreSQL ``$n`` placeholders in order."""

    def __init__(self):
        self.params: List[Any] = []

    def add(self, value: Any) -> str:
        self.params.append(value)
        return f"${len(self.params)}"

    def bundle(self) -> tuple:
        return tuple(self.params)


def validate_limit(limit: Any) -> int:
    """
    Check that a result limit is a positive integer.

    Raises:
        InvalidLimitError: for booleans, non-integers and values below 1.
    """
    if isinstance(limit, bool) or not isinstance(limit, numbers.Integral):
        raise InvalidLimitError(limit)
    if limit <= 0:
        raise InvalidLimitError(limit)
    return int(limit)


def build_property_search_query(criteria: Any = None, limit: int = DEFAULT_LIMIT) -> QueryPlan:
    """
    Build the property search query.

    Each present criterion adds one predicate, in the order of
    PROPERTY_FILTER_RULES, joined with AND under a single WHERE. With no
    criteria the WHERE clause is omitted. The limit is always the last param.

    Args:
        criteria: None, a mapping, or a SearchCriteria. Not modified.
        limit: Maximum number of properties to return.

    Returns:
        QueryPlan with the template and its ordered params.

    Raises:
        InvalidLimitError: if limit is not a positive integer.
        InvalidCriteriaError: if a recognized criterion is malformed.
    """
    limit = validate_limit(limit)
    search = SearchCriteria.from_input(criteria)

    sink = ParamSink()
    filters: List[str] = []
    for rule in PROPERTY_FILTER_RULES:
        value = getattr(search, rule.field)
        if value is None:
            continue
        param = rule.to_param(value) if rule.to_param else value
        filters.append(rule.clause.format(sink.add(param)))

    lines = [_PROPERTY_SEARCH_BASE]
    if filters:
        lines.append("WHERE " + " AND ".join(filters))
    lines.append("GROUP BY properties.id")
    lines.append("ORDER BY properties.cost_per_night")
    lines.append(f"LIMIT {sink.add(limit)};")

    plan = QueryPlan(template="\n".join(lines), params=sink.bundle())
    logger.debug(f"Property search query: {plan.template} {list(plan.params)}")
    return plan


__all__ = [
    "DEFAULT_LIMIT",
    "PROPERTY_FILTER_RULES",
    "ParamSink",
    "validate_limit",
    "build_property_search_query",
]
