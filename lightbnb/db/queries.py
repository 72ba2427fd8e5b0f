"""
Database Query Functions

Contains the data-access functions for users, reservations and properties.
Each function builds a QueryPlan and hands it to an explicitly passed
executor.
"""

from typing import Any, Dict, List, Mapping, Optional

from ..core.exceptions import InvalidRecordError
from ..core.logger import get_logger
from .connection import QueryExecutor
from .models import NewUser, Property, QueryPlan, Reservation, User
from .search import DEFAULT_LIMIT, build_property_search_query, validate_limit

logger = get_logger(__name__)

USER_COLUMNS = ("name", "email", "password")

PROPERTY_COLUMNS = (
    "owner_id",
    "title",
    "description",
    "thumbnail_photo_url",
    "cover_photo_url",
    "cost_per_night",
    "parking_spaces",
    "number_of_bathrooms",
    "number_of_bedrooms",
    "country",
    "street",
    "city",
    "province",
    "post_code",
)

REQUIRED_PROPERTY_COLUMNS = frozenset([
    "owner_id", "title", "cost_per_night",
    "country", "street", "city", "province", "post_code",
])

# Columns that default to zero instead of NULL when left out
_ZERO_DEFAULT_COLUMNS = frozenset([
    "parking_spaces", "number_of_bathrooms", "number_of_bedrooms",
])


def _require_mapping(record: Any, name: str) -> None:
    if not isinstance(record, Mapping):
        raise InvalidRecordError(
            name,
            message="Record must be a mapping",
            details=f"got {type(record).__name__}",
        )


def _first_row(rows: List[Dict]) -> Optional[Dict]:
    return rows[0] if rows else None


def _run(executor: QueryExecutor, plan: QueryPlan) -> List[Dict]:
    return executor.execute(plan.template, plan.params)


def _insert_plan(table: str, columns: tuple, values: tuple) -> QueryPlan:
    placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
    template = (
        f"INSERT INTO {table} ({', '.join(columns)})\n"
        f"VALUES ({placeholders})\n"
        "RETURNING *;"
    )
    return QueryPlan(template=template, params=values)


# =============================================================================
# USERS
# =============================================================================

def get_user_with_email(executor: QueryExecutor, email: str) -> Optional[User]:
    """
    Get a single user given their email.

    Returns:
        The user row, or None if no user has that email.
    """
    plan = QueryPlan("SELECT * FROM users WHERE email = $1;", (email,))
    return _first_row(_run(executor, plan))


def get_user_with_id(executor: QueryExecutor, user_id: Any) -> Optional[User]:
    """
    Get a single user given their id.

    Returns:
        The user row, or None if not found.
    """
    plan = QueryPlan("SELECT * FROM users WHERE id = $1;", (user_id,))
    return _first_row(_run(executor, plan))


def add_user(executor: QueryExecutor, user: NewUser) -> User:
    """
    Add a new user.

    Args:
        executor: Query executor
        user: Mapping with name, email and password

    Returns:
        The stored user row, including its id.

    Raises:
        InvalidRecordError: if name, email or password is missing,
            or user is not a mapping.
    """
    _require_mapping(user, "user")
    for column in USER_COLUMNS:
        if user.get(column) is None:
            raise InvalidRecordError(column)

    plan = _insert_plan("users", USER_COLUMNS, tuple(user[c] for c in USER_COLUMNS))
    stored = _first_row(_run(executor, plan))
    logger.info(f"Added user {stored.get('id') if stored else '?'}")
    return stored


# =============================================================================
# RESERVATIONS
# =============================================================================

_PAST_RESERVATIONS = """
SELECT properties.*, reservations.*, avg(property_reviews.rating) AS average_rating
FROM reservations
JOIN properties ON reservations.property_id = properties.id
JOIN property_reviews ON properties.id = property_reviews.property_id
WHERE reservations.guest_id = $1
AND reservations.end_date < now()::date
GROUP BY properties.id, reservations.id
ORDER BY reservations.start_date
LIMIT $2;
""".strip()


def get_all_reservations(
    executor: QueryExecutor,
    guest_id: Any,
    limit: int = DEFAULT_LIMIT,
) -> List[Reservation]:
    """
    Get the past reservations of a single guest.

    Args:
        executor: Query executor
        guest_id: The id of the guest
        limit: Maximum number of reservations to return

    Returns:
        Reservation rows joined to their property and its average rating,
        oldest first.
    """
    limit = validate_limit(limit)
    rows = _run(executor, QueryPlan(_PAST_RESERVATIONS, (guest_id, limit)))
    logger.info(f"Retrieved {len(rows)} reservations for guest {guest_id}")
    return rows


# =============================================================================
# PROPERTIES
# =============================================================================

def get_all_properties(
    executor: QueryExecutor,
    criteria: Any = None,
    limit: int = DEFAULT_LIMIT,
) -> List[Property]:
    """
    Get properties matching the search criteria, cheapest first.

    Args:
        executor: Query executor
        criteria: None, a mapping, or a SearchCriteria
        limit: Maximum number of properties to return

    Returns:
        Property rows, each with an average_rating.
    """
    plan = build_property_search_query(criteria, limit)
    rows = _run(executor, plan)
    logger.info(f"Retrieved {len(rows)} properties")
    return rows


def add_property(executor: QueryExecutor, prop: Mapping[str, Any]) -> Property:
    """
    Add a property.

    The input mapping is left untouched; the stored row (with the id the
    database assigned) is returned instead.

    Raises:
        InvalidRecordError: if a required column is missing, or prop is not
            a mapping.
    """
    _require_mapping(prop, "property")
    for column in PROPERTY_COLUMNS:
        if column in REQUIRED_PROPERTY_COLUMNS and prop.get(column) is None:
            raise InvalidRecordError(column)

    values = []
    for column in PROPERTY_COLUMNS:
        value = prop.get(column)
        if value is None and column in _ZERO_DEFAULT_COLUMNS:
            value = 0
        values.append(value)

    plan = _insert_plan("properties", PROPERTY_COLUMNS, tuple(values))
    stored = _first_row(_run(executor, plan))
    logger.info(f"Added property {stored.get('id') if stored else '?'}")
    return stored


__all__ = [
    "get_user_with_email",
    "get_user_with_id",
    "add_user",
    "get_all_reservations",
    "get_all_properties",
    "add_property",
    "USER_COLUMNS",
    "PROPERTY_COLUMNS",
    "REQUIRED_PROPERTY_COLUMNS",
]
