"""
Database Module

Provides connection handling, the property search query builder and the
data-access functions for users, reservations and properties.

Usage:
    from lightbnb.db import PostgresExecutor, get_all_properties

    executor = PostgresExecutor()
    get_all_properties(executor, {"city": "Vancouver"}, limit=5)
"""

# Connection management
from .connection import (
    QueryExecutor,
    PostgresExecutor,
    get_db_connection,
    get_connection,
    test_connection,
    to_pyformat,
)

# Query building
from .search import (
    DEFAULT_LIMIT,
    build_property_search_query,
    validate_limit,
)

# Query functions
from .queries import (
    get_user_with_email,
    get_user_with_id,
    add_user,
    get_all_reservations,
    get_all_properties,
    add_property,
)

# Models and types
from .models import (
    User,
    NewUser,
    Property,
    Reservation,
    SearchCriteria,
    QueryPlan,
)

__all__ = [
    # Connection
    'QueryExecutor',
    'PostgresExecutor',
    'get_db_connection',
    'get_connection',
    'test_connection',
    'to_pyformat',
    # Query building
    'DEFAULT_LIMIT',
    'build_property_search_query',
    'validate_limit',
    # Queries
    'get_user_with_email',
    'get_user_with_id',
    'add_user',
    'get_all_reservations',
    'get_all_properties',
    'add_property',
    # Models
    'User',
    'NewUser',
    'Property',
    'Reservation',
    'SearchCriteria',
    'QueryPlan',
]
