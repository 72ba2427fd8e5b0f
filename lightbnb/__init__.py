"""
LightBnB data layer.

Lookups and inserts for users, reservations and properties of the LightBnB
vacation-rental app, backed by PostgreSQL.
"""

__version__ = "1.0.0"
