"""
Infrastructure package for dbconnect.

Centralizes the backend connection constructors. Keep this layer focused on
opening and validating driver handles; what callers do with them is theirs.
"""

from dbconnect.infrastructure.connectors import (
    new_mongo_connection,
    new_mysql_connection,
    new_postgres_connection,
    new_redis_connection,
    new_sqlite_connection,
)

__all__ = [
    "new_mongo_connection",
    "new_mysql_connection",
    "new_postgres_connection",
    "new_redis_connection",
    "new_sqlite_connection",
]
