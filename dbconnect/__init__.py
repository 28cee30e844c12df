"""
dbconnect - startup helpers that open and validate data store connections.

Each connector accepts a connection string or a structured configuration,
opens the backend's native client, pings it and returns the live handle.
Failures are logged with the failing stage and terminate the process.

Supported backends:

- MongoDB (pymongo)
- MySQL (PyMySQL)
- PostgreSQL (psycopg)
- SQLite (sqlite3)
- Redis (redis-py)
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from dbconnect.config import Settings, get_settings
from dbconnect.domain.models import MySQLConfig, RedisOptions, parse_dsn
from dbconnect.infrastructure.connectors import (
    new_mongo_connection,
    new_mysql_connection,
    new_postgres_connection,
    new_redis_connection,
    new_sqlite_connection,
)
from dbconnect.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Structured configs
    "MySQLConfig",
    "RedisOptions",
    "parse_dsn",
    # Connectors
    "new_mongo_connection",
    "new_mysql_connection",
    "new_postgres_connection",
    "new_redis_connection",
    "new_sqlite_connection",
    # Logging
    "configure_logging",
    "get_logger",
]
