"""
Domain package for dbconnect.

Exports the structured connection configurations accepted by the connectors.
Keep this package focused on data definitions and validation concerns.
"""

from dbconnect.domain.models import MySQLConfig, RedisOptions, parse_dsn

__all__ = [
    "MySQLConfig",
    "RedisOptions",
    "parse_dsn",
]
