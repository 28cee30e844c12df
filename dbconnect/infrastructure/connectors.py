"""
Connection constructors for dbconnect.

One function per supported backend. Each one normalizes its input, opens a
client with the backend's own driver, pings it, and returns the live handle.
They are meant for application startup wiring: any failure is logged at
CRITICAL level with the failing stage and the process exits with status 1.

Stages reported on failure (``stage`` attribute of the log record):

- ``config``: input of the wrong type or an invalid structured configuration
- ``url``: the URI/DSN could not be parsed
- ``scheme``: the MongoDB URI scheme is not accepted
- ``create``: the SQLite database file could not be created
- ``open``: the driver rejected the parameters or could not connect
- ``ping``: the liveness probe failed

The caller owns every returned handle and is responsible for closing it.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path
from typing import NoReturn, Optional, Union
from urllib.parse import quote, urlsplit

import psycopg
import pymysql
import redis
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError

from dbconnect.domain.models import MySQLConfig, RedisOptions, parse_dsn
from dbconnect.utils.logging import get_logger

log = get_logger(__name__)

MONGO_SCHEMES = ("mongodb", "mongodb+srv")
SQLITE_URI_PARAMS = "cache=shared&mode=rwc"


def _abort(logger: logging.Logger, backend: str, stage: str, message: str) -> NoReturn:
    """Log a fatal connector failure and terminate the process."""
    logger.critical(message, extra={"backend": backend, "stage": stage})
    raise SystemExit(1)


def new_mongo_connection(
    connection_uri: str, *, logger: Optional[logging.Logger] = None
) -> MongoClient:
    """
    Connect to MongoDB and verify the server answers a ping.

    Parameters
    ----------
    connection_uri : str
        ``mongodb://`` or ``mongodb+srv://`` connection string.
    logger : logging.Logger, optional
        Logger receiving progress and failure records.

    Returns
    -------
    MongoClient
        A client whose deployment answered ``ping``.
    """
    logger = logger or log
    if not isinstance(connection_uri, str):
        _abort(logger, "mongodb", "config", f"Invalid config type: {type(connection_uri).__name__}")

    try:
        parsed = urlsplit(connection_uri)
    except ValueError as exc:
        _abort(logger, "mongodb", "url", f"Invalid URL format: {exc}")

    if parsed.scheme not in MONGO_SCHEMES:
        _abort(
            logger,
            "mongodb",
            "scheme",
            f"Invalid scheme: {parsed.scheme!r}. Expected 'mongodb' or 'mongodb+srv'",
        )

    try:
        client: MongoClient = MongoClient(connection_uri)
    except ValueError as exc:
        # pymongo's URI parser raises plain ValueError for malformed ports
        _abort(logger, "mongodb", "url", f"Invalid URL format: {exc}")
    except PyMongoError as exc:
        _abort(logger, "mongodb", "open", f"Failed to open MongoDB client: {exc}")

    logger.info("Trying to ping the MongoDB deployment", extra={"backend": "mongodb"})
    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        client.close()
        _abort(logger, "mongodb", "ping", f"Failed to ping MongoDB: {exc}")

    logger.info("Successfully connected to MongoDB", extra={"backend": "mongodb"})
    return client


def new_mysql_connection(
    cfg: Union[str, MySQLConfig], *, logger: Optional[logging.Logger] = None
) -> pymysql.connections.Connection:
    """
    Connect to MySQL from a DSN string or a `MySQLConfig`, then ping it.

    A config and the DSN produced by its `MySQLConfig.format_dsn` connect with
    identical driver arguments.

    Parameters
    ----------
    cfg : str | MySQLConfig
        ``mysql://`` DSN or structured configuration.
    logger : logging.Logger, optional
        Logger receiving progress and failure records.

    Returns
    -------
    pymysql.connections.Connection
        An open connection that answered ``COM_PING``.
    """
    logger = logger or log
    if isinstance(cfg, MySQLConfig):
        config = cfg
    elif isinstance(cfg, str):
        try:
            config = parse_dsn(cfg)
        except ValueError as exc:
            _abort(logger, "mysql", "url", f"Invalid MySQL DSN: {exc}")
    else:
        _abort(logger, "mysql", "config", f"Invalid config type: {type(cfg).__name__}")

    try:
        connect_kwargs = config.connect_kwargs()
    except ValueError as exc:
        _abort(logger, "mysql", "config", f"Invalid MySQL config: {exc}")

    try:
        conn = pymysql.connect(**connect_kwargs)
    except pymysql.MySQLError as exc:
        _abort(logger, "mysql", "open", f"Failed to open database connection: {exc}")

    logger.info("Trying to ping the MySQL database", extra={"backend": "mysql"})
    try:
        conn.ping(reconnect=False)
    except pymysql.MySQLError as exc:
        conn.close()
        _abort(logger, "mysql", "ping", f"Failed to ping database: {exc}")

    logger.info("Successfully connected to the MySQL database", extra={"backend": "mysql"})
    return conn


def new_postgres_connection(
    dsn: str, *, logger: Optional[logging.Logger] = None
) -> psycopg.Connection:
    """
    Connect to PostgreSQL with a libpq DSN and run ``SELECT 1``.

    Parameters
    ----------
    dsn : str
        URI (``postgres://user:pw@host:5432/db?sslmode=disable``) or
        key/value connection string.
    logger : logging.Logger, optional
        Logger receiving progress and failure records.
    """
    logger = logger or log
    if not isinstance(dsn, str):
        _abort(logger, "postgres", "config", f"Invalid config type: {type(dsn).__name__}")

    try:
        conn = psycopg.connect(dsn)
    except psycopg.Error as exc:
        _abort(logger, "postgres", "open", f"Failed to open database connection: {exc}")

    logger.info("Trying to ping the PostgreSQL database", extra={"backend": "postgres"})
    try:
        conn.execute("SELECT 1")
    except psycopg.Error as exc:
        conn.close()
        _abort(logger, "postgres", "ping", f"Failed to ping database: {exc}")

    logger.info("Successfully connected to the PostgreSQL database", extra={"backend": "postgres"})
    return conn


def new_sqlite_connection(
    dsn: str = "",
    file_path: Union[str, os.PathLike[str]] = "",
    *,
    logger: Optional[logging.Logger] = None,
) -> sqlite3.Connection:
    """
    Open an SQLite database from a DSN or a file path and verify it is readable.

    A non-empty `dsn` wins and is used verbatim (``file:`` DSNs are opened in
    URI mode). Otherwise `file_path` is used: a missing file is created empty
    and opened as ``file:<path>?cache=shared&mode=rwc``.

    Parameters
    ----------
    dsn : str
        SQLite URI or plain filename. May be empty.
    file_path : str | os.PathLike
        Database file, used only when `dsn` is empty.
    logger : logging.Logger, optional
        Logger receiving progress and failure records.
    """
    logger = logger or log
    if not isinstance(dsn, str) or not isinstance(file_path, (str, os.PathLike)):
        _abort(
            logger,
            "sqlite",
            "config",
            f"Invalid config type: ({type(dsn).__name__}, {type(file_path).__name__})",
        )

    path = os.fspath(file_path)
    if dsn:
        target = dsn
    elif path:
        if not os.path.exists(path):
            logger.info(
                f"SQLite database file does not exist, creating new database at {path}",
                extra={"backend": "sqlite"},
            )
            try:
                Path(path).touch()
            except OSError as exc:
                _abort(logger, "sqlite", "create", f"Failed to create SQLite database file: {exc}")
        target = f"file:{quote(path)}?{SQLITE_URI_PARAMS}"
    else:
        _abort(
            logger,
            "sqlite",
            "config",
            "Both connection string and file path are empty. Cannot connect to SQLite.",
        )

    logger.info(f"Opening SQLite database {target}", extra={"backend": "sqlite"})
    try:
        conn = sqlite3.connect(target, uri=target.startswith("file:"), check_same_thread=False)
    except sqlite3.Error as exc:
        _abort(logger, "sqlite", "open", f"Failed to open SQLite database connection: {exc}")

    logger.info("Trying to ping the SQLite database", extra={"backend": "sqlite"})
    try:
        conn.execute("PRAGMA schema_version").fetchone()
    except sqlite3.Error as exc:
        conn.close()
        _abort(logger, "sqlite", "ping", f"Failed to ping SQLite database: {exc}")

    logger.info("Successfully connected to SQLite database", extra={"backend": "sqlite"})
    return conn


def new_redis_connection(
    cfg: Union[str, RedisOptions], *, logger: Optional[logging.Logger] = None
) -> redis.Redis:
    """
    Create a Redis client from an address or `RedisOptions` and ping the server.

    A bare ``host:port`` address is wrapped in `RedisOptions` without
    credentials; a `RedisOptions` value is used unchanged.

    Parameters
    ----------
    cfg : str | RedisOptions
        Server address or structured options.
    logger : logging.Logger, optional
        Logger receiving progress and failure records.
    """
    logger = logger or log
    if isinstance(cfg, RedisOptions):
        options = cfg
    elif isinstance(cfg, str):
        options = RedisOptions(addr=cfg)
    else:
        _abort(logger, "redis", "config", f"Invalid config type: {type(cfg).__name__}")

    try:
        client_kwargs = options.client_kwargs()
    except ValueError as exc:
        _abort(logger, "redis", "config", f"Invalid Redis options: {exc}")

    try:
        client = redis.Redis(**client_kwargs)
    except (RedisError, ValueError) as exc:
        _abort(logger, "redis", "open", f"Failed to create Redis client: {exc}")

    logger.info("Trying to ping the Redis server", extra={"backend": "redis"})
    try:
        client.ping()
    except RedisError as exc:
        client.close()
        _abort(logger, "redis", "ping", f"Failed to connect to Redis: {exc}")

    logger.info("Successfully connected to Redis", extra={"backend": "redis"})
    return client


__all__ = [
    "MONGO_SCHEMES",
    "new_mongo_connection",
    "new_mysql_connection",
    "new_postgres_connection",
    "new_redis_connection",
    "new_sqlite_connection",
]
