from __future__ import annotations

import sys
from enum import Enum
from typing import Any, Optional

import typer

from dbconnect.config import Settings, get_settings
from dbconnect.domain.models import RedisOptions
from dbconnect.infrastructure.connectors import (
    new_mongo_connection,
    new_mysql_connection,
    new_postgres_connection,
    new_redis_connection,
    new_sqlite_connection,
)
from dbconnect.reporter import print_ping_result, print_targets
from dbconnect.utils.logging import configure_logging, get_logger
from dbconnect.utils.profiler import profile_block

app = typer.Typer(help="Open and ping configured data store connections.")
log = get_logger(__name__)


class Backend(str, Enum):
    mongodb = "mongodb"
    mysql = "mysql"
    postgres = "postgres"
    sqlite = "sqlite"
    redis = "redis"


def _connect(backend: Backend, settings: Settings, target: Optional[str]) -> Any:
    """Run the connector for `backend` against `target` or the configured default."""
    if backend is Backend.mongodb:
        return new_mongo_connection(target or settings.mongo_uri)
    if backend is Backend.mysql:
        return new_mysql_connection(target or settings.mysql_dsn)
    if backend is Backend.postgres:
        return new_postgres_connection(target or settings.postgres_dsn)
    if backend is Backend.sqlite:
        if target:
            # file: URIs are DSNs, anything else is a database path
            if target.startswith("file:"):
                return new_sqlite_connection(target, "")
            return new_sqlite_connection("", target)
        return new_sqlite_connection(settings.sqlite_dsn, settings.sqlite_path)
    if target:
        return new_redis_connection(target)
    if settings.redis_password:
        return new_redis_connection(
            RedisOptions(addr=settings.redis_addr, password=settings.redis_password)
        )
    return new_redis_connection(settings.redis_addr)


@app.command()
def info() -> None:
    """
    Show the configured connection targets (credentials masked).
    """
    print_targets(get_settings())


@app.command()
def ping(
    backend: Backend = typer.Argument(..., help="Backend to connect to."),
    target: Optional[str] = typer.Option(
        None,
        "--target",
        "-t",
        help="URI, DSN, address or SQLite path overriding the configured one.",
    ),
) -> None:
    """
    Open a connection, ping it, report the elapsed time and close it.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    with profile_block(backend.value) as stats:
        handle = _connect(backend, settings, target)
    try:
        print_ping_result(backend.value, stats)
    finally:
        handle.close()
        log.debug(f"Closed {backend.value} handle", extra={"backend": backend.value})


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
