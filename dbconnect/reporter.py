from __future__ import annotations

import re
from typing import List, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit

from rich import box
from rich.console import Console
from rich.table import Table

from dbconnect.config import Settings
from dbconnect.utils.profiler import ProfileStats

_MASK = "***"
_KEYVALUE_PASSWORD = re.compile(r"(\bpassword\s*=\s*)('(?:[^'\\]|\\.)*'|\S+)")


def mask_target(target: str) -> str:
    """
    Hide the password in a URI or libpq key/value connection string.

    Targets without credentials (addresses, file paths) are returned unchanged.
    """
    if "://" not in target:
        return _KEYVALUE_PASSWORD.sub(lambda m: m.group(1) + _MASK, target)

    try:
        parts = urlsplit(target)
    except ValueError:
        return target
    userinfo, sep, hostinfo = parts.netloc.rpartition("@")
    if not sep or ":" not in userinfo:
        return target
    user = userinfo.split(":", 1)[0]
    return urlunsplit(parts._replace(netloc=f"{user}:{_MASK}@{hostinfo}"))


def configured_targets(settings: Settings) -> List[Tuple[str, str]]:
    """(backend, masked target) pairs for every configured backend."""
    redis_target = settings.redis_addr
    if settings.redis_password:
        redis_target = f"{redis_target} (password {_MASK})"
    sqlite_target = settings.sqlite_dsn or f"{settings.sqlite_path} (file)"
    return [
        ("mongodb", mask_target(settings.mongo_uri)),
        ("mysql", mask_target(settings.mysql_dsn)),
        ("postgres", mask_target(settings.postgres_dsn)),
        ("sqlite", sqlite_target),
        ("redis", redis_target),
    ]


def print_targets(settings: Settings, console: Optional[Console] = None) -> None:
    """
    Render the configured connection targets as a rich table.
    """
    console = console or Console()
    table = Table(
        title="Configured Targets",
        box=box.ROUNDED,
        caption=f"Environment: {settings.app_env}",
    )
    table.add_column("Backend", style="cyan", no_wrap=True)
    table.add_column("Target", style="magenta")

    for backend, target in configured_targets(settings):
        table.add_row(backend, target)

    console.print(table)


def print_ping_result(backend: str, stats: ProfileStats, console: Optional[Console] = None) -> None:
    """Print a one-line success summary for a connector run."""
    console = console or Console()
    console.print(
        f"[bold green]OK[/bold green] [cyan]{backend}[/cyan] "
        f"connected and pinged in {stats.duration_ms:.1f} ms"
    )


__all__ = ["configured_targets", "mask_target", "print_ping_result", "print_targets"]
