"""
Utilities package for dbconnect.

Exports shared helpers for logging and timing.
Keep this package lightweight and free of backend-specific logic.
"""

from dbconnect.utils.logging import configure_logging, get_logger
from dbconnect.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
