"""Core application components."""

from .config import Settings, settings
from .database import Database
from .logging import get_logger, setup_logging

__all__ = [
    "settings",
    "Settings",
    "Database",
    "get_logger",
    "setup_logging",
]
