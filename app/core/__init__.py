"""Core module - config, database, exceptions."""

from app.core.config import get_settings, Settings
from app.core.database import Database
from app.core.exceptions import DirectoryLookupError

__all__ = [
    "get_settings",
    "Settings",
    "Database",
    "DirectoryLookupError",
]
