"""
Configuration - Search daemon settings and error taxonomy.
"""

from .errors import (
    ConfigurationError,
    ErrorCode,
    ReindexError,
    SearchExecutionError,
    SphinxSearchError,
)
from .settings import Settings, get_settings, load_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "load_settings",
    # Errors
    "ErrorCode",
    "SphinxSearchError",
    "ConfigurationError",
    "SearchExecutionError",
    "ReindexError",
]
