"""
CLI Interface - Command-line tools for sphinxsearch.

Provides commands for:
- Paginated search queries
- Delta index rebuilds
"""

from .main import app, main

__all__ = ["app", "main"]
