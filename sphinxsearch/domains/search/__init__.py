"""
Search Domain - Query composition and result pagination over searchd.

This domain handles:
- Search request parameters and sort selection
- Offset clamping against the daemon's result window
- Result normalization to document ids
- Page window arithmetic
"""

from .contracts import ClientFactory, FilterHook, SearchClient, Searcher
from .engine import SearchEngine
from .models import (
    MAX_MATCHES,
    DocumentMatch,
    MatchMode,
    QueryResult,
    ResultSet,
    SearchRequest,
    SortMode,
    SortOrder,
)
from .paginator import Paginator

__all__ = [
    "SearchClient",
    "Searcher",
    "ClientFactory",
    "FilterHook",
    "SearchEngine",
    "Paginator",
    "MAX_MATCHES",
    "SearchRequest",
    "ResultSet",
    "SortOrder",
    "MatchMode",
    "SortMode",
    "DocumentMatch",
    "QueryResult",
]
