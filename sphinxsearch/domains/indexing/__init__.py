"""
Indexing Domain - Delta index rebuilds via the external indexer.
"""

from .models import ReindexOutcome
from .reindexer import Reindexer

__all__ = [
    "Reindexer",
    "ReindexOutcome",
]
