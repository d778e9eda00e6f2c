"""
Search Models - Data types for search domain.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from .paginator import Paginator

# Most matches searchd will ever return for a query (its max_matches default).
MAX_MATCHES = 1000


class SortOrder(str, Enum):
    """Direction of an attribute sort."""

    ASCENDING = "ASC"
    DESCENDING = "DESC"


class MatchMode(IntEnum):
    """How query terms combine on the daemon side."""

    ALL = 0
    ANY = 1
    PHRASE = 2
    BOOLEAN = 3
    EXTENDED = 4
    FULLSCAN = 5
    EXTENDED2 = 6


class SortMode(IntEnum):
    """How the daemon orders matches."""

    RELEVANCE = 0
    ATTR_DESC = 1
    ATTR_ASC = 2
    TIME_SEGMENTS = 3
    EXTENDED = 4
    EXPR = 5


class SearchRequest(BaseModel):
    """Parameters for a single search."""

    phrase: str | None = None
    offset: int = Field(default=0, ge=0)
    page_size: int = Field(default=100, gt=0)
    index_names: str = "*"  # space separated
    sort_field: str = ""
    sort_order: SortOrder = SortOrder.DESCENDING

    model_config = {"frozen": True}

    @property
    def sort_by_relevance(self) -> bool:
        """Relevance only applies when there is something to match."""
        return bool(self.phrase)

    def query_string(self) -> str:
        """URL query string that reproduces this search, e.g. ``search=door+fault``."""
        if self.phrase is None:
            return ""
        return urlencode({"search": self.phrase})

    def for_page(self, paginator: Paginator) -> SearchRequest:
        """Copy of this request windowed to the paginator's current page."""
        return self.model_copy(
            update={"offset": paginator.offset, "page_size": paginator.page_size}
        )

    def __str__(self) -> str:
        return f"SearchRequest: {self.phrase}"


class ResultSet(BaseModel):
    """Matched document ids plus the total the daemon knows about."""

    ids: list[int] = Field(default_factory=list)
    total_found: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    @field_validator("ids", mode="before")
    @classmethod
    def _widen_ids(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return [int(v) for v in value]
        return value

    @classmethod
    def empty(cls) -> ResultSet:
        return cls(ids=[], total_found=0)

    def __len__(self) -> int:
        return len(self.ids)

    def __iter__(self) -> Iterator[int]:  # type: ignore[override]
        return iter(self.ids)


class DocumentMatch(BaseModel):
    """A single match as reported by the daemon."""

    doc_id: int
    weight: float = 0.0
    attrs: dict[str, Any] = Field(default_factory=dict)


class QueryResult(BaseModel):
    """Raw query response from the search client."""

    matches: list[DocumentMatch] = Field(default_factory=list)
    total: int = 0
    total_found: int = 0
    time: float = 0.0
