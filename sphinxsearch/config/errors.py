"""
Error Taxonomy - Consistent error codes across the package.

Usage:
    from sphinxsearch.config.errors import ErrorCode, SphinxSearchError

    raise SphinxSearchError(ErrorCode.SEARCH_EXECUTION_FAILED, "searchd unreachable")
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sphinxsearch.domains.indexing.models import ReindexOutcome


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Configuration errors
    CONFIGURATION_INVALID = "CONFIGURATION_INVALID"

    # Search errors
    SEARCH_EXECUTION_FAILED = "SEARCH_EXECUTION_FAILED"

    # Indexing errors
    REINDEX_FAILED = "REINDEX_FAILED"


class SphinxSearchError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to a serializable dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(SphinxSearchError):
    """Required configuration is missing or invalid."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.CONFIGURATION_INVALID, message, details)


class SearchExecutionError(SphinxSearchError):
    """The search daemon returned no response or an error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.SEARCH_EXECUTION_FAILED, message, details)


class ReindexError(SphinxSearchError):
    """The re-index command exited unsuccessfully."""

    def __init__(
        self,
        message: str,
        outcome: ReindexOutcome | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.outcome = outcome
        if outcome is not None:
            details = {
                "index_name": outcome.index_name,
                "exit_code": outcome.exit_code,
                "error_detail": outcome.error_detail,
                **(details or {}),
            }
        super().__init__(ErrorCode.REINDEX_FAILED, message, details)
