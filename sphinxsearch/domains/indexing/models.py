"""
Indexing Models - Data types for indexing domain.
"""

from __future__ import annotations

from pydantic import BaseModel


class ReindexOutcome(BaseModel):
    """Result of one index command run."""

    index_name: str
    success: bool
    exit_code: int
    output: str = ""
    error_detail: str | None = None

    model_config = {"frozen": True}
