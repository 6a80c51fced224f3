"""
Related posts component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from src.domain.entities import BlogPost


class CandidateRepoPort(Protocol):
    """Source of candidate posts for recommendation."""

    def list_related_candidates(
        self,
        *,
        exclude_post_id: str,
        locale: str,
        limit: int,
    ) -> list[BlogPost]:
        """
        Published posts in ``locale`` whose post_id differs from
        ``exclude_post_id``, most recent published_at first (undated last),
        at most ``limit`` rows.
        """
        ...


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
