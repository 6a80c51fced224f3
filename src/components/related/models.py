"""
Related posts component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from src.domain.entities import BlogPost, ParsedBlogPost
from src.rules.models import RelatedPostsRules


@dataclass(frozen=True)
class ScoringConfig:
    """Weights of the additive relevance score."""

    category_match_weight: int = 3
    featured_weight: int = 2
    recency_weight: int = 1
    recency_window: timedelta = timedelta(days=30)
    candidate_pool_factor: int = 4
    default_limit: int = 6

    @classmethod
    def from_rules(cls, rules: RelatedPostsRules) -> ScoringConfig:
        return cls(
            category_match_weight=rules.category_match_weight,
            featured_weight=rules.featured_weight,
            recency_weight=rules.recency_weight,
            recency_window=timedelta(days=rules.recency_window_days),
            candidate_pool_factor=rules.candidate_pool_factor,
            default_limit=rules.default_limit,
        )


DEFAULT_SCORING = ScoringConfig()


@dataclass(frozen=True)
class GetRelatedInput:
    """Input for related posts of one post translation."""

    post_id: str
    locale: str
    categories: list[str] = field(default_factory=list)
    limit: int | None = None  # None -> config default


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate row with its relevance score."""

    post: BlogPost
    score: int


@dataclass(frozen=True)
class RelatedPostsOutput:
    """Ranked related posts, best first."""

    posts: list[ParsedBlogPost] = field(default_factory=list)
    ranked: list[ScoredCandidate] = field(default_factory=list)
    pool_size: int = 0
    success: bool = True
