"""
Related posts component - Category/featured/recency scoring of sibling posts.
"""

from .component import (
    get_related_posts,
    is_recent,
    rank_candidates,
    run_get_related,
    score_candidate,
)
from .models import (
    DEFAULT_SCORING,
    GetRelatedInput,
    RelatedPostsOutput,
    ScoredCandidate,
    ScoringConfig,
)
from .ports import CandidateRepoPort, TimePort

__all__ = [
    # Entry points
    "get_related_posts",
    "run_get_related",
    # Scoring
    "is_recent",
    "rank_candidates",
    "score_candidate",
    # Models
    "DEFAULT_SCORING",
    "GetRelatedInput",
    "RelatedPostsOutput",
    "ScoredCandidate",
    "ScoringConfig",
    # Ports
    "CandidateRepoPort",
    "TimePort",
]
