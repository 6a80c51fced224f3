"""
Related posts component - Rank sibling posts for a post detail page.

Scoring is additive per candidate:
- category_match_weight for each category shared with the source post
- featured_weight if the candidate is featured
- recency_weight if published less than recency_window before now

Invariants:
- I1: The source post (any locale) never appears in its own results
- I2: Only published posts of the same locale are candidates
- I3: The pool is the candidate_pool_factor x limit most recent candidates;
      older posts are never scored
- I4: Order is score desc, then published_at desc, undated posts last
- I5: At most ``limit`` posts are returned
"""

from __future__ import annotations

import math
from collections.abc import Collection
from datetime import UTC, datetime

from src.components.documents import parse_blog_post, parse_categories
from src.domain.entities import BlogPost, ParsedBlogPost

from .models import (
    DEFAULT_SCORING,
    GetRelatedInput,
    RelatedPostsOutput,
    ScoredCandidate,
    ScoringConfig,
)
from .ports import CandidateRepoPort, TimePort


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def is_recent(published_at: datetime | None, now: datetime, config: ScoringConfig) -> bool:
    """Binary freshness: published less than the recency window before now."""
    if published_at is None:
        return False
    return _as_utc(now) - _as_utc(published_at) < config.recency_window


def score_candidate(
    candidate: BlogPost,
    source_categories: Collection[str],
    now: datetime,
    config: ScoringConfig = DEFAULT_SCORING,
) -> int:
    """Relevance of one candidate row to the source post."""
    wanted = set(source_categories)
    shared = sum(1 for slug in parse_categories(candidate.categories) if slug in wanted)

    score = shared * config.category_match_weight
    if candidate.featured:
        score += config.featured_weight
    if is_recent(candidate.published_at, now, config):
        score += config.recency_weight
    return score


def _sort_key(item: ScoredCandidate) -> tuple[int, float]:
    published_at = item.post.published_at
    timestamp = _as_utc(published_at).timestamp() if published_at else -math.inf
    return (-item.score, -timestamp)


def rank_candidates(
    candidates: list[BlogPost],
    source_categories: Collection[str],
    now: datetime,
    config: ScoringConfig = DEFAULT_SCORING,
) -> list[ScoredCandidate]:
    """Score every candidate and order best first."""
    scored = [
        ScoredCandidate(post=candidate, score=score_candidate(candidate, source_categories, now, config))
        for candidate in candidates
    ]
    return sorted(scored, key=_sort_key)


# --- Component Entry Points ---


def run_get_related(
    inp: GetRelatedInput,
    *,
    repo: CandidateRepoPort,
    time: TimePort,
    config: ScoringConfig = DEFAULT_SCORING,
) -> RelatedPostsOutput:
    """
    Rank related posts for one post translation.

    Args:
        inp: Source post identity, locale, categories and limit.
        repo: Candidate source.
        time: Clock used for the recency bonus.
        config: Scoring weights.

    Returns:
        RelatedPostsOutput with at most ``limit`` parsed posts.
    """
    limit = config.default_limit if inp.limit is None else inp.limit
    if limit <= 0:
        return RelatedPostsOutput()

    pool = repo.list_related_candidates(
        exclude_post_id=inp.post_id,
        locale=inp.locale,
        limit=limit * config.candidate_pool_factor,
    )
    # Repositories may ignore the exclusion on odd rows; enforce it here too
    pool = [post for post in pool if post.post_id != inp.post_id]

    if not pool:
        return RelatedPostsOutput()

    ranked = rank_candidates(pool, inp.categories, time.now_utc(), config)[:limit]

    return RelatedPostsOutput(
        posts=[parse_blog_post(item.post) for item in ranked],
        ranked=ranked,
        pool_size=len(pool),
    )


def get_related_posts(
    post_id: str,
    locale: str,
    categories: Collection[str],
    limit: int | None = None,
    *,
    repo: CandidateRepoPort,
    time: TimePort,
    config: ScoringConfig = DEFAULT_SCORING,
) -> list[ParsedBlogPost]:
    """Related posts for a post detail page, best first."""
    inp = GetRelatedInput(post_id=post_id, locale=locale, categories=list(categories), limit=limit)
    return run_get_related(inp, repo=repo, time=time, config=config).posts
