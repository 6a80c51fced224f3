"""
BlogService - Post administration and public read paths.

Key behaviors:
- Upsert writes one row per translation, all in one transaction
- Category guard: every referenced slug must be registered before any write
- published_at is stamped when a row becomes published, kept while it stays
  published and cleared when it is unpublished
- views and created_at survive upserts
- Slug lookup falls back to the same post in another locale
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from src.components.documents import join_categories, parse_blog_post, serialize_document
from src.components.related import ScoringConfig, get_related_posts
from src.domain.entities import (
    BlogPost,
    BlogPostJSON,
    BlogSettings,
    ParsedBlogPost,
    PostTranslationJSON,
    make_row_id,
)
from src.rules.models import ListingRules, Rules

from .errors import PostNotFoundError, UnknownCategoryError, UnsupportedLocaleError
from .models import (
    ListPostsQuery,
    PostPage,
    SettingsUpdate,
    ToggleResult,
    Translation,
    UpsertResult,
)
from .ports import BlogPostRepoPort, CategoryRepoPort, SettingsRepoPort, TimePort

logger = logging.getLogger(__name__)


class BlogService:
    """
    Blog service.

    Provides the multi-locale upsert with its category guard, flag toggles,
    listings, slug resolution, settings and view counters.
    """

    def __init__(
        self,
        posts: BlogPostRepoPort,
        categories: CategoryRepoPort,
        settings: SettingsRepoPort,
        time: TimePort,
        rules: Rules | None = None,
    ) -> None:
        self._posts = posts
        self._categories = categories
        self._settings = settings
        self._time = time
        self._locales = list(rules.locales.supported) if rules else None
        self._listing = rules.listing if rules else ListingRules()
        self._scoring = ScoringConfig.from_rules(rules.related_posts) if rules else ScoringConfig()

    # --- Upsert ---

    def find_unknown_categories(self, document: BlogPostJSON) -> list[str]:
        """Referenced slugs that are not registered, in encounter order."""
        referenced = document.referenced_categories()
        if not referenced:
            return []
        known = self._categories.existing_slugs(referenced)
        return [slug for slug in referenced if slug not in known]

    def upsert_post(
        self,
        document: BlogPostJSON | dict[str, Any],
        *,
        author_id: str | None = None,
    ) -> UpsertResult:
        """
        Create or update every translation of a post.

        Raises:
            pydantic.ValidationError: If a raw dict is not a valid post document.
            UnsupportedLocaleError: If a translation uses a locale outside the
                supported set.
            UnknownCategoryError: If any translation names an unregistered
                category. Nothing is written in either case.
        """
        if not isinstance(document, BlogPostJSON):
            document = BlogPostJSON.model_validate(document)

        if self._locales is not None:
            unsupported = [
                t.locale for t in document.translations if t.locale not in self._locales
            ]
            if unsupported:
                logger.info(
                    "Rejected post %s: unsupported locales %s", document.post_id, unsupported
                )
                raise UnsupportedLocaleError(unsupported, self._locales)

        unknown = self.find_unknown_categories(document)
        if unknown:
            logger.info("Rejected post %s: unknown categories %s", document.post_id, unknown)
            raise UnknownCategoryError(unknown)

        now = self._time.now_utc()
        rows = [
            self._build_row(document, translation, author_id=author_id, now=now)
            for translation in document.translations
        ]
        self._posts.upsert_many(rows)

        ids = [row.id for row in rows]
        logger.info("Upserted post %s (%s)", document.post_id, ", ".join(ids))
        return UpsertResult(post_id=document.post_id, ids=ids)

    def _build_row(
        self,
        document: BlogPostJSON,
        translation: PostTranslationJSON,
        *,
        author_id: str | None,
        now: datetime,
    ) -> BlogPost:
        row_id = make_row_id(document.post_id, translation.locale)
        existing = self._posts.get_by_id(row_id)

        if not document.published:
            published_at = None
        elif existing and existing.published and existing.published_at:
            published_at = existing.published_at
        else:
            published_at = now

        return BlogPost(
            id=row_id,
            post_id=document.post_id,
            locale=translation.locale,
            slug=translation.slug,
            title=translation.title,
            excerpt=translation.excerpt,
            content=serialize_document(translation.content),
            cover_image=document.cover_image,
            categories=join_categories(translation.categories),
            badge_text=translation.badge_text,
            badge_color=translation.badge_color,
            featured=document.featured,
            published=document.published,
            published_at=published_at,
            author_id=author_id or (existing.author_id if existing else None),
            author_name=document.author_name or (existing.author_name if existing else None),
            views=existing.views if existing else 0,
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )

    # --- Admin operations ---

    def delete_post(self, post_id: str) -> int:
        """
        Delete all translations of a post.

        Raises:
            PostNotFoundError: If no row has this post id.
        """
        deleted = self._posts.delete_by_post_id(post_id)
        if deleted == 0:
            raise PostNotFoundError(post_id)
        logger.info("Deleted post %s (%d rows)", post_id, deleted)
        return deleted

    def _require_row(self, row_id: str) -> BlogPost:
        row = self._posts.get_by_id(row_id)
        if row is None:
            raise PostNotFoundError(row_id)
        return row

    def toggle_published(self, row_id: str) -> ToggleResult:
        """Flip one translation between published and draft."""
        row = self._require_row(row_id)
        published = not row.published
        now = self._time.now_utc()
        updated = row.model_copy(
            update={
                "published": published,
                "published_at": now if published else None,
                "updated_at": now,
            }
        )
        self._posts.save(updated)
        return ToggleResult(id=row_id, value=published)

    def toggle_featured(self, row_id: str) -> ToggleResult:
        """Flip the featured flag of one translation."""
        row = self._require_row(row_id)
        featured = not row.featured
        self._posts.save(
            row.model_copy(update={"featured": featured, "updated_at": self._time.now_utc()})
        )
        return ToggleResult(id=row_id, value=featured)

    def get_post_by_id(self, row_id: str) -> ParsedBlogPost | None:
        row = self._posts.get_by_id(row_id)
        return parse_blog_post(row) if row else None

    def get_post_document(self, post_id: str) -> BlogPostJSON:
        """
        Rebuild the editing document of a post from its rows.

        Raises:
            PostNotFoundError: If no row has this post id.
        """
        rows = self._posts.list_by_post_id(post_id)
        if not rows:
            raise PostNotFoundError(post_id)
        return rows_to_document(rows)

    def list_admin_posts(
        self,
        page: int = 1,
        limit: int | None = None,
        search: str | None = None,
    ) -> PostPage:
        """All rows regardless of locale or state, newest created first."""
        page, limit = _page_bounds(page, limit, self._listing.admin_page_size)
        rows, total = self._posts.list_all(
            offset=(page - 1) * limit,
            limit=limit,
            search=search or None,
        )
        return PostPage(posts=[parse_blog_post(r) for r in rows], total=total, page=page, limit=limit)

    # --- Public reads ---

    def list_posts(self, query: ListPostsQuery) -> PostPage:
        """Published posts of a locale with filters and pagination."""
        default_limit = self.get_settings().posts_per_page or self._listing.posts_per_page
        page, limit = _page_bounds(query.page, query.limit, default_limit)
        rows, total = self._posts.list_published(
            locale=query.locale,
            offset=(page - 1) * limit,
            limit=limit,
            category=query.category or None,
            search=query.search or None,
            sort=query.sort,
            exclude_featured=query.exclude_featured,
        )
        return PostPage(posts=[parse_blog_post(r) for r in rows], total=total, page=page, limit=limit)

    def get_featured_post(self, locale: str) -> ParsedBlogPost | None:
        row = self._posts.get_featured(locale)
        return parse_blog_post(row) if row else None

    def get_post_by_slug(self, slug: str, locale: str) -> ParsedBlogPost | None:
        """
        Published post by slug.

        Tries the exact (slug, locale) pair first, then resolves the slug in
        any locale and returns that post's version in ``locale``.
        """
        exact = self._posts.get_published_by_slug(slug, locale)
        if exact:
            return parse_blog_post(exact)

        other = self._posts.get_published_by_slug(slug)
        if other is None:
            return None

        for row in self._posts.list_by_post_id(other.post_id):
            if row.locale == locale and row.published:
                return parse_blog_post(row)
        return None

    def get_post_translations(self, post_id: str) -> list[Translation]:
        """Published locale versions of a post."""
        return [
            Translation(locale=row.locale, slug=row.slug)
            for row in self._posts.list_by_post_id(post_id)
            if row.published
        ]

    def get_published_slugs(self) -> list[Translation]:
        """Every published (locale, slug) pair, for sitemaps."""
        return [
            Translation(locale=locale, slug=slug)
            for slug, locale in self._posts.list_published_slugs()
        ]

    def get_related_posts(
        self,
        post: ParsedBlogPost,
        limit: int | None = None,
    ) -> list[ParsedBlogPost]:
        """Related posts for a post detail page."""
        return get_related_posts(
            post.post_id,
            post.locale,
            post.categories,
            limit,
            repo=self._posts,
            time=self._time,
            config=self._scoring,
        )

    # --- Settings ---

    def get_settings(self) -> BlogSettings:
        """Current settings, defaults when none were saved."""
        settings = self._settings.get()
        if settings is None:
            return BlogSettings(
                posts_per_page=self._listing.posts_per_page,
                updated_at=self._time.now_utc(),
            )
        return settings

    def is_enabled(self) -> bool:
        return self.get_settings().enabled

    def update_settings(self, update: SettingsUpdate) -> BlogSettings:
        current = self.get_settings()
        changes: dict[str, Any] = {
            key: value
            for key, value in (
                ("enabled", update.enabled),
                ("posts_per_page", update.posts_per_page),
                ("show_featured", update.show_featured),
            )
            if value is not None
        }
        if "posts_per_page" in changes and changes["posts_per_page"] < 1:
            raise ValueError("posts_per_page must be at least 1")
        changes["updated_at"] = self._time.now_utc()
        return self._settings.save(current.model_copy(update=changes))

    # --- Views ---

    def track_view(self, row_id: str) -> None:
        """
        Count one view of a translation.

        Raises:
            PostNotFoundError: If the row does not exist.
        """
        if not self._posts.increment_views(row_id):
            raise PostNotFoundError(row_id)

    def get_view_count(self, row_id: str) -> int:
        row = self._posts.get_by_id(row_id)
        return row.views if row else 0

    def get_most_viewed(self, locale: str, limit: int | None = None) -> list[ParsedBlogPost]:
        limit = self._listing.most_viewed_limit if limit is None else limit
        if limit <= 0:
            return []
        return [parse_blog_post(r) for r in self._posts.list_most_viewed(locale, limit)]


def _page_bounds(page: int, limit: int | None, default_limit: int) -> tuple[int, int]:
    page = max(1, page)
    if limit is None or limit < 1:
        limit = default_limit
    return page, limit


def rows_to_document(rows: list[BlogPost]) -> BlogPostJSON:
    """Group the locale rows of one post back into an editing document."""
    parsed = [parse_blog_post(row) for row in rows]
    first = parsed[0]
    return BlogPostJSON(
        post_id=first.post_id,
        cover_image=first.cover_image,
        featured=first.featured,
        published=first.published,
        author_name=first.author_name,
        translations=[
            PostTranslationJSON(
                locale=p.locale,
                slug=p.slug,
                title=p.title,
                excerpt=p.excerpt,
                content=p.content,
                categories=p.categories,
                badge_text=p.badge_text,
                badge_color=p.badge_color,
            )
            for p in parsed
        ],
    )
