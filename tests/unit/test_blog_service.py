"""
Unit tests for BlogService.

Tests the functional core without HTTP or SQLite.

Test assertions:
- Upsert writes one row per translation with id ``{post_id}_{locale}``
- Any unregistered category rejects the whole post before any write
- published_at: stamped on publish, kept while published, cleared on unpublish
- views and created_at survive upserts
- Slug lookup falls back to the same post in another locale
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from src.components.blog import (
    BlogService,
    ListPostsQuery,
    PostNotFoundError,
    SettingsUpdate,
    UnknownCategoryError,
    UnsupportedLocaleError,
    generate_example_post,
)
from src.domain.entities import BlogCategory, BlogPostJSON
from tests.fakes import NOW, make_document, make_row


def register(category_repo, *slugs: str) -> None:
    for slug in slugs:
        category_repo.save(BlogCategory(id=f"cat-{slug}", slug=slug, name_en=slug, name_pl=slug))


# --- Upsert ---


class TestUpsert:
    def test_creates_one_row_per_locale(self, blog_service: BlogService, post_repo) -> None:
        result = blog_service.upsert_post(make_document("p1"))

        assert result.success
        assert result.post_id == "p1"
        assert result.ids == ["p1_en", "p1_pl"]
        assert set(post_repo.rows) == {"p1_en", "p1_pl"}
        assert post_repo.upsert_calls == 1

    def test_row_fields(self, blog_service: BlogService, post_repo, category_repo) -> None:
        register(category_repo, "tutorial", "docs")
        doc = make_document("p1", categories=["tutorial", "docs"], featured=True)
        doc["coverImage"] = "/c.png"
        doc["translations"][0]["badgeText"] = "New"

        blog_service.upsert_post(doc, author_id="u1")

        row = post_repo.rows["p1_en"]
        assert row.slug == "p1-en"
        assert row.title == "Hello en"
        assert row.categories == "tutorial,docs"
        assert row.cover_image == "/c.png"
        assert row.badge_text == "New"
        assert row.featured is True
        assert row.author_id == "u1"
        assert row.published_at == NOW
        assert '"type": "paragraph"' in row.content

    def test_accepts_parsed_document(
        self, blog_service: BlogService, post_repo, category_repo
    ) -> None:
        register(category_repo, "tutorial", "documentation")
        blog_service.upsert_post(generate_example_post("x"))
        assert set(post_repo.rows) == {"x_en", "x_pl"}

    def test_invalid_document_raises(self, blog_service: BlogService, post_repo) -> None:
        with pytest.raises(ValidationError):
            blog_service.upsert_post({"postId": "p1", "translations": []})
        assert post_repo.rows == {}

    def test_duplicate_locales_rejected(self, blog_service: BlogService) -> None:
        doc = make_document("p1", locales=("en", "en"))
        with pytest.raises(ValidationError, match="Duplicate translation locale"):
            blog_service.upsert_post(doc)

    def test_unsupported_locale_rejects_everything(
        self, blog_service: BlogService, post_repo
    ) -> None:
        with pytest.raises(UnsupportedLocaleError) as exc:
            blog_service.upsert_post(make_document("p1", locales=("en", "de", "en_pl")))

        assert exc.value.locales == ["de", "en_pl"]
        assert post_repo.upsert_calls == 0

    def test_locale_cannot_overwrite_another_post(
        self, blog_service: BlogService, post_repo
    ) -> None:
        blog_service.upsert_post(make_document("p1_en", locales=("pl",)))

        with pytest.raises(UnsupportedLocaleError):
            blog_service.upsert_post(make_document("p1", locales=("en_pl",)))

        assert post_repo.rows["p1_en_pl"].post_id == "p1_en"


class TestCategoryGuard:
    """All-or-nothing category validation."""

    def test_unknown_category_rejects_everything(
        self, blog_service: BlogService, post_repo, category_repo
    ) -> None:
        register(category_repo, "tutorial")
        doc = make_document("p1", categories=["tutorial"])
        doc["translations"][1]["categories"] = ["tutorial", "ghost"]

        with pytest.raises(UnknownCategoryError) as exc:
            blog_service.upsert_post(doc)

        assert exc.value.slugs == ["ghost"]
        assert "Invalid categories: ghost" in str(exc.value)
        assert post_repo.rows == {}
        assert post_repo.upsert_calls == 0

    def test_lists_every_unknown_slug_once(self, blog_service: BlogService) -> None:
        doc = make_document("p1", categories=["a", "b"])
        with pytest.raises(UnknownCategoryError) as exc:
            blog_service.upsert_post(doc)
        assert exc.value.slugs == ["a", "b"]
        assert str(exc.value) == "Invalid categories: a, b. Please create these categories first."

    def test_existing_rows_untouched_on_rejection(
        self, blog_service: BlogService, post_repo, category_repo
    ) -> None:
        blog_service.upsert_post(make_document("p1", title="Original"))
        with pytest.raises(UnknownCategoryError):
            blog_service.upsert_post(make_document("p1", title="Changed", categories=["nope"]))
        assert post_repo.rows["p1_en"].title == "Original en"

    def test_no_categories_needs_no_registry(self, blog_service: BlogService) -> None:
        doc = BlogPostJSON.model_validate(make_document("p1"))
        assert blog_service.find_unknown_categories(doc) == []

    def test_find_unknown_categories(self, blog_service: BlogService, category_repo) -> None:
        register(category_repo, "b")
        doc = BlogPostJSON.model_validate(make_document("p1", categories=["a", "b", "c"]))
        assert blog_service.find_unknown_categories(doc) == ["a", "c"]


class TestPublishedAt:
    def test_draft_has_no_published_at(self, blog_service: BlogService, post_repo) -> None:
        blog_service.upsert_post(make_document("p1", published=False))
        assert post_repo.rows["p1_en"].published_at is None

    def test_kept_while_published(self, blog_service: BlogService, post_repo, clock) -> None:
        blog_service.upsert_post(make_document("p1"))
        clock.advance(timedelta(days=3))
        blog_service.upsert_post(make_document("p1", title="Edited"))

        row = post_repo.rows["p1_en"]
        assert row.published_at == NOW
        assert row.updated_at == NOW + timedelta(days=3)
        assert row.title == "Edited en"

    def test_cleared_when_unpublished(self, blog_service: BlogService, post_repo) -> None:
        blog_service.upsert_post(make_document("p1"))
        blog_service.upsert_post(make_document("p1", published=False))
        assert post_repo.rows["p1_en"].published_at is None

    def test_restamped_when_republished(self, blog_service: BlogService, post_repo, clock) -> None:
        blog_service.upsert_post(make_document("p1"))
        blog_service.upsert_post(make_document("p1", published=False))
        clock.advance(timedelta(days=10))
        blog_service.upsert_post(make_document("p1"))
        assert post_repo.rows["p1_en"].published_at == NOW + timedelta(days=10)

    def test_new_locale_gets_its_own_stamp(
        self, blog_service: BlogService, post_repo, clock
    ) -> None:
        blog_service.upsert_post(make_document("p1", locales=("en",)))
        clock.advance(timedelta(days=1))
        blog_service.upsert_post(make_document("p1", locales=("en", "pl")))

        assert post_repo.rows["p1_en"].published_at == NOW
        assert post_repo.rows["p1_pl"].published_at == NOW + timedelta(days=1)


class TestPreservedFields:
    def test_views_and_created_at_survive(
        self, blog_service: BlogService, post_repo, clock
    ) -> None:
        blog_service.upsert_post(make_document("p1"))
        for _ in range(3):
            blog_service.track_view("p1_en")
        clock.advance(timedelta(hours=5))
        blog_service.upsert_post(make_document("p1", title="New"))

        row = post_repo.rows["p1_en"]
        assert row.views == 3
        assert row.created_at == NOW

    def test_missing_locale_left_alone(self, blog_service: BlogService, post_repo) -> None:
        blog_service.upsert_post(make_document("p1"))
        blog_service.upsert_post(make_document("p1", locales=("en",), title="Only en"))

        assert post_repo.rows["p1_pl"].title == "Hello pl"
        assert post_repo.rows["p1_en"].title == "Only en en"

    def test_author_kept_when_not_given(self, blog_service: BlogService, post_repo) -> None:
        blog_service.upsert_post(make_document("p1"), author_id="u1")
        blog_service.upsert_post(make_document("p1"))
        assert post_repo.rows["p1_en"].author_id == "u1"


# --- Admin operations ---


class TestAdmin:
    def test_delete_post(self, blog_service: BlogService, post_repo) -> None:
        blog_service.upsert_post(make_document("p1"))
        assert blog_service.delete_post("p1") == 2
        assert post_repo.rows == {}

    def test_delete_missing(self, blog_service: BlogService) -> None:
        with pytest.raises(PostNotFoundError):
            blog_service.delete_post("nope")

    def test_toggle_published(self, blog_service: BlogService, post_repo, clock) -> None:
        blog_service.upsert_post(make_document("p1"))

        result = blog_service.toggle_published("p1_en")
        assert result.value is False
        assert post_repo.rows["p1_en"].published_at is None
        assert post_repo.rows["p1_pl"].published is True

        clock.advance(timedelta(days=1))
        result = blog_service.toggle_published("p1_en")
        assert result.value is True
        assert post_repo.rows["p1_en"].published_at == NOW + timedelta(days=1)

    def test_toggle_featured(self, blog_service: BlogService, post_repo) -> None:
        blog_service.upsert_post(make_document("p1"))
        assert blog_service.toggle_featured("p1_en").value is True
        assert post_repo.rows["p1_en"].featured is True
        assert blog_service.toggle_featured("p1_en").value is False

    def test_toggle_missing(self, blog_service: BlogService) -> None:
        with pytest.raises(PostNotFoundError):
            blog_service.toggle_featured("nope_en")

    def test_get_post_document(self, blog_service: BlogService, category_repo) -> None:
        register(category_repo, "tutorial")
        blog_service.upsert_post(make_document("p1", categories=["tutorial"], featured=True))

        document = blog_service.get_post_document("p1")
        assert document.post_id == "p1"
        assert document.featured is True
        assert [t.locale for t in document.translations] == ["en", "pl"]
        assert document.translations[0].categories == ["tutorial"]
        assert document.translations[0].content[0].content == "Text en"

    def test_get_post_document_missing(self, blog_service: BlogService) -> None:
        with pytest.raises(PostNotFoundError):
            blog_service.get_post_document("nope")

    def test_admin_list_includes_drafts(self, blog_service: BlogService, post_repo) -> None:
        post_repo.upsert_many([make_row("a"), make_row("b", published=False)])
        page = blog_service.list_admin_posts()
        assert page.total == 2
        assert page.limit == 20


# --- Public reads ---


class TestListing:
    @pytest.fixture
    def seeded(self, post_repo):
        post_repo.upsert_many(
            [
                make_row(f"p{i}", published_at=NOW - timedelta(days=i), title=f"Post {i}")
                for i in range(5)
            ]
            + [
                make_row("draft", published=False),
                make_row("polish", "pl"),
                make_row("tagged", categories="python,web", published_at=NOW - timedelta(days=9)),
                make_row("star", featured=True, published_at=NOW - timedelta(days=10)),
            ]
        )

    def test_locale_and_published_only(self, blog_service: BlogService, seeded) -> None:
        page = blog_service.list_posts(ListPostsQuery(locale="en"))
        assert page.total == 7
        assert all(p.locale == "en" and p.published for p in page.posts)

    def test_newest_first(self, blog_service: BlogService, seeded) -> None:
        page = blog_service.list_posts(ListPostsQuery(locale="en", limit=3))
        assert [p.post_id for p in page.posts] == ["p0", "p1", "p2"]

    def test_oldest_first(self, blog_service: BlogService, seeded) -> None:
        page = blog_service.list_posts(ListPostsQuery(locale="en", limit=2, sort="oldest"))
        assert [p.post_id for p in page.posts] == ["star", "tagged"]

    def test_pagination(self, blog_service: BlogService, seeded) -> None:
        page = blog_service.list_posts(ListPostsQuery(locale="en", page=2, limit=3))
        assert [p.post_id for p in page.posts] == ["p3", "p4", "tagged"]
        assert page.total_pages == 3
        assert page.has_more is True

    def test_page_below_one_is_first(self, blog_service: BlogService, seeded) -> None:
        page = blog_service.list_posts(ListPostsQuery(locale="en", page=0, limit=3))
        assert page.page == 1

    def test_category_filter(self, blog_service: BlogService, seeded) -> None:
        page = blog_service.list_posts(ListPostsQuery(locale="en", category="web"))
        assert [p.post_id for p in page.posts] == ["tagged"]

    def test_search_title(self, blog_service: BlogService, seeded) -> None:
        page = blog_service.list_posts(ListPostsQuery(locale="en", search="post 3"))
        assert [p.post_id for p in page.posts] == ["p3"]

    def test_exclude_featured(self, blog_service: BlogService, seeded) -> None:
        page = blog_service.list_posts(ListPostsQuery(locale="en", exclude_featured=True))
        assert "star" not in [p.post_id for p in page.posts]

    def test_default_limit_from_settings(self, blog_service: BlogService, seeded) -> None:
        blog_service.update_settings(SettingsUpdate(posts_per_page=2))
        page = blog_service.list_posts(ListPostsQuery(locale="en"))
        assert page.limit == 2
        assert len(page.posts) == 2

    def test_featured(self, blog_service: BlogService, seeded) -> None:
        featured = blog_service.get_featured_post("en")
        assert featured is not None
        assert featured.post_id == "star"
        assert blog_service.get_featured_post("pl") is None


class TestSlugLookup:
    def test_exact_match(self, blog_service: BlogService) -> None:
        blog_service.upsert_post(make_document("p1"))
        post = blog_service.get_post_by_slug("p1-pl", "pl")
        assert post is not None
        assert post.id == "p1_pl"

    def test_falls_back_to_other_locale(self, blog_service: BlogService) -> None:
        blog_service.upsert_post(make_document("p1"))
        post = blog_service.get_post_by_slug("p1-en", "pl")
        assert post is not None
        assert post.id == "p1_pl"

    def test_no_translation_in_locale(self, blog_service: BlogService) -> None:
        blog_service.upsert_post(make_document("p1", locales=("en",)))
        assert blog_service.get_post_by_slug("p1-en", "pl") is None

    def test_unpublished_not_found(self, blog_service: BlogService) -> None:
        blog_service.upsert_post(make_document("p1", published=False))
        assert blog_service.get_post_by_slug("p1-en", "en") is None

    def test_translations_published_only(self, blog_service: BlogService) -> None:
        blog_service.upsert_post(make_document("p1"))
        blog_service.toggle_published("p1_pl")
        assert [(t.locale, t.slug) for t in blog_service.get_post_translations("p1")] == [
            ("en", "p1-en")
        ]

    def test_published_slugs(self, blog_service: BlogService) -> None:
        blog_service.upsert_post(make_document("p1"))
        blog_service.upsert_post(make_document("p2", published=False))
        slugs = {(t.locale, t.slug) for t in blog_service.get_published_slugs()}
        assert slugs == {("en", "p1-en"), ("pl", "p1-pl")}


class TestRelated:
    def test_uses_post_categories(self, blog_service: BlogService, post_repo) -> None:
        old = NOW - timedelta(days=100)
        post_repo.upsert_many(
            [
                make_row("src", categories="x"),
                make_row("match", categories="x", published_at=old),
                make_row("plain", published_at=old + timedelta(days=1)),
            ]
        )
        source = blog_service.get_post_by_id("src_en")
        related = blog_service.get_related_posts(source)
        assert [p.post_id for p in related] == ["match", "plain"]


# --- Settings & views ---


class TestSettings:
    def test_defaults(self, blog_service: BlogService, rules) -> None:
        settings = blog_service.get_settings()
        assert settings.enabled is True
        assert settings.posts_per_page == rules.listing.posts_per_page
        assert blog_service.is_enabled()

    def test_partial_update(self, blog_service: BlogService, settings_repo) -> None:
        blog_service.update_settings(SettingsUpdate(enabled=False))
        settings = blog_service.update_settings(SettingsUpdate(show_featured=False))

        assert settings.enabled is False
        assert settings.show_featured is False
        assert settings_repo.settings == settings

    def test_posts_per_page_must_be_positive(self, blog_service: BlogService) -> None:
        with pytest.raises(ValueError):
            blog_service.update_settings(SettingsUpdate(posts_per_page=0))


class TestViews:
    def test_track_view(self, blog_service: BlogService) -> None:
        blog_service.upsert_post(make_document("p1"))
        blog_service.track_view("p1_en")
        blog_service.track_view("p1_en")
        assert blog_service.get_view_count("p1_en") == 2
        assert blog_service.get_view_count("p1_pl") == 0

    def test_track_missing(self, blog_service: BlogService) -> None:
        with pytest.raises(PostNotFoundError):
            blog_service.track_view("nope_en")

    def test_view_count_missing_is_zero(self, blog_service: BlogService) -> None:
        assert blog_service.get_view_count("nope") == 0

    def test_most_viewed(self, blog_service: BlogService, post_repo) -> None:
        post_repo.upsert_many(
            [make_row("a", views=5), make_row("b", views=50), make_row("c", views=1)]
        )
        assert [p.post_id for p in blog_service.get_most_viewed("en", 2)] == ["b", "a"]
        assert blog_service.get_most_viewed("en", 0) == []
