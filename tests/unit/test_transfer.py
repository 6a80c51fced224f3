"""
Tests for blog export, import and statistics.

Test assertions:
- Export wraps every table in a versioned envelope with camelCase keys
- Unreadable payloads raise ImportFormatError before anything is written
- Import skips rows whose id already exists unless clear is set
"""

from __future__ import annotations

import json

import pytest

from src.adapters.clock import FixedClock
from src.components.blog import ImportFormatError
from src.components.transfer import (
    EXPORT_VERSION,
    BlogExport,
    export_blog_data,
    export_blog_json,
    get_blog_stats,
    import_blog_data,
    parse_import,
    validate_import,
)
from src.domain.entities import BlogCategory, BlogSettings
from src.rules.models import SlugRules
from tests.fakes import NOW, MockBlogDataStore, make_row


@pytest.fixture
def store() -> MockBlogDataStore:
    store = MockBlogDataStore()
    for row in (
        make_row("a", "en", views=3),
        make_row("a", "pl", views=1),
        make_row("b", "en", published=False),
    ):
        store.posts[row.id] = row
    store.categories["c1"] = BlogCategory(
        id="c1", slug="tutorial", name_en="Tutorial", name_pl="Poradnik", created_at=NOW
    )
    store.settings["default"] = BlogSettings(updated_at=NOW)
    return store


@pytest.fixture
def exported(store) -> dict:
    return json.loads(export_blog_json(store=store, time=FixedClock(NOW)))


class TestExport:
    def test_envelope(self, exported: dict) -> None:
        assert exported["version"] == EXPORT_VERSION
        assert exported["exportedAt"].startswith("2025-06-01T12:00:00")
        assert set(exported["tables"]) == {"blogPosts", "blogCategories", "blogSettings"}

    def test_rows_keep_stored_shape(self, exported: dict) -> None:
        post = exported["tables"]["blogPosts"][0]
        assert post["post_id"] == "a"
        assert post["content"] == "[]"
        assert len(exported["tables"]["blogPosts"]) == 3

    def test_export_model(self, store) -> None:
        export = export_blog_data(store=store, time=FixedClock(NOW), version="1.2.0")
        assert export.version == "1.2.0"
        assert [c.slug for c in export.tables.blog_categories] == ["tutorial"]


class TestParseImport:
    def test_not_json(self) -> None:
        with pytest.raises(ImportFormatError, match="not valid JSON"):
            parse_import("{nope")

    def test_not_an_object(self) -> None:
        with pytest.raises(ImportFormatError, match="JSON object"):
            parse_import("[1, 2]")

    def test_bad_structure(self) -> None:
        with pytest.raises(ImportFormatError, match="Invalid export structure"):
            parse_import({"version": "1.0.0", "exportedAt": NOW.isoformat()})

    def test_major_version_mismatch(self, exported: dict) -> None:
        exported["version"] = "2.0.0"
        with pytest.raises(ImportFormatError, match="Unsupported export version 2.0.0"):
            parse_import(exported)

    def test_minor_version_accepted(self, exported: dict) -> None:
        exported["version"] = "1.4.2"
        assert parse_import(exported).version == "1.4.2"

    def test_bytes_and_model(self, exported: dict) -> None:
        parsed = parse_import(json.dumps(exported).encode())
        assert isinstance(parsed, BlogExport)
        assert parse_import(parsed) is parsed

    @pytest.mark.parametrize("slug", ["a,b", "Tutorial", ""])
    def test_invalid_category_slug(self, exported: dict, slug: str) -> None:
        exported["tables"]["blogCategories"][0]["slug"] = slug
        with pytest.raises(ImportFormatError, match="Invalid categories"):
            parse_import(exported)

    def test_category_slug_rules_applied(self, exported: dict) -> None:
        with pytest.raises(ImportFormatError, match="tutorial"):
            parse_import(exported, slug_rules=SlugRules(max=3))


class TestValidateImport:
    def test_counts(self, exported: dict) -> None:
        result = validate_import(exported)
        assert result.is_valid
        assert result.counts == {"blogPosts": 3, "blogCategories": 1, "blogSettings": 1}

    def test_invalid(self) -> None:
        result = validate_import("nope")
        assert not result.is_valid
        assert len(result.errors) == 1


class TestImport:
    def test_into_empty_store(self, exported: dict) -> None:
        target = MockBlogDataStore()
        result = import_blog_data(exported, store=target)

        assert result.success
        assert result.imported == {"blogCategories": 1, "blogPosts": 3, "blogSettings": 1}
        assert result.message == "Imported 5 rows"
        assert target.posts["a_en"].views == 3

    def test_existing_ids_skipped(self, store, exported: dict) -> None:
        result = import_blog_data(exported, store=store)
        assert sum(result.imported.values()) == 0
        assert result.skipped["blogPosts"] == 3
        assert result.message == "Imported 0 rows, skipped 5 existing"

    def test_clear_replaces_everything(self, store, exported: dict) -> None:
        extra = make_row("z")
        store.posts[extra.id] = extra

        result = import_blog_data(exported, store=store, clear=True)

        assert "z_en" not in store.posts
        assert result.imported["blogPosts"] == 3
        assert sum(result.skipped.values()) == 0

    def test_bad_payload_writes_nothing(self) -> None:
        target = MockBlogDataStore()
        with pytest.raises(ImportFormatError):
            import_blog_data('{"version": "1.0.0"}', store=target, clear=True)
        assert target.load_calls == 0

    def test_invalid_category_writes_nothing(self, exported: dict) -> None:
        exported["tables"]["blogCategories"][0]["slug"] = "a,b"
        target = MockBlogDataStore()

        assert not validate_import(exported).is_valid
        with pytest.raises(ImportFormatError):
            import_blog_data(exported, store=target)
        assert target.load_calls == 0


class TestStats:
    def test_counts(self, store) -> None:
        stats = get_blog_stats(store=store)
        assert stats.blog_posts == 3
        assert stats.published_posts == 2
        assert stats.blog_categories == 1
        assert stats.locales == {"en": 2, "pl": 1}
        assert stats.total_views == 4

    def test_empty(self) -> None:
        stats = get_blog_stats(store=MockBlogDataStore())
        assert stats.blog_posts == 0
        assert stats.locales == {}
