from datetime import timedelta

import pytest

from src.adapters.sqlite.repos import (
    SQLiteBlogPostRepo,
    SQLiteBlogSettingsRepo,
    SQLiteCategoryRepo,
    to_iso,
)
from src.domain.entities import BlogCategory, BlogSettings
from tests.fakes import NOW, make_row


@pytest.fixture
def repo(db_path):
    return SQLiteBlogPostRepo(db_path)


@pytest.fixture
def category_repo(db_path):
    return SQLiteCategoryRepo(db_path)


def _days_ago(days: int):
    return NOW - timedelta(days=days)


def test_to_iso_normalizes_to_utc():
    naive = NOW.replace(tzinfo=None)
    assert to_iso(naive) == "2025-06-01T12:00:00.000000+00:00"
    assert to_iso(None) is None


def test_upsert_and_get(repo):
    row = make_row("p1", categories="a,b", views=0)
    repo.upsert_many([row])

    loaded = repo.get_by_id("p1_en")
    assert loaded is not None
    assert loaded.categories == "a,b"
    assert loaded.published is True
    assert loaded.published_at == NOW


def test_upsert_keeps_views_and_created_at(repo):
    repo.upsert_many([make_row("p1")])
    assert repo.increment_views("p1_en")
    assert repo.increment_views("p1_en")

    later = make_row("p1", title="Changed", published_at=_days_ago(-1))
    repo.upsert_many([later])

    loaded = repo.get_by_id("p1_en")
    assert loaded.title == "Changed"
    assert loaded.views == 2
    assert loaded.created_at == NOW


def test_increment_views_missing_row(repo):
    assert repo.increment_views("nope_en") is False


def test_list_by_post_id_and_delete(repo):
    repo.upsert_many([make_row("p1", "pl"), make_row("p1", "en"), make_row("p2")])

    assert [r.locale for r in repo.list_by_post_id("p1")] == ["en", "pl"]
    assert repo.delete_by_post_id("p1") == 2
    assert repo.delete_by_post_id("p1") == 0
    assert repo.get_by_id("p2_en") is not None


def test_list_published_ordering_undated_last(repo):
    repo.upsert_many(
        [
            make_row("old", published_at=_days_ago(10)),
            make_row("new", published_at=_days_ago(1)),
            make_row("draft", published=False),
        ]
    )
    # A published row without a date, e.g. from an import
    repo.upsert_many([make_row("undated").model_copy(update={"published_at": None})])

    newest, total = repo.list_published(locale="en", offset=0, limit=10)
    assert [r.post_id for r in newest] == ["new", "old", "undated"]
    assert total == 3

    oldest, _ = repo.list_published(locale="en", offset=0, limit=10, sort="oldest")
    assert [r.post_id for r in oldest] == ["old", "new", "undated"]


def test_list_published_pagination(repo):
    repo.upsert_many([make_row(f"p{i}", published_at=_days_ago(i)) for i in range(5)])

    page, total = repo.list_published(locale="en", offset=2, limit=2)
    assert [r.post_id for r in page] == ["p2", "p3"]
    assert total == 5


def test_category_filter_matches_whole_slug(repo):
    repo.upsert_many(
        [
            make_row("a", categories="web,ai"),
            make_row("b", categories="web-dev"),
            make_row("c", categories="ai"),
        ]
    )

    rows, total = repo.list_published(locale="en", offset=0, limit=10, category="web")
    assert [r.post_id for r in rows] == ["a"]
    assert total == 1


def test_search_escapes_like_wildcards(repo):
    repo.upsert_many(
        [
            make_row("a", title="100% Python"),
            make_row("b", title="1000 Python tips"),
            make_row("c", title="snake_case"),
            make_row("d", title="snakeXcase"),
        ]
    )

    rows, _ = repo.list_published(locale="en", offset=0, limit=10, search="100%")
    assert [r.post_id for r in rows] == ["a"]
    rows, _ = repo.list_published(locale="en", offset=0, limit=10, search="_")
    assert [r.post_id for r in rows] == ["c"]
    rows, _ = repo.list_published(locale="en", offset=0, limit=10, search="PYTHON")
    assert {r.post_id for r in rows} == {"a", "b"}


def test_exclude_featured_and_get_featured(repo):
    repo.upsert_many(
        [
            make_row("f1", featured=True, published_at=_days_ago(5)),
            make_row("f2", featured=True, published_at=_days_ago(1)),
            make_row("plain"),
        ]
    )

    rows, _ = repo.list_published(locale="en", offset=0, limit=10, exclude_featured=True)
    assert [r.post_id for r in rows] == ["plain"]
    assert repo.get_featured("en").post_id == "f2"
    assert repo.get_featured("pl") is None


def test_published_by_slug(repo):
    repo.upsert_many([make_row("a", "en"), make_row("b", "en", published=False)])

    assert repo.get_published_by_slug("a-en").id == "a_en"
    assert repo.get_published_by_slug("a-en", "pl") is None
    assert repo.get_published_by_slug("b-en") is None


def test_slugs_categories_and_most_viewed(repo):
    repo.upsert_many(
        [
            make_row("a", "en", categories="x", views=5, published_at=_days_ago(3)),
            make_row("b", "en", categories=None, views=9, published_at=_days_ago(1)),
            make_row("a", "pl", views=1),
        ]
    )

    assert repo.list_published_slugs() == [("a-en", "en"), ("b-en", "en"), ("a-pl", "pl")]
    assert repo.list_published_categories("en") == [None, "x"]
    assert [r.post_id for r in repo.list_most_viewed("en", 1)] == ["b"]


def test_related_candidates(repo):
    repo.upsert_many(
        [
            make_row("src", "en"),
            make_row("a", "en", published_at=_days_ago(1)),
            make_row("b", "en", published_at=_days_ago(2)),
            make_row("c", "en", published_at=_days_ago(3)),
            make_row("a", "pl"),
        ]
    )

    rows = repo.list_related_candidates(exclude_post_id="src", locale="en", limit=2)
    assert [r.post_id for r in rows] == ["a", "b"]


def test_list_all_search(repo):
    repo.upsert_many([make_row("a", title="Alpha"), make_row("b", title="Beta", published=False)])

    rows, total = repo.list_all(search="bet")
    assert [r.post_id for r in rows] == ["b"]
    assert total == 1
    assert repo.list_all()[1] == 2


def test_category_repo(category_repo):
    category = BlogCategory(id="c1", slug="tutorial", name_en="Tutorial", name_pl="Poradnik")
    category_repo.save(category)
    category_repo.save(category.model_copy(update={"name_en": "Tutorials"}))

    assert category_repo.get_by_slug("tutorial").name_en == "Tutorials"
    assert category_repo.get_by_id("c1").slug == "tutorial"
    assert category_repo.existing_slugs(["tutorial", "nope", "tutorial"]) == {"tutorial"}
    assert category_repo.existing_slugs([]) == set()

    category_repo.delete("c1")
    assert category_repo.list_all() == []


def test_settings_repo(db_path):
    repo = SQLiteBlogSettingsRepo(db_path)
    assert repo.get() is None

    repo.save(BlogSettings(enabled=False, posts_per_page=5, updated_at=NOW))
    repo.save(BlogSettings(enabled=False, posts_per_page=7, updated_at=NOW))

    loaded = repo.get()
    assert loaded.enabled is False
    assert loaded.posts_per_page == 7
    assert loaded.show_featured is True
