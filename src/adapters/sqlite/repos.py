import sqlite3
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import Any

from src.components.transfer import LoadCounts
from src.domain.entities import BlogCategory, BlogPost, BlogSettings, SortOrder

POST_COLUMNS = (
    "id",
    "post_id",
    "locale",
    "slug",
    "title",
    "excerpt",
    "content",
    "cover_image",
    "categories",
    "badge_text",
    "badge_color",
    "featured",
    "published",
    "published_at",
    "author_id",
    "author_name",
    "views",
    "created_at",
    "updated_at",
)

# Columns an upsert must not overwrite on an existing row
POST_KEEP_ON_CONFLICT = {"id", "views", "created_at"}


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def to_iso(value: datetime | None) -> str | None:
    """UTC ISO-8601 text with a fixed precision, so text order is time order."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _post_params(post: BlogPost) -> tuple[Any, ...]:
    return (
        post.id,
        post.post_id,
        post.locale,
        post.slug,
        post.title,
        post.excerpt,
        post.content,
        post.cover_image,
        post.categories,
        post.badge_text,
        post.badge_color,
        int(post.featured),
        int(post.published),
        to_iso(post.published_at),
        post.author_id,
        post.author_name,
        post.views,
        to_iso(post.created_at),
        to_iso(post.updated_at),
    )


_POST_PLACEHOLDERS = ", ".join("?" for _ in POST_COLUMNS)
_POST_UPDATE_SET = ",\n        ".join(
    f"{c}=excluded.{c}" for c in POST_COLUMNS if c not in POST_KEEP_ON_CONFLICT
)
_POST_UPSERT_SQL = f"""
    INSERT INTO blog_post ({', '.join(POST_COLUMNS)})
    VALUES ({_POST_PLACEHOLDERS})
    ON CONFLICT(id) DO UPDATE SET
        {_POST_UPDATE_SET}
"""
_POST_INSERT_IGNORE_SQL = f"""
    INSERT OR IGNORE INTO blog_post ({', '.join(POST_COLUMNS)})
    VALUES ({_POST_PLACEHOLDERS})
"""


class SQLiteBlogPostRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _map_row(self, row: dict[str, Any]) -> BlogPost:
        return BlogPost.model_validate(row)

    def get_by_id(self, row_id: str) -> BlogPost | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM blog_post WHERE id = ?", (row_id,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_by_post_id(self, post_id: str) -> list[BlogPost]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM blog_post WHERE post_id = ? ORDER BY locale ASC", (post_id,)
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def get_published_by_slug(self, slug: str, locale: str | None = None) -> BlogPost | None:
        query = "SELECT * FROM blog_post WHERE slug = ? AND published = 1"
        params: list[Any] = [slug]
        if locale is not None:
            query += " AND locale = ?"
            params.append(locale)
        query += " ORDER BY published_at IS NULL, published_at DESC LIMIT 1"

        conn = self._get_conn()
        try:
            row = conn.execute(query, params).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def upsert_many(self, rows: Sequence[BlogPost]) -> None:
        conn = self._get_conn()
        try:
            for post in rows:
                conn.execute(_POST_UPSERT_SQL, _post_params(post))
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def save(self, row: BlogPost) -> BlogPost:
        self.upsert_many([row])
        return row

    def delete_by_post_id(self, post_id: str) -> int:
        conn = self._get_conn()
        try:
            cursor = conn.execute("DELETE FROM blog_post WHERE post_id = ?", (post_id,))
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def delete_all(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM blog_post")
            conn.commit()
        finally:
            conn.close()

    def list_published(
        self,
        *,
        locale: str,
        offset: int,
        limit: int,
        category: str | None = None,
        search: str | None = None,
        sort: SortOrder = "newest",
        exclude_featured: bool = False,
    ) -> tuple[list[BlogPost], int]:
        where = ["locale = ?", "published = 1"]
        params: list[Any] = [locale]

        if exclude_featured:
            where.append("featured = 0")
        if search:
            where.append("title LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(search)}%")
        if category:
            # Whole-slug match inside the comma-joined list
            where.append("instr(',' || COALESCE(categories, '') || ',', ?) > 0")
            params.append(f",{category},")

        clause = " AND ".join(where)
        direction = "ASC" if sort == "oldest" else "DESC"

        conn = self._get_conn()
        try:
            total = conn.execute(
                f"SELECT count(*) AS n FROM blog_post WHERE {clause}", params
            ).fetchone()["n"]
            rows = conn.execute(
                f"SELECT * FROM blog_post WHERE {clause} "
                f"ORDER BY published_at IS NULL, published_at {direction}, id ASC "
                "LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()
            return [self._map_row(r) for r in rows], total
        finally:
            conn.close()

    def list_all(
        self,
        *,
        offset: int = 0,
        limit: int | None = None,
        search: str | None = None,
    ) -> tuple[list[BlogPost], int]:
        clause = ""
        params: list[Any] = []
        if search:
            clause = "WHERE title LIKE ? ESCAPE '\\'"
            params.append(f"%{_escape_like(search)}%")

        conn = self._get_conn()
        try:
            total = conn.execute(
                f"SELECT count(*) AS n FROM blog_post {clause}", params
            ).fetchone()["n"]
            rows = conn.execute(
                f"SELECT * FROM blog_post {clause} ORDER BY created_at DESC, id ASC "
                "LIMIT ? OFFSET ?",
                [*params, -1 if limit is None else limit, offset],
            ).fetchall()
            return [self._map_row(r) for r in rows], total
        finally:
            conn.close()

    def get_featured(self, locale: str) -> BlogPost | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                """
                SELECT * FROM blog_post
                WHERE locale = ? AND published = 1 AND featured = 1
                ORDER BY published_at IS NULL, published_at DESC
                LIMIT 1
            """,
                (locale,),
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_published_slugs(self) -> list[tuple[str, str]]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT slug, locale FROM blog_post WHERE published = 1 ORDER BY locale, slug"
            ).fetchall()
            return [(r["slug"], r["locale"]) for r in rows]
        finally:
            conn.close()

    def list_published_categories(self, locale: str) -> list[str | None]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT categories FROM blog_post
                WHERE locale = ? AND published = 1
                ORDER BY published_at IS NULL, published_at DESC
            """,
                (locale,),
            ).fetchall()
            return [r["categories"] for r in rows]
        finally:
            conn.close()

    def increment_views(self, row_id: str) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute("UPDATE blog_post SET views = views + 1 WHERE id = ?", (row_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def list_most_viewed(self, locale: str, limit: int) -> list[BlogPost]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT * FROM blog_post
                WHERE locale = ? AND published = 1
                ORDER BY views DESC, published_at IS NULL, published_at DESC
                LIMIT ?
            """,
                (locale, limit),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def list_related_candidates(
        self,
        *,
        exclude_post_id: str,
        locale: str,
        limit: int,
    ) -> list[BlogPost]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT * FROM blog_post
                WHERE locale = ? AND published = 1 AND post_id != ?
                ORDER BY published_at IS NULL, published_at DESC, id ASC
                LIMIT ?
            """,
                (locale, exclude_post_id, limit),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()


class SQLiteCategoryRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _map_row(self, row: dict[str, Any]) -> BlogCategory:
        return BlogCategory.model_validate(row)

    def list_all(self) -> list[BlogCategory]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM blog_category ORDER BY created_at, slug").fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def get_by_id(self, category_id: str) -> BlogCategory | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM blog_category WHERE id = ?", (category_id,)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def get_by_slug(self, slug: str) -> BlogCategory | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM blog_category WHERE slug = ?", (slug,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def existing_slugs(self, slugs: Iterable[str]) -> set[str]:
        wanted = list(dict.fromkeys(slugs))
        if not wanted:
            return set()
        placeholders = ", ".join("?" for _ in wanted)
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"SELECT slug FROM blog_category WHERE slug IN ({placeholders})", wanted
            ).fetchall()
            return {r["slug"] for r in rows}
        finally:
            conn.close()

    def save(self, category: BlogCategory) -> BlogCategory:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO blog_category (id, slug, name_en, name_pl, color, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    slug=excluded.slug,
                    name_en=excluded.name_en,
                    name_pl=excluded.name_pl,
                    color=excluded.color
            """,
                (
                    category.id,
                    category.slug,
                    category.name_en,
                    category.name_pl,
                    category.color,
                    to_iso(category.created_at),
                ),
            )
            conn.commit()
            return category
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def delete(self, category_id: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM blog_category WHERE id = ?", (category_id,))
            conn.commit()
        finally:
            conn.close()

    def delete_all(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM blog_category")
            conn.commit()
        finally:
            conn.close()


class SQLiteBlogSettingsRepo:
    """SQLite adapter for BlogSettings (single-row table)."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def get(self) -> BlogSettings | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM blog_settings WHERE id = 'default'").fetchone()
            return BlogSettings.model_validate(row) if row else None
        finally:
            conn.close()

    def save(self, settings: BlogSettings) -> BlogSettings:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO blog_settings (id, enabled, posts_per_page, show_featured, updated_at)
                VALUES ('default', ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    enabled=excluded.enabled,
                    posts_per_page=excluded.posts_per_page,
                    show_featured=excluded.show_featured,
                    updated_at=excluded.updated_at
            """,
                (
                    int(settings.enabled),
                    settings.posts_per_page,
                    int(settings.show_featured),
                    to_iso(settings.updated_at),
                ),
            )
            conn.commit()
            return settings
        finally:
            conn.close()


class SQLiteBlogDataStore:
    """Whole-table dump and load of the blog tables for export/import."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def dump(self) -> tuple[list[BlogPost], list[BlogCategory], list[BlogSettings]]:
        conn = self._get_conn()
        try:
            posts = conn.execute("SELECT * FROM blog_post ORDER BY created_at, id").fetchall()
            categories = conn.execute("SELECT * FROM blog_category ORDER BY created_at, id").fetchall()
            settings = conn.execute("SELECT * FROM blog_settings").fetchall()
            return (
                [BlogPost.model_validate(r) for r in posts],
                [BlogCategory.model_validate(r) for r in categories],
                [BlogSettings.model_validate(r) for r in settings],
            )
        finally:
            conn.close()

    def load(
        self,
        posts: list[BlogPost],
        categories: list[BlogCategory],
        settings: list[BlogSettings],
        *,
        clear: bool = False,
    ) -> LoadCounts:
        imported = {"blogCategories": 0, "blogPosts": 0, "blogSettings": 0}
        skipped = {"blogCategories": 0, "blogPosts": 0, "blogSettings": 0}

        conn = self._get_conn()
        try:
            if clear:
                conn.execute("DELETE FROM blog_post")
                conn.execute("DELETE FROM blog_category")
                conn.execute("DELETE FROM blog_settings")

            for category in categories:
                cursor = conn.execute(
                    """
                    INSERT OR IGNORE INTO blog_category
                    (id, slug, name_en, name_pl, color, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                """,
                    (
                        category.id,
                        category.slug,
                        category.name_en,
                        category.name_pl,
                        category.color,
                        to_iso(category.created_at),
                    ),
                )
                (imported if cursor.rowcount else skipped)["blogCategories"] += 1

            for post in posts:
                cursor = conn.execute(_POST_INSERT_IGNORE_SQL, _post_params(post))
                (imported if cursor.rowcount else skipped)["blogPosts"] += 1

            for row in settings:
                cursor = conn.execute(
                    """
                    INSERT OR IGNORE INTO blog_settings
                    (id, enabled, posts_per_page, show_featured, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                """,
                    (
                        row.id,
                        int(row.enabled),
                        row.posts_per_page,
                        int(row.show_featured),
                        to_iso(row.updated_at),
                    ),
                )
                (imported if cursor.rowcount else skipped)["blogSettings"] += 1

            conn.commit()
            return LoadCounts(imported=imported, skipped=skipped)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
