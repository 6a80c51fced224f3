"""
Transfer component - Blog export, import and statistics.

Invariants:
- I1: Export covers the post, category and settings tables completely
- I2: Import validates the whole payload before writing anything
- I3: Import never overwrites an existing id; with clear, tables are
      emptied first and the whole load is one transaction
- I4: Only exports with the same major format version are accepted
- I5: Imported categories pass the same field checks as created ones
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from typing import Any

from pydantic import ValidationError

from src.components.blog import ImportFormatError
from src.components.categories import validate_category_fields
from src.domain.entities import BlogCategory
from src.rules.models import SlugRules

from .models import BlogExport, BlogStats, ExportTables, ImportResult, ImportValidation
from .ports import BlogDataStorePort, TimePort

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"

ImportPayload = str | bytes | dict[str, Any] | BlogExport


def _major(version: str) -> str:
    return version.split(".", 1)[0]


def _format_validation_error(e: ValidationError) -> list[str]:
    messages = []
    for err in e.errors():
        location = ".".join(str(part) for part in err["loc"])
        messages.append(f"{location}: {err['msg']}" if location else err["msg"])
    return messages


def parse_import(
    data: ImportPayload,
    *,
    version: str = EXPORT_VERSION,
    slug_rules: SlugRules | None = None,
) -> BlogExport:
    """
    Read an export payload.

    Raises:
        ImportFormatError: If the payload is not JSON, does not match the
            export structure, or has an incompatible version, or carries a
            category that fails field validation.
    """
    if isinstance(data, BlogExport):
        parsed = data
    else:
        if isinstance(data, (str, bytes)):
            try:
                data = json.loads(data)
            except (json.JSONDecodeError, RecursionError) as e:
                raise ImportFormatError(f"Import file is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ImportFormatError("Import file must contain a JSON object")

        try:
            parsed = BlogExport.model_validate(data)
        except ValidationError as e:
            details = "; ".join(_format_validation_error(e)[:5])
            raise ImportFormatError(f"Invalid export structure: {details}") from e

    if _major(parsed.version) != _major(version):
        raise ImportFormatError(
            f"Unsupported export version {parsed.version} (expected {_major(version)}.x)"
        )

    category_errors = _category_errors(parsed.tables.blog_categories, slug_rules)
    if category_errors:
        raise ImportFormatError(f"Invalid categories: {'; '.join(category_errors[:5])}")
    return parsed


def _category_errors(
    categories: list[BlogCategory], slug_rules: SlugRules | None
) -> list[str]:
    messages = []
    for category in categories:
        for err in validate_category_fields(
            category.slug, category.name_en, category.name_pl, category.color, slug_rules
        ):
            messages.append(f"{category.slug!r}: {err.message}")
    return messages


# --- Component Entry Points ---


def export_blog_data(
    *,
    store: BlogDataStorePort,
    time: TimePort,
    version: str = EXPORT_VERSION,
) -> BlogExport:
    """Snapshot of every blog table."""
    posts, categories, settings = store.dump()
    logger.info(
        "Exported %d posts, %d categories, %d settings rows",
        len(posts),
        len(categories),
        len(settings),
    )
    return BlogExport(
        version=version,
        exported_at=time.now_utc(),
        tables=ExportTables(
            blog_posts=posts,
            blog_categories=categories,
            blog_settings=settings,
        ),
    )


def export_blog_json(
    *,
    store: BlogDataStorePort,
    time: TimePort,
    version: str = EXPORT_VERSION,
) -> str:
    """Export as indented JSON text."""
    export = export_blog_data(store=store, time=time, version=version)
    return export.model_dump_json(by_alias=True, indent=2)


def validate_import(
    data: ImportPayload,
    *,
    version: str = EXPORT_VERSION,
    slug_rules: SlugRules | None = None,
) -> ImportValidation:
    """Check a payload without writing anything."""
    try:
        parsed = parse_import(data, version=version, slug_rules=slug_rules)
    except ImportFormatError as e:
        return ImportValidation(is_valid=False, errors=[str(e)])

    tables = parsed.tables
    return ImportValidation(
        is_valid=True,
        counts={
            "blogPosts": len(tables.blog_posts),
            "blogCategories": len(tables.blog_categories),
            "blogSettings": len(tables.blog_settings),
        },
    )


def import_blog_data(
    data: ImportPayload,
    *,
    store: BlogDataStorePort,
    clear: bool = False,
    version: str = EXPORT_VERSION,
    slug_rules: SlugRules | None = None,
) -> ImportResult:
    """
    Load an export into storage.

    Raises:
        ImportFormatError: If the payload is unreadable. Nothing is written.
    """
    parsed = parse_import(data, version=version, slug_rules=slug_rules)
    tables = parsed.tables

    counts = store.load(
        tables.blog_posts,
        tables.blog_categories,
        tables.blog_settings,
        clear=clear,
    )

    total = sum(counts.imported.values())
    skipped = sum(counts.skipped.values())
    message = f"Imported {total} rows"
    if skipped:
        message += f", skipped {skipped} existing"
    logger.info("%s (clear=%s, exported_at=%s)", message, clear, parsed.exported_at.isoformat())

    return ImportResult(message=message, imported=counts.imported, skipped=counts.skipped)


def get_blog_stats(*, store: BlogDataStorePort) -> BlogStats:
    """Row counts per table, published posts and rows per locale."""
    posts, categories, _ = store.dump()
    return BlogStats(
        blog_posts=len(posts),
        published_posts=sum(1 for p in posts if p.published),
        blog_categories=len(categories),
        locales=dict(Counter(p.locale for p in posts)),
        total_views=sum(p.views for p in posts),
    )
