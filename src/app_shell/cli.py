import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from src.adapters.clock import SystemClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import (
    SQLiteBlogDataStore,
    SQLiteBlogPostRepo,
    SQLiteBlogSettingsRepo,
    SQLiteCategoryRepo,
)
from src.components.blog import (
    EXAMPLE_CATEGORIES,
    BlogService,
    CategoryValidationError,
    ImportFormatError,
    UnknownCategoryError,
    generate_example_post,
)
from src.components.categories import CategoryService
from src.components.transfer import (
    export_blog_json,
    get_blog_stats,
    import_blog_data,
    validate_import,
)
from src.rules.loader import load_rules
from src.rules.models import Rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")

DATA_DIR = os.environ.get("BLOG_DATA_DIR", "./data")
DB_PATH = f"{DATA_DIR}/blog.db"
RULES_PATH = os.environ.get("BLOG_RULES_PATH", "rules.yaml")
MIGRATIONS_DIR = "migrations"


@dataclass
class BlogContext:
    rules: Rules
    clock: SystemClock
    store: SQLiteBlogDataStore
    category_repo: SQLiteCategoryRepo
    blog: BlogService
    categories: CategoryService

    @classmethod
    def create(cls, db_path: str, rules: Rules) -> "BlogContext":
        clock = SystemClock()
        posts = SQLiteBlogPostRepo(db_path)
        category_repo = SQLiteCategoryRepo(db_path)
        return cls(
            rules=rules,
            clock=clock,
            store=SQLiteBlogDataStore(db_path),
            category_repo=category_repo,
            blog=BlogService(posts, category_repo, SQLiteBlogSettingsRepo(db_path), clock, rules),
            categories=CategoryService(category_repo, posts, clock, rules),
        )


def get_context() -> BlogContext:
    if not Path(RULES_PATH).exists():
        logger.error(f"Rules file {RULES_PATH} not found.")
        sys.exit(1)

    rules = load_rules(Path(RULES_PATH))
    handle_migrate(quiet=True)
    return BlogContext.create(DB_PATH, rules)


def handle_migrate(quiet: bool = False) -> None:
    Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(DB_PATH, MIGRATIONS_DIR).run_migrations()
    if not quiet:
        print(f"Applied {len(applied)} migration(s).")


def handle_export(ctx: BlogContext, args: argparse.Namespace) -> None:
    body = export_blog_json(
        store=ctx.store, time=ctx.clock, version=ctx.rules.transfer.export_version
    )
    if args.out:
        Path(args.out).write_text(body, encoding="utf-8")
        print(f"Export written to {args.out}")
    else:
        print(body)


def handle_import(ctx: BlogContext, args: argparse.Namespace) -> None:
    path = Path(args.file)
    if not path.exists():
        logger.error(f"File {path} not found.")
        sys.exit(1)

    payload = path.read_text(encoding="utf-8")
    version = ctx.rules.transfer.export_version

    if args.validate_only:
        result = validate_import(payload, version=version, slug_rules=ctx.rules.slugs)
        if not result.is_valid:
            for error in result.errors:
                print(f"ERROR: {error}")
            sys.exit(1)
        print(f"Valid export: {json.dumps(result.counts)}")
        return

    try:
        result = import_blog_data(
            payload,
            store=ctx.store,
            clear=args.clear,
            version=version,
            slug_rules=ctx.rules.slugs,
        )
    except ImportFormatError as e:
        logger.error(str(e))
        sys.exit(1)
    print(result.message)


def handle_stats(ctx: BlogContext, args: argparse.Namespace) -> None:
    stats = get_blog_stats(store=ctx.store)
    print(f"Posts: {stats.blog_posts} ({stats.published_posts} published)")
    print(f"Categories: {stats.blog_categories}")
    print(f"Total views: {stats.total_views}")
    for locale, count in sorted(stats.locales.items()):
        print(f" - {locale}: {count}")


def handle_add_category(ctx: BlogContext, args: argparse.Namespace) -> None:
    try:
        category = ctx.categories.create_category(args.slug, args.name_en, args.name_pl, args.color)
    except CategoryValidationError as e:
        for error in e.errors:
            logger.error(f"{error.field}: {error.message}")
        sys.exit(1)
    print(f"Category '{category.slug}' created ({category.id}).")


def handle_example(ctx: BlogContext, args: argparse.Namespace) -> None:
    document = generate_example_post()

    if not args.upsert:
        body = document.model_dump_json(by_alias=True, indent=2)
        if args.out:
            Path(args.out).write_text(body, encoding="utf-8")
            print(f"Example written to {args.out}")
        else:
            print(body)
        return

    for slug, name_en, name_pl in EXAMPLE_CATEGORIES:
        if ctx.category_repo.get_by_slug(slug) is None:
            ctx.categories.create_category(slug, name_en, name_pl)
    try:
        result = ctx.blog.upsert_post(document)
    except UnknownCategoryError as e:
        logger.error(str(e))
        sys.exit(1)
    print(f"Example post saved: {', '.join(result.ids)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Blog CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # export
    export_parser = subparsers.add_parser("export", help="Export all blog data as JSON")
    export_parser.add_argument("--out", help="Write to this file instead of stdout")

    # import
    import_parser = subparsers.add_parser("import", help="Load a JSON export")
    import_parser.add_argument("file", help="Path to export file")
    import_parser.add_argument("--clear", action="store_true", help="Empty blog tables first")
    import_parser.add_argument(
        "--validate-only", action="store_true", help="Check the file without writing"
    )

    # stats
    subparsers.add_parser("stats", help="Show blog statistics")

    # add-category
    category_parser = subparsers.add_parser("add-category", help="Register a category")
    category_parser.add_argument("slug")
    category_parser.add_argument("name_en")
    category_parser.add_argument("name_pl")
    category_parser.add_argument("--color", help="Hex color, e.g. #6366f1")

    # example
    example_parser = subparsers.add_parser("example", help="Generate the example post")
    example_parser.add_argument("--out", help="Write the document to this file")
    example_parser.add_argument(
        "--upsert", action="store_true", help="Save it, creating its categories if needed"
    )

    args = parser.parse_args()

    if args.command == "migrate":
        handle_migrate()
        return

    ctx = get_context()

    if args.command == "export":
        handle_export(ctx, args)
    elif args.command == "import":
        handle_import(ctx, args)
    elif args.command == "stats":
        handle_stats(ctx, args)
    elif args.command == "add-category":
        handle_add_category(ctx, args)
    elif args.command == "example":
        handle_example(ctx, args)


if __name__ == "__main__":
    main()
