from pathlib import Path

import pytest

from src.adapters.clock import FixedClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.components.blog import BlogService
from src.components.categories import CategoryService
from src.rules.loader import load_rules
from tests.fakes import NOW, MockBlogPostRepo, MockCategoryRepo, MockSettingsRepo

# --- Fixtures ---


@pytest.fixture
def rules():
    """Real rules from the project root."""
    rules_path = Path("rules.yaml").resolve()
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def post_repo() -> MockBlogPostRepo:
    return MockBlogPostRepo()


@pytest.fixture
def category_repo() -> MockCategoryRepo:
    return MockCategoryRepo()


@pytest.fixture
def settings_repo() -> MockSettingsRepo:
    return MockSettingsRepo()


@pytest.fixture
def blog_service(post_repo, category_repo, settings_repo, clock, rules) -> BlogService:
    return BlogService(post_repo, category_repo, settings_repo, clock, rules)


@pytest.fixture
def category_service(category_repo, post_repo, clock, rules) -> CategoryService:
    return CategoryService(category_repo, post_repo, clock, rules)


@pytest.fixture
def db_path(tmp_path) -> str:
    """Migrated SQLite database in a temp dir."""
    path = str(tmp_path / "blog.db")
    SQLiteMigrator(path, "migrations").run_migrations()
    return path
