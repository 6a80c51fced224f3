import logging
import os
import secrets
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import (
    SQLiteBlogDataStore,
    SQLiteBlogPostRepo,
    SQLiteBlogSettingsRepo,
    SQLiteCategoryRepo,
)
from src.components.blog import BlogService
from src.components.categories import CategoryService
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger(__name__)


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("BLOG_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "blog.db")
        self.rules_path = Path(os.environ.get("BLOG_RULES_PATH", self.base_dir / "rules.yaml"))
        self.migrations_dir = self.base_dir / "migrations"
        self.admin_token = os.environ.get("BLOG_ADMIN_TOKEN") or None


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Repos ---
def get_post_repo(settings: Settings = Depends(get_settings)) -> SQLiteBlogPostRepo:
    return SQLiteBlogPostRepo(settings.db_path)


def get_category_repo(settings: Settings = Depends(get_settings)) -> SQLiteCategoryRepo:
    return SQLiteCategoryRepo(settings.db_path)


def get_settings_repo(settings: Settings = Depends(get_settings)) -> SQLiteBlogSettingsRepo:
    return SQLiteBlogSettingsRepo(settings.db_path)


def get_data_store(settings: Settings = Depends(get_settings)) -> SQLiteBlogDataStore:
    return SQLiteBlogDataStore(settings.db_path)


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Component Services ---
def get_blog_service(
    posts: SQLiteBlogPostRepo = Depends(get_post_repo),
    categories: SQLiteCategoryRepo = Depends(get_category_repo),
    settings_repo: SQLiteBlogSettingsRepo = Depends(get_settings_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> BlogService:
    """Get blog component service."""
    return BlogService(posts, categories, settings_repo, clock, rules)


def get_category_service(
    categories: SQLiteCategoryRepo = Depends(get_category_repo),
    posts: SQLiteBlogPostRepo = Depends(get_post_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> CategoryService:
    """Get category component service."""
    return CategoryService(categories, posts, clock, rules)


# --- Auth ---
bearer_scheme = HTTPBearer(auto_error=False)


async def require_admin(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    settings: Settings = Depends(get_settings),
) -> None:
    """Admin routes need the configured token as a bearer token or cookie."""
    if not settings.admin_token:
        logger.warning("Admin request rejected: BLOG_ADMIN_TOKEN is not set")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin access is not configured",
        )

    token = credentials.credentials if credentials else request.cookies.get("admin_token")
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not secrets.compare_digest(token.encode(), settings.admin_token.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
