from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api import deps
from src.api.routes import admin_blog, public_blog
from tests.fakes import ADMIN_TOKEN, MockBlogDataStore


@pytest.fixture
def data_store() -> MockBlogDataStore:
    return MockBlogDataStore()


@pytest.fixture
def api_settings() -> SimpleNamespace:
    """Stand-in for deps.Settings with only what the routes read."""
    return SimpleNamespace(admin_token=ADMIN_TOKEN)


@pytest.fixture
def app(blog_service, category_service, rules, clock, data_store, api_settings) -> FastAPI:
    """Test FastAPI app with the blog routers over in-memory repos."""
    app = FastAPI()
    app.include_router(public_blog.router, prefix="/api/blog")
    app.include_router(admin_blog.router, prefix="/api/admin/blog")

    app.dependency_overrides[deps.get_blog_service] = lambda: blog_service
    app.dependency_overrides[deps.get_category_service] = lambda: category_service
    app.dependency_overrides[deps.get_rules] = lambda: rules
    app.dependency_overrides[deps.get_clock] = lambda: clock
    app.dependency_overrides[deps.get_data_store] = lambda: data_store
    app.dependency_overrides[deps.get_settings] = lambda: api_settings

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Client without credentials."""
    return TestClient(app)


@pytest.fixture
def admin(app: FastAPI) -> TestClient:
    """Client sending the admin bearer token."""
    return TestClient(app, headers={"Authorization": f"Bearer {ADMIN_TOKEN}"})
