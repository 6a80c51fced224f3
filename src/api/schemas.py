from typing import Any

from pydantic import BaseModel, Field

from src.domain.blocks import ContentBlock
from src.domain.entities import LocalizedCategory, ParsedBlogPost


# --- Posts ---
class PostListResponse(BaseModel):
    posts: list[ParsedBlogPost]
    total: int
    page: int
    limit: int
    total_pages: int
    has_more: bool


class UpsertResponse(BaseModel):
    success: bool = True
    post_id: str
    ids: list[str]


class DeleteResponse(BaseModel):
    success: bool = True
    deleted: int


class ToggleResponse(BaseModel):
    success: bool = True
    id: str
    value: bool


class TranslationResponse(BaseModel):
    locale: str
    slug: str


class RenderedPostResponse(BaseModel):
    post: ParsedBlogPost
    html: str
    headings: list[dict[str, Any]]


class ViewCountResponse(BaseModel):
    id: str
    views: int


# --- Categories ---
class CategoryListResponse(BaseModel):
    categories: list[LocalizedCategory]


class CategoryCreateRequest(BaseModel):
    slug: str
    name_en: str
    name_pl: str
    color: str | None = None


class CategoryUpdateRequest(BaseModel):
    slug: str | None = None
    name_en: str | None = None
    name_pl: str | None = None
    color: str | None = None


# --- Settings ---
class SettingsUpdateRequest(BaseModel):
    enabled: bool | None = None
    posts_per_page: int | None = Field(default=None, ge=1)
    show_featured: bool | None = None


# --- Editor conversion ---
class HtmlToBlocksRequest(BaseModel):
    html: str


class BlocksRequest(BaseModel):
    content: list[ContentBlock]


class BlocksResponse(BaseModel):
    content: list[ContentBlock]


class EditorHtmlResponse(BaseModel):
    html: str
    lossy: bool
    unsupported: list[dict[str, str]]


class RenderResponse(BaseModel):
    html: str
    warnings: list[dict[str, Any]]


# --- Transfer ---
class ImportResponse(BaseModel):
    success: bool = True
    message: str
    imported: dict[str, int]
    skipped: dict[str, int]


class ImportValidationResponse(BaseModel):
    is_valid: bool
    errors: list[str]
    counts: dict[str, int]


class StatsResponse(BaseModel):
    blog_posts: int
    published_posts: int
    blog_categories: int
    locales: dict[str, int]
    total_views: int


class ErrorDetail(BaseModel):
    field: str | None = None
    code: str
    message: str


class ErrorResponse(BaseModel):
    detail: str
    errors: list[ErrorDetail] = []
