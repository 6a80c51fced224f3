from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.domain.blocks import BaseBlock, ContentBlock

# --- Enums / Literals ---
SortOrder = Literal["newest", "oldest"]
Locale = str

DEFAULT_CATEGORY_COLOR = "#6366f1"


def utcnow() -> datetime:
    return datetime.now(UTC)


# --- Posts ---


class BlogPost(BaseModel):
    """Stored row: one per (post_id, locale), id is ``{post_id}_{locale}``."""

    id: str
    post_id: str
    locale: Locale
    slug: str
    title: str
    excerpt: str | None = None
    content: str  # Serialized document
    cover_image: str | None = None
    categories: str | None = None  # Comma-joined slugs
    badge_text: str | None = None
    badge_color: str | None = None
    featured: bool = False
    published: bool = False
    published_at: datetime | None = None
    author_id: str | None = None
    author_name: str | None = None
    views: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ParsedBlogPost(BaseModel):
    """A stored row with its document and categories decoded."""

    id: str
    post_id: str
    locale: Locale
    slug: str
    title: str
    excerpt: str | None = None
    content: list[ContentBlock] = Field(default_factory=list)
    cover_image: str | None = None
    categories: list[str] = Field(default_factory=list)
    badge_text: str | None = None
    badge_color: str | None = None
    featured: bool = False
    published: bool = False
    published_at: datetime | None = None
    author_id: str | None = None
    author_name: str | None = None
    views: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


def make_row_id(post_id: str, locale: Locale) -> str:
    return f"{post_id}_{locale}"


# --- Import / editing document ---


class PostTranslationJSON(BaseModel):
    locale: Locale
    slug: str
    title: str
    excerpt: str | None = None
    content: list[ContentBlock] = Field(default_factory=list)
    categories: list[str] | None = None
    badge_text: str | None = Field(default=None, alias="badgeText")
    badge_color: str | None = Field(default=None, alias="badgeColor")

    model_config = ConfigDict(populate_by_name=True)


class BlogPostJSON(BaseModel):
    post_id: str = Field(alias="postId", min_length=1)
    translations: list[PostTranslationJSON] = Field(min_length=1)
    cover_image: str | None = Field(default=None, alias="coverImage")
    featured: bool = False
    published: bool = False
    author_name: str | None = Field(default=None, alias="authorName")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("translations")
    @classmethod
    def _unique_locales(cls, value: list[PostTranslationJSON]) -> list[PostTranslationJSON]:
        seen: set[str] = set()
        for translation in value:
            if translation.locale in seen:
                raise ValueError(f"Duplicate translation locale '{translation.locale}'")
            seen.add(translation.locale)
        return value

    def referenced_categories(self) -> list[str]:
        """All category slugs referenced by any translation, first occurrence order."""
        slugs: list[str] = []
        for translation in self.translations:
            for slug in translation.categories or []:
                if slug not in slugs:
                    slugs.append(slug)
        return slugs


# --- Categories & Settings ---


class BlogCategory(BaseModel):
    id: str
    slug: str
    name_en: str
    name_pl: str
    color: str = DEFAULT_CATEGORY_COLOR
    created_at: datetime = Field(default_factory=utcnow)


class LocalizedCategory(BlogCategory):
    name: str


class BlogSettings(BaseModel):
    id: str = "default"
    enabled: bool = True
    posts_per_page: int = 12
    show_featured: bool = True
    updated_at: datetime = Field(default_factory=utcnow)


__all__ = [
    "BaseBlock",
    "BlogCategory",
    "BlogPost",
    "BlogPostJSON",
    "BlogSettings",
    "DEFAULT_CATEGORY_COLOR",
    "LocalizedCategory",
    "ParsedBlogPost",
    "PostTranslationJSON",
    "SortOrder",
    "make_row_id",
    "utcnow",
]
