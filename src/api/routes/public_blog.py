"""
Public Blog API.

Read-only endpoints behind the blog listing and post pages.

- Unknown slugs and rows answer 404
- A disabled blog answers 404 on listing and post pages
- Rendered HTML is produced server side with sanitized inline markup
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.deps import get_blog_service, get_category_service, get_rules
from src.api.schemas import (
    CategoryListResponse,
    PostListResponse,
    RenderedPostResponse,
    TranslationResponse,
    ViewCountResponse,
)
from src.components.blog import BlogService, ListPostsQuery, PostNotFoundError
from src.components.categories import CategoryService
from src.components.render_blocks import (
    ExtractHeadingsInput,
    RenderDocumentInput,
    run_extract_headings,
    run_render,
)
from src.domain.entities import BlogSettings, ParsedBlogPost, SortOrder
from src.rules.models import Rules

router = APIRouter()


def _require_enabled(service: BlogService) -> None:
    if not service.is_enabled():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog is disabled")


def _require_post(post: ParsedBlogPost | None, slug: str) -> ParsedBlogPost:
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Post '{slug}' not found",
        )
    return post


# --- Listing ---


@router.get("", response_model=PostListResponse, summary="List published posts")
def list_posts(
    locale: str = Query(...),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    category: str | None = None,
    search: str | None = None,
    sort: SortOrder = "newest",
    exclude_featured: bool = False,
    service: BlogService = Depends(get_blog_service),
) -> PostListResponse:
    _require_enabled(service)
    result = service.list_posts(
        ListPostsQuery(
            locale=locale,
            page=page,
            limit=limit,
            category=category,
            search=search,
            sort=sort,
            exclude_featured=exclude_featured,
        )
    )
    return PostListResponse(
        posts=result.posts,
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        has_more=result.has_more,
    )


@router.get("/featured", response_model=ParsedBlogPost | None, summary="Featured post")
def get_featured(
    locale: str = Query(...),
    service: BlogService = Depends(get_blog_service),
) -> ParsedBlogPost | None:
    settings = service.get_settings()
    if not settings.enabled or not settings.show_featured:
        return None
    return service.get_featured_post(locale)


@router.get("/most-viewed", response_model=list[ParsedBlogPost])
def most_viewed(
    locale: str = Query(...),
    limit: int | None = Query(None, ge=0, le=50),
    service: BlogService = Depends(get_blog_service),
) -> list[ParsedBlogPost]:
    return service.get_most_viewed(locale, limit)


@router.get("/slugs", response_model=list[TranslationResponse], summary="Published slugs")
def list_slugs(service: BlogService = Depends(get_blog_service)) -> list[TranslationResponse]:
    return [TranslationResponse(locale=t.locale, slug=t.slug) for t in service.get_published_slugs()]


@router.get("/categories", response_model=CategoryListResponse)
def list_categories(
    locale: str = Query(...),
    service: CategoryService = Depends(get_category_service),
) -> CategoryListResponse:
    return CategoryListResponse(categories=service.list_categories(locale))


@router.get("/settings", response_model=BlogSettings)
def get_settings(service: BlogService = Depends(get_blog_service)) -> BlogSettings:
    return service.get_settings()


# --- Post pages ---


@router.get("/posts/{slug}", response_model=ParsedBlogPost, summary="Published post by slug")
def get_post(
    slug: str,
    locale: str = Query(...),
    service: BlogService = Depends(get_blog_service),
) -> ParsedBlogPost:
    _require_enabled(service)
    return _require_post(service.get_post_by_slug(slug, locale), slug)


@router.get("/posts/{slug}/html", response_model=RenderedPostResponse)
def get_post_html(
    slug: str,
    locale: str = Query(...),
    service: BlogService = Depends(get_blog_service),
    rules: Rules = Depends(get_rules),
) -> RenderedPostResponse:
    """Post with its document rendered to HTML and a table of contents."""
    _require_enabled(service)
    post = _require_post(service.get_post_by_slug(slug, locale), slug)

    rendered = run_render(RenderDocumentInput(document=post.content), rules=rules.richtext)
    headings = run_extract_headings(ExtractHeadingsInput(document=post.content))
    return RenderedPostResponse(
        post=post,
        html=rendered.html,
        headings=[asdict(h) for h in headings.headings],
    )


@router.get("/posts/{post_id}/translations", response_model=list[TranslationResponse])
def get_translations(
    post_id: str,
    service: BlogService = Depends(get_blog_service),
) -> list[TranslationResponse]:
    return [
        TranslationResponse(locale=t.locale, slug=t.slug)
        for t in service.get_post_translations(post_id)
    ]


@router.get("/related/{row_id}", response_model=list[ParsedBlogPost], summary="Related posts")
def get_related(
    row_id: str,
    limit: int | None = Query(None, ge=0, le=24),
    service: BlogService = Depends(get_blog_service),
) -> list[ParsedBlogPost]:
    post = service.get_post_by_id(row_id)
    if post is None or not post.published:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return service.get_related_posts(post, limit)


# --- Views ---


@router.post("/views/{row_id}", response_model=ViewCountResponse, summary="Count a view")
def track_view(
    row_id: str,
    service: BlogService = Depends(get_blog_service),
) -> ViewCountResponse:
    try:
        service.track_view(row_id)
    except PostNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return ViewCountResponse(id=row_id, views=service.get_view_count(row_id))
