"""
Admin Blog API.

Post upsert and moderation, category management, settings, editor
conversion and data transfer. Every endpoint requires the admin token.

- Upsert answers 400 listing every unregistered category and writes nothing
- Unknown post or category ids answer 404
- Import payload errors answer 400 before anything is written
"""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from pydantic import ValidationError

from src.api.deps import (
    get_blog_service,
    get_category_service,
    get_clock,
    get_data_store,
    get_rules,
    require_admin,
)
from src.api.schemas import (
    BlocksRequest,
    BlocksResponse,
    CategoryCreateRequest,
    CategoryUpdateRequest,
    DeleteResponse,
    EditorHtmlResponse,
    HtmlToBlocksRequest,
    ImportResponse,
    ImportValidationResponse,
    PostListResponse,
    RenderResponse,
    SettingsUpdateRequest,
    StatsResponse,
    ToggleResponse,
    UpsertResponse,
)
from src.components.blog import (
    BlogService,
    CategoryNotFoundError,
    CategoryValidationError,
    ImportFormatError,
    PostNotFoundError,
    SettingsUpdate,
    UnknownCategoryError,
    UnsupportedLocaleError,
    generate_example_post,
)
from src.components.categories import CategoryService
from src.components.html_convert import (
    BlocksToHtmlInput,
    HtmlToBlocksInput,
    run_blocks_to_html,
    run_html_to_blocks,
)
from src.components.render_blocks import RenderDocumentInput, run_render
from src.components.transfer import (
    BlogDataStorePort,
    TimePort,
    export_blog_json,
    get_blog_stats,
    import_blog_data,
    validate_import,
)
from src.domain.entities import BlogCategory, BlogPostJSON, BlogSettings
from src.rules.models import Rules

router = APIRouter(dependencies=[Depends(require_admin)])


# --- Helper Functions ---


def _bad_request(message: str, errors: list[dict[str, Any]]) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"message": message, "errors": errors},
    )


def _pydantic_errors(e: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or None,
            "code": err["type"],
            "message": err["msg"],
        }
        for err in e.errors()
    ]


def _not_found(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


# --- Posts ---


@router.post(
    "/posts",
    response_model=UpsertResponse,
    summary="Create or update a post",
    description="Writes one row per translation. Unregistered categories reject the whole post.",
)
def upsert_post(
    document: dict[str, Any] = Body(...),
    service: BlogService = Depends(get_blog_service),
) -> UpsertResponse:
    try:
        result = service.upsert_post(document)
    except ValidationError as e:
        raise _bad_request("Invalid post document", _pydantic_errors(e)) from e
    except UnsupportedLocaleError as e:
        raise _bad_request(
            str(e),
            [
                {"field": "locale", "code": "unsupported_locale", "message": locale}
                for locale in e.locales
            ],
        ) from e
    except UnknownCategoryError as e:
        raise _bad_request(
            str(e),
            [
                {"field": "categories", "code": "unknown_category", "message": slug}
                for slug in e.slugs
            ],
        ) from e
    return UpsertResponse(post_id=result.post_id, ids=result.ids)


@router.get("/posts", response_model=PostListResponse, summary="List all posts")
def list_posts(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    search: str | None = None,
    service: BlogService = Depends(get_blog_service),
) -> PostListResponse:
    result = service.list_admin_posts(page, limit, search)
    return PostListResponse(
        posts=result.posts,
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        has_more=result.has_more,
    )


@router.get("/posts/example", response_model=BlogPostJSON, summary="Example post document")
def example_post() -> BlogPostJSON:
    return generate_example_post()


@router.get("/posts/{post_id}", response_model=BlogPostJSON, summary="Post editing document")
def get_post_document(
    post_id: str,
    service: BlogService = Depends(get_blog_service),
) -> BlogPostJSON:
    try:
        return service.get_post_document(post_id)
    except PostNotFoundError as e:
        raise _not_found(e) from e


@router.delete("/posts/{post_id}", response_model=DeleteResponse)
def delete_post(
    post_id: str,
    service: BlogService = Depends(get_blog_service),
) -> DeleteResponse:
    try:
        deleted = service.delete_post(post_id)
    except PostNotFoundError as e:
        raise _not_found(e) from e
    return DeleteResponse(deleted=deleted)


@router.post("/rows/{row_id}/toggle-published", response_model=ToggleResponse)
def toggle_published(
    row_id: str,
    service: BlogService = Depends(get_blog_service),
) -> ToggleResponse:
    try:
        result = service.toggle_published(row_id)
    except PostNotFoundError as e:
        raise _not_found(e) from e
    return ToggleResponse(id=result.id, value=result.value)


@router.post("/rows/{row_id}/toggle-featured", response_model=ToggleResponse)
def toggle_featured(
    row_id: str,
    service: BlogService = Depends(get_blog_service),
) -> ToggleResponse:
    try:
        result = service.toggle_featured(row_id)
    except PostNotFoundError as e:
        raise _not_found(e) from e
    return ToggleResponse(id=result.id, value=result.value)


# --- Categories ---


def _category_errors(e: CategoryValidationError) -> HTTPException:
    return _bad_request(str(e), [asdict(err) for err in e.errors])


@router.get("/categories", response_model=list[BlogCategory])
def list_categories(
    service: CategoryService = Depends(get_category_service),
) -> list[BlogCategory]:
    return service.list_registered()


@router.post("/categories", response_model=BlogCategory, status_code=status.HTTP_201_CREATED)
def create_category(
    request: CategoryCreateRequest,
    service: CategoryService = Depends(get_category_service),
) -> BlogCategory:
    try:
        return service.create_category(
            request.slug, request.name_en, request.name_pl, request.color
        )
    except CategoryValidationError as e:
        raise _category_errors(e) from e


@router.patch("/categories/{category_id}", response_model=BlogCategory)
def update_category(
    category_id: str,
    request: CategoryUpdateRequest,
    service: CategoryService = Depends(get_category_service),
) -> BlogCategory:
    try:
        return service.update_category(
            category_id,
            slug=request.slug,
            name_en=request.name_en,
            name_pl=request.name_pl,
            color=request.color,
        )
    except CategoryNotFoundError as e:
        raise _not_found(e) from e
    except CategoryValidationError as e:
        raise _category_errors(e) from e


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
) -> Response:
    try:
        service.delete_category(category_id)
    except CategoryNotFoundError as e:
        raise _not_found(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Settings ---


@router.get("/settings", response_model=BlogSettings)
def get_settings(service: BlogService = Depends(get_blog_service)) -> BlogSettings:
    return service.get_settings()


@router.put("/settings", response_model=BlogSettings)
def update_settings(
    request: SettingsUpdateRequest,
    service: BlogService = Depends(get_blog_service),
) -> BlogSettings:
    return service.update_settings(
        SettingsUpdate(
            enabled=request.enabled,
            posts_per_page=request.posts_per_page,
            show_featured=request.show_featured,
        )
    )


# --- Editor conversion ---


@router.post("/convert/html-to-blocks", response_model=BlocksResponse)
def html_to_blocks(request: HtmlToBlocksRequest) -> BlocksResponse:
    output = run_html_to_blocks(HtmlToBlocksInput(html=request.html))
    return BlocksResponse(content=output.document)


@router.post("/convert/blocks-to-html", response_model=EditorHtmlResponse)
def blocks_to_html(request: BlocksRequest) -> EditorHtmlResponse:
    """Editor HTML. ``lossy`` warns that saving from the editor drops blocks."""
    output = run_blocks_to_html(BlocksToHtmlInput(document=list(request.content)))
    return EditorHtmlResponse(
        html=output.html,
        lossy=output.lossy,
        unsupported=[{"type": t, "id": i} for t, i in output.unsupported],
    )


@router.post("/render", response_model=RenderResponse, summary="Preview rendered HTML")
def render_preview(
    request: BlocksRequest,
    rules: Rules = Depends(get_rules),
) -> RenderResponse:
    try:
        output = run_render(RenderDocumentInput(document=request.content), rules=rules.richtext)
    except ValueError as e:
        raise _bad_request(str(e), []) from e
    return RenderResponse(html=output.html, warnings=[asdict(w) for w in output.warnings])


# --- Transfer ---


@router.get("/export", summary="Download all blog data")
def export_data(
    store: BlogDataStorePort = Depends(get_data_store),
    clock: TimePort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> Response:
    body = export_blog_json(store=store, time=clock, version=rules.transfer.export_version)
    filename = f"blog-export-{clock.now_utc():%Y-%m-%d}.json"
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import/validate", response_model=ImportValidationResponse)
def validate_data(
    payload: Any = Body(...),
    rules: Rules = Depends(get_rules),
) -> ImportValidationResponse:
    result = validate_import(
        payload, version=rules.transfer.export_version, slug_rules=rules.slugs
    )
    return ImportValidationResponse(
        is_valid=result.is_valid,
        errors=result.errors,
        counts=result.counts,
    )


@router.post("/import", response_model=ImportResponse, summary="Load an export")
def import_data(
    payload: Any = Body(...),
    clear: bool = Query(False, description="Empty the blog tables first"),
    store: BlogDataStorePort = Depends(get_data_store),
    rules: Rules = Depends(get_rules),
) -> ImportResponse:
    try:
        result = import_blog_data(
            payload,
            store=store,
            clear=clear,
            version=rules.transfer.export_version,
            slug_rules=rules.slugs,
        )
    except ImportFormatError as e:
        raise _bad_request(str(e), []) from e
    return ImportResponse(message=result.message, imported=result.imported, skipped=result.skipped)


@router.get("/stats", response_model=StatsResponse)
def stats(store: BlogDataStorePort = Depends(get_data_store)) -> StatsResponse:
    result = get_blog_stats(store=store)
    return StatsResponse(**asdict(result))
