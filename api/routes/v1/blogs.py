"""
api/routes/v1/blogs.py -- Blog endpoints.

Routes:
  GET    /api/v1/blogs                  -- public, paginated; status defaults to "published"
  GET    /api/v1/blogs/admin/all        -- admin; every status unless filtered
  GET    /api/v1/blogs/admin/stats      -- admin
  GET    /api/v1/blogs/meta/categories  -- public
  GET    /api/v1/blogs/{slug}           -- public, published only; counts a view
  POST   /api/v1/blogs                  -- admin
  PUT    /api/v1/blogs/{id}             -- admin; partial update
  DELETE /api/v1/blogs/{id}             -- admin; archives the post
  POST   /api/v1/blogs/{id}/image       -- admin; sets featuredImage

publishedAt is never accepted from the client. The store stamps it the first
time a post's status becomes "published" and keeps it through later edits.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from api.models import ApiResponse, BlogCreate, BlogResponse, BlogStats, BlogUpdate, PagedResponse, PaginationMeta
from api.uploads import store_image
from auth.dependencies import require_admin
from auth.models import Account
from cms.models import Blog, BlogStatus
from cms.store import CMSStore
from core.errors import Conflict, NotFound

router = APIRouter()

_NOT_FOUND = "Blog not found"
_SLUG_TAKEN = "Blog with this slug already exists"


def _paged(result) -> PagedResponse[BlogResponse]:
    return PagedResponse(
        data=[BlogResponse.from_blog(b) for b in result.items],
        pagination=PaginationMeta.from_page(result),
    )


@router.get("/blogs", response_model=PagedResponse[BlogResponse])
def list_blogs(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: BlogStatus = BlogStatus.published,
    category: Optional[str] = Query(None, max_length=100),
    featured: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=200),
    sort: str = Query("-publishedAt", max_length=50),
) -> PagedResponse[BlogResponse]:
    store: CMSStore = request.app.state.cms_store
    result = store.list_blogs(
        page=page,
        limit=limit,
        status=status.value,
        category=category,
        featured=featured,
        search=search,
        sort=sort,
    )
    return _paged(result)


@router.get("/blogs/admin/all", response_model=PagedResponse[BlogResponse])
def list_all_blogs(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[BlogStatus] = None,
    category: Optional[str] = Query(None, max_length=100),
    search: Optional[str] = Query(None, max_length=200),
    sort: str = Query("-createdAt", max_length=50),
    current_user: Account = Depends(require_admin),
) -> PagedResponse[BlogResponse]:
    store: CMSStore = request.app.state.cms_store
    result = store.list_blogs(
        page=page,
        limit=limit,
        status=status.value if status else None,
        category=category,
        search=search,
        sort=sort,
    )
    return _paged(result)


@router.get("/blogs/admin/stats", response_model=ApiResponse[BlogStats])
def blog_stats(request: Request, current_user: Account = Depends(require_admin)) -> ApiResponse[BlogStats]:
    store: CMSStore = request.app.state.cms_store
    return ApiResponse(data=BlogStats(**store.blog_stats()))


@router.get("/blogs/meta/categories", response_model=ApiResponse[list[str]])
def blog_categories(request: Request) -> ApiResponse[list[str]]:
    store: CMSStore = request.app.state.cms_store
    return ApiResponse(data=store.blog_categories())


@router.get("/blogs/{slug}", response_model=ApiResponse[BlogResponse])
def get_blog(request: Request, slug: str) -> ApiResponse[BlogResponse]:
    store: CMSStore = request.app.state.cms_store
    blog = store.get_blog_by_slug(slug)
    if blog is None:
        raise NotFound(_NOT_FOUND)
    store.increment_blog_views(blog.id)
    blog.views += 1
    return ApiResponse(data=BlogResponse.from_blog(blog))


@router.post("/blogs", response_model=ApiResponse[BlogResponse], status_code=201)
def create_blog(
    request: Request,
    body: BlogCreate,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[BlogResponse]:
    store: CMSStore = request.app.state.cms_store
    if store.slug_taken(body.slug):
        raise Conflict(_SLUG_TAKEN)
    blog_id = store.create_blog(Blog(**body.model_dump(), author=current_user.id))
    return ApiResponse(message="Blog created successfully", data=BlogResponse.from_blog(store.get_blog(blog_id)))


@router.put("/blogs/{blog_id}", response_model=ApiResponse[BlogResponse])
def update_blog(
    request: Request,
    blog_id: int,
    body: BlogUpdate,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[BlogResponse]:
    store: CMSStore = request.app.state.cms_store
    if body.slug and store.slug_taken(body.slug, exclude_id=blog_id):
        raise Conflict(_SLUG_TAKEN)
    updated = store.update_blog(blog_id, **body.model_dump(exclude_unset=True))
    if updated is None:
        raise NotFound(_NOT_FOUND)
    return ApiResponse(message="Blog updated successfully", data=BlogResponse.from_blog(updated))


@router.delete("/blogs/{blog_id}", response_model=ApiResponse[None])
def delete_blog(
    request: Request,
    blog_id: int,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[None]:
    store: CMSStore = request.app.state.cms_store
    if not store.archive_blog(blog_id):
        raise NotFound(_NOT_FOUND)
    return ApiResponse(message="Blog archived successfully")


@router.post("/blogs/{blog_id}/image", response_model=ApiResponse[BlogResponse])
def upload_blog_image(
    request: Request,
    blog_id: int,
    image: UploadFile = File(...),
    current_user: Account = Depends(require_admin),
) -> ApiResponse[BlogResponse]:
    store: CMSStore = request.app.state.cms_store
    if store.get_blog(blog_id) is None:
        raise NotFound(_NOT_FOUND)
    url = store_image(request, image)
    updated = store.update_blog(blog_id, featured_image=url)
    return ApiResponse(message="Image uploaded successfully", data=BlogResponse.from_blog(updated))
