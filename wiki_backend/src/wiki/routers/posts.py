from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from ..deps import get_app_settings, get_repo
from ..queries import in_category
from ..repositories import Repository
from ..schemas import CategoryCount, PostCreate, PostOut, PostUpdate
from ..settings import Settings
from ..utils import paginate, pagination_envelope

router = APIRouter(
    prefix="/api/v1/posts",
    tags=["posts"],
)


class PaginationEnvelope(BaseModel):
    """
    Envelope for paginated list responses.
    """
    items: List[PostOut] = Field(..., description="List of posts")
    total: int = Field(..., description="Total number of posts matching the query")
    limit: int = Field(..., description="Limit applied to the query")
    offset: int = Field(..., description="Offset applied to the query")


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=PostOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Post",
    description="Create a new post and return the created resource.",
    responses={
        201: {"description": "Post created successfully"},
        422: {"description": "Validation error"},
    },
)
def create_post(payload: PostCreate, repo: Repository = Depends(get_repo)) -> PostOut:
    """
    Create a new post.
    """
    return PostOut(**repo.create_post(payload))


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=PaginationEnvelope,
    summary="List Posts",
    description=(
        "List posts, most recently updated first.\n\n"
        "Query parameters:\n"
        "- q: search text for title/content (case-insensitive substring). Terms shorter "
        "than the configured minimum length are ignored and the plain listing is returned\n"
        "- category: exact category filter\n"
        "- limit: max number of items to return (0..1000)\n"
        "- offset: number of items to skip (>=0)\n\n"
        "Returns a pagination envelope with items and total count."
    ),
    responses={200: {"description": "List retrieved successfully"}},
)
def list_posts(
    q: Optional[str] = Query(None, description="Search text for title/content"),
    category: Optional[str] = Query(None, description="Exact category name"),
    limit: int = Query(50, ge=0, le=1000, description="Maximum number of items to return"),
    offset: int = Query(0, ge=0, description="Number of items to skip"),
    repo: Repository = Depends(get_repo),
    settings: Settings = Depends(get_app_settings),
) -> PaginationEnvelope:
    """
    List posts with optional search, category filter and pagination.
    """
    if q is not None and len(q.strip()) >= settings.search_min_length:
        items = repo.search_posts(q)
        if category is not None:
            items = [p for p in items if in_category(p, category)]
    elif category is not None:
        items = repo.list_posts_by_category(category)
    else:
        items = repo.list_all_posts()

    envelope = pagination_envelope(
        items=[PostOut(**it) for it in paginate(items, limit, offset)],
        total=len(items),
        limit=limit,
        offset=offset,
    )
    return PaginationEnvelope(**envelope)


# PUBLIC_INTERFACE
@router.get(
    "/search",
    response_model=List[PostOut],
    summary="Search Posts",
    description=(
        "Case-insensitive substring search over title and content. The term is passed "
        "through as given; a blank term returns no posts."
    ),
)
def search_posts(
    q: str = Query("", description="Search text"),
    repo: Repository = Depends(get_repo),
) -> List[PostOut]:
    return [PostOut(**it) for it in repo.search_posts(q)]


# PUBLIC_INTERFACE
@router.get(
    "/categories",
    response_model=List[CategoryCount],
    summary="List Categories",
    description="Distinct non-empty categories with their post counts, sorted by name.",
)
def list_categories(repo: Repository = Depends(get_repo)) -> List[CategoryCount]:
    return [CategoryCount(category=c, count=n) for c, n in repo.category_counts().items()]


# PUBLIC_INTERFACE
@router.get(
    "/{post_id}",
    response_model=PostOut,
    summary="Get Post",
    description="Get a single post by ID.",
    responses={
        200: {"description": "Post found"},
        404: {"description": "Post not found"},
    },
)
def get_post(post_id: str, repo: Repository = Depends(get_repo)) -> PostOut:
    """
    Retrieve a single post by its ID.
    """
    item = repo.get_post(post_id)
    if item is None:
        raise _not_found()
    return PostOut(**item)


# PUBLIC_INTERFACE
@router.put(
    "/{post_id}",
    response_model=PostOut,
    summary="Replace Post",
    description=(
        "Replace the editable fields of a post. Omitted optional fields are reset to their "
        "defaults; id and created_at are kept."
    ),
    responses={
        200: {"description": "Post updated"},
        404: {"description": "Post not found"},
    },
)
def put_post(post_id: str, payload: PostCreate, repo: Repository = Depends(get_repo)) -> PostOut:
    """
    Full replace implemented through the partial-update path by sending every
    editable field explicitly.
    """
    update = PostUpdate(
        title=payload.title,
        content=payload.content,
        category=payload.category,
        author=payload.author,
    )
    updated = repo.update_post(post_id, update)
    if updated is None:
        raise _not_found()
    return PostOut(**updated)


# PUBLIC_INTERFACE
@router.patch(
    "/{post_id}",
    response_model=PostOut,
    summary="Update Post",
    description="Partially update fields of a post.",
    responses={
        200: {"description": "Post updated"},
        404: {"description": "Post not found"},
    },
)
def patch_post(post_id: str, payload: PostUpdate, repo: Repository = Depends(get_repo)) -> PostOut:
    """
    Partial update of a post.
    """
    updated = repo.update_post(post_id, payload)
    if updated is None:
        raise _not_found()
    return PostOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Post",
    description="Delete a post by ID.",
    responses={
        204: {"description": "Post deleted"},
        404: {"description": "Post not found"},
    },
)
def delete_post(post_id: str, repo: Repository = Depends(get_repo)) -> None:
    """
    Delete a post. Returns 204 on success, 404 if not found.
    """
    if not repo.delete_post(post_id):
        raise _not_found()
    return None
