"""
Blog API - Post Routes
======================

What:  CRUD and search for blog posts under /api/posts.
How:   Reads are public. Create needs role USER or ADMIN; update and delete
       additionally need the caller to be the author or an ADMIN, which the
       PostService checks after loading the post.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from blogapi.dependencies import get_post_service, require_roles
from blogapi.models.user import Role, User
from blogapi.schemas.common import MAX_PAGE, MAX_PAGE_SIZE, ErrorResponse, PagedResponse
from blogapi.schemas.post import PostRequest, PostResponse
from blogapi.services.post_service import PostService

router = APIRouter(prefix="/api/posts", tags=["Posts"])

author_or_admin = require_roles(Role.USER, Role.ADMIN)


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid post data", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "Author not found", "model": ErrorResponse},
    },
    summary="Create a post",
)
async def create_post(
    body: PostRequest,
    _user: User = Depends(author_or_admin),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    return await service.create(body)


@router.get(
    "",
    response_model=PagedResponse[PostResponse],
    responses={400: {"description": "Invalid paging parameters", "model": ErrorResponse}},
    summary="List posts, newest first",
    description=(
        "Zero-based pagination. `search` keeps posts whose title or content "
        "contains the term, ignoring case."
    ),
)
async def list_posts(
    page: int = Query(default=0, ge=0, le=MAX_PAGE, description="Zero-based page index"),
    size: int = Query(
        default=10, ge=1, le=MAX_PAGE_SIZE, description="Items per page (max 100)"
    ),
    search: Optional[str] = Query(default=None, description="Case-insensitive substring"),
    service: PostService = Depends(get_post_service),
) -> PagedResponse[PostResponse]:
    return await service.list(page=page, size=size, search=search)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    responses={404: {"description": "Post not found", "model": ErrorResponse}},
    summary="Get a post by id",
)
async def get_post(
    post_id: str,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    return await service.get(post_id)


@router.put(
    "/{post_id}",
    response_model=PostResponse,
    responses={
        400: {"description": "Invalid data or author changed", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Caller is neither the author nor an admin", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Update a post's title and content",
)
async def update_post(
    post_id: str,
    body: PostRequest,
    user: User = Depends(author_or_admin),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    return await service.update(post_id, body, actor=user)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Caller is neither the author nor an admin", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Delete a post and all of its comments",
)
async def delete_post(
    post_id: str,
    user: User = Depends(author_or_admin),
    service: PostService = Depends(get_post_service),
) -> Response:
    await service.delete(post_id, actor=user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
