"""
Blog API - Comment Routes
=========================

Routes:
    POST   /api/comments                    USER/ADMIN        → 201
    GET    /api/comments/{id}               public            → 200
    PUT    /api/comments/{id}               author or ADMIN   → 200
    DELETE /api/comments/{id}               author or ADMIN   → 204
    GET    /api/posts/{postId}/comments     public            → 200 page, oldest first
"""

from fastapi import APIRouter, Depends, Query, Response, status

from blogapi.dependencies import get_comment_service, require_roles
from blogapi.models.user import Role, User
from blogapi.schemas.common import MAX_PAGE, MAX_PAGE_SIZE, ErrorResponse, PagedResponse
from blogapi.schemas.post import CommentRequest, CommentResponse
from blogapi.services.comment_service import CommentService

router = APIRouter(prefix="/api", tags=["Comments"])

author_or_admin = require_roles(Role.USER, Role.ADMIN)

_MUTATION_ERRORS = {
    401: {"description": "Not authenticated", "model": ErrorResponse},
    403: {"description": "Caller is neither the author nor an admin", "model": ErrorResponse},
    404: {"description": "Comment not found", "model": ErrorResponse},
}


@router.post(
    "/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid comment data", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "Post or author not found", "model": ErrorResponse},
    },
    summary="Comment on a post",
)
async def create_comment(
    body: CommentRequest,
    _user: User = Depends(author_or_admin),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    return await service.create(body)


@router.get(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    responses={404: {"description": "Comment not found", "model": ErrorResponse}},
    summary="Get a comment by id",
)
async def get_comment(
    comment_id: str,
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    return await service.get(comment_id)


@router.put(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    responses={
        400: {"description": "Invalid data, or post/author changed", "model": ErrorResponse},
        **_MUTATION_ERRORS,
    },
    summary="Update a comment's content",
)
async def update_comment(
    comment_id: str,
    body: CommentRequest,
    user: User = Depends(author_or_admin),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    return await service.update(comment_id, body, actor=user)


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_MUTATION_ERRORS,
    summary="Delete a comment",
)
async def delete_comment(
    comment_id: str,
    user: User = Depends(author_or_admin),
    service: CommentService = Depends(get_comment_service),
) -> Response:
    await service.delete(comment_id, actor=user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/posts/{post_id}/comments",
    response_model=PagedResponse[CommentResponse],
    responses={
        400: {"description": "Invalid paging parameters", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="List a post's comments, oldest first",
)
async def list_post_comments(
    post_id: str,
    page: int = Query(default=0, ge=0, le=MAX_PAGE, description="Zero-based page index"),
    size: int = Query(
        default=10, ge=1, le=MAX_PAGE_SIZE, description="Items per page (max 100)"
    ),
    service: CommentService = Depends(get_comment_service),
) -> PagedResponse[CommentResponse]:
    return await service.list_by_post(post_id, page=page, size=size)
