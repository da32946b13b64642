"""
Blog API - User Routes
======================

What:  Registration, profile lookup and (admin-only) account deletion.

Routes:
    POST   /api/users/register   public      → 201 UserResponse
    GET    /api/users/{id}       public      → 200 UserResponse
    DELETE /api/users/{id}       ADMIN only  → 204
"""

from fastapi import APIRouter, Depends, Response, status

from blogapi.dependencies import get_user_service, require_roles
from blogapi.models.user import Role, User
from blogapi.schemas.common import ErrorResponse
from blogapi.schemas.user import UserRegistrationRequest, UserResponse
from blogapi.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid registration data", "model": ErrorResponse},
        409: {"description": "Email or username already taken", "model": ErrorResponse},
    },
    summary="Register a new user account",
)
async def register(
    body: UserRegistrationRequest,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """New accounts get role USER. The password is never echoed back."""
    return await service.register(body.username, body.email, body.password)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Get a user by id",
)
async def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.get_by_id(user_id)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Caller is not an admin", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Delete a user (admin only)",
    description="Posts and comments written by the user are kept.",
)
async def delete_user(
    user_id: int,
    _admin: User = Depends(require_roles(Role.ADMIN)),
    service: UserService = Depends(get_user_service),
) -> Response:
    await service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
