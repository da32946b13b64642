"""
Blog API - Authentication Route
===============================

What:  POST /api/auth/login exchanges a username and password for a bearer token.
Who:   Any client; the returned accessToken goes in `Authorization: Bearer <token>`.
"""

from fastapi import APIRouter, Depends

from blogapi.dependencies import get_auth_service
from blogapi.schemas.common import ErrorResponse
from blogapi.schemas.user import AuthResponse, LoginRequest
from blogapi.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        400: {"description": "Missing username or password", "model": ErrorResponse},
        401: {"description": "Invalid username or password", "model": ErrorResponse},
    },
    summary="Log in and obtain an access token",
)
async def login(
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    return await service.login(body.username, body.password)
