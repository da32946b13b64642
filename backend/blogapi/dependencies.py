"""
Blog API - Request Dependencies
===============================

What:  FastAPI dependencies for the access guard and for building services.
How:   The bearer token is read with HTTPBearer(auto_error=False), so a
       missing or unusable token means "anonymous" rather than an error.
       Routes that need an identity depend on get_current_user or
       require_roles, which raise the matching BlogError.

Usage:
    @router.delete("/{user_id}")
    async def delete_user(
        user_id: int,
        _: User = Depends(require_roles(Role.ADMIN)),
        service: UserService = Depends(get_user_service),
    ): ...

FastAPI resolves each dependency once per request, so the guard and the
service share the same credential store session.
"""

import logging
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.database import get_content_session, get_db_session
from blogapi.exceptions import AuthenticationError, PermissionDeniedError
from blogapi.models.user import Role, User
from blogapi.repositories.comment_repository import CommentRepository
from blogapi.repositories.post_repository import PostRepository
from blogapi.repositories.user_repository import UserRepository
from blogapi.security import TokenError, decode_access_token
from blogapi.services.auth_service import AuthService
from blogapi.services.comment_service import CommentService
from blogapi.services.post_service import PostService
from blogapi.services.user_service import UserService

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False, description="JWT from POST /api/auth/login")


# ── Access guard ──────────────────────────────────────────────────────────────

async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    """
    Resolve the caller from the Authorization header, or None.

    Returns None for a missing header, a scheme other than Bearer, an
    invalid or expired token, or a token whose user no longer exists.
    """
    if credentials is None:
        return None

    try:
        claims = decode_access_token(credentials.credentials)
    except TokenError as e:
        logger.debug("Ignoring bearer token: %s", e)
        return None

    user = await UserRepository(db).get_by_id(claims.user_id)
    if user is None:
        logger.warning("Token for user %s no longer resolves to an account", claims.user_id)
        return None
    return user


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    if user is None:
        raise AuthenticationError()
    return user


def require_roles(*roles: Role) -> Callable:
    """
    Dependency factory: the caller must be authenticated and hold one of `roles`.

    Example:
        Depends(require_roles(Role.USER, Role.ADMIN))
    """
    allowed = frozenset(roles)

    async def guard(user: User = Depends(get_current_user)) -> User:
        if not (user.roles & allowed):
            logger.warning(
                "User %s lacks role %s", user.id, sorted(r.value for r in allowed)
            )
            raise PermissionDeniedError("Access denied")
        return user

    return guard


# ── Services ──────────────────────────────────────────────────────────────────

def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService(UserRepository(db))


def get_auth_service(db: AsyncSession = Depends(get_db_session)) -> AuthService:
    return AuthService(UserRepository(db))


def get_post_service(
    db: AsyncSession = Depends(get_db_session),
    content: AsyncSession = Depends(get_content_session),
) -> PostService:
    return PostService(
        posts=PostRepository(content),
        comments=CommentRepository(content),
        users=UserRepository(db),
    )


def get_comment_service(
    db: AsyncSession = Depends(get_db_session),
    content: AsyncSession = Depends(get_content_session),
) -> CommentService:
    return CommentService(
        comments=CommentRepository(content),
        posts=PostRepository(content),
        users=UserRepository(db),
    )
