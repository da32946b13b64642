"""
Blog API - User Service
=======================

What:  Registration, lookup and deletion of user accounts.
How:   Works on the credential store only, through UserRepository.
Who:   Called by the /api/users routes and by the startup admin bootstrap.
"""

import logging

from sqlalchemy.exc import IntegrityError

from blogapi.exceptions import AlreadyExistsError, NotFoundError
from blogapi.models.user import Role, User
from blogapi.repositories.user_repository import UserRepository, normalize_email
from blogapi.schemas.user import UserResponse
from blogapi.security import hash_password

logger = logging.getLogger(__name__)


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        created_at=user.created_at,
    )


class UserService:
    """
    Business logic for user accounts.

    Responsibilities:
        - register(): uniqueness checks, password hashing, default role
        - get_by_id(): single lookup with not-found handling
        - delete(): hard delete (authored posts and comments are kept)
        - ensure_admin(): idempotent admin bootstrap
    """

    def __init__(self, users: UserRepository):
        self.users = users

    async def register(self, username: str, email: str, password: str) -> UserResponse:
        """
        Create an account with role USER.

        Raises:
            AlreadyExistsError: email or username already taken (→ 409)
        """
        if await self.users.exists_by_email(email):
            raise AlreadyExistsError("Email is already registered", context={"field": "email"})
        if await self.users.exists_by_username(username):
            raise AlreadyExistsError("Username is already taken", context={"field": "username"})

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
        )
        user.grant(Role.USER)

        try:
            await self.users.add(user)
        except IntegrityError as exc:
            # A concurrent registration won the unique constraint
            logger.info("Registration of '%s' lost a uniqueness race", username)
            raise AlreadyExistsError(
                "Username or email is already registered",
                context={"constraint": type(exc.orig).__name__},
            ) from exc

        logger.info("User %s registered as '%s'", user.id, user.username)
        return to_user_response(user)

    async def get_by_id(self, user_id: int) -> UserResponse:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return to_user_response(user)

    async def delete(self, user_id: int) -> None:
        """
        Hard-delete a user. Posts and comments keep the stale author_id.

        Raises:
            NotFoundError: no user with that id (→ 404)
        """
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        await self.users.delete(user)
        logger.info("User %s ('%s') deleted", user_id, user.username)

    async def ensure_admin(self, username: str, email: str, password: str) -> User:
        """
        Make sure an ADMIN account named `username` exists.

        An existing user is promoted; otherwise the account is created with
        roles USER and ADMIN. The password of an existing user is left as is.

        Raises:
            AlreadyExistsError: the account is missing but `email` belongs
                to another user; nothing is written
        """
        user = await self.users.get_by_username(username)
        if user is None:
            if await self.users.exists_by_email(email):
                raise AlreadyExistsError(
                    f"Admin email {email} is already registered to another user",
                    context={"field": "email", "username": username},
                )
            user = User(
                username=username,
                email=normalize_email(email),
                password_hash=hash_password(password),
            )
            user.grant(Role.USER)
            user.grant(Role.ADMIN)
            try:
                await self.users.add(user)
            except IntegrityError as exc:
                raise AlreadyExistsError(
                    f"Admin account '{username}' conflicts with an existing user",
                    context={"constraint": type(exc.orig).__name__},
                ) from exc
            logger.info("Admin account '%s' created (id=%s)", username, user.id)
            return user

        if not user.has_role(Role.ADMIN):
            user.grant(Role.ADMIN)
            await self.users.save(user)
            logger.info("User '%s' promoted to ADMIN", username)
        return user
