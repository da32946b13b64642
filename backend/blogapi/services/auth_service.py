"""
Blog API - Authenticator
========================

What:  Verifies username/password and issues a signed access token.

Both an unknown username and a wrong password produce the same
AuthenticationError, so a response never tells which one was wrong.
"""

import logging

from blogapi.exceptions import AuthenticationError
from blogapi.repositories.user_repository import UserRepository
from blogapi.schemas.user import AuthResponse
from blogapi.security import create_access_token, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


class AuthService:
    def __init__(self, users: UserRepository):
        self.users = users

    async def login(self, username: str, password: str) -> AuthResponse:
        user = await self.users.get_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for username '%s'", username)
            raise AuthenticationError(INVALID_CREDENTIALS)

        roles = sorted(role.value for role in user.roles)
        token = create_access_token(user_id=user.id, username=user.username, roles=roles)
        logger.info("User %s logged in", user.id)

        return AuthResponse(
            access_token=token,
            token_type="Bearer",
            id=user.id,
            username=user.username,
            email=user.email,
            roles=roles,
        )
