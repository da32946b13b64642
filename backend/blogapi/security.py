"""
Blog API - Password Hashing and Access Tokens
=============================================

What:  bcrypt password hashing and signed JWT access tokens.
How:   Thin wrappers around the `bcrypt` and `PyJWT` libraries, configured
       from settings. No cryptography is implemented here.

Token payload:
    sub    username
    uid    user id (integer)
    roles  list of role names, e.g. ["USER"]
    type   always "access"
    iat    issued-at (epoch seconds)
    exp    iat + JWT_EXPIRATION_MINUTES
"""

import time
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import bcrypt
import jwt

from blogapi.config import settings

# bcrypt only reads the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


class TokenError(Exception):
    """Raised when a token is missing, malformed, expired or badly signed."""
    pass


@dataclass(frozen=True)
class TokenClaims:
    """Identity extracted from a verified access token."""

    user_id: int
    username: str
    roles: Tuple[str, ...]
    expires_at: int


def _password_bytes(plain_password: str) -> bytes:
    return (plain_password or "").encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: Optional[int] = None) -> str:
    password = _password_bytes(plain_password)
    if not password:
        raise ValueError("Password is empty.")
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password, salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = _password_bytes(plain_password)
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    *,
    user_id: int,
    username: str,
    roles: Iterable[str],
    expires_in_minutes: Optional[int] = None,
) -> str:
    issued_at = int(time.time())
    minutes = expires_in_minutes if expires_in_minutes is not None else settings.jwt_expiration_minutes

    payload = {
        "sub": username,
        "uid": user_id,
        "roles": sorted(roles),
        "type": "access",
        "iat": issued_at,
        "exp": issued_at + minutes * 60,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verifies signature and expiry and returns the embedded identity.

    Raises:
        TokenError: for any token that must not be trusted
    """
    raw = (token or "").strip()
    if not raw:
        raise TokenError("Access token is empty.")

    try:
        payload = jwt.decode(
            raw,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError("Invalid access token.") from exc

    if payload.get("type") != "access":
        raise TokenError("Token is not an access token.")

    user_id = payload.get("uid")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise TokenError("Access token has no valid user id.")

    roles = payload.get("roles") or []
    if not isinstance(roles, list):
        raise TokenError("Access token roles claim is malformed.")

    return TokenClaims(
        user_id=user_id,
        username=str(payload["sub"]),
        roles=tuple(str(role) for role in roles),
        expires_at=int(payload["exp"]),
    )
