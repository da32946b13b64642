"""
Blog API - User and Auth Schemas
================================

Request and response bodies for registration, profile lookup and login.
The password only ever travels inbound; no response model has a password
field.
"""

from datetime import datetime
from typing import List

from pydantic import EmailStr, Field, field_validator

from blogapi.schemas.common import ApiModel, require_text


class UserRegistrationRequest(ApiModel):
    username: str = Field(max_length=50, examples=["johndoe"])
    email: EmailStr = Field(examples=["john.doe@example.com"])
    # bcrypt reads at most 72 bytes
    password: str = Field(max_length=72, examples=["password123"])

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        return require_text(v, "Username is required").strip()

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v: str) -> str:
        return require_text(v, "Password is required")


class UserResponse(ApiModel):
    """Public projection of a user."""

    id: int
    username: str
    email: str
    created_at: datetime


class LoginRequest(ApiModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        return require_text(v, "Username is required").strip()

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v: str) -> str:
        return require_text(v, "Password is required")


class AuthResponse(ApiModel):
    """Returned by a successful login."""

    access_token: str
    token_type: str = "Bearer"
    id: int
    username: str
    email: str
    roles: List[str]
