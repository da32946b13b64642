"""
Blog API - Post and Comment Schemas
===================================

The same request body serves create and update. On update, authorId (and
postId for comments) must repeat the stored value; the services reject any
change.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from blogapi.database import BIGINT_MAX, BIGINT_MIN
from blogapi.schemas.common import ApiModel, require_text


class PostRequest(ApiModel):
    title: str = Field(max_length=255, examples=["My first blog post"])
    content: str = Field(examples=["This is my first post..."])
    author_id: int = Field(
        ge=BIGINT_MIN,
        le=BIGINT_MAX,
        description="Id of the authoring user",
        examples=[1],
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        return require_text(v, "Title is required")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return require_text(v, "Content is required")


class PostResponse(ApiModel):
    id: str
    title: str
    content: str
    author_id: int
    # None when the author account has since been deleted
    author_username: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CommentRequest(ApiModel):
    post_id: str = Field(description="Id of the post being commented on")
    author_id: int = Field(
        ge=BIGINT_MIN,
        le=BIGINT_MAX,
        description="Id of the authoring user",
        examples=[1],
    )
    content: str = Field(examples=["Great article!"])

    @field_validator("post_id")
    @classmethod
    def post_id_not_blank(cls, v: str) -> str:
        return require_text(v, "Post ID is required").strip()

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return require_text(v, "Content is required")


class CommentResponse(ApiModel):
    id: str
    post_id: str
    author_id: int
    author_username: Optional[str] = None
    content: str
    created_at: datetime
    updated_at: datetime
