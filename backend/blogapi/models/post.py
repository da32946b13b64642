"""
Blog API - Post Model
=====================

What:  ORM model for the `posts` collection in the content store.
Who:   Used by PostRepository; comments reference posts by id.

Design:
    - String id assigned by the store (32 hex chars), opaque to clients
    - author_id is a weak reference to users.id in the credential store;
      no foreign key exists because the stores are separate databases
    - Index on created_at: listing is always ordered by creation time
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from blogapi.database import ContentBase


def new_document_id() -> str:
    return uuid.uuid4().hex


class Post(ContentBase):
    """
    A blog post.

    Lifecycle:
        1. Created by an authenticated user for an existing author
        2. Title and content may be edited by the author or an admin
        3. Deleted together with every comment that references it
    """

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_document_id,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        index=True,
        comment="Weak reference to users.id in the credential store",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Post(id='{self.id}', author_id={self.author_id})>"
