"""
Blog API - Comment Model
========================

What:  ORM model for the `comments` collection in the content store.

post_id and author_id are weak references (no foreign keys) and never
change after creation. The composite index serves "comments of a post,
oldest first" and the cascade delete by post_id.
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from blogapi.database import ContentBase
from blogapi.models.post import new_document_id


class Comment(ContentBase):
    """A comment on a post."""

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_document_id,
    )

    post_id: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Weak reference to posts.id",
    )

    author_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        index=True,
        comment="Weak reference to users.id in the credential store",
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

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
        Index("idx_comments_post_created", "post_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id='{self.id}', post_id='{self.post_id}', author_id={self.author_id})>"
