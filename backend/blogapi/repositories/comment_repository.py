"""
Content store persistence helpers for comments.
"""

from typing import List, Optional, Tuple

from sqlalchemy import asc, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.models.comment import Comment


class CommentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, comment_id: str) -> Optional[Comment]:
        result = await self.session.execute(select(Comment).where(Comment.id == comment_id))
        return result.scalar_one_or_none()

    async def add(self, comment: Comment) -> Comment:
        self.session.add(comment)
        await self.session.flush()
        return comment

    async def save(self, comment: Comment) -> Comment:
        await self.session.flush()
        return comment

    async def delete(self, comment: Comment) -> None:
        await self.session.delete(comment)
        await self.session.flush()

    async def delete_by_post_id(self, post_id: str) -> int:
        """Deletes every comment of a post; returns how many were removed."""
        result = await self.session.execute(
            delete(Comment)
            .where(Comment.post_id == post_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def find_page_by_post(
        self,
        post_id: str,
        offset: int,
        limit: int,
    ) -> Tuple[List[Comment], int]:
        """One page of a post's comments, oldest first, plus the total count."""
        result = await self.session.execute(
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(asc(Comment.created_at), Comment.id)
            .offset(offset)
            .limit(limit)
        )
        comments = list(result.scalars().all())

        count_result = await self.session.execute(
            select(func.count(Comment.id)).where(Comment.post_id == post_id)
        )
        total = count_result.scalar() or 0

        return comments, total
