"""
Content store persistence helpers for posts.
"""

from typing import List, Optional, Tuple

from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.models.post import Post


def contains_pattern(term: str) -> str:
    """
    Builds a LIKE pattern matching `term` anywhere in the value.

    %, _ and the escape character itself are matched literally.
    """
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class PostRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, post_id: str) -> Optional[Post]:
        result = await self.session.execute(select(Post).where(Post.id == post_id))
        return result.scalar_one_or_none()

    async def exists(self, post_id: str) -> bool:
        result = await self.session.execute(
            select(func.count(Post.id)).where(Post.id == post_id)
        )
        return (result.scalar() or 0) > 0

    async def add(self, post: Post) -> Post:
        self.session.add(post)
        await self.session.flush()
        return post

    async def save(self, post: Post) -> Post:
        await self.session.flush()
        return post

    async def delete(self, post: Post) -> None:
        await self.session.delete(post)
        await self.session.flush()

    async def find_page(
        self,
        offset: int,
        limit: int,
        search: Optional[str] = None,
    ) -> Tuple[List[Post], int]:
        """
        One page of posts, newest first, plus the total matching count.

        A search term matches the title or the content, case-insensitively.
        """
        query = select(Post)
        count_query = select(func.count(Post.id))

        if search:
            pattern = contains_pattern(search)
            condition = or_(
                Post.title.ilike(pattern, escape="\\"),
                Post.content.ilike(pattern, escape="\\"),
            )
            query = query.where(condition)
            count_query = count_query.where(condition)

        query = query.order_by(desc(Post.created_at), Post.id).offset(offset).limit(limit)

        result = await self.session.execute(query)
        posts = list(result.scalars().all())

        count_result = await self.session.execute(count_query)
        total = count_result.scalar() or 0

        return posts, total
