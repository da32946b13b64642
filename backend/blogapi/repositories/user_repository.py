"""
Credential store persistence helpers.
"""

from typing import Dict, Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.database import fits_bigint
from blogapi.models.user import User


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        # No stored id lies outside the column range; the driver would reject it
        if not fits_bigint(user_id):
            return None
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        result = await self.session.execute(
            select(func.count(User.id)).where(User.email == normalize_email(email))
        )
        return (result.scalar() or 0) > 0

    async def exists_by_username(self, username: str) -> bool:
        result = await self.session.execute(
            select(func.count(User.id)).where(User.username == username)
        )
        return (result.scalar() or 0) > 0

    async def find_usernames(self, user_ids: Iterable[int]) -> Dict[int, str]:
        """
        Resolve many author ids to usernames in one query.

        Ids that no longer resolve (deleted users) are absent from the result.
        """
        ids = {i for i in user_ids if fits_bigint(i)}
        if not ids:
            return {}
        result = await self.session.execute(
            select(User.id, User.username).where(User.id.in_(ids))
        )
        return {row.id: row.username for row in result}

    async def add(self, user: User) -> User:
        """Stages a new user and flushes so the store assigns its id."""
        user.email = normalize_email(user.email)
        self.session.add(user)
        await self.session.flush()
        return user

    async def save(self, user: User) -> User:
        await self.session.flush()
        return user

    async def delete(self, user: User) -> None:
        await self.session.delete(user)
        await self.session.flush()
