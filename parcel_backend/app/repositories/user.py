"""
User store.
"""

from datetime import datetime
from typing import Optional, Sequence
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.models.user import User
from parcel_backend.app.models.enums import UserRole


def _like_pattern(fragment: str) -> str:
    escaped = fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        return user

    async def get(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User)
            .where(User.email == email)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def search(self, fragment: str, limit: int = 10) -> Sequence[User]:
        result = await self.db.execute(
            select(User)
            .where(User.email.ilike(_like_pattern(fragment), escape="\\"))
            .order_by(User.email)
            .limit(limit)
        )
        return result.scalars().all()

    async def set_role(self, user_id: int, role: UserRole) -> int:
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id, User.role != role)
            .values(role=role)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def set_role_by_email(self, email: str, role: UserRole) -> int:
        result = await self.db.execute(
            update(User)
            .where(User.email == email, User.role != role)
            .values(role=role)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def touch_login(self, user_id: int, at: datetime) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(last_login_at=at)
            .execution_options(synchronize_session=False)
        )
