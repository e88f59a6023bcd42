"""
User service.

Users are created on first sign-in and keyed by email. The role reported to
clients is derived: a user with an active rider record is a rider even if
the stored role has not caught up yet, and admins always stay admins.
"""

import logging
from typing import Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.core.exceptions import ResourceNotFoundError, ValidationError
from parcel_backend.app.models.enums import UserRole
from parcel_backend.app.models.parcel import utcnow
from parcel_backend.app.models.user import User
from parcel_backend.app.repositories.rider import RiderRepository
from parcel_backend.app.repositories.user import UserRepository
from parcel_backend.app.schemas.user import UserRegister
from parcel_backend.app.services.audit import record_event, AuditAction

logger = logging.getLogger(__name__)

# Roles an admin may hand out directly; rider comes from rider approval
ASSIGNABLE_ROLES = (UserRole.ADMIN, UserRole.USER)


class UserService:

    def __init__(self, db: AsyncSession, users: UserRepository, riders: RiderRepository):
        self.db = db
        self.users = users
        self.riders = riders

    async def register(self, data: UserRegister) -> Tuple[User, bool]:
        """
        Create the user on first sign-in, otherwise stamp last_login_at.

        Returns:
            (user, inserted)
        """
        existing = await self.users.get_by_email(data.email)
        if existing:
            await self.users.touch_login(existing.id, utcnow())
            await self.db.commit()
            return await self.users.get(existing.id), False

        user = User(email=data.email, name=data.name, role=UserRole.USER, last_login_at=utcnow())
        try:
            await self.users.add(user)
        except IntegrityError:
            await self.db.rollback()
            existing = await self.users.get_by_email(data.email)
            if existing is None:
                raise
            return existing, False

        await self.db.commit()
        await self.db.refresh(user)
        return user, True

    async def search(self, fragment: Optional[str]) -> Sequence[User]:
        if not fragment or not fragment.strip():
            raise ValidationError("Missing email query")
        return await self.users.search(fragment.strip(), limit=10)

    async def effective_role(self, email: str) -> UserRole:
        user = await self.users.get_by_email(email)
        if user is None:
            raise ResourceNotFoundError("User", email)
        return await self.role_of(user)

    async def role_of(self, user: User) -> UserRole:
        if user.role == UserRole.ADMIN:
            return UserRole.ADMIN
        if await self.riders.has_active_rider(user.email):
            return UserRole.RIDER
        return user.role

    async def change_role(self, user_id: int, role: str, actor_email: Optional[str] = None) -> int:
        try:
            new_role = UserRole(role)
        except ValueError:
            new_role = None
        if new_role not in ASSIGNABLE_ROLES:
            raise ValidationError("Invalid role", details={"allowed": [r.value for r in ASSIGNABLE_ROLES]})

        user = await self.users.get(user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id)

        modified = await self.users.set_role(user_id, new_role)
        if modified:
            record_event(
                self.db,
                action=AuditAction.ROLE_CHANGED,
                entity="user",
                entity_id=user_id,
                actor_email=actor_email,
                metadata={"previous_role": user.role.value, "role": new_role.value}
            )
            logger.info("User %s role changed to %s by %s", user_id, new_role.value, actor_email)
        await self.db.commit()
        return modified
