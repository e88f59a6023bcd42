"""
Security guards for role-based and identity-based access control.

Roles are looked up in the user store on every request, so a role change
or rider approval takes effect immediately.
"""

from typing import List, Optional
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from parcel_backend.app.core.dependencies import get_current_identity
from parcel_backend.app.core.exceptions import InsufficientPermissionsError
from parcel_backend.app.db.session import get_db
from parcel_backend.app.models.enums import UserRole
from parcel_backend.app.repositories.rider import RiderRepository
from parcel_backend.app.repositories.user import UserRepository
from parcel_backend.app.services.users import UserService


async def resolve_role(db: AsyncSession, email: str) -> Optional[UserRole]:
    """Effective role of the user with this email, or None if unknown."""
    service = UserService(db, UserRepository(db), RiderRepository(db))
    user = await service.users.get_by_email(email)
    if user is None:
        return None
    return await service.role_of(user)


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/riders/pending")
        async def list_pending(current_user: dict = Depends(require_role([UserRole.ADMIN]))):
            ...

    Raises:
        InsufficientPermissionsError 403 if the caller's role is not allowed
    """
    async def role_checker(
        current_user: dict = Depends(get_current_identity),
        db: AsyncSession = Depends(get_db)
    ) -> dict:
        role = await resolve_role(db, current_user["email"])

        if role is None or role not in allowed_roles:
            raise InsufficientPermissionsError(
                "Forbidden access",
                details={"required": [r.value for r in allowed_roles]}
            )

        return {**current_user, "role": role.value}

    return role_checker


require_admin = require_role([UserRole.ADMIN])
require_rider = require_role([UserRole.RIDER])


async def require_self_or_admin(
    db: AsyncSession,
    current_user: dict,
    email: Optional[str]
) -> None:
    """
    Allow a caller to read data scoped to their own email.

    Admins may read any email, or all records when email is omitted.

    Raises:
        InsufficientPermissionsError 403 otherwise
    """
    if email and email == current_user["email"]:
        return

    if await resolve_role(db, current_user["email"]) == UserRole.ADMIN:
        return

    raise InsufficientPermissionsError("Forbidden entry")


def enforce_own_email(current_user: dict, email: str) -> None:
    """Riders may only list their own parcels."""
    if email != current_user["email"]:
        raise InsufficientPermissionsError("Forbidden entry")
