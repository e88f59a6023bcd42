"""
User API Endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, Response, status

from parcel_backend.app.core.guards import require_admin
from parcel_backend.app.core.identifiers import parse_id
from parcel_backend.app.schemas.user import (
    UserRegister, UserResponse, UserRegisterResponse,
    RoleResponse, RoleUpdate, RoleUpdateResult
)
from parcel_backend.app.services.users import UserService
from parcel_backend.app.api.v1.providers import get_user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserRegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserRegister,
    response: Response,
    service: UserService = Depends(get_user_service)
):
    """Create the user on first sign-in; returns 200 for a known email."""
    user, inserted = await service.register(user_data)
    if not inserted:
        response.status_code = status.HTTP_200_OK
    return UserRegisterResponse(
        inserted=inserted,
        message="User created" if inserted else "User already exists",
        user=UserResponse.model_validate(user)
    )


@router.get("/search", response_model=List[UserResponse])
async def search_users(
    email: Optional[str] = Query(None, description="Case-insensitive email fragment"),
    service: UserService = Depends(get_user_service)
):
    users = await service.search(email)
    return [UserResponse.model_validate(u) for u in users]


@router.get("/{email}/role", response_model=RoleResponse)
async def get_user_role(
    email: str = Path(..., description="User email"),
    service: UserService = Depends(get_user_service)
):
    return RoleResponse(role=await service.effective_role(email))


@router.patch("/{user_id}/role", response_model=RoleUpdateResult)
async def change_user_role(
    user_id: str = Path(..., description="User ID"),
    update: RoleUpdate = ...,
    current_user: dict = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    """Grant or revoke admin (Admin only)."""
    modified = await service.change_role(
        parse_id(user_id, "user_id"),
        update.role,
        actor_email=current_user["email"]
    )
    return RoleUpdateResult(modified_count=modified)
