"""
User Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from parcel_backend.app.models.enums import UserRole


class UserRegister(BaseModel):
    """First sign-in of a user; roles are never granted here."""
    email: str = Field(..., min_length=3, max_length=255)
    name: Optional[str] = Field(None, max_length=200)


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str]
    role: UserRole
    created_at: datetime
    last_login_at: Optional[datetime]

    class Config:
        from_attributes = True


class UserRegisterResponse(BaseModel):
    inserted: bool
    message: str
    user: UserResponse


class RoleResponse(BaseModel):
    role: UserRole


class RoleUpdate(BaseModel):
    role: str


class RoleUpdateResult(BaseModel):
    modified_count: int
