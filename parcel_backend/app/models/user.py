"""
User database model.

Users are keyed by email; credentials live with the identity provider.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum
from parcel_backend.app.db.session import Base
from parcel_backend.app.models.parcel import utcnow
from parcel_backend.app.models.enums import UserRole


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=True)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
