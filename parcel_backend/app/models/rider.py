"""
Rider database model.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum
from parcel_backend.app.db.session import Base
from parcel_backend.app.models.parcel import utcnow
from parcel_backend.app.models.rider_enums import RiderStatus, WorkStatus


class Rider(Base):
    """
    Courier who picks up and delivers parcels.

    status tracks the application (pending -> active / deactive);
    work_status tracks current availability and follows parcel assignments.
    """
    __tablename__ = "riders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    district = Column(String(100), nullable=False, index=True)

    status = Column(Enum(RiderStatus), default=RiderStatus.PENDING, nullable=False, index=True)
    work_status = Column(Enum(WorkStatus), default=WorkStatus.FREE, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Rider(id={self.id}, email='{self.email}', status='{self.status.value}', work_status='{self.work_status.value}')>"
