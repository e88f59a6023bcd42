"""
Payment database model.

Payment rows are immutable once inserted.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime
from parcel_backend.app.db.session import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # No foreign key: deleting a parcel leaves its payments in place
    parcel_id = Column(Integer, nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    payment_method = Column(String(100), nullable=False)
    transaction_id = Column(String(255), nullable=False)

    paid_at = Column(DateTime(timezone=True), nullable=False, index=True)
    paid_at_string = Column(String(40), nullable=False)

    def __repr__(self):
        return f"<Payment(id={self.id}, parcel_id={self.parcel_id}, amount={self.amount})>"
