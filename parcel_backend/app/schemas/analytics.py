"""
Analytics Pydantic schemas.
"""

from pydantic import BaseModel


class StatusCount(BaseModel):
    """One group of a status aggregation."""
    status: str
    count: int
