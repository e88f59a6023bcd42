"""
User roles enumeration.

Defines the role types for the parcel delivery system.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        USER: Customer who books parcels (default role)
        RIDER: Approved courier
        ADMIN: Back office staff
    """
    USER = "user"
    RIDER = "rider"
    ADMIN = "admin"
