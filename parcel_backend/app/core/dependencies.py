"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with bearer tokens
issued by the identity provider.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from parcel_backend.app.core.exceptions import AuthenticationError, InsufficientPermissionsError
from parcel_backend.app.core import jwt as identity

# HTTP Bearer security scheme; missing credentials are reported as 401 below
security = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    FastAPI dependency resolving the caller's identity.

    Returns:
        Decoded token payload; always contains "email"

    Raises:
        AuthenticationError: 401 if the header is missing or the token is not valid
        InsufficientPermissionsError: 403 if the token carries no email
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Unauthorized")

    payload = identity.identity_verifier.verify(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Could not validate credentials")

    if not payload.get("email"):
        raise InsufficientPermissionsError("Token carries no email identity")

    return payload
