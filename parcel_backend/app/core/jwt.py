"""
JWT token utilities for identity verification.

Token issuing belongs to the identity provider; this service only needs to
verify bearer tokens and read the caller's email from them. The encoder is
kept for local tooling and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Protocol
from jose import JWTError, jwt
from parcel_backend.app.core.config import settings


class IdentityVerifier(Protocol):
    """Turns a bearer token into a decoded identity, or None when invalid."""

    def verify(self, token: str) -> Optional[Dict[str, Any]]:
        ...


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data payload to encode in the token (should include: sub, email)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a JWT access token.

    Returns:
        Decoded token payload if valid (includes: sub, email, exp), None otherwise
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


class JWTIdentityVerifier:
    """Default verifier: HS256 tokens signed with the configured secret."""

    def verify(self, token: str) -> Optional[Dict[str, Any]]:
        return decode_access_token(token)


identity_verifier: IdentityVerifier = JWTIdentityVerifier()
