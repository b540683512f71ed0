"""
Security utilities for the microlearning backend.

Handles PIN comparison and JWT session token creation/verification.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
import secrets

from jose import JWTError, jwt

from .config import settings


def verify_pin(plain_pin: str, stored_pin: str) -> bool:
    """
    Compare a submitted PIN with the stored one.

    PINs are stored as plain 4-digit strings (the roster export needs
    them), so this is a constant-time string comparison, not a hash check.

    Args:
        plain_pin: The PIN typed at login
        stored_pin: The PIN on the user record

    Returns:
        bool: True if the PINs match, False otherwise
    """
    return secrets.compare_digest(
        (plain_pin or "").encode("utf-8"),
        (stored_pin or "").encode("utf-8"),
    )


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[Dict[str, Any]] = None
) -> str:
    """
    Create a JWT access token.

    Args:
        subject: The subject of the token (the staff id)
        expires_delta: Optional custom expiration time
        additional_claims: Optional additional claims to include in the token

    Returns:
        str: The encoded JWT token
    """
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode: Dict[str, Any] = {"exp": expire, "sub": subject, "iat": now}

    # Add additional claims if provided
    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a JWT token.

    Args:
        token: The JWT token to verify

    Returns:
        Optional[Dict[str, Any]]: The decoded token payload if valid, None otherwise
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        return None
