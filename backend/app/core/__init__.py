"""
Core module for the microlearning backend.

This module contains core functionality including:
- Configuration management
- Database connections
- Security utilities (JWT, PIN comparison)
- The error taxonomy
"""

from .config import settings
from .database import get_db, engine, SessionLocal
from .security import (
    create_access_token,
    verify_pin,
    verify_token
)

__all__ = [
    "settings",
    "get_db",
    "engine",
    "SessionLocal",
    "create_access_token",
    "verify_pin",
    "verify_token"
]
