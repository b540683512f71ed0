"""
Database models for the microlearning backend.

This module contains all SQLAlchemy models for the application:
- User: staff records with XP, badges and the quiz attempt log
- Course: training modules with their ordered slides
- Badge: the achievement catalog
"""

from app.core.database import Base

# Import all models to ensure they're registered with SQLAlchemy
from .user import User
from .course import Course
from .badge import Badge

# Export all models
__all__ = [
    "Base",
    "User",
    "Course",
    "Badge",
]
