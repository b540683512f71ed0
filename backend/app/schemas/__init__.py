"""
Domain records and request/response bodies for the microlearning API.
"""

from .common import DomainRecord, now_ms
from .user import User, QuizAttempt, Role, UserUpdate, UserPublic, default_avatar
from .course import Course, CourseCreate, Slide, SlideType, QuizData
from .badge import Badge

__all__ = [
    "DomainRecord",
    "now_ms",
    "User",
    "QuizAttempt",
    "Role",
    "UserUpdate",
    "UserPublic",
    "default_avatar",
    "Course",
    "CourseCreate",
    "Slide",
    "SlideType",
    "QuizData",
    "Badge",
]
