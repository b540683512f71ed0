"""
User table for the microlearning backend.

Each row is one staff document keyed by the external staff id. Badges,
completed courses and the quiz attempt log are stored as JSON columns.
"""

from datetime import datetime
from typing import Any, Dict, List
from sqlalchemy import Integer, String, DateTime, Index, CheckConstraint, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.core.database import Base


class User(Base):
    """
    Staff member (nurse or educator) with gamification state.
    """
    __tablename__ = "users"

    # Storage key, never exposed
    pk: Mapped[int] = mapped_column(Integer, primary_key=True)

    # External staff identifier
    id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)

    # Credentials (plain 4-digit PIN, low-assurance internal tool)
    pin: Mapped[str] = mapped_column(String(4), nullable=False)

    # Profile fields
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    avatar: Mapped[str] = mapped_column(String(500), default="", nullable=False)

    # Gamification
    xp: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    streak: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    badges: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    completed_courses: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    quiz_attempts: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    # Table constraints
    __table_args__ = (
        CheckConstraint("xp >= 0", name="check_xp_positive"),
        CheckConstraint("streak >= 0", name="check_streak_positive"),
        CheckConstraint("role IN ('Nurse', 'Educator')", name="check_role"),
        Index("idx_user_role", "role"),
        Index("idx_user_xp", "xp"),
    )

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', name='{self.name}', role='{self.role}')>"

    def to_document(self) -> Dict[str, Any]:
        """Convert row to the wire document."""
        return {
            "id": self.id,
            "pin": self.pin,
            "name": self.name,
            "role": self.role,
            "avatar": self.avatar,
            "xp": self.xp,
            "streak": self.streak,
            "badges": list(self.badges or []),
            "completedCourses": list(self.completed_courses or []),
            "quizAttempts": list(self.quiz_attempts or []),
        }

    def apply_document(self, document: Dict[str, Any]) -> None:
        """Overwrite every column from a validated wire document."""
        self.id = document["id"]
        self.pin = document["pin"]
        self.name = document["name"]
        self.role = document["role"]
        self.avatar = document["avatar"]
        self.xp = document["xp"]
        self.streak = document["streak"]
        self.badges = list(document["badges"])
        self.completed_courses = list(document["completedCourses"])
        self.quiz_attempts = list(document["quizAttempts"])
