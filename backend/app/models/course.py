"""
Course table for the microlearning backend.

Slides are an ordered JSON array on the course row, so a course is read
and written as one document.
"""

from datetime import datetime
from typing import Any, Dict, List
from sqlalchemy import BigInteger, Integer, String, DateTime, Index, CheckConstraint, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.core.database import Base


class Course(Base):
    """
    Slide-based training module.
    """
    __tablename__ = "courses"

    # Storage key, never exposed
    pk: Mapped[int] = mapped_column(Integer, primary_key=True)

    # External course identifier
    id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)

    # Basic information
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)

    # Course metadata
    duration_minutes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    xp_reward: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)  # epoch ms

    # Ordered slides
    slides: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)

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
        CheckConstraint("xp_reward >= 0", name="check_course_xp_positive"),
        CheckConstraint("duration_minutes >= 0", name="check_duration_positive"),
        Index("idx_course_category", "category"),
        Index("idx_course_timestamp", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<Course(id='{self.id}', title='{self.title}')>"

    def to_document(self) -> Dict[str, Any]:
        """Convert row to the wire document."""
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "slides": list(self.slides or []),
            "xpReward": self.xp_reward,
            "durationMinutes": self.duration_minutes,
            "timestamp": self.timestamp,
        }

    def apply_document(self, document: Dict[str, Any]) -> None:
        """Overwrite every column from a validated wire document."""
        self.id = document["id"]
        self.title = document["title"]
        self.category = document["category"]
        self.slides = list(document["slides"])
        self.xp_reward = document["xpReward"]
        self.duration_minutes = document["durationMinutes"]
        self.timestamp = document["timestamp"]
