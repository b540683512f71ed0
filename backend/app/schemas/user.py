"""
User and QuizAttempt records.
"""

from enum import Enum
from typing import List, Optional
from urllib.parse import quote

from pydantic import Field, field_validator

from .common import DomainRecord, RequestBody


PIN_PATTERN = r"^\d{4}$"


class Role(str, Enum):
    """Staff roles."""
    NURSE = "Nurse"
    EDUCATOR = "Educator"


def default_avatar(name: str) -> str:
    """Generated avatar URL for staff without an uploaded picture."""
    return f"https://ui-avatars.com/api/?name={quote(name, safe='')}&background=random"


class QuizAttempt(DomainRecord):
    """
    One answer to a quiz slide. Attempts are never deduplicated: replaying
    a course and answering again appends a new record.
    """
    course_id: str = Field(alias="courseId")
    slide_id: str = Field(alias="slideId")
    question: str
    selected_option: str = Field(alias="selectedOption")
    is_correct: bool = Field(alias="isCorrect")
    timestamp: int


class User(DomainRecord):
    """
    Staff member with gamification state.
    """
    id: str = Field(min_length=1)
    pin: str = Field(pattern=PIN_PATTERN)
    name: str = Field(min_length=1)
    role: Role
    avatar: str = ""
    xp: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    badges: List[str] = Field(default_factory=list)
    completed_courses: List[str] = Field(default_factory=list, alias="completedCourses")
    quiz_attempts: List[QuizAttempt] = Field(default_factory=list, alias="quizAttempts")

    @field_validator("badges", "completed_courses")
    @classmethod
    def drop_duplicates(cls, v: List[str]) -> List[str]:
        # set semantics, first occurrence wins
        return list(dict.fromkeys(v))

    @property
    def is_nurse(self) -> bool:
        return self.role == Role.NURSE.value

    @property
    def is_educator(self) -> bool:
        return self.role == Role.EDUCATOR.value

    def has_completed(self, course_id: str) -> bool:
        return course_id in self.completed_courses


class UserUpdate(RequestBody):
    """
    Partial educator edit of a staff record. Omitted fields keep their
    current value.
    """
    name: Optional[str] = Field(default=None, min_length=1)
    pin: Optional[str] = Field(default=None, pattern=PIN_PATTERN)
    role: Optional[Role] = None
    avatar: Optional[str] = None
    xp: Optional[int] = Field(default=None, ge=0)
    streak: Optional[int] = Field(default=None, ge=0)
    badges: Optional[List[str]] = None


class UserPublic(RequestBody):
    """User as shown to other staff, without the PIN or attempt log."""
    id: str
    name: str
    role: Role
    avatar: str
    xp: int
    streak: int
    badges: List[str]
