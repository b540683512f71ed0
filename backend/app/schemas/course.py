"""
Course, Slide and QuizData records.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field, model_validator

from .common import DomainRecord, RequestBody, now_ms


class SlideType(str, Enum):
    """Kinds of slide in a course."""
    INTRO = "intro"
    VIDEO = "video"
    QUIZ = "quiz"
    SUMMARY = "summary"


class QuizData(DomainRecord):
    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=2)
    correct_index: int = Field(alias="correctIndex", ge=0)

    @model_validator(mode="after")
    def check_correct_index(self) -> "QuizData":
        if self.correct_index >= len(self.options):
            raise ValueError("correctIndex must reference one of the options")
        return self


class Slide(DomainRecord):
    """
    One step of a course. Video slides carry the embed URL in ``content``.
    """
    id: str = Field(min_length=1)
    type: SlideType
    title: str
    content: str = ""
    image: Optional[str] = None
    quiz_data: Optional[QuizData] = Field(default=None, alias="quizData")

    @model_validator(mode="after")
    def check_quiz_data(self) -> "Slide":
        is_quiz = self.type == SlideType.QUIZ.value
        if is_quiz and self.quiz_data is None:
            raise ValueError("Quiz slides require quizData")
        if not is_quiz and self.quiz_data is not None:
            raise ValueError("Only quiz slides may carry quizData")
        return self

    @property
    def is_quiz(self) -> bool:
        return self.type == SlideType.QUIZ.value


class Course(DomainRecord):
    """
    Slide-based training module. Slide order is the playback order.
    ``xp_reward`` is the advertised reward; the XP actually granted comes
    from quiz answers.
    """
    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    category: str = Field(min_length=1)
    slides: List[Slide] = Field(default_factory=list)
    xp_reward: int = Field(default=0, ge=0, alias="xpReward")
    duration_minutes: int = Field(default=0, ge=0, alias="durationMinutes")
    timestamp: int = Field(default_factory=now_ms)

    @model_validator(mode="after")
    def check_unique_slide_ids(self) -> "Course":
        seen = set()
        for slide in self.slides:
            if slide.id in seen:
                raise ValueError(f"Duplicate slide id {slide.id}")
            seen.add(slide.id)
        return self

    @property
    def slide_count(self) -> int:
        return len(self.slides)


class CourseCreate(RequestBody):
    """
    Course authored by an educator. The id is generated when omitted.
    """
    id: Optional[str] = Field(default=None, min_length=1)
    title: str = Field(min_length=1)
    category: str = Field(min_length=1)
    slides: List[Slide] = Field(default_factory=list)
    xp_reward: int = Field(default=0, ge=0, alias="xpReward")
    duration_minutes: int = Field(default=0, ge=0, alias="durationMinutes")


class CatalogEntry(RequestBody):
    course: Course
    is_new: bool = Field(alias="isNew")
    is_completed: bool = Field(alias="isCompleted")


class CourseCatalog(RequestBody):
    """Course list as rendered on the nurse dashboard."""
    categories: List[str]
    courses: List[CatalogEntry]
