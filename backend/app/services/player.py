"""
Course player: forward-only slide navigation with quiz answer recording.

The player holds no durable state. It emits events; the caller records
each QuizAnswered attempt immediately and applies CourseCompleted
through the progress engine. Closing early discards the slide position.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from app.core.exceptions import InvalidTransitionError
from app.schemas import Course, QuizAttempt, Slide, now_ms
from app.services.progress import earned_xp_for


@dataclass(frozen=True)
class QuizAnswered:
    attempt: QuizAttempt


@dataclass(frozen=True)
class CourseCompleted:
    course_id: str
    earned_xp: int


PlayerEvent = Union[QuizAnswered, CourseCompleted]


class CoursePlayer:
    """
    State machine over a course's slides.

    States are ``AtSlide(index)`` and ``Closed``. A fresh player is at the
    first slide; ``next()`` on the last slide completes the course.
    Only the first answer given to each quiz slide counts towards XP;
    every answer is still emitted for the attempt log.
    """

    def __init__(
        self,
        course: Course,
        clock: Callable[[], int] = now_ms,
    ):
        if course.slide_count == 0:
            raise InvalidTransitionError(f"Course {course.id} has no slides")
        self.course = course
        self._clock = clock
        self._index: Optional[int] = 0
        self._first_answers: Dict[str, bool] = {}

    def __repr__(self) -> str:
        return f"<CoursePlayer(course_id='{self.course.id}', index={self._index})>"

    @property
    def is_closed(self) -> bool:
        return self._index is None

    @property
    def index(self) -> int:
        self._ensure_open()
        return self._index

    @property
    def current_slide(self) -> Slide:
        return self.course.slides[self.index]

    @property
    def is_last_slide(self) -> bool:
        return self.index == self.course.slide_count - 1

    @property
    def correct_answers(self) -> int:
        return sum(1 for correct in self._first_answers.values() if correct)

    @property
    def earned_xp(self) -> int:
        return earned_xp_for(self.correct_answers)

    def has_answered(self, slide_id: str) -> bool:
        return slide_id in self._first_answers

    def _ensure_open(self) -> None:
        if self._index is None:
            raise InvalidTransitionError("Course player is closed")

    def answer_quiz(self, selected_option_index: int) -> QuizAnswered:
        """
        Answer the quiz on the current slide. Does not advance.

        Raises:
            InvalidTransitionError: If the slide is not a quiz, the option
                index is out of range, or the player is closed
        """
        slide = self.current_slide
        if not slide.is_quiz:
            raise InvalidTransitionError(f"Slide {slide.id} is not a quiz")

        quiz = slide.quiz_data
        if not 0 <= selected_option_index < len(quiz.options):
            raise InvalidTransitionError(
                f"Option {selected_option_index} does not exist on slide {slide.id}"
            )

        is_correct = selected_option_index == quiz.correct_index
        self._first_answers.setdefault(slide.id, is_correct)
        attempt = QuizAttempt(
            course_id=self.course.id,
            slide_id=slide.id,
            question=quiz.question,
            selected_option=quiz.options[selected_option_index],
            is_correct=is_correct,
            timestamp=self._clock(),
        )
        return QuizAnswered(attempt=attempt)

    def next(self) -> Optional[CourseCompleted]:
        """
        Move to the next slide, or complete the course from the last one.

        Returns:
            Optional[CourseCompleted]: The completion event, or None on a move
        """
        if self.is_last_slide:
            event = CourseCompleted(course_id=self.course.id, earned_xp=self.earned_xp)
            self._index = None
            return event
        self._index += 1
        return None

    def close(self) -> None:
        """Abandon the playthrough. Valid from any state."""
        self._index = None
