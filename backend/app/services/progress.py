"""
Progress engine: XP, levels, badges, leaderboard and compliance.

All functions are pure. They take domain records and return new
snapshots; persisting the result is the caller's job, and a snapshot
that failed to persist must be thrown away.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence
import math

from app.core.config import settings
from app.core.exceptions import RecordValidationError
from app.schemas import Course, QuizAttempt, User

ALL_CATEGORIES = "All"


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of apply_completion."""
    user: User
    applied: bool
    new_badges: List[str] = field(default_factory=list)


# --- Levels ---

def compute_level(xp: int) -> int:
    """One level per XP_PER_LEVEL points, starting at level 1."""
    return xp // settings.XP_PER_LEVEL + 1


def compute_level_progress(xp: int) -> float:
    """Fraction of the current level already earned, in [0, 1)."""
    level = compute_level(xp)
    return (xp - (level - 1) * settings.XP_PER_LEVEL) / settings.XP_PER_LEVEL


def level_info(xp: int) -> dict:
    """
    Level figures for the dashboard progress bar.
    """
    level = compute_level(xp)
    into_level = xp - (level - 1) * settings.XP_PER_LEVEL
    return {
        "level": level,
        "xp": xp,
        "xp_into_level": into_level,
        "xp_for_next_level": settings.XP_PER_LEVEL - into_level,
        "progress": compute_level_progress(xp),
    }


# --- Rewards ---

def max_possible_xp(course: Course) -> int:
    """
    Perfect-score threshold. Counts every slide, not only quiz slides, so a
    course earns the perfect badge only when each slide is a quiz.
    """
    return course.slide_count * settings.XP_PER_CORRECT_ANSWER


def earned_xp_for(correct_answers: int) -> int:
    return correct_answers * settings.XP_PER_CORRECT_ANSWER


def evaluate_badges(
    badges: Sequence[str],
    completed_courses: Sequence[str],
    new_xp: int,
    is_perfect_score: bool,
) -> List[str]:
    """
    Apply the unlock rules to a badge list and return the new list.

    Rules are independent and only ever add: first completed course,
    reaching the XP milestone, and a perfect score. The streak badge is
    granted outside this engine.
    """
    result = list(badges)

    def grant(badge_id: str) -> None:
        if badge_id not in result:
            result.append(badge_id)

    if len(completed_courses) == 1:
        grant(settings.FIRST_COURSE_BADGE_ID)
    if new_xp >= settings.XP_MILESTONE:
        grant(settings.XP_MILESTONE_BADGE_ID)
    if is_perfect_score:
        grant(settings.PERFECT_SCORE_BADGE_ID)
    return result


def apply_completion(user: User, course: Course, earned_xp: int) -> CompletionResult:
    """
    Reward a user for finishing a course.

    A course already in ``completed_courses`` is a no-op, so replays never
    pay out twice. ``earned_xp`` is trusted as supplied by the player.

    Args:
        user: Current user snapshot
        course: The course that was finished
        earned_xp: XP won during this playthrough

    Returns:
        CompletionResult: The new snapshot and whether anything changed
    """
    if user.has_completed(course.id):
        return CompletionResult(user=user, applied=False)
    if earned_xp < 0:
        raise RecordValidationError("earnedXp must not be negative")

    max_xp = max_possible_xp(course)
    is_perfect_score = earned_xp == max_xp and max_xp > 0

    new_xp = user.xp + earned_xp
    new_completed = [*user.completed_courses, course.id]
    new_badges = evaluate_badges(user.badges, new_completed, new_xp, is_perfect_score)

    updated = user.model_copy(update={
        "xp": new_xp,
        "badges": new_badges,
        "completed_courses": new_completed,
    })
    granted = [badge_id for badge_id in new_badges if badge_id not in user.badges]
    return CompletionResult(user=updated, applied=True, new_badges=granted)


def record_quiz_attempt(user: User, attempt: QuizAttempt) -> User:
    """Append an attempt to the user's log. No deduplication."""
    return user.model_copy(update={"quiz_attempts": [*user.quiz_attempts, attempt]})


# --- Leaderboard ---

def _ranked_nurses(users: Iterable[User]) -> List[User]:
    # sorted() is stable with reverse=True, ties keep their input order
    return sorted(
        (user for user in users if user.is_nurse),
        key=lambda user: user.xp,
        reverse=True,
    )


def compute_leaderboard(users: Iterable[User], size: Optional[int] = None) -> List[User]:
    """Top nurses by XP, highest first."""
    size = settings.LEADERBOARD_SIZE if size is None else size
    return _ranked_nurses(users)[:size]


def compute_rank(users: Iterable[User], user_id: str) -> int:
    """
    1-based position of a nurse among all nurses, or 0 for anyone else.
    """
    for position, user in enumerate(_ranked_nurses(users), start=1):
        if user.id == user_id:
            return position
    return 0


# --- Compliance ---

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_compliance_rate(nurses: Sequence[User], courses: Sequence[Course]) -> int:
    """
    Percentage of nurse/course assignments completed, rounded.
    """
    total_assignments = len(nurses) * len(courses)
    if total_assignments == 0:
        return 0
    total_completions = sum(len(nurse.completed_courses) for nurse in nurses)
    return _round_half_up(100 * total_completions / total_assignments)


def compute_staff_breakdown(nurses: Sequence[User], courses: Sequence[Course]) -> List[dict]:
    total = len(courses)
    return [
        {
            "id": nurse.id,
            "name": nurse.name,
            "avatar": nurse.avatar,
            "completed": len(nurse.completed_courses),
            "total": total,
            "all_done": len(nurse.completed_courses) == total,
        }
        for nurse in nurses
    ]


def compliance_report(users: Sequence[User], courses: Sequence[Course]) -> dict:
    """
    Figures for the educator compliance tab.
    """
    nurses = [user for user in users if user.is_nurse]
    total_assignments = len(nurses) * len(courses)
    total_completions = sum(len(nurse.completed_courses) for nurse in nurses)
    return {
        "completion_rate": compute_compliance_rate(nurses, courses),
        "total_staff": len(nurses),
        "total_assignments": total_assignments,
        "total_completions": total_completions,
        "pending": max(total_assignments - total_completions, 0),
        "staff": compute_staff_breakdown(nurses, courses),
    }


# --- Catalog ---

def course_categories(courses: Iterable[Course]) -> List[str]:
    return sorted({course.category for course in courses})


def filter_courses(courses: Iterable[Course], category: Optional[str] = None) -> List[Course]:
    if not category or category == ALL_CATEGORIES:
        return list(courses)
    return [course for course in courses if course.category == category]


def is_new_course(course: Course, now_ms: int) -> bool:
    """True for courses published within the last NEW_COURSE_WINDOW_DAYS."""
    window_ms = settings.NEW_COURSE_WINDOW_DAYS * 24 * 60 * 60 * 1000
    return (now_ms - course.timestamp) < window_ms
