"""
Progress router for the microlearning backend.

Handles quiz attempt logging, course completion rewards, the nurse
dashboard summary, the course catalog and the leaderboard.
"""

from typing import Any, Dict, List, Optional
import logging

from fastapi import APIRouter, Depends, Query

from app.routers.auth import get_current_user, get_store
from app.schemas import QuizAttempt, User, now_ms
from app.schemas.course import CourseCatalog
from app.schemas.progress import (
    CompletionRequest,
    CompletionResponse,
    LeaderboardEntry,
    ProgressSummary,
    QuizAttemptRequest,
)
from app.services import progress
from app.services.store import DocumentStore


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=ProgressSummary)
async def get_my_progress(
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> Dict[str, Any]:
    """
    Level, rank and completions of the current user.
    """
    users = store.users()
    courses = store.courses()
    return {
        "user": current_user.model_dump(),
        "level": progress.level_info(current_user.xp),
        "rank": progress.compute_rank(users, current_user.id),
        "completed_courses": current_user.completed_courses,
        "total_courses": len(courses),
    }


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> List[Dict[str, Any]]:
    """
    Top nurses by XP. Educators never appear.
    """
    top = progress.compute_leaderboard(store.users(), size=limit)
    return [
        {
            "rank": position,
            "id": user.id,
            "name": user.name,
            "avatar": user.avatar,
            "xp": user.xp,
            "level": progress.compute_level(user.xp),
        }
        for position, user in enumerate(top, start=1)
    ]


@router.get("/catalog", response_model=CourseCatalog)
async def get_catalog(
    category: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> Dict[str, Any]:
    """
    Courses as shown on the nurse dashboard, with new and completed flags.
    """
    courses = store.courses()
    now = now_ms()
    return {
        "categories": [progress.ALL_CATEGORIES, *progress.course_categories(courses)],
        "courses": [
            {
                "course": course,
                "is_new": progress.is_new_course(course, now),
                "is_completed": current_user.has_completed(course.id),
            }
            for course in progress.filter_courses(courses, category)
        ],
    }


@router.post("/quiz-attempts", response_model=User)
async def record_quiz_attempt(
    attempt_data: QuizAttemptRequest,
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> User:
    """
    Append a quiz answer to the current user's attempt log.
    """
    attempt = QuizAttempt(
        course_id=attempt_data.course_id,
        slide_id=attempt_data.slide_id,
        question=attempt_data.question,
        selected_option=attempt_data.selected_option,
        is_correct=attempt_data.is_correct,
        timestamp=now_ms(),
    )
    return store.save_user(progress.record_quiz_attempt(current_user, attempt))


@router.post("/complete", response_model=CompletionResponse)
async def complete_course(
    completion: CompletionRequest,
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> Dict[str, Any]:
    """
    Grant XP and badges for a finished course. Completing the same course
    again changes nothing.
    """
    course = store.get_course(completion.course_id)
    result = progress.apply_completion(current_user, course, completion.earned_xp)

    user = result.user
    if result.applied:
        user = store.save_user(result.user)
        logger.info(
            f"{user.id} completed {course.id} for {completion.earned_xp} XP"
            + (f", badges {result.new_badges}" if result.new_badges else "")
        )

    return {
        "user": user,
        "applied": result.applied,
        "new_badges": result.new_badges,
    }
