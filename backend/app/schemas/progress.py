"""
Request and response bodies for progress, leaderboard and compliance.
"""

from typing import List

from pydantic import Field

from .common import RequestBody
from .user import User, UserPublic


class QuizAttemptRequest(RequestBody):
    """Answer recorded by the course player for the current user."""
    course_id: str = Field(alias="courseId", min_length=1)
    slide_id: str = Field(alias="slideId", min_length=1)
    question: str
    selected_option: str = Field(alias="selectedOption")
    is_correct: bool = Field(alias="isCorrect")


class CompletionRequest(RequestBody):
    course_id: str = Field(alias="courseId", min_length=1)
    earned_xp: int = Field(alias="earnedXp", ge=0)


class CompletionResponse(RequestBody):
    user: User
    applied: bool
    new_badges: List[str] = Field(default_factory=list, alias="newBadges")


class LevelInfo(RequestBody):
    level: int
    xp: int
    xp_into_level: int = Field(alias="xpIntoLevel")
    xp_for_next_level: int = Field(alias="xpForNextLevel")
    progress: float


class ProgressSummary(RequestBody):
    """Header of the nurse dashboard."""
    user: UserPublic
    level: LevelInfo
    rank: int
    completed_courses: List[str] = Field(alias="completedCourses")
    total_courses: int = Field(alias="totalCourses")


class LeaderboardEntry(RequestBody):
    rank: int
    id: str
    name: str
    avatar: str
    xp: int
    level: int


class StaffProgress(RequestBody):
    id: str
    name: str
    avatar: str
    completed: int
    total: int
    all_done: bool = Field(alias="allDone")


class ComplianceReport(RequestBody):
    """Educator compliance tab."""
    completion_rate: int = Field(alias="completionRate")
    total_staff: int = Field(alias="totalStaff")
    total_assignments: int = Field(alias="totalAssignments")
    total_completions: int = Field(alias="totalCompletions")
    pending: int
    staff: List[StaffProgress]


class ImportReport(RequestBody):
    created: List[str]
    updated: List[str]
    skipped: int
