"""
API routers for the MAHSA microlearning backend.

- auth: login, PIN reset and change, current user
- users: staff records
- courses: course catalog and authoring
- badges: badge catalog
- progress: quiz attempts, completions, leaderboard
- admin: compliance report and roster CSV
"""

from fastapi import APIRouter

# Import individual routers
from .auth import router as auth_router
from .users import router as users_router
from .courses import router as courses_router
from .badges import router as badges_router
from .progress import router as progress_router

# Import admin sub-routers
from .admin import admin_router

# Create main API router
api_router = APIRouter()

api_router.include_router(
    auth_router,
    prefix="/auth",
    tags=["authentication"]
)

api_router.include_router(
    users_router,
    prefix="/users",
    tags=["users"]
)

api_router.include_router(
    courses_router,
    prefix="/courses",
    tags=["courses"]
)

api_router.include_router(
    badges_router,
    prefix="/badges",
    tags=["badges"]
)

api_router.include_router(
    progress_router,
    prefix="/progress",
    tags=["progress"]
)

api_router.include_router(
    admin_router,
    prefix="/admin",
    tags=["admin"]
)

__all__ = [
    "api_router",
    "auth_router",
    "users_router",
    "courses_router",
    "badges_router",
    "progress_router",
    "admin_router"
]
