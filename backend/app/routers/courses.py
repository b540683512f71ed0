"""
Courses router for the microlearning backend.

Any logged-in staff member can browse courses; educators author them.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.routers.auth import get_current_educator, get_current_user, get_store
from app.schemas import Course, CourseCreate, User, now_ms
from app.services import progress
from app.services.store import DocumentStore, EntityKind


router = APIRouter()


@router.get("/", response_model=List[Course])
async def list_courses(
    category: Optional[str] = Query(None, description="Category filter, 'All' for every course"),
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> List[Course]:
    """
    List courses, optionally filtered by category.
    """
    return progress.filter_courses(store.courses(), category)


@router.get("/categories", response_model=List[str])
async def list_categories(
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> List[str]:
    """
    Distinct course categories, sorted.
    """
    return progress.course_categories(store.courses())


@router.get("/{course_id}", response_model=Course)
async def get_course(
    course_id: str,
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> Course:
    """
    Get a course with its slides.
    """
    return store.get_course(course_id)


@router.post("/", response_model=Course, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: CourseCreate,
    educator: User = Depends(get_current_educator),
    store: DocumentStore = Depends(get_store)
) -> Course:
    """
    Create a course. Without an explicit id one is generated from the
    course count and the creation time.
    """
    timestamp = now_ms()
    document = course_data.model_dump(by_alias=True, exclude_none=True)
    document["timestamp"] = timestamp
    if "id" not in document:
        document["id"] = f"c{len(store.courses()) + 1}-{timestamp}"
    return store.insert(EntityKind.COURSE, document)


@router.put("/{course_id}", response_model=Course)
async def update_course(
    course_id: str,
    course: Course,
    educator: User = Depends(get_current_educator),
    store: DocumentStore = Depends(get_store)
) -> Course:
    """
    Replace a course, slides included. The publication timestamp is kept
    unless the body sets one.
    """
    if "timestamp" not in course.model_fields_set:
        course = course.model_copy(update={"timestamp": store.get_course(course_id).timestamp})
    return store.replace(EntityKind.COURSE, course_id, course)


@router.delete("/{course_id}")
async def delete_course(
    course_id: str,
    educator: User = Depends(get_current_educator),
    store: DocumentStore = Depends(get_store)
) -> Dict[str, str]:
    """
    Delete a course. Completion records that mention it are kept.
    """
    store.delete(EntityKind.COURSE, course_id)
    return {"message": "Course deleted"}
