"""
Badge catalog router.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from app.routers.auth import get_current_educator, get_current_user, get_store
from app.schemas import Badge, User
from app.services.store import DocumentStore, EntityKind


router = APIRouter()


@router.get("/", response_model=List[Badge])
async def list_badges(
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> List[Badge]:
    return store.badges()


@router.get("/{badge_id}", response_model=Badge)
async def get_badge(
    badge_id: str,
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> Badge:
    return store.find_one(EntityKind.BADGE, badge_id)


@router.post("/", response_model=Badge, status_code=status.HTTP_201_CREATED)
async def create_badge(
    badge: Badge,
    educator: User = Depends(get_current_educator),
    store: DocumentStore = Depends(get_store)
) -> Badge:
    """
    Add a badge to the catalog. Unlock rules only know the seeded ids.
    """
    return store.insert(EntityKind.BADGE, badge)
