"""
Staff router for the microlearning backend.

CRUD over user records keyed by staff id. Educators manage the roster;
nurses may only read their own record.
"""

from typing import Dict, List

from fastapi import APIRouter, Depends, status

from app.core.exceptions import PermissionDeniedError
from app.routers.auth import get_current_educator, get_current_user, get_store
from app.schemas import User, UserUpdate, default_avatar
from app.services.store import DocumentStore, EntityKind


router = APIRouter()

SELF_LOCKED_FIELDS = {"role", "xp", "streak", "badges"}


@router.get("/", response_model=List[User])
async def list_users(
    educator: User = Depends(get_current_educator),
    store: DocumentStore = Depends(get_store)
) -> List[User]:
    """
    List all staff.
    """
    return store.users()


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> User:
    """
    Get one staff record.
    """
    if current_user.id != user_id and not current_user.is_educator:
        raise PermissionDeniedError("You can only view your own record")
    return store.get_user(user_id)


@router.post("/", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(
    user: User,
    educator: User = Depends(get_current_educator),
    store: DocumentStore = Depends(get_store)
) -> User:
    """
    Add a staff member. A generated avatar is used when none is given.
    """
    if not user.avatar:
        user = user.model_copy(update={"avatar": default_avatar(user.name)})
    return store.insert(EntityKind.USER, user)


@router.put("/{user_id}", response_model=User)
async def replace_user(
    user_id: str,
    user: User,
    educator: User = Depends(get_current_educator),
    store: DocumentStore = Depends(get_store)
) -> User:
    """
    Replace a staff record wholesale.
    """
    return store.replace(EntityKind.USER, user_id, user)


@router.patch("/{user_id}", response_model=User)
async def update_user(
    user_id: str,
    changes: UserUpdate,
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> User:
    """
    Edit selected fields of a staff record, keeping XP, badges and
    progress unless they are given. Renaming regenerates the avatar.

    Staff may edit their own name, avatar and PIN; everything else is
    for educators.
    """
    update = changes.model_dump(exclude_unset=True)
    if not current_user.is_educator:
        if current_user.id != user_id:
            raise PermissionDeniedError("You can only edit your own record")
        locked = sorted(set(update) & SELF_LOCKED_FIELDS)
        if locked:
            raise PermissionDeniedError(f"Only educators can change {', '.join(locked)}")

    current = store.get_user(user_id)

    if "name" in update and update["name"] != current.name and "avatar" not in update:
        update["avatar"] = default_avatar(update["name"])

    updated = current.model_copy(update=update)
    return store.replace(EntityKind.USER, user_id, updated.model_dump(by_alias=True))


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    educator: User = Depends(get_current_educator),
    store: DocumentStore = Depends(get_store)
) -> Dict[str, str]:
    """
    Remove a staff member. Educators cannot remove themselves.
    """
    if user_id == educator.id:
        raise PermissionDeniedError("You cannot delete your own account while logged in.")
    store.delete(EntityKind.USER, user_id)
    return {"message": "User deleted"}
