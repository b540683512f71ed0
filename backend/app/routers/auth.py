"""
Authentication router for the microlearning backend.

Handles staff login by id and PIN, the forgotten-PIN reset, PIN change,
and the current-user dependencies used by the other routers.
"""

from typing import Any, Dict
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationError, NotFoundError, RecordValidationError
from app.core.security import create_access_token, verify_pin, verify_token
from app.schemas import User
from app.schemas.auth import LoginRequest, PinChangeRequest, PinResetRequest, Token
from app.services.pin_reset import PinResetFlow, ResetStep
from app.services.store import DocumentStore


logger = logging.getLogger(__name__)

router = APIRouter()

# OAuth2 scheme for token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")


# Dependencies
def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    """
    Document store bound to the request's database session.
    """
    return DocumentStore(db)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    store: DocumentStore = Depends(get_store)
) -> User:
    """
    Get current authenticated user from JWT token.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = verify_token(token)
    if payload is None:
        raise credentials_exception

    staff_id = payload.get("sub")
    if staff_id is None:
        raise credentials_exception

    try:
        return store.get_user(staff_id)
    except NotFoundError:
        # account removed while the token was still valid
        raise credentials_exception


def get_current_educator(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Verify that the current user is an educator.
    """
    if not current_user.is_educator:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Educator access required"
        )
    return current_user


# Endpoints
@router.post("/login", response_model=Token)
async def login(
    credentials: LoginRequest,
    store: DocumentStore = Depends(get_store)
) -> Dict[str, Any]:
    """
    Log in with staff id and 4-digit PIN.
    """
    try:
        user = store.get_user(credentials.id)
    except NotFoundError:
        user = None

    if user is None or not verify_pin(credentials.pin, user.pin):
        logger.warning(f"Failed login for staff id {credentials.id}")
        raise AuthenticationError()

    access_token = create_access_token(
        subject=user.id,
        additional_claims={"role": user.role}
    )
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": user
    }


@router.get("/me", response_model=User)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Get current user information.
    """
    return current_user


@router.post("/reset-pin")
async def reset_pin(
    reset_data: PinResetRequest,
    store: DocumentStore = Depends(get_store)
) -> Dict[str, str]:
    """
    Set a new PIN for a staff id. No old PIN is required.
    """
    def apply_reset(staff_id: str, new_pin: str) -> bool:
        try:
            user = store.get_user(staff_id)
        except NotFoundError:
            return False
        store.save_user(user.model_copy(update={"pin": new_pin}))
        return True

    flow = PinResetFlow()
    flow.submit_id(reset_data.id)
    if flow.step != ResetStep.ENTERING_NEW_PIN:
        raise RecordValidationError(flow.message)

    step = flow.submit_pin(reset_data.new_pin, apply_reset)
    if step == ResetStep.ENTERING_NEW_PIN:
        raise RecordValidationError(flow.message)
    if step == ResetStep.ENTERING_ID:
        raise NotFoundError("User", reset_data.id)

    return {"message": flow.message, "id": flow.prefilled_id}


@router.post("/change-pin", response_model=User)
async def change_pin(
    pin_data: PinChangeRequest,
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
) -> User:
    """
    Change the PIN of the logged-in user.
    """
    return store.save_user(current_user.model_copy(update={"pin": pin_data.new_pin}))
