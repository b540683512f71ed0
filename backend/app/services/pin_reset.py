"""
Forgotten-PIN flow and PIN format checks.
"""

from enum import Enum
from typing import Callable, Optional
import re

from app.core.exceptions import InvalidTransitionError, RecordValidationError
from app.schemas.user import PIN_PATTERN


_PIN_RE = re.compile(PIN_PATTERN)


def is_valid_pin(pin: str) -> bool:
    return bool(_PIN_RE.fullmatch(pin or ""))


def validate_pin(pin: str) -> str:
    """
    Raises:
        RecordValidationError: If the PIN is not exactly four digits
    """
    if not is_valid_pin(pin):
        raise RecordValidationError("PIN must be 4 digits.")
    return pin


class ResetStep(str, Enum):
    ENTERING_ID = "entering_id"
    ENTERING_NEW_PIN = "entering_new_pin"
    LOGIN = "login"


class PinResetFlow:
    """
    Staff id -> new PIN -> back to login with the id filled in.

    The reset callable receives ``(staff_id, new_pin)`` and returns False
    when the id is unknown. No old PIN is asked for.
    """

    def __init__(self):
        self.step = ResetStep.ENTERING_ID
        self.staff_id: Optional[str] = None
        self.message: Optional[str] = None

    @property
    def prefilled_id(self) -> Optional[str]:
        return self.staff_id if self.step == ResetStep.LOGIN else None

    def submit_id(self, staff_id: str) -> ResetStep:
        if self.step != ResetStep.ENTERING_ID:
            raise InvalidTransitionError("Staff ID already entered")
        staff_id = (staff_id or "").strip()
        if not staff_id:
            self.message = "Enter your Staff ID."
            return self.step

        self.staff_id = staff_id
        self.message = None
        self.step = ResetStep.ENTERING_NEW_PIN
        return self.step

    def submit_pin(self, new_pin: str, reset: Callable[[str, str], bool]) -> ResetStep:
        if self.step != ResetStep.ENTERING_NEW_PIN:
            raise InvalidTransitionError("Enter your Staff ID first")
        if not is_valid_pin(new_pin):
            self.message = "PIN must be 4 digits."
            return self.step

        if reset(self.staff_id, new_pin):
            self.message = "PIN updated successfully. Please login."
            self.step = ResetStep.LOGIN
        else:
            self.message = "Staff ID not found."
            self.staff_id = None
            self.step = ResetStep.ENTERING_ID
        return self.step
