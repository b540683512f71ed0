"""
Authentication request and response bodies.
"""

from pydantic import Field

from .common import RequestBody
from .user import PIN_PATTERN, User


class LoginRequest(RequestBody):
    id: str = Field(min_length=1)
    pin: str


class Token(RequestBody):
    access_token: str
    token_type: str = "bearer"
    user: User


class PinResetRequest(RequestBody):
    """Forgotten PIN: only the staff id is required."""
    id: str = Field(min_length=1)
    new_pin: str = Field(alias="newPin")


class PinChangeRequest(RequestBody):
    new_pin: str = Field(alias="newPin", pattern=PIN_PATTERN)
