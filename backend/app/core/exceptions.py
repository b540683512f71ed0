"""
Error taxonomy for the MAHSA microlearning backend.

Every failure surfaced to a caller is a MicrolearningError carrying a
user-facing message. The HTTP status used by the REST layer is attached
to each class so the handlers in main.py stay generic.
"""

from typing import Any, Dict, List, Optional

from fastapi import status


class MicrolearningError(Exception):
    """
    Base class for all domain and persistence failures.
    """
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to the JSON body returned by the API."""
        data: Dict[str, Any] = {"message": self.message}
        if self.detail is not None:
            data["detail"] = self.detail
        return data


class NotFoundError(MicrolearningError):
    """Referenced User/Course/Badge id does not exist."""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} not found")
        self.kind = kind
        self.entity_id = entity_id


class RecordValidationError(MicrolearningError):
    """A record failed the shape constraints of the domain model."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, detail=errors or None)
        self.errors = errors or []


class DuplicateIdError(MicrolearningError):
    """Creation attempted with an id already in use."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} with ID {entity_id} already exists.")
        self.kind = kind
        self.entity_id = entity_id


class TransportFailure(MicrolearningError):
    """The store is unreachable or failed for an unclassified reason."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class AuthenticationError(MicrolearningError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Invalid Staff ID or PIN"):
        super().__init__(message)


class PermissionDeniedError(MicrolearningError):
    status_code = status.HTTP_403_FORBIDDEN


class InvalidTransitionError(MicrolearningError):
    """Operation is not valid in the current player or flow state."""
    status_code = status.HTTP_409_CONFLICT


class DataLoadError(MicrolearningError):
    """Initial load of users and courses failed; the session cannot start."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
