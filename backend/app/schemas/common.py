"""
Shared base for the domain records.

Field names on the wire are the camelCase names used by the dashboards;
Python code uses the snake_case attribute names. Records are frozen so
every change produces a new snapshot.
"""

import time

from pydantic import BaseModel, ConfigDict


def now_ms() -> int:
    """Current time in epoch milliseconds, the timestamp unit of all records."""
    return int(time.time() * 1000)


class DomainRecord(BaseModel):
    """
    Base class for User, Course, Slide, QuizAttempt and Badge records.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        use_enum_values=True,
        extra="ignore",
    )

    def to_document(self) -> dict:
        """Serialize to the JSON document stored and returned by the API."""
        return self.model_dump(mode="json", by_alias=True)


class RequestBody(BaseModel):
    """Base for request and response bodies that are not stored."""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)
