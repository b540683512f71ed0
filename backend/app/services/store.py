"""
Document store over the SQLAlchemy tables.

This is the single writer of record for users, courses and badges. Every
operation is keyed by the external string id; callers never see the
storage key. Documents are validated against the domain records on the
way in and on the way out, so a row that no longer fits the model is
reported instead of silently patched.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple, Type, Union
import logging

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import Base
from app.core.exceptions import (
    DuplicateIdError,
    NotFoundError,
    RecordValidationError,
    TransportFailure,
)
from app.models import Badge as BadgeRow, Course as CourseRow, User as UserRow
from app.schemas import Badge, Course, DomainRecord, User


logger = logging.getLogger(__name__)

RecordInput = Union[DomainRecord, Mapping[str, Any]]


class EntityKind(str, Enum):
    """Kinds of document held by the store."""
    USER = "User"
    COURSE = "Course"
    BADGE = "Badge"


_BINDINGS: Dict[EntityKind, Tuple[Type[Base], Type[DomainRecord]]] = {
    EntityKind.USER: (UserRow, User),
    EntityKind.COURSE: (CourseRow, Course),
    EntityKind.BADGE: (BadgeRow, Badge),
}


def to_record(kind: EntityKind, data: RecordInput) -> DomainRecord:
    """
    Validate a document (or an existing record) against the domain model.

    Raises:
        RecordValidationError: If the document does not fit the record shape
    """
    _, schema = _BINDINGS[kind]
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        errors = [
            {"loc": list(err["loc"]), "msg": err["msg"]}
            for err in e.errors(include_url=False)
        ]
        raise RecordValidationError(f"Invalid {kind.value.lower()} record", errors)


class DocumentStore:
    """
    find/insert/replace/delete by external id for each EntityKind.
    """

    def __init__(self, db: Session):
        self.db = db

    def _row(self, kind: EntityKind, entity_id: str):
        table, _ = _BINDINGS[kind]
        return self.db.query(table).filter(table.id == entity_id).first()

    def _fail(self, action: str, kind: EntityKind, error: SQLAlchemyError) -> TransportFailure:
        self.db.rollback()
        logger.error(f"Failed to {action} {kind.value}: {error}")
        return TransportFailure(f"Error {action.rstrip('e')}ing {kind.value.lower()}")

    def find_all(self, kind: EntityKind) -> List[DomainRecord]:
        """
        Return every record of a kind in insertion order.
        """
        table, _ = _BINDINGS[kind]
        try:
            rows = self.db.query(table).order_by(table.pk).all()
        except SQLAlchemyError as e:
            raise self._fail("fetch", kind, e)
        return [to_record(kind, row.to_document()) for row in rows]

    def find_one(self, kind: EntityKind, entity_id: str) -> DomainRecord:
        """
        Return one record by external id.

        Raises:
            NotFoundError: If no record has this id
        """
        try:
            row = self._row(kind, entity_id)
        except SQLAlchemyError as e:
            raise self._fail("fetch", kind, e)
        if row is None:
            raise NotFoundError(kind.value, entity_id)
        return to_record(kind, row.to_document())

    def exists(self, kind: EntityKind, entity_id: str) -> bool:
        try:
            return self._row(kind, entity_id) is not None
        except SQLAlchemyError as e:
            raise self._fail("fetch", kind, e)

    def insert(self, kind: EntityKind, data: RecordInput) -> DomainRecord:
        """
        Store a new record.

        Raises:
            DuplicateIdError: If the id is already in use
            RecordValidationError: If the document does not fit the record shape
        """
        record = to_record(kind, data)
        table, _ = _BINDINGS[kind]
        if self.exists(kind, record.id):
            raise DuplicateIdError(kind.value, record.id)

        row = table()
        row.apply_document(record.to_document())
        try:
            self.db.add(row)
            self.db.commit()
        except IntegrityError:
            # lost a race with another insert of the same id
            self.db.rollback()
            raise DuplicateIdError(kind.value, record.id)
        except SQLAlchemyError as e:
            raise self._fail("create", kind, e)

        logger.info(f"{kind.value} {record.id} created")
        return record

    def replace(self, kind: EntityKind, entity_id: str, data: RecordInput) -> DomainRecord:
        """
        Overwrite the record with this id. Last write wins.

        Raises:
            NotFoundError: If no record has this id
            RecordValidationError: If the document does not fit the record
                shape or carries a different id
        """
        record = to_record(kind, data)
        if record.id != entity_id:
            raise RecordValidationError(
                f"{kind.value} id in body ({record.id}) does not match {entity_id}"
            )

        try:
            row = self._row(kind, entity_id)
        except SQLAlchemyError as e:
            raise self._fail("update", kind, e)
        if row is None:
            raise NotFoundError(kind.value, entity_id)

        row.apply_document(record.to_document())
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("update", kind, e)
        return record

    def delete(self, kind: EntityKind, entity_id: str) -> None:
        """
        Remove the record with this id.

        Raises:
            NotFoundError: If no record has this id
        """
        try:
            row = self._row(kind, entity_id)
        except SQLAlchemyError as e:
            raise self._fail("delete", kind, e)
        if row is None:
            raise NotFoundError(kind.value, entity_id)

        try:
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", kind, e)
        logger.info(f"{kind.value} {entity_id} deleted")

    # Typed conveniences used by the routers and the application state

    def users(self) -> List[User]:
        return self.find_all(EntityKind.USER)

    def courses(self) -> List[Course]:
        return self.find_all(EntityKind.COURSE)

    def badges(self) -> List[Badge]:
        return self.find_all(EntityKind.BADGE)

    def get_user(self, user_id: str) -> User:
        return self.find_one(EntityKind.USER, user_id)

    def get_course(self, course_id: str) -> Course:
        return self.find_one(EntityKind.COURSE, course_id)

    def save_user(self, user: User) -> User:
        return self.replace(EntityKind.USER, user.id, user)
