"""
Staff roster CSV import and export.

Import format is ``id,name,pin,role`` per line; export adds ``xp``.
"""

from typing import List, Sequence, Tuple
import csv
import io
import logging

from app.core.exceptions import RecordValidationError
from app.schemas import Role, User, default_avatar
from app.services.pin_reset import is_valid_pin
from app.services.store import DocumentStore, EntityKind


logger = logging.getLogger(__name__)

EXPORT_HEADER = ["id", "name", "pin", "role", "xp"]
EXPORT_FILENAME = "mahsa_users.csv"


def _parse_role(value: str) -> str:
    value = value.strip()
    if value in (Role.NURSE.value, Role.EDUCATOR.value):
        return value
    return Role.NURSE.value


def parse_users_csv(text: str) -> Tuple[List[User], int]:
    """
    Parse roster lines into new user records.

    Blank lines and a leading header row are ignored. Lines with fewer
    than four fields, an empty id/name/PIN, or a PIN that is not four
    digits are skipped. Unknown roles become Nurse.

    Returns:
        Tuple[List[User], int]: Parsed users and the number of skipped lines

    Raises:
        RecordValidationError: If the text is not readable as CSV
    """
    users: List[User] = []
    skipped = 0

    reader = csv.reader(io.StringIO(text))
    try:
        rows = list(reader)
    except csv.Error as e:
        logger.warning(f"Unreadable roster file at line {reader.line_num}: {e}")
        raise RecordValidationError(f"Roster line {reader.line_num} could not be read: {e}")

    for line_number, parts in enumerate(rows, start=1):
        if not parts or not any(part.strip() for part in parts):
            continue
        if line_number == 1 and parts[0].strip().lower() == "id":
            continue
        if len(parts) < 4:
            logger.warning(f"Skipping roster line {line_number}: expected 4 fields, got {len(parts)}")
            skipped += 1
            continue

        staff_id = parts[0].strip()
        name = parts[1].replace('"', "").strip()
        pin = parts[2].strip()
        if not (staff_id and name and pin):
            skipped += 1
            continue
        if not is_valid_pin(pin):
            logger.warning(f"Skipping roster line {line_number}: PIN for {staff_id} is not 4 digits")
            skipped += 1
            continue

        users.append(User(
            id=staff_id,
            name=name,
            pin=pin,
            role=_parse_role(parts[3]),
            avatar=default_avatar(name),
        ))

    return users, skipped


def merge_imported_users(
    existing: Sequence[User],
    imported: Sequence[User],
) -> Tuple[List[User], List[User]]:
    """
    Split imported rows into new users and updates of existing ones.

    Existing staff keep their progress and take the imported name, PIN
    and role. A later row for the same id wins.

    Returns:
        Tuple[List[User], List[User]]: (to_insert, to_replace)
    """
    by_id = {user.id: user for user in existing}
    to_insert: dict = {}
    to_replace: dict = {}

    for row in imported:
        current = by_id.get(row.id)
        if current is None:
            to_insert[row.id] = row
        else:
            to_replace[row.id] = current.model_copy(update={
                "name": row.name,
                "pin": row.pin,
                "role": row.role,
            })

    return list(to_insert.values()), list(to_replace.values())


def import_users_csv(store: DocumentStore, text: str) -> Tuple[List[User], List[User], int]:
    """
    Parse a roster file and write it through the store.

    Each record is written on its own; a failure stops the import and
    propagates, leaving earlier rows stored.

    Returns:
        Tuple[List[User], List[User], int]: (created, updated, skipped)
    """
    imported, skipped = parse_users_csv(text)
    to_insert, to_replace = merge_imported_users(store.users(), imported)

    created = [store.insert(EntityKind.USER, user) for user in to_insert]
    updated = [store.save_user(user) for user in to_replace]
    logger.info(
        f"Roster import: {len(created)} created, {len(updated)} updated, {skipped} skipped"
    )
    return created, updated, skipped


def export_users_csv(users: Sequence[User]) -> str:
    """
    Roster as CSV text. Names are always quoted so the file imports back.
    """
    output = io.StringIO()
    output.write(",".join(EXPORT_HEADER) + "\n")
    for user in users:
        name = user.name.replace('"', '""')
        output.write(f'{user.id},"{name}",{user.pin},{user.role},{user.xp}\n')
    return output.getvalue()
