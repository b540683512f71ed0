import csv

import pytest

from app.core.exceptions import RecordValidationError
from app.services.roster import (
    EXPORT_HEADER,
    export_users_csv,
    merge_imported_users,
    parse_users_csv,
)
from tests.factories import make_user


def test_parse_quoted_name() -> None:
    users, skipped = parse_users_csv('99999,"John Doe",1234,Nurse')

    assert skipped == 0
    assert len(users) == 1
    user = users[0]
    assert user.id == "99999"
    assert user.name == "John Doe"
    assert user.pin == "1234"
    assert user.role == "Nurse"
    assert user.xp == 0
    assert user.completed_courses == []
    assert "ui-avatars.com" in user.avatar


def test_short_lines_are_skipped() -> None:
    users, skipped = parse_users_csv("99999,John Doe,1234\n88888,Jane Roe,4321,Educator\n")

    assert skipped == 1
    assert [user.id for user in users] == ["88888"]
    assert users[0].role == "Educator"


def test_header_and_blank_lines_are_ignored() -> None:
    text = "id,name,pin,role\n\n99999,John Doe,1234,Nurse\n\n"
    users, skipped = parse_users_csv(text)
    assert skipped == 0
    assert [user.id for user in users] == ["99999"]


def test_unknown_role_becomes_nurse() -> None:
    users, _ = parse_users_csv("99999,John Doe,1234,Surgeon")
    assert users[0].role == "Nurse"


def test_bad_pin_is_skipped() -> None:
    users, skipped = parse_users_csv("99999,John Doe,12,Nurse\n88888,Jane Roe,abcd,Nurse")
    assert users == []
    assert skipped == 2


def test_name_with_comma_survives_quoting() -> None:
    users, _ = parse_users_csv('77777,"Wong, A.",1234,Educator')
    assert users[0].name == "Wong, A."


def test_merge_keeps_progress_of_existing_staff() -> None:
    existing = [make_user(id="12345", name="Sarah Jenkins", xp=1250, badges=["b1"], completed_courses=["c1"])]
    imported, _ = parse_users_csv("12345,Sarah J,4321,Educator\n99999,John Doe,1234,Nurse")

    to_insert, to_replace = merge_imported_users(existing, imported)

    assert [user.id for user in to_insert] == ["99999"]
    updated = to_replace[0]
    assert updated.name == "Sarah J"
    assert updated.pin == "4321"
    assert updated.role == "Educator"
    assert updated.xp == 1250
    assert updated.badges == ["b1"]
    assert updated.completed_courses == ["c1"]


def test_export_quotes_names() -> None:
    users = [
        make_user(id="12345", name="Sarah Jenkins", xp=1250),
        make_user(id="2", name='Dr. "Doc" Who', role="Educator"),
    ]

    lines = export_users_csv(users).splitlines()

    assert lines[0] == ",".join(EXPORT_HEADER)
    assert lines[1] == '12345,"Sarah Jenkins",1234,Nurse,1250'
    assert lines[2] == '2,"Dr. ""Doc"" Who",1234,Educator,0'


def test_exported_file_imports_back() -> None:
    users = [make_user(id="12345", name="Wong, A.", role="Educator")]
    parsed, skipped = parse_users_csv(export_users_csv(users))
    assert skipped == 0
    assert [(u.id, u.name, u.pin, u.role) for u in parsed] == [("12345", "Wong, A.", "1234", "Educator")]


def test_unreadable_csv_is_a_validation_error() -> None:
    huge_field = "x" * (csv.field_size_limit() + 1)
    with pytest.raises(RecordValidationError):
        parse_users_csv(f'99999,"{huge_field}",1234,Nurse')
