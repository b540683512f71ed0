import pytest

from app.core.exceptions import (
    AuthenticationError,
    DataLoadError,
    DuplicateIdError,
    InvalidTransitionError,
    PermissionDeniedError,
    RecordValidationError,
    TransportFailure,
)
from app.schemas import Course
from app.services.session import AppState
from app.services.store import EntityKind
from tests.factories import make_user, quiz_slide, text_slide


@pytest.fixture
def state(store) -> AppState:
    app_state = AppState(store, clock=lambda: 1000)
    app_state.load()
    return app_state


def test_load_fetches_users_and_courses(state) -> None:
    assert state.loaded
    assert len(state.users) == 4
    assert [course.id for course in state.courses] == ["c1", "c2"]


def test_load_failure_is_reported(store, monkeypatch) -> None:
    def unreachable():
        raise TransportFailure("Error fetching user")

    monkeypatch.setattr(store, "users", unreachable)
    app_state = AppState(store)

    with pytest.raises(DataLoadError) as exc:
        app_state.load()
    assert "Failed to connect to server" in exc.value.message
    assert not app_state.loaded


def test_login(state) -> None:
    with pytest.raises(AuthenticationError):
        state.login("54321", "0000")
    with pytest.raises(AuthenticationError):
        state.login("nobody", "1234")

    user = state.login("54321", "1234")
    assert state.current_user == user


def test_full_playthrough_awards_xp_once(state, store) -> None:
    state.login("54321", "1234")
    player = state.start_course("c2")

    assert state.next_slide() is None
    attempt = state.answer_quiz(1)
    assert attempt.is_correct
    assert attempt.timestamp == 1000
    assert len(store.get_user("54321").quiz_attempts) == 1

    assert state.next_slide() is None
    result = state.next_slide()

    assert result.applied
    assert result.user.xp == 900
    assert result.new_badges == []
    assert state.player is None
    assert player.is_closed
    stored = store.get_user("54321")
    assert stored.xp == 900
    assert stored.completed_courses == ["c2"]
    assert state.current_user.xp == 900

    replay = state.complete_course("c2", 50)
    assert replay.applied is False
    assert store.get_user("54321").xp == 900


def test_player_actions_need_an_open_course(state) -> None:
    state.login("54321", "1234")
    with pytest.raises(InvalidTransitionError):
        state.answer_quiz(0)
    with pytest.raises(InvalidTransitionError):
        state.next_slide()


def test_closing_a_course_keeps_progress_unchanged(state, store) -> None:
    state.login("54321", "1234")
    state.start_course("c1")
    state.next_slide()
    state.close_course()

    assert state.player is None
    assert store.get_user("54321").completed_courses == []


def test_nurse_cannot_author_courses(state) -> None:
    state.login("54321", "1234")
    with pytest.raises(PermissionDeniedError):
        state.add_course({"title": "X", "category": "Y"})


def test_educator_adds_updates_and_deletes_course(state, store) -> None:
    state.login("admin", "1234")

    course = state.add_course({
        "title": "Sepsis Basics",
        "category": "Emergency",
        "slides": [text_slide("s1"), quiz_slide("s2")],
    })
    assert course.id == "c3-1000"
    assert course.timestamp == 1000
    assert store.get_course("c3-1000").slide_count == 2

    renamed = state.update_course(course.model_copy(update={"title": "Sepsis 101"}))
    assert state.find_course("c3-1000").title == "Sepsis 101"
    assert renamed.title == "Sepsis 101"

    state.delete_course("c3-1000")
    assert [c.id for c in state.courses] == ["c1", "c2"]


def test_staff_management(state, store) -> None:
    state.login("admin", "1234")

    added = state.add_user(make_user(id="777", name="New Nurse"))
    assert "ui-avatars.com" in added.avatar
    assert store.exists(EntityKind.USER, "777")

    with pytest.raises(DuplicateIdError):
        state.add_user(make_user(id="777"))

    with pytest.raises(PermissionDeniedError):
        state.remove_user("admin")

    state.remove_user("777")
    assert state.find_user("777") is None


def test_updating_self_refreshes_current_user(state) -> None:
    educator = state.login("admin", "1234")
    state.update_user(educator.model_copy(update={"name": "Dr. Wong"}))
    assert state.current_user.name == "Dr. Wong"


def test_import_users(state) -> None:
    state.login("admin", "1234")

    report = state.import_users("99999,John Doe,1234,Nurse\n12345,Sarah J,1111,Nurse\nbad,line")

    assert report == {"created": ["99999"], "updated": ["12345"], "skipped": 1}
    assert state.find_user("99999").name == "John Doe"
    assert state.find_user("12345").xp == 1250


def test_reset_and_change_pin(state) -> None:
    assert state.reset_pin("nobody", "4321") is False
    assert state.reset_pin("54321", "4321") is True
    with pytest.raises(RecordValidationError):
        state.reset_pin("54321", "43")

    state.login("54321", "4321")
    state.change_pin("9999")
    state.logout()
    state.login("54321", "9999")


def test_leaderboard_rank_and_compliance(state) -> None:
    state.login("54321", "1234")

    assert [user.id for user in state.leaderboard()] == ["99901", "12345", "54321"]
    assert state.current_rank() == 3

    report = state.compliance()
    assert report["completion_rate"] == 0
    assert report["pending"] == 6


def _unreachable_save(user):
    raise TransportFailure("Error updating user")


def test_failed_completion_save_keeps_previous_user(state, store, monkeypatch) -> None:
    state.login("54321", "1234")
    state.start_course("c2")
    state.next_slide()
    state.answer_quiz(1)
    state.next_slide()

    monkeypatch.setattr(store, "save_user", _unreachable_save)
    with pytest.raises(TransportFailure):
        state.next_slide()

    assert state.player is None
    for user in (state.current_user, state.find_user("54321"), store.get_user("54321")):
        assert user.xp == 850
        assert user.badges == ["b1"]
        assert user.completed_courses == []

    with pytest.raises(TransportFailure):
        state.complete_course("c1", 50)
    assert state.current_user.xp == 850
    assert store.get_user("54321").completed_courses == []


def test_failed_attempt_save_keeps_previous_user(state, store, monkeypatch) -> None:
    state.login("54321", "1234")
    state.start_course("c2")
    state.next_slide()

    monkeypatch.setattr(store, "save_user", _unreachable_save)
    with pytest.raises(TransportFailure):
        state.answer_quiz(1)

    assert state.current_user.quiz_attempts == []
    assert state.find_user("54321").quiz_attempts == []
    assert store.get_user("54321").quiz_attempts == []


def test_update_course_keeps_publication_time(state) -> None:
    state.login("admin", "1234")
    published = state.find_course("c1")
    document = published.to_document()
    del document["timestamp"]
    document["title"] = "Hand Hygiene Refresher"

    updated = state.update_course(Course.model_validate(document))

    assert updated.timestamp == published.timestamp
    assert state.find_course("c1").title == "Hand Hygiene Refresher"
