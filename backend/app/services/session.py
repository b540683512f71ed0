"""
Application state for one interactive session.

AppState replaces the dashboard's global in-memory lists. It caches the
users and courses read from the store, tracks the logged-in user and the
open course player, and routes every mutation through the store first:
the cached copy only changes after the write succeeded, so a failed
write leaves the previous state in place and the error reaches the
caller.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Union
import logging

from app.core.exceptions import (
    AuthenticationError,
    DataLoadError,
    DuplicateIdError,
    InvalidTransitionError,
    MicrolearningError,
    NotFoundError,
    PermissionDeniedError,
)
from app.core.security import verify_pin
from app.schemas import Course, CourseCreate, QuizAttempt, User, default_avatar, now_ms
from app.services import progress
from app.services.pin_reset import validate_pin
from app.services.player import CoursePlayer
from app.services.roster import import_users_csv
from app.services.store import DocumentStore, EntityKind


logger = logging.getLogger(__name__)


class AppState:
    """
    Session-scoped state and the operations the dashboards call.
    """

    def __init__(self, store: DocumentStore, clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock
        self.users: List[User] = []
        self.courses: List[Course] = []
        self.current_user: Optional[User] = None
        self.player: Optional[CoursePlayer] = None
        self.loaded = False

    # --- Loading ---

    def load(self) -> None:
        """
        Fetch all users and courses.

        Raises:
            DataLoadError: If either fetch fails; nothing is partially loaded
        """
        try:
            users = self.store.users()
            courses = self.store.courses()
        except MicrolearningError as e:
            logger.error(f"Failed to load data: {e.message}")
            raise DataLoadError(
                "Failed to connect to server. Please ensure the backend is running."
            ) from e
        self.users = users
        self.courses = courses
        self.loaded = True

    reload = load

    # --- Cache helpers ---

    def find_user(self, user_id: str) -> Optional[User]:
        return next((user for user in self.users if user.id == user_id), None)

    def find_course(self, course_id: str) -> Course:
        for course in self.courses:
            if course.id == course_id:
                return course
        raise NotFoundError(EntityKind.COURSE.value, course_id)

    def _cache_user(self, user: User) -> None:
        for i, cached in enumerate(self.users):
            if cached.id == user.id:
                self.users[i] = user
                break
        else:
            self.users.append(user)
        if self.current_user is not None and self.current_user.id == user.id:
            self.current_user = user

    def _cache_course(self, course: Course) -> None:
        for i, cached in enumerate(self.courses):
            if cached.id == course.id:
                self.courses[i] = course
                return
        self.courses.append(course)

    def _persist_user(self, user: User) -> User:
        stored = self.store.save_user(user)
        self._cache_user(stored)
        return stored

    def _require_login(self) -> User:
        if self.current_user is None:
            raise AuthenticationError("Not logged in")
        return self.current_user

    def _require_educator(self) -> User:
        user = self._require_login()
        if not user.is_educator:
            raise PermissionDeniedError("Educator access required")
        return user

    def _require_player(self) -> CoursePlayer:
        if self.player is None or self.player.is_closed:
            raise InvalidTransitionError("No course is open")
        return self.player

    # --- Authentication ---

    def login(self, staff_id: str, pin: str) -> User:
        user = self.find_user(staff_id)
        if user is None or not verify_pin(pin, user.pin):
            logger.warning(f"Failed login for staff id {staff_id}")
            raise AuthenticationError()
        self.current_user = user
        return user

    def logout(self) -> None:
        self.close_course()
        self.current_user = None

    def reset_pin(self, staff_id: str, new_pin: str) -> bool:
        """
        Forgotten-PIN reset by staff id. Returns False for an unknown id.
        """
        validate_pin(new_pin)
        user = self.find_user(staff_id)
        if user is None:
            return False
        self._persist_user(user.model_copy(update={"pin": new_pin}))
        return True

    def change_pin(self, new_pin: str) -> User:
        validate_pin(new_pin)
        user = self._require_login()
        return self._persist_user(user.model_copy(update={"pin": new_pin}))

    # --- Course player ---

    def start_course(self, course_id: str) -> CoursePlayer:
        self._require_login()
        course = self.find_course(course_id)
        self.close_course()
        self.player = CoursePlayer(course, clock=self.clock)
        return self.player

    def answer_quiz(self, selected_option_index: int) -> QuizAttempt:
        """
        Answer the current quiz slide and store the attempt right away.
        """
        player = self._require_player()
        event = player.answer_quiz(selected_option_index)
        user = self._require_login()
        self._persist_user(progress.record_quiz_attempt(user, event.attempt))
        return event.attempt

    def next_slide(self) -> Optional[progress.CompletionResult]:
        """
        Advance the player. On the last slide the course is completed and
        the player closes even if saving the completion fails.
        """
        player = self._require_player()
        event = player.next()
        if event is None:
            return None
        self.player = None
        return self.complete_course(event.course_id, event.earned_xp)

    def close_course(self) -> None:
        if self.player is not None:
            self.player.close()
        self.player = None

    def complete_course(self, course_id: str, earned_xp: int) -> progress.CompletionResult:
        user = self._require_login()
        course = self.find_course(course_id)
        result = progress.apply_completion(user, course, earned_xp)
        if not result.applied:
            return result

        stored = self._persist_user(result.user)
        logger.info(
            f"{user.id} completed {course_id} for {earned_xp} XP"
            + (f", badges {result.new_badges}" if result.new_badges else "")
        )
        return progress.CompletionResult(user=stored, applied=True, new_badges=result.new_badges)

    # --- Course management ---

    def add_course(self, data: Union[CourseCreate, Mapping[str, Any]]) -> Course:
        self._require_educator()
        if isinstance(data, CourseCreate):
            data = data.model_dump(by_alias=True, exclude_none=True)
        timestamp = self.clock()
        document: Dict[str, Any] = {
            **data,
            "id": data.get("id") or f"c{len(self.courses) + 1}-{timestamp}",
            "timestamp": timestamp,
        }
        course = self.store.insert(EntityKind.COURSE, document)
        self.courses.append(course)
        return course

    def update_course(self, course: Course) -> Course:
        self._require_educator()
        if "timestamp" not in course.model_fields_set:
            course = course.model_copy(update={"timestamp": self.find_course(course.id).timestamp})
        stored = self.store.replace(EntityKind.COURSE, course.id, course)
        self._cache_course(stored)
        return stored

    def delete_course(self, course_id: str) -> None:
        self._require_educator()
        self.store.delete(EntityKind.COURSE, course_id)
        self.courses = [course for course in self.courses if course.id != course_id]

    # --- Staff management ---

    def add_user(self, user: User) -> User:
        self._require_educator()
        if self.find_user(user.id) is not None:
            raise DuplicateIdError(EntityKind.USER.value, user.id)
        if not user.avatar:
            user = user.model_copy(update={"avatar": default_avatar(user.name)})
        stored = self.store.insert(EntityKind.USER, user)
        self.users.append(stored)
        return stored

    def update_user(self, user: User) -> User:
        self._require_educator()
        return self._persist_user(user)

    def remove_user(self, user_id: str) -> None:
        educator = self._require_educator()
        if user_id == educator.id:
            raise PermissionDeniedError("You cannot delete your own account while logged in.")
        self.store.delete(EntityKind.USER, user_id)
        self.users = [user for user in self.users if user.id != user_id]

    def import_users(self, csv_text: str) -> Dict[str, Any]:
        self._require_educator()
        created, updated, skipped = import_users_csv(self.store, csv_text)
        for user in [*created, *updated]:
            self._cache_user(user)
        return {
            "created": [user.id for user in created],
            "updated": [user.id for user in updated],
            "skipped": skipped,
        }

    # --- Derived views ---

    def leaderboard(self) -> List[User]:
        return progress.compute_leaderboard(self.users)

    def current_rank(self) -> int:
        return progress.compute_rank(self.users, self._require_login().id)

    def compliance(self) -> Dict[str, Any]:
        return progress.compliance_report(self.users, self.courses)
