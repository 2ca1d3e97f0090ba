"""
DEX - Profile persistence and the session store handle.

ProfileStore is the host's key/value persistence for UserProfile.
UserProgressStore is the session-scoped handle engines are driven through:
it loads the profile once, applies pure state transitions, persists each
change and journals it.

Unusable stored data never stops a session: a DataError on load is logged
and replaced with a freshly initialized profile.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

from dex.core.errors import DataError, InvalidPhaseTransition, StateError
from dex.core.models import UserProfile
from dex.core.notifications import LoggingNotificationSink, NotificationSink, Severity
from dex.observability.session_logger import SessionLogger, get_session_logger
from onboarding.graduation import GraduationFlow
from onboarding.state import DayStatus, begin_journey, complete_day, get_day_status

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# ProfileStore
# =============================================================================


class ProfileStore(ABC):
    """Key/value persistence for profiles."""

    @abstractmethod
    def get(self, key: str) -> UserProfile | None:
        """Stored profile, None if absent. Raises DataError if unreadable."""

    @abstractmethod
    def set(self, key: str, profile: UserProfile) -> None:
        ...


class InMemoryProfileStore(ProfileStore):
    """Holds serialized profiles in a dict, like browser local storage."""

    def __init__(self):
        self.records: dict[str, str] = {}

    def get(self, key: str) -> UserProfile | None:
        raw = self.records.get(key)
        if raw is None:
            return None
        return UserProfile.from_json(raw)

    def set(self, key: str, profile: UserProfile) -> None:
        self.records[key] = profile.to_json()


class JsonFileProfileStore(ProfileStore):
    """One JSON file per key under a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> UserProfile | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DataError(f"Cannot read {path}: {e}") from e
        return UserProfile.from_json(raw)

    def set(self, key: str, profile: UserProfile) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(profile.to_json(), encoding="utf-8")


def load_profile(store: ProfileStore, key: str, **defaults: Any) -> UserProfile:
    """Stored profile, or a fresh one if it is missing or malformed."""
    try:
        profile = store.get(key)
    except DataError as e:
        logger.warning("Stored profile %r is unusable, starting fresh: %s", key, e)
        profile = None
    if profile is None:
        profile = UserProfile.new(user_id=key, **defaults)
    return profile


# =============================================================================
# Session handle
# =============================================================================


@dataclass
class Outcome(Generic[T]):
    """Result of attempt(): either a value or the reason the action is blocked."""
    action: str
    ok: bool
    value: T | None = None
    blocked_reason: str | None = None


class UserProgressStore:
    """
    Session-scoped owner of the signed-in user's profile.

    Every mutating call replaces the held profile with the engine's returned
    copy and writes it through to the ProfileStore.
    """

    def __init__(
        self,
        store: ProfileStore,
        key: str,
        sink: NotificationSink | None = None,
        journal: SessionLogger | None = None,
        **defaults: Any,
    ):
        self.store = store
        self.key = key
        self.sink = sink or LoggingNotificationSink()
        self.journal = journal or get_session_logger()
        self._defaults = defaults
        self._profile: UserProfile | None = None
        self._flow: GraduationFlow | None = None

    @property
    def profile(self) -> UserProfile:
        if self._profile is None:
            self._profile = load_profile(self.store, self.key, **self._defaults)
        return self._profile

    @property
    def graduation(self) -> GraduationFlow:
        """Day 5 flow for this session."""
        if self._flow is None:
            self._flow = GraduationFlow.for_profile(self.profile)
        return self._flow

    def _commit(self, profile: UserProfile, old_state: str, new_state: str, reason: str) -> UserProfile:
        self._profile = profile
        self.store.set(self.key, profile)
        self.journal.state_change(profile.id, "profile", old_state, new_state, reason=reason)
        return profile

    @staticmethod
    def _state_label(profile: UserProfile) -> str:
        return "graduated" if profile.onboarding_complete else f"day_{profile.onboarding_day}"

    def save(self, profile: UserProfile) -> UserProfile:
        """
        Replace the held profile, e.g. after editing identity fields.

        Progress only moves forward here; reset() is the one way to wipe it.
        """
        current = self.profile
        old_state, new_state = self._state_label(current), self._state_label(profile)
        lost = [
            day for day in current.day_progress
            if current.is_day_completed(day) and not profile.is_day_completed(day)
        ]
        if lost:
            raise InvalidPhaseTransition(old_state, new_state, f"would drop completed days {lost}")
        if profile.onboarding_day < current.onboarding_day:
            raise InvalidPhaseTransition(old_state, new_state, "onboarding day cannot go backwards")
        if current.onboarding_complete and not profile.onboarding_complete:
            raise InvalidPhaseTransition(old_state, new_state, "graduation cannot be undone")
        return self._commit(profile, old_state, new_state, "save")

    def begin_journey(self, with_preboarding: bool = False, **identity: Any) -> UserProfile:
        """
        Start the journey, optionally updating identity fields (name, role, ...).

        Raises InvalidPhaseTransition if the journey is already under way.
        """
        current = self.profile
        updated = begin_journey(current.copy(**identity), with_preboarding=with_preboarding)
        return self._commit(updated, self._state_label(current), self._state_label(updated), "begin_journey")

    def complete_day(self, day: int, now: datetime | None = None) -> UserProfile:
        """Raises DayLocked unless `day` is the active day."""
        current = self.profile
        updated = complete_day(current, day, now)
        if updated.day_progress == current.day_progress:
            return updated
        self.sink.notify(f"Day {day} complete!", Severity.SUCCESS)
        return self._commit(updated, self._state_label(current), self._state_label(updated), "complete_day")

    def graduate(self, flow: GraduationFlow | None = None) -> UserProfile:
        """Raises DayLocked before Day 5 and FeedbackRequired until feedback is in."""
        current = self.profile
        updated = (flow or self.graduation).graduate(current)
        self.sink.notify(f"Congratulations, {current.first_name or 'graduate'}!", Severity.SUCCESS)
        return self._commit(updated, self._state_label(current), "graduated", "graduate")

    def can_complete(self, day: int) -> bool:
        return get_day_status(self.profile, day) == DayStatus.ACTIVE

    def attempt(self, action: str, operation: Callable[[], T]) -> Outcome[T]:
        """
        Run an operation, turning a StateError into a blocked outcome.

        Hosts use this to grey out an affordance instead of showing a fault.
        """
        try:
            return Outcome(action=action, ok=True, value=operation())
        except StateError as e:
            logger.info("%s blocked: %s", action, e)
            self.journal.rejected(action, str(e))
            return Outcome(action=action, ok=False, blocked_reason=str(e))

    def reset(self) -> UserProfile:
        """Start over with a fresh profile."""
        current = self.profile
        self._flow = None
        fresh = UserProfile.new(user_id=self.key, **self._defaults)
        return self._commit(fresh, self._state_label(current), self._state_label(fresh), "reset")
