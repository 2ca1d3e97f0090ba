"""
DEX - Domain Model.

Plain dataclasses shared by every engine. Engines treat these as values:
they return changed copies instead of mutating what they were handed.

UserProfile is the only persisted type; it round-trips through
to_dict/from_dict so any ProfileStore can hold it as JSON.
"""

import json
import uuid
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any

from dex.config import QUARANTINE_THRESHOLD
from dex.core.errors import DataError


FINAL_DAY = 5


class Role(Enum):
    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"


class RoleCategory(Enum):
    """Broad work setting used for coarse content targeting."""
    DESK = "DESK"
    FRONTLINE = "FRONTLINE"
    REMOTE = "REMOTE"
    LEADERSHIP = "LEADERSHIP"


class WeekdayBucket(Enum):
    """Weekly rhythm the Daily 3 follows."""
    MONDAY_PLANNING = "MONDAY_PLANNING"
    WEDNESDAY_SIMULATOR = "WEDNESDAY_SIMULATOR"
    FRIDAY_REFLECTION = "FRIDAY_REFLECTION"
    DEFAULT = "DEFAULT"


# =============================================================================
# User Profile
# =============================================================================


@dataclass
class DayProgress:
    """Completion record for one onboarding day."""
    completed: bool = False
    completed_at: str | None = None


@dataclass
class UserProfile:
    """
    The signed-in user and their onboarding progress.

    Invariants:
    - onboarding_day never decreases while onboarding_complete is False
    - day_progress[d].completed never goes back to False
    """
    id: str = ""
    name: str = ""
    role: Role = Role.EMPLOYEE
    job_title: str = ""
    department: str = ""
    role_category: RoleCategory | None = None
    manager: str = ""
    start_date: str | None = None  # ISO date

    onboarding_day: int = 0  # 0 = manager preboarding, 1-5 = journey days
    onboarding_complete: bool = False
    day_progress: dict[int, DayProgress] = field(default_factory=dict)

    @classmethod
    def new(cls, user_id: str | None = None, **kwargs: Any) -> "UserProfile":
        """Freshly-initialized profile, used whenever stored data is unusable."""
        if not user_id:
            user_id = f"user-{uuid.uuid4().hex[:9]}"
        return cls(id=user_id, **kwargs)

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else ""

    def is_day_completed(self, day: int) -> bool:
        progress = self.day_progress.get(day)
        return bool(progress and progress.completed)

    def copy(self, **changes: Any) -> "UserProfile":
        """Copy with independent day_progress records."""
        progress = {d: replace(p) for d, p in self.day_progress.items()}
        changes.setdefault("day_progress", progress)
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Serialize profile to dict for JSON storage."""
        data = asdict(self)
        data["role"] = self.role.value
        data["role_category"] = self.role_category.value if self.role_category else None
        # JSON object keys are strings
        data["day_progress"] = {
            str(day): asdict(progress) for day, progress in self.day_progress.items()
        }
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        """
        Deserialize profile from dict.

        Raises DataError for anything that does not describe a valid profile.
        """
        if not isinstance(data, dict):
            raise DataError(f"Profile must be an object, got {type(data).__name__}")

        data = dict(data)
        try:
            if "role" in data:
                data["role"] = Role(data["role"])
            if data.get("role_category"):
                data["role_category"] = RoleCategory(data["role_category"])
            else:
                data["role_category"] = None
            progress_map = data.get("day_progress") or {}
            if not isinstance(progress_map, dict) or not all(
                isinstance(progress, dict) for progress in progress_map.values()
            ):
                raise DataError("day_progress must map days to progress objects")
            data["day_progress"] = {
                int(day): DayProgress(**progress) for day, progress in progress_map.items()
            }
            profile = cls(**data)
        except (TypeError, ValueError) as e:
            raise DataError(f"Malformed profile: {e}") from e

        day = profile.onboarding_day
        # bool is an int subclass
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= FINAL_DAY:
            raise DataError(f"onboarding_day out of range: {profile.onboarding_day}")
        return profile

    def to_json(self) -> str:
        """Serialize profile to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> "UserProfile":
        """Deserialize profile from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise DataError(f"Profile is not valid JSON: {e}") from e
        return cls.from_dict(data)


# =============================================================================
# Preboarding
# =============================================================================


class PreboardingCategory(Enum):
    IDENTITY = "IDENTITY"
    DEVICE = "DEVICE"
    FACILITY = "FACILITY"
    FINANCE = "FINANCE"
    TEAM = "TEAM"


class PreboardingStatus(Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    READY = "READY"
    BLOCKED = "BLOCKED"
    ESCALATED = "ESCALATED"  # only reachable from BLOCKED


@dataclass
class PreboardingItem:
    """One Day-1 readiness checklist item owned by IT, HR, facilities..."""
    id: str
    title: str
    category: PreboardingCategory
    owner: str
    status: PreboardingStatus = PreboardingStatus.PENDING
    eta: str | None = None
    escalated_to: str | None = None
    role_categories: list[RoleCategory] | None = None  # None = everyone


# =============================================================================
# Daily 3 cards
# =============================================================================


class CardSlot(Enum):
    CONTEXT_ANCHOR = "CONTEXT_ANCHOR"
    DOMAIN_EDGE = "DOMAIN_EDGE"
    MICRO_SKILL = "MICRO_SKILL"
    SIMULATOR = "SIMULATOR"


class FlagReason(Enum):
    INCORRECT = "INCORRECT"
    OUTDATED = "OUTDATED"
    INAPPROPRIATE = "INAPPROPRIATE"


@dataclass
class DailyCard:
    """
    A single Daily 3 card.

    Created fresh for each selection cycle. flag_count only ever grows;
    quarantine is derived from it and never stored.
    """
    id: str
    slot: CardSlot
    title: str
    description: str = ""
    source: str = ""
    source_type: str = "SYSTEM"
    priority: str = "MEDIUM"
    action_label: str = ""
    action_url: str | None = None

    # Targeting: None means "not targeted" on that axis
    role_categories: list[RoleCategory] | None = None
    target_roles: list[str] | None = None  # job titles

    explainer: str | None = None  # author override, shown verbatim

    # Moderation counters
    flag_count: int = 0
    flagged: bool = False
    last_flag_reason: FlagReason | None = None

    @property
    def is_quarantined(self) -> bool:
        return self.flag_count >= QUARANTINE_THRESHOLD

    @property
    def is_generic(self) -> bool:
        """Untargeted card usable as backfill for anyone."""
        if self.target_roles is not None:
            return False
        return self.role_categories is None or RoleCategory.DESK in self.role_categories

    def clone(self, **changes: Any) -> "DailyCard":
        """Fresh instance that shares no mutable state with this one."""
        changes.setdefault(
            "role_categories",
            list(self.role_categories) if self.role_categories is not None else None,
        )
        changes.setdefault(
            "target_roles",
            list(self.target_roles) if self.target_roles is not None else None,
        )
        return replace(self, **changes)


@dataclass
class SimulatorDefinition:
    """A Wednesday simulator scenario. Exactly one is active at a time."""
    id: str
    title: str
    description: str
    difficulty: str = "MEDIUM"
    active: bool = False


# =============================================================================
# Team
# =============================================================================


@dataclass
class BurnoutSignal:
    """One drifting work-pattern metric (e.g. after-hours commits)."""
    metric: str
    value: float = 0.0
    baseline: float = 0.0


@dataclass
class TeamMember:
    id: str
    name: str
    title: str = ""
    project: str | None = None
    burnout_score: float = 0.0  # 0-100
    current_load: float = 0.0  # percent of capacity
    skill_scores: dict[str, float] = field(default_factory=dict)
    burnout_signals: list[BurnoutSignal] = field(default_factory=list)

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else self.id
