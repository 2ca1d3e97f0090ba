"""
Onboarding Journey State.

Day-by-day progress through the five-day journey. Everything here is a pure
function of the UserProfile: day status is derived from onboarding_day and
day_progress, and completing a day returns a new profile.

Day 0 is the optional manager preboarding day; Days 1-5 are the journey.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from dex.core.errors import DayLocked, InvalidPhaseTransition
from dex.core.models import FINAL_DAY, DayProgress, Role, UserProfile

logger = logging.getLogger(__name__)


class DayStatus(Enum):
    """Navigation status of one journey day."""
    COMPLETED = "completed"
    ACTIVE = "active"
    AVAILABLE = "available"  # earlier day, revisitable
    LOCKED = "locked"        # not navigable, not completable


# day -> (title, description)
DAY_TITLES: dict[int, tuple[str, str]] = {
    0: ("Preboarding", "Get Day 1 ready for your new hire"),
    1: ("Setup & Essentials", "Everything to function comfortably"),
    2: ("Company Culture", "Learn our unwritten rules"),
    3: ("Tools & Workflow", "How you get work done"),
    4: ("Team Connections", "Connect with your Critical 5"),
    5: ("Completion Day", "Complete your journey"),
}


@dataclass(frozen=True)
class JourneyDay:
    day: int
    title: str
    description: str
    status: DayStatus


def get_day_status(profile: UserProfile, day: int) -> DayStatus:
    """Derive a day's status. Completion takes precedence over position."""
    if profile.is_day_completed(day):
        return DayStatus.COMPLETED
    if day == profile.onboarding_day:
        return DayStatus.ACTIVE
    if day < profile.onboarding_day:
        return DayStatus.AVAILABLE
    return DayStatus.LOCKED


def can_navigate(profile: UserProfile, day: int) -> bool:
    return get_day_status(profile, day) != DayStatus.LOCKED


def journey_days(profile: UserProfile) -> list[JourneyDay]:
    """
    Navigation list for the journey sidebar.

    Day 0 only shows for managers who started with preboarding.
    """
    first = 0 if profile.role == Role.MANAGER and (
        profile.onboarding_day == 0 or profile.is_day_completed(0)
    ) else 1
    return [
        JourneyDay(day, *DAY_TITLES[day], get_day_status(profile, day))
        for day in range(first, FINAL_DAY + 1)
    ]


def begin_journey(profile: UserProfile, with_preboarding: bool = False) -> UserProfile:
    """
    Role selection: put the profile at the start of the journey.

    Managers may start at Day 0 to run preboarding for a new hire; everyone
    else starts at Day 1.
    """
    if with_preboarding and profile.role != Role.MANAGER:
        raise InvalidPhaseTransition(
            f"day_{profile.onboarding_day}", "day_0", "preboarding is manager-only"
        )
    if profile.day_progress or profile.onboarding_complete:
        raise InvalidPhaseTransition(
            f"day_{profile.onboarding_day}", "start", "journey already in progress"
        )
    start = 0 if with_preboarding else 1
    logger.info("Journey started for %s at day %d", profile.id, start)
    return profile.copy(onboarding_day=start)


def complete_day(profile: UserProfile, day: int, now: datetime | None = None) -> UserProfile:
    """
    Mark the active day complete and unlock the next one.

    Raises:
        DayLocked: `day` is not the active onboarding day
    """
    if day != profile.onboarding_day:
        raise DayLocked(day, profile.onboarding_day)

    # Final day stays put once done; keep the original timestamp
    if profile.is_day_completed(day):
        return profile.copy()

    now = now or datetime.now()
    updated = profile.copy()
    updated.day_progress[day] = DayProgress(completed=True, completed_at=now.isoformat())
    if day < FINAL_DAY:
        updated.onboarding_day = day + 1

    logger.info("Day %d completed for %s", day, profile.id)
    return updated


def completed_days(profile: UserProfile) -> int:
    """Journey days (1-5) finished so far."""
    return sum(1 for day in range(1, FINAL_DAY + 1) if profile.is_day_completed(day))
