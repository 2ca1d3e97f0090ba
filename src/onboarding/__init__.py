"""
DEX Onboarding Journey.

The five-day journey a new hire walks through, plus the manager's Day 0:

0. Preboarding - Day 1 readiness checklist (managers only)
1-4. Journey days - each unlocked by completing the one before
5. Completion Day - manager sign-off, feedback, graduation

Everything here works on plain UserProfile values and returns copies.
"""

from .forms import FeedbackForm
from .graduation import GraduationFlow, GraduationPhase
from .readiness import PreboardingTracker, ReadinessScore, compute_readiness
from .state import DayStatus, complete_day, get_day_status

__all__ = [
    "DayStatus",
    "FeedbackForm",
    "GraduationFlow",
    "GraduationPhase",
    "PreboardingTracker",
    "ReadinessScore",
    "complete_day",
    "compute_readiness",
    "get_day_status",
]
