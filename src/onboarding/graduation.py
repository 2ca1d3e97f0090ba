"""
Day 5 Graduation Flow.

Strictly forward phase sequence:

    OVERVIEW -> SIGNOFF -> FEEDBACK -> GRADUATION -> TRANSITION

- SIGNOFF -> FEEDBACK needs the manager's sign-off
- FEEDBACK -> GRADUATION happens by submitting the feedback form
- GRADUATION -> TRANSITION happens by graduating, which marks onboarding
  complete on the profile

Going back is allowed to any phase already visited, except out of
TRANSITION. Switching the app into its post-onboarding mode is up to the
host once graduate() returns.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from dex.core.errors import DayLocked, FeedbackRequired, InvalidPhaseTransition, SignoffRequired
from dex.core.models import FINAL_DAY, UserProfile
from dex.core.notifications import LoggingNotificationSink, NotificationSink, Severity

from .forms import FeedbackForm

logger = logging.getLogger(__name__)


class GraduationPhase(Enum):
    OVERVIEW = "OVERVIEW"
    SIGNOFF = "SIGNOFF"
    FEEDBACK = "FEEDBACK"
    GRADUATION = "GRADUATION"
    TRANSITION = "TRANSITION"


PHASE_ORDER = list(GraduationPhase)


def _rank(phase: GraduationPhase) -> int:
    return PHASE_ORDER.index(phase)


@dataclass
class ManagerSignoff:
    """The manager's confirmation that the new hire is ready."""
    manager_name: str = "Your Manager"
    welcome_message: str = ""
    first_week_goals: list[str] = field(default_factory=list)
    first_month_goals: list[str] = field(default_factory=list)
    requested: bool = False
    signed_off: bool = False
    signed_off_at: str | None = None


@dataclass
class OnboardingFeedback:
    """A submitted FeedbackForm, stamped."""
    overall_satisfaction: int
    confidence_level: int
    day_ratings: dict[int, int]
    friction_points: list[str]
    highlights: list[str]
    suggestions: str
    submitted_at: str
    requires_follow_up: bool

    @classmethod
    def from_form(cls, form: FeedbackForm, now: datetime) -> "OnboardingFeedback":
        return cls(
            overall_satisfaction=form.overall_satisfaction,
            confidence_level=form.confidence_level,
            day_ratings=dict(form.day_ratings),
            friction_points=list(form.friction_points),
            highlights=list(form.highlights),
            suggestions=form.suggestions,
            submitted_at=now.isoformat(),
            requires_follow_up=form.requires_follow_up,
        )


@dataclass(frozen=True)
class ChecklistItem:
    id: str
    title: str
    done: bool


@dataclass
class GraduationFlow:
    """
    Session state of the Day 5 sub-flow.

    Lives for one session only; the durable outcome is
    profile.onboarding_complete.
    """

    signoff: ManagerSignoff = field(default_factory=ManagerSignoff)
    phase: GraduationPhase = GraduationPhase.OVERVIEW
    visited: list[GraduationPhase] = field(default_factory=lambda: [GraduationPhase.OVERVIEW])
    feedback: OnboardingFeedback | None = None
    graduated: bool = False

    @classmethod
    def for_profile(cls, profile: UserProfile) -> "GraduationFlow":
        return cls(signoff=ManagerSignoff(manager_name=profile.manager or "Your Manager"))

    # =========================================================================
    # Navigation
    # =========================================================================

    def _move(self, phase: GraduationPhase) -> None:
        logger.info("Graduation phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase
        if phase not in self.visited:
            self.visited.append(phase)

    def advance_to(self, phase: GraduationPhase) -> GraduationPhase:
        """
        Move to `phase`.

        Raises:
            SignoffRequired: FEEDBACK requested before the manager signed off
            InvalidPhaseTransition: skipping ahead, leaving TRANSITION, or
                reaching GRADUATION/TRANSITION other than through
                submit_feedback()/graduate()
        """
        if phase == self.phase:
            return self.phase
        if self.phase == GraduationPhase.TRANSITION:
            raise InvalidPhaseTransition(self.phase.value, phase.value, "already graduated")
        if phase in self.visited:
            self._move(phase)
            return self.phase

        if _rank(phase) != _rank(self.phase) + 1:
            raise InvalidPhaseTransition(self.phase.value, phase.value, "phases cannot be skipped")
        if phase == GraduationPhase.FEEDBACK and not self.signoff.signed_off:
            raise SignoffRequired()
        if phase == GraduationPhase.GRADUATION:
            raise InvalidPhaseTransition(self.phase.value, phase.value, "submit feedback to continue")
        if phase == GraduationPhase.TRANSITION:
            raise InvalidPhaseTransition(self.phase.value, phase.value, "graduate to continue")

        self._move(phase)
        return self.phase

    def go_back(self) -> GraduationPhase:
        """Step to the previous phase."""
        if self.phase in (GraduationPhase.OVERVIEW, GraduationPhase.TRANSITION):
            raise InvalidPhaseTransition(self.phase.value, "previous", "no earlier phase to return to")
        self._move(PHASE_ORDER[_rank(self.phase) - 1])
        return self.phase

    # =========================================================================
    # Sign-off
    # =========================================================================

    def request_signoff(self, sink: NotificationSink | None = None) -> ManagerSignoff:
        """Ask the manager to sign off. Repeated requests do not re-notify."""
        if self.phase != GraduationPhase.SIGNOFF:
            raise InvalidPhaseTransition(self.phase.value, "signoff request", "not on the sign-off step")
        if self.signoff.requested or self.signoff.signed_off:
            return self.signoff

        self.signoff.requested = True
        sink = sink or LoggingNotificationSink()
        sink.notify(f"Sign-off request sent to {self.signoff.manager_name}", Severity.INFO)
        return self.signoff

    def approve_signoff(self, now: datetime | None = None) -> ManagerSignoff:
        """Record the manager's approval of a pending request."""
        if not self.signoff.requested:
            raise InvalidPhaseTransition("unrequested", "signed_off", "sign-off was never requested")
        if not self.signoff.signed_off:
            self.signoff.signed_off = True
            self.signoff.signed_off_at = (now or datetime.now()).isoformat()
            logger.info("Sign-off approved by %s", self.signoff.manager_name)
        return self.signoff

    # =========================================================================
    # Feedback and graduation
    # =========================================================================

    def submit_feedback(self, form: FeedbackForm, now: datetime | None = None) -> OnboardingFeedback:
        """Stamp the feedback and move on to GRADUATION."""
        if not self.signoff.signed_off:
            raise SignoffRequired()
        if self.phase != GraduationPhase.FEEDBACK:
            raise InvalidPhaseTransition(self.phase.value, "feedback", "not on the feedback step")

        self.feedback = OnboardingFeedback.from_form(form, now or datetime.now())
        if self.feedback.requires_follow_up:
            logger.warning(
                "Low onboarding satisfaction (%d/5); follow-up needed",
                self.feedback.overall_satisfaction,
            )
        self._move(GraduationPhase.GRADUATION)
        return self.feedback

    def graduate(self, profile: UserProfile) -> UserProfile:
        """
        Complete onboarding.

        Raises:
            DayLocked: the profile is not on the final day
            FeedbackRequired: feedback has not been submitted
        """
        if profile.onboarding_day != FINAL_DAY:
            raise DayLocked(FINAL_DAY, profile.onboarding_day)
        if self.feedback is None:
            raise FeedbackRequired()

        self.graduated = True
        self._move(GraduationPhase.TRANSITION)
        logger.info("%s graduated from onboarding", profile.id)
        return profile.copy(onboarding_complete=True)

    def completion_checklist(self) -> list[ChecklistItem]:
        """What is left to do on Day 5."""
        return [
            ChecklistItem("signoff", "Manager Sign-off", self.signoff.signed_off),
            ChecklistItem("feedback", "Submit Feedback", self.feedback is not None),
            ChecklistItem("graduate", "Complete Graduation", self.graduated),
        ]
