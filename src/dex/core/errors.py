"""
DEX - Error taxonomy.

StateError      rejected transition; surfaced as a blocked affordance
DataError       missing/malformed persisted data; recovered with a fresh value
GenerationError briefing generation failed; recovered with the rule-based feed
ModerationError invalid or duplicate flag; prior state retained

None of these is fatal to the process.
"""


class DexError(Exception):
    """Base class for all DEX errors."""


# =============================================================================
# State errors
# =============================================================================


class StateError(DexError):
    """A transition was requested that the current state does not allow."""


class DayLocked(StateError):
    """Attempted to complete a day that is not the active onboarding day."""

    def __init__(self, day: int, active_day: int):
        self.day = day
        self.active_day = active_day
        super().__init__(f"Day {day} is locked (active day is {active_day})")


class FeedbackRequired(StateError):
    """Graduation was requested before onboarding feedback was submitted."""

    def __init__(self):
        super().__init__("Submit onboarding feedback before graduating")


class SignoffRequired(StateError):
    """The feedback phase was requested before the manager signed off."""

    def __init__(self):
        super().__init__("Manager sign-off is required before feedback")


class InvalidPhaseTransition(StateError):
    """A phase or status move that the flow does not permit."""

    def __init__(self, current: str, requested: str, reason: str = ""):
        self.current = current
        self.requested = requested
        message = f"Cannot move from {current} to {requested}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


# =============================================================================
# Recoverable errors
# =============================================================================


class DataError(DexError):
    """Persisted data is missing or cannot be parsed."""


class GenerationError(DexError):
    """Daily content generation failed or timed out."""


class ModerationError(DexError):
    """A flag submission was rejected."""
