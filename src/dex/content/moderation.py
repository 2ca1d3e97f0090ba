"""
Community Moderation for Daily 3 cards.

Readers flag cards as incorrect, outdated or inappropriate. Every accepted
flag bumps the card's counter; at QUARANTINE_THRESHOLD the card is
quarantined and hidden from the feed. Quarantine is read from the counter
each time and never stored, and the counter never goes down, so a
quarantined card stays quarantined.

Records are kept for the life of the engine even after quarantine; hiding
a card is a filter on read, not a delete.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import BaseModel, field_validator

from dex.config import QUARANTINE_THRESHOLD
from dex.core.errors import ModerationError
from dex.core.models import DailyCard, FlagReason
from dex.core.notifications import NotificationSink, Severity

logger = logging.getLogger(__name__)


class FlagRequest(BaseModel):
    """Inbound flag submission."""
    card_id: str
    reason: FlagReason
    reporter_id: str | None = None

    @field_validator("card_id")
    @classmethod
    def card_id_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("card_id is required")
        return v


@dataclass
class FlagRecord:
    reason: FlagReason
    submitted_at: str
    reporter_id: str | None = None


@dataclass
class ModerationState:
    """Flag ledger entry for one card."""
    card_id: str
    flag_count: int = 0
    flagged: bool = False
    last_reason: FlagReason | None = None
    history: list[FlagRecord] = field(default_factory=list)

    @property
    def is_quarantined(self) -> bool:
        return self.flag_count >= QUARANTINE_THRESHOLD


class ModerationEngine:
    """
    Flag ledger keyed by card id.

    Cards must be registered with track() (or seeded through annotate())
    before they can be flagged, so typos in card ids are rejected instead
    of silently creating ledger entries.
    """

    def __init__(self, sink: NotificationSink | None = None):
        self._states: dict[str, ModerationState] = {}
        self._sink = sink

    def track(self, cards: list[DailyCard]) -> None:
        """Register cards in view, seeding the ledger from their counters."""
        for card in cards:
            if card.id not in self._states:
                self._states[card.id] = ModerationState(
                    card_id=card.id,
                    flag_count=card.flag_count,
                    flagged=card.flagged,
                    last_reason=card.last_flag_reason,
                )

    def state(self, card_id: str) -> ModerationState | None:
        return self._states.get(card_id)

    def submit_flag(
        self,
        card_id: str,
        reason: FlagReason | str,
        reporter_id: str | None = None,
        now: datetime | None = None,
    ) -> ModerationState:
        """
        Record one flag against a card.

        Raises ModerationError for an unknown card, an invalid reason, or a
        repeat flag from the same reporter. The ledger is untouched on error.
        """
        try:
            request = FlagRequest(card_id=card_id, reason=reason, reporter_id=reporter_id)
        except ValueError as e:
            raise ModerationError(f"Invalid flag for {card_id!r}: {e}") from e

        state = self._states.get(request.card_id)
        if state is None:
            raise ModerationError(f"Unknown card: {request.card_id}")

        if request.reporter_id is not None and any(
            record.reporter_id == request.reporter_id for record in state.history
        ):
            raise ModerationError(
                f"{request.reporter_id} already flagged {request.card_id}"
            )

        was_quarantined = state.is_quarantined
        submitted_at = (now or datetime.now(timezone.utc)).isoformat()

        state.flag_count += 1
        state.flagged = True
        state.last_reason = request.reason
        state.history.append(
            FlagRecord(
                reason=request.reason,
                submitted_at=submitted_at,
                reporter_id=request.reporter_id,
            )
        )
        logger.info(
            "Card %s flagged %s (%d/%d)",
            state.card_id, request.reason.value, state.flag_count, QUARANTINE_THRESHOLD,
        )

        if state.is_quarantined and not was_quarantined:
            logger.warning("Card %s quarantined after %d flags", state.card_id, state.flag_count)
            if self._sink:
                self._sink.notify(
                    f"Card {state.card_id} was quarantined for review",
                    Severity.WARNING,
                )

        return state

    def annotate(self, cards: list[DailyCard]) -> list[DailyCard]:
        """Copies of the cards carrying the ledger's counters."""
        self.track(cards)
        annotated = []
        for card in cards:
            state = self._states[card.id]
            annotated.append(
                card.clone(
                    flag_count=state.flag_count,
                    flagged=state.flagged,
                    last_flag_reason=state.last_reason,
                )
            )
        return annotated

    def visible(self, cards: list[DailyCard]) -> list[DailyCard]:
        """Annotated cards minus anything quarantined."""
        return [card for card in self.annotate(cards) if not card.is_quarantined]

    def quarantined_ids(self) -> list[str]:
        return [card_id for card_id, state in self._states.items() if state.is_quarantined]
