"""
Day 1 Readiness.

Scores the preboarding checklist (SSO account, laptop, badge, payroll...)
and drives the two ways an item's status moves: manual escalation of a
blocked item, and polling the owning teams for updates.

The score is always recomputed from the current items; nothing caches it.
"""

import asyncio
import logging
import math
import random
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Awaitable, Callable

from dex.core.errors import InvalidPhaseTransition
from dex.core.models import (
    PreboardingCategory,
    PreboardingItem,
    PreboardingStatus,
    RoleCategory,
)
from dex.core.notifications import LoggingNotificationSink, NotificationSink, Severity
from dex.core.tokens import RequestTokens
from dex.observability.session_logger import SessionLogger, get_session_logger

logger = logging.getLogger(__name__)


CRITICAL_CATEGORIES = frozenset({
    PreboardingCategory.IDENTITY,
    PreboardingCategory.DEVICE,
    PreboardingCategory.FACILITY,
})

DEFAULT_ESCALATION_TARGET = "HR Manager"


@dataclass
class ReadinessScore:
    overall_score: int
    critical_items_ready: int
    critical_items_total: int
    blocked_items: list[PreboardingItem] = field(default_factory=list)
    escalated_items: list[PreboardingItem] = field(default_factory=list)
    last_updated: str = ""

    @property
    def is_day1_ready(self) -> bool:
        return self.critical_items_ready == self.critical_items_total and not self.blocked_items


def compute_readiness(items: list[PreboardingItem], now: datetime | None = None) -> ReadinessScore:
    """
    Score a checklist.

    overall_score is the percentage of READY items, rounded half up.
    Escalated items count as not ready.
    """
    total = len(items)
    ready = sum(1 for item in items if item.status == PreboardingStatus.READY)
    critical = [item for item in items if item.category in CRITICAL_CATEGORIES]

    return ReadinessScore(
        overall_score=math.floor(100 * ready / total + 0.5) if total else 0,
        critical_items_ready=sum(1 for item in critical if item.status == PreboardingStatus.READY),
        critical_items_total=len(critical),
        blocked_items=[item for item in items if item.status == PreboardingStatus.BLOCKED],
        escalated_items=[item for item in items if item.status == PreboardingStatus.ESCALATED],
        last_updated=(now or datetime.now()).isoformat(),
    )


def _find(items: list[PreboardingItem], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise KeyError(f"Unknown preboarding item: {item_id}")


def escalate(
    items: list[PreboardingItem],
    item_id: str,
    target: str = DEFAULT_ESCALATION_TARGET,
) -> list[PreboardingItem]:
    """
    Escalate a blocked item. Returns the updated checklist.

    Raises:
        InvalidPhaseTransition: the item is not BLOCKED
    """
    index = _find(items, item_id)
    item = items[index]
    if item.status != PreboardingStatus.BLOCKED:
        raise InvalidPhaseTransition(
            item.status.value, PreboardingStatus.ESCALATED.value, "only blocked items can be escalated"
        )
    updated = list(items)
    updated[index] = replace(item, status=PreboardingStatus.ESCALATED, escalated_to=target)
    logger.info("Escalated %s to %s", item_id, target)
    return updated


def update_status(
    items: list[PreboardingItem],
    item_id: str,
    status: PreboardingStatus,
) -> list[PreboardingItem]:
    """Set an item's status. ESCALATED is only reachable through escalate()."""
    index = _find(items, item_id)
    item = items[index]
    if status == PreboardingStatus.ESCALATED and item.status != PreboardingStatus.ESCALATED:
        raise InvalidPhaseTransition(item.status.value, status.value, "use escalate()")
    updated = list(items)
    updated[index] = replace(item, status=status)
    return updated


def relevant_items(
    templates: list[PreboardingItem] | tuple[PreboardingItem, ...],
    role_category: RoleCategory | None,
) -> list[PreboardingItem]:
    """Checklist for a hire: untargeted items plus those for their category."""
    return [
        replace(item)
        for item in templates
        if item.role_categories is None
        or (role_category is not None and role_category in item.role_categories)
    ]


def days_until_start(start_date: str | date | None, today: date | None = None) -> int:
    """Whole days until the start date; 0 when unknown or past."""
    if not start_date:
        return 0
    if isinstance(start_date, str):
        start_date = date.fromisoformat(start_date[:10])
    today = today or date.today()
    return max(0, (start_date - today).days)


# =============================================================================
# Status polling
# =============================================================================


# Returns the statuses that changed, by item id
StatusProvider = Callable[[list[PreboardingItem]], Awaitable[dict[str, PreboardingStatus]]]


class SimulatedStatusProvider:
    """
    Stand-in for the owning teams' systems.

    Each poll, a PENDING item starts with probability 0.5 and an IN_PROGRESS
    item finishes with probability 0.3. Seeded, so runs are repeatable.
    """

    def __init__(self, seed: int | None = None, latency_seconds: float = 0.0):
        self._rng = random.Random(seed)
        self.latency_seconds = latency_seconds

    async def __call__(self, items: list[PreboardingItem]) -> dict[str, PreboardingStatus]:
        await asyncio.sleep(self.latency_seconds)
        changes = {}
        for item in items:
            if item.status == PreboardingStatus.PENDING and self._rng.random() > 0.5:
                changes[item.id] = PreboardingStatus.IN_PROGRESS
            elif item.status == PreboardingStatus.IN_PROGRESS and self._rng.random() > 0.7:
                changes[item.id] = PreboardingStatus.READY
        return changes


class PreboardingTracker:
    """
    Session-scoped checklist for one new hire.

    Holds the current items and hands out a fresh ReadinessScore on every
    read.
    """

    def __init__(
        self,
        items: list[PreboardingItem],
        sink: NotificationSink | None = None,
        journal: SessionLogger | None = None,
    ):
        self.items = list(items)
        self.sink = sink or LoggingNotificationSink()
        self.journal = journal or get_session_logger()
        self._tokens = RequestTokens()

    @property
    def score(self) -> ReadinessScore:
        return compute_readiness(self.items)

    def escalate(self, item_id: str, target: str = DEFAULT_ESCALATION_TARGET) -> ReadinessScore:
        old = self.items[_find(self.items, item_id)].status
        self.items = escalate(self.items, item_id, target)
        self.journal.state_change(item_id, "preboarding_item", old.value, "ESCALATED", reason=target)
        self.sink.notify(f"Escalated to {target}", Severity.WARNING)
        return self.score

    async def refresh(self, provider: StatusProvider) -> ReadinessScore | None:
        """
        Poll for status updates.

        Returns None, applying nothing, if a newer refresh was started while
        this one was in flight.
        """
        token = self._tokens.issue()
        changes = await provider([replace(item) for item in self.items])

        if not self._tokens.is_latest(token):
            logger.info("Discarding stale refresh %d (latest is %d)", token, self._tokens.latest)
            return None

        for item_id, status in changes.items():
            try:
                index = _find(self.items, item_id)
            except KeyError:
                logger.warning("Refresh reported unknown item %s", item_id)
                continue
            old = self.items[index].status
            if status == old:
                continue
            if status == PreboardingStatus.ESCALATED:
                logger.warning("Refresh tried to escalate %s; ignored", item_id)
                continue
            self.items[index] = replace(self.items[index], status=status)
            self.journal.state_change(item_id, "preboarding_item", old.value, status.value, reason="refresh")

        return self.score
