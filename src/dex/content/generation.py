"""
Daily Briefing Generation.

The feed is produced behind an async boundary that mimics a model call:
it waits for the configured latency and then returns the rule-based
selection, labelled as "generated" when an AI key is configured. There is
no real model behind it.

Failure handling degrades silently: a generator error or timeout is logged
and the user gets the deterministic fallback feed instead.

Overlapping loads are resolved with request tokens; a result that arrives
after a newer request was issued is dropped.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Awaitable, Callable

from dex.config import settings
from dex.content.catalog import ContentCatalog, default_catalog
from dex.content.moderation import ModerationEngine
from dex.content.selection import get_weekday_bucket, select_daily_cards
from dex.core.errors import GenerationError
from dex.core.models import DailyCard, UserProfile, WeekdayBucket
from dex.core.tokens import RequestTokens
from dex.observability.session_logger import SessionLogger, get_session_logger

logger = logging.getLogger(__name__)


# Feed header per weekday rhythm
WEEKDAY_HEADERS: dict[WeekdayBucket, tuple[str, str]] = {
    WeekdayBucket.MONDAY_PLANNING: ("Plan Your Week", "Focus on strategic priorities"),
    WeekdayBucket.WEDNESDAY_SIMULATOR: ("Simulator Wednesday", "Practice makes perfect"),
    WeekdayBucket.FRIDAY_REFLECTION: ("Reflect & Grow", "Celebrate your progress"),
    WeekdayBucket.DEFAULT: ("Your Daily 3", "Stay focused on what matters"),
}


@dataclass
class DailyBriefing:
    """One resolved Daily 3 request."""
    cards: list[DailyCard]
    greeting_title: str
    greeting_subtitle: str
    generated: bool  # True on the simulated-AI path, False on pure fallback
    weekday_bucket: WeekdayBucket = WeekdayBucket.DEFAULT
    fallback_reason: str | None = None
    token: int = 0

    @property
    def header(self) -> tuple[str, str]:
        return WEEKDAY_HEADERS[self.weekday_bucket]

    @property
    def card_ids(self) -> list[str]:
        return [card.id for card in self.cards]


def build_fallback_briefing(
    user: UserProfile,
    day: date,
    catalog: ContentCatalog | None = None,
    simulated: bool = False,
) -> DailyBriefing:
    """Rule-based briefing: the selection engine plus a greeting."""
    cards = select_daily_cards(user, day, catalog)
    first_name = user.first_name
    if simulated:
        title = f"Good Morning, {first_name}"
        subtitle = f"I've curated these priorities for your {user.job_title} role."
    else:
        title = f"Welcome back, {first_name}"
        subtitle = "Here is your daily briefing."
    return DailyBriefing(
        cards=cards,
        greeting_title=title,
        greeting_subtitle=subtitle,
        generated=simulated,
        weekday_bucket=get_weekday_bucket(day),
    )


# Pluggable generator: (user, day) -> briefing
ContentGenerator = Callable[[UserProfile, date], Awaitable[DailyBriefing]]


@dataclass
class BriefingService:
    """
    Session-scoped Daily 3 loader.

    Holds the most recently applied briefing in `current`. Nothing else
    survives between calls.
    """

    catalog: ContentCatalog = field(default_factory=default_catalog)
    moderation: ModerationEngine | None = None
    generator: ContentGenerator | None = None
    latency_seconds: float | None = None
    timeout_seconds: float | None = None
    ai_enabled: bool | None = None
    journal: SessionLogger | None = None

    current: DailyBriefing | None = field(default=None, init=False)
    _tokens: RequestTokens = field(default_factory=RequestTokens, init=False, repr=False)

    def __post_init__(self):
        if self.latency_seconds is None:
            self.latency_seconds = settings.generation_latency_seconds
        if self.timeout_seconds is None:
            self.timeout_seconds = settings.generation_timeout_seconds
        if self.ai_enabled is None:
            self.ai_enabled = settings.ai_enabled
        if self.journal is None:
            self.journal = get_session_logger()

    async def _simulated_generation(self, user: UserProfile, day: date) -> DailyBriefing:
        await asyncio.sleep(self.latency_seconds)
        if not self.ai_enabled:
            logger.info("No API key configured; using deterministic fallback")
            return build_fallback_briefing(user, day, self.catalog)
        logger.info("API key present; simulating AI generation")
        return build_fallback_briefing(user, day, self.catalog, simulated=True)

    async def generate(self, user: UserProfile, day: date) -> DailyBriefing:
        """
        Produce a briefing, never raising for generation problems.

        Timeouts and generator errors fall back to the rule-based feed.
        """
        generator = self.generator or self._simulated_generation
        fallback_reason = None
        try:
            briefing = await asyncio.wait_for(generator(user, day), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            fallback_reason = f"timed out after {self.timeout_seconds}s"
        except GenerationError as e:
            fallback_reason = str(e)
        except Exception as e:
            logger.exception("Unexpected generator failure")
            fallback_reason = f"{type(e).__name__}: {e}"

        if fallback_reason is not None:
            logger.warning("Briefing generation failed (%s); using fallback", fallback_reason)
            briefing = build_fallback_briefing(user, day, self.catalog)
            briefing.fallback_reason = fallback_reason

        if self.moderation is not None:
            briefing.cards = self.moderation.visible(briefing.cards)
        return briefing

    async def load(self, user: UserProfile, day: date) -> DailyBriefing | None:
        """
        Generate and apply a briefing.

        Returns None when a newer load was issued while this one was in
        flight; `current` is left as the newer result.
        """
        token = self._tokens.issue()
        briefing = await self.generate(user, day)
        briefing.token = token

        stale = not self._tokens.is_latest(token)
        self.journal.generation(
            user_id=user.id,
            token=token,
            card_ids=briefing.card_ids,
            generated=briefing.generated,
            fallback_reason=briefing.fallback_reason,
            stale=stale,
        )
        if stale:
            logger.info(
                "Discarding stale briefing %d (latest is %d)", token, self._tokens.latest
            )
            return None

        self.current = briefing
        return briefing
