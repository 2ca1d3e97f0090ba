"""
Daily 3 Card Selection.

Rule-based selection of up to three cards for a user on a given date:

1. Weekday bucket from the date (Monday planning, Wednesday simulator,
   Friday reflection, everything else default)
2. Base selection: catalog cards matching the user's role category and job
   title, first three in catalog order
3. Backfill with generic cards, catalog order, no duplicates
4. Weekday override by slot index, looked up in WEEKDAY_OVERRIDES

Same (user, date, catalog) in, same cards out. Nothing here keeps state.
"""

import logging
from datetime import date
from typing import Callable

from dex.content.catalog import (
    FRIDAY_MICRO_SKILL,
    MONDAY_CONTEXT_ANCHOR,
    SIMULATOR_CARD_ID,
    SIMULATOR_EXPLAINER,
    ContentCatalog,
    default_catalog,
)
from dex.core.models import CardSlot, DailyCard, UserProfile, WeekdayBucket

logger = logging.getLogger(__name__)

DAILY_CARD_LIMIT = 3

# date.weekday(): Monday == 0
_WEEKDAY_BUCKETS = {
    0: WeekdayBucket.MONDAY_PLANNING,
    2: WeekdayBucket.WEDNESDAY_SIMULATOR,
    4: WeekdayBucket.FRIDAY_REFLECTION,
}


def get_weekday_bucket(day: date) -> WeekdayBucket:
    """Map a calendar date onto the weekly rhythm."""
    return _WEEKDAY_BUCKETS.get(day.weekday(), WeekdayBucket.DEFAULT)


# =============================================================================
# Weekday overrides
# =============================================================================

# Factory returns the replacement card, or None to leave the slot alone
OverrideFactory = Callable[[ContentCatalog], DailyCard | None]


def _planning_anchor(catalog: ContentCatalog) -> DailyCard:
    return MONDAY_CONTEXT_ANCHOR.clone()


def _reflection_card(catalog: ContentCatalog) -> DailyCard:
    return FRIDAY_MICRO_SKILL.clone()


def _simulator_card(catalog: ContentCatalog) -> DailyCard | None:
    simulator = catalog.active_simulator()
    if simulator is None:
        logger.debug("No active simulator; keeping the regular third card")
        return None
    return DailyCard(
        id=SIMULATOR_CARD_ID,
        slot=CardSlot.SIMULATOR,
        title=simulator.title,
        description=simulator.description,
        source="Living OS",
        source_type="SYSTEM",
        priority="MEDIUM",
        action_label="Start Challenge",
        explainer=SIMULATOR_EXPLAINER,
    )


# bucket -> {slot index -> replacement factory}
# Adding a rhythm day means adding a row here.
WEEKDAY_OVERRIDES: dict[WeekdayBucket, dict[int, OverrideFactory]] = {
    WeekdayBucket.MONDAY_PLANNING: {0: _planning_anchor},
    WeekdayBucket.WEDNESDAY_SIMULATOR: {2: _simulator_card},
    WeekdayBucket.FRIDAY_REFLECTION: {2: _reflection_card},
    WeekdayBucket.DEFAULT: {},
}


# =============================================================================
# Selection
# =============================================================================


def matches_user(card: DailyCard, user: UserProfile) -> bool:
    """Role-category (broad) then job-title (narrow) targeting check."""
    if (
        card.role_categories is not None
        and user.role_category is not None
        and user.role_category not in card.role_categories
    ):
        return False
    if card.target_roles is not None and (
        not user.job_title or user.job_title not in card.target_roles
    ):
        return False
    return True


def base_selection(user: UserProfile, catalog: ContentCatalog) -> list[DailyCard]:
    """Targeted selection plus generic backfill, before weekday overrides."""
    selected = [card for card in catalog.cards if matches_user(card, user)][:DAILY_CARD_LIMIT]

    if len(selected) < DAILY_CARD_LIMIT:
        seen = {card.id for card in selected}
        for card in catalog.cards:
            if len(selected) >= DAILY_CARD_LIMIT:
                break
            if card.is_generic and card.id not in seen:
                selected.append(card)
                seen.add(card.id)

    return [card.clone() for card in selected]


def apply_weekday_overrides(
    cards: list[DailyCard],
    bucket: WeekdayBucket,
    catalog: ContentCatalog,
) -> list[DailyCard]:
    """
    Replace slots positionally for the weekday.

    An override whose index is past the end of the list is skipped
    silently, so a short feed is never padded or reordered.
    """
    adjusted = list(cards)
    for index, factory in WEEKDAY_OVERRIDES.get(bucket, {}).items():
        if index >= len(adjusted):
            logger.debug(
                "Skipping %s override at slot %d: only %d cards",
                bucket.value, index, len(adjusted),
            )
            continue
        replacement = factory(catalog)
        if replacement is not None:
            adjusted[index] = replacement
    return adjusted


def select_daily_cards(
    user: UserProfile,
    day: date,
    catalog: ContentCatalog | None = None,
) -> list[DailyCard]:
    """
    Select today's Daily 3 for a user.

    Returns at most three fresh card instances, each tagged with its slot.
    """
    if catalog is None:
        catalog = default_catalog()

    bucket = get_weekday_bucket(day)
    cards = apply_weekday_overrides(base_selection(user, catalog), bucket, catalog)

    logger.debug(
        "Selected %s for %s on %s (%s)",
        [card.id for card in cards], user.id, day.isoformat(), bucket.value,
    )
    return cards
