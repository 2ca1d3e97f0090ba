"""
Tests for Daily 3 card selection.
"""

from datetime import date

import pytest

from dex.content.catalog import ContentCatalog, default_catalog
from dex.content.selection import (
    WEEKDAY_OVERRIDES,
    base_selection,
    get_weekday_bucket,
    select_daily_cards,
)
from dex.core.models import CardSlot, DailyCard, RoleCategory, UserProfile, WeekdayBucket

# 2024-01-01 was a Monday
MONDAY = date(2024, 1, 1)
TUESDAY = date(2024, 1, 2)
WEDNESDAY = date(2024, 1, 3)
THURSDAY = date(2024, 1, 4)
FRIDAY = date(2024, 1, 5)
SUNDAY = date(2024, 1, 7)


def _pm_card(card_id: str) -> DailyCard:
    return DailyCard(
        id=card_id,
        slot=CardSlot.CONTEXT_ANCHOR,
        title=card_id,
        role_categories=[RoleCategory.DESK],
        target_roles=["Product Manager"],
    )


def _generic_card(card_id: str) -> DailyCard:
    return DailyCard(id=card_id, slot=CardSlot.DOMAIN_EDGE, title=card_id)


@pytest.fixture
def pm_catalog():
    """Two PM-targeted cards followed by five generic ones."""
    return ContentCatalog(
        cards=(_pm_card("pm-1"), _pm_card("pm-2"))
        + tuple(_generic_card(f"generic-{i}") for i in range(1, 6))
    )


def _ids(cards):
    return [card.id for card in cards]


class TestWeekdayBucket:
    @pytest.mark.parametrize(
        "day,bucket",
        [
            (MONDAY, WeekdayBucket.MONDAY_PLANNING),
            (TUESDAY, WeekdayBucket.DEFAULT),
            (WEDNESDAY, WeekdayBucket.WEDNESDAY_SIMULATOR),
            (THURSDAY, WeekdayBucket.DEFAULT),
            (FRIDAY, WeekdayBucket.FRIDAY_REFLECTION),
            (SUNDAY, WeekdayBucket.DEFAULT),
        ],
    )
    def test_bucket(self, day, bucket):
        assert get_weekday_bucket(day) == bucket

    def test_every_bucket_has_an_override_row(self):
        assert set(WEEKDAY_OVERRIDES) == set(WeekdayBucket)


class TestBaseSelection:
    """Targeting and generic backfill."""

    def test_product_manager_on_tuesday(self, pm_user, pm_catalog):
        assert _ids(select_daily_cards(pm_user, TUESDAY, pm_catalog)) == ["pm-1", "pm-2", "generic-1"]

    def test_product_manager_default_catalog(self, pm_user):
        assert _ids(select_daily_cards(pm_user, TUESDAY)) == ["pm-1", "pm-2", "generic-1"]

    def test_engineer_gets_engineering_cards(self, catalog):
        user = UserProfile(
            id="u-eng", name="Sam", job_title="Senior Software Engineer", role_category=RoleCategory.DESK
        )
        assert _ids(select_daily_cards(user, THURSDAY, catalog)) == ["eng-1", "eng-2", "generic-1"]

    def test_frontline_skips_desk_cards(self, catalog):
        user = UserProfile(id="u-ops", name="Pat", role_category=RoleCategory.FRONTLINE)
        assert _ids(select_daily_cards(user, THURSDAY, catalog)) == ["ops-1", "generic-1", "generic-2"]

    def test_backfill_uses_generic_cards(self):
        ops = DailyCard(id="ops-1", slot=CardSlot.CONTEXT_ANCHOR, title="ops", role_categories=[RoleCategory.FRONTLINE])
        desk_generic = DailyCard(id="desk-1", slot=CardSlot.MICRO_SKILL, title="desk", role_categories=[RoleCategory.DESK])
        catalog = ContentCatalog(cards=(ops, desk_generic))
        user = UserProfile(id="u-ops", role_category=RoleCategory.FRONTLINE)

        assert _ids(base_selection(user, catalog)) == ["ops-1", "desk-1"]

    def test_backfill_never_duplicates(self, pm_user, pm_catalog):
        cards = base_selection(pm_user, pm_catalog)
        assert len(set(_ids(cards))) == len(cards)

    def test_small_catalog_returns_what_matches(self, pm_user):
        catalog = ContentCatalog(cards=(_pm_card("pm-1"),))
        assert _ids(select_daily_cards(pm_user, TUESDAY, catalog)) == ["pm-1"]

    def test_empty_catalog(self, pm_user):
        assert select_daily_cards(pm_user, TUESDAY, ContentCatalog()) == []

    @pytest.mark.parametrize("day", [MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY])
    def test_never_more_than_three(self, pm_user, catalog, day):
        assert len(select_daily_cards(pm_user, day, catalog)) == 3


class TestDeterminism:
    def test_same_inputs_same_output(self, pm_user, catalog):
        first = select_daily_cards(pm_user, WEDNESDAY, catalog)
        second = select_daily_cards(pm_user, WEDNESDAY, catalog)

        assert first == second
        assert all(a is not b for a, b in zip(first, second))

    def test_returned_cards_are_copies(self, pm_user, catalog):
        cards = select_daily_cards(pm_user, TUESDAY, catalog)
        cards[0].flag_count = 5
        cards[0].target_roles.append("Designer")

        assert catalog.card("pm-1").flag_count == 0
        assert catalog.card("pm-1").target_roles == ["Product Manager"]


class TestWeekdayOverrides:
    """Positional slot replacement."""

    def test_monday_replaces_first_slot(self, pm_user, pm_catalog):
        cards = select_daily_cards(pm_user, MONDAY, pm_catalog)

        assert _ids(cards) == ["monday-planning-anchor", "pm-2", "generic-1"]
        assert cards[0].slot == CardSlot.CONTEXT_ANCHOR

    def test_wednesday_builds_simulator_card(self, pm_user):
        catalog = default_catalog()
        cards = select_daily_cards(pm_user, WEDNESDAY, catalog)

        assert _ids(cards)[:2] == ["pm-1", "pm-2"]
        assert cards[2].id == "simulator-card"
        assert cards[2].slot == CardSlot.SIMULATOR
        assert cards[2].title == catalog.active_simulator().title

    def test_wednesday_without_active_simulator(self, pm_user, pm_catalog):
        assert _ids(select_daily_cards(pm_user, WEDNESDAY, pm_catalog)) == ["pm-1", "pm-2", "generic-1"]

    def test_friday_replaces_third_slot(self, pm_user, pm_catalog):
        cards = select_daily_cards(pm_user, FRIDAY, pm_catalog)

        assert _ids(cards) == ["pm-1", "pm-2", "friday-reflection-skill"]
        assert cards[2].slot == CardSlot.MICRO_SKILL

    @pytest.mark.parametrize("day", [WEDNESDAY, FRIDAY])
    def test_third_slot_override_skipped_when_short(self, pm_user, day):
        catalog = ContentCatalog(cards=(_pm_card("pm-1"), _pm_card("pm-2")))
        assert _ids(select_daily_cards(pm_user, day, catalog)) == ["pm-1", "pm-2"]

    def test_monday_override_applies_to_short_feed(self, pm_user):
        catalog = ContentCatalog(cards=(_pm_card("pm-1"),))
        assert _ids(select_daily_cards(pm_user, MONDAY, catalog)) == ["monday-planning-anchor"]

    def test_override_touches_only_its_slot(self, pm_user, catalog):
        tuesday = select_daily_cards(pm_user, TUESDAY, catalog)
        friday = select_daily_cards(pm_user, FRIDAY, catalog)

        assert friday[:2] == tuesday[:2]
