"""
Tests for "why am I seeing this?" explainers.
"""

import pytest

from dex.content.catalog import FRIDAY_MICRO_SKILL
from dex.content.explainer import ExplainerContext, explain, workload_bucket
from dex.core.models import CardSlot, DailyCard, Role, WeekdayBucket


@pytest.fixture
def anchor_card():
    return DailyCard(id="pm-1", slot=CardSlot.CONTEXT_ANCHOR, title="Roadmap")


@pytest.fixture
def context():
    return ExplainerContext(role=Role.EMPLOYEE, job_title="Product Manager")


class TestWorkloadBucket:
    @pytest.mark.parametrize(
        "workload,bucket",
        [
            (50, "LOW"),
            (69.9, "LOW"),
            (70, "MEDIUM"),
            (100, "MEDIUM"),
            (101, "HIGH"),
            ("low", "LOW"),
            (" HIGH ", "HIGH"),
            ("unknown", "MEDIUM"),
        ],
    )
    def test_bucket(self, workload, bucket):
        assert workload_bucket(workload) == bucket


class TestExplain:
    def test_author_explainer_wins(self, context):
        assert explain(FRIDAY_MICRO_SKILL, context) == FRIDAY_MICRO_SKILL.explainer

    def test_author_explainer_ignores_suffixes(self, context):
        context.recent_kpi_alerts = 3
        assert explain(FRIDAY_MICRO_SKILL, context) == FRIDAY_MICRO_SKILL.explainer

    def test_default_template(self, anchor_card, context):
        assert explain(anchor_card, context) == (
            "This is the company context most relevant to your work as a Product Manager right now."
        )

    def test_weekday_and_workload_template(self, anchor_card, context):
        context.weekday_bucket = WeekdayBucket.MONDAY_PLANNING
        context.current_workload = 120

        assert explain(anchor_card, context) == (
            "Heavy week ahead. Anchor your plan on this before the meetings start."
        )

    def test_falls_back_to_weekday_medium(self, context):
        card = DailyCard(id="skill", slot=CardSlot.MICRO_SKILL, title="Skill")
        context.weekday_bucket = WeekdayBucket.FRIDAY_REFLECTION
        context.current_workload = "HIGH"

        assert explain(card, context).startswith("Friday is for reflection.")

    def test_falls_back_to_default_bucket(self, context):
        card = DailyCard(id="edge", slot=CardSlot.DOMAIN_EDGE, title="Edge")
        context.weekday_bucket = WeekdayBucket.WEDNESDAY_SIMULATOR
        context.current_workload = "LOW"

        assert explain(card, context) == (
            "A quieter day is a good time to look outward. This trend is shaping the Product Manager field."
        )

    def test_missing_title_uses_role(self, anchor_card):
        context = ExplainerContext(role=Role.MANAGER)
        assert "as a Manager" in explain(anchor_card, context)

    def test_suffixes(self, anchor_card, context):
        context.recent_kpi_alerts = 2
        context.pending_deadlines = 1
        context.recently_seen_card_ids = ["pm-1"]

        text = explain(anchor_card, context)

        assert text.endswith(
            " It relates to 2 KPI alert(s) on your team."
            " Keep your 1 pending deadline(s) in mind."
            " You saw this recently; it is back because it is still relevant."
        )

    def test_pure(self, anchor_card, context):
        assert explain(anchor_card, context) == explain(anchor_card, context)
        assert anchor_card.explainer is None
