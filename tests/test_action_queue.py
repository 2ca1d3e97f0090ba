"""
Tests for the manager action queue.
"""

import pytest

from dex.core.models import BurnoutSignal, TeamMember
from dex.manager.action_queue import (
    PRIORITY_RANK,
    AcknowledgementSet,
    ActionPriority,
    ActionType,
    StaffingAssignment,
    apply_staffing_plan,
    generate_action_queue,
    merge_acknowledgements,
    team_capacity,
)


def _member(member_id: str, burnout: float = 20, load: float = 50, **kwargs) -> TeamMember:
    return TeamMember(id=member_id, name=f"{member_id} Person", burnout_score=burnout, current_load=load, **kwargs)


def _burnout_items(queue):
    return [item for item in queue if item.type == ActionType.BURNOUT]


class TestBurnoutItems:
    def test_critical_member(self):
        queue = generate_action_queue([_member("m1", burnout=80, load=130)])
        items = _burnout_items(queue)

        assert len(items) == 1
        assert items[0].priority == ActionPriority.HIGH
        assert items[0].member_id == "m1"
        assert items[0].title == "Critical: m1 Overloaded"

    @pytest.mark.parametrize(
        "burnout,load,priority",
        [
            (60, 50, ActionPriority.MEDIUM),
            (74, 120, ActionPriority.MEDIUM),
            (10, 106, ActionPriority.MEDIUM),
            (75, 50, ActionPriority.HIGH),
            (10, 121, ActionPriority.HIGH),
        ],
    )
    def test_priority_thresholds(self, burnout, load, priority):
        items = _burnout_items(generate_action_queue([_member("m1", burnout=burnout, load=load)]))
        assert [item.priority for item in items] == [priority]

    def test_below_thresholds_no_item(self):
        assert _burnout_items(generate_action_queue([_member("m1", burnout=59, load=105)])) == []

    def test_context_names_signals(self):
        member = _member(
            "m1", burnout=65, load=90,
            burnout_signals=[BurnoutSignal(metric="After-hours commits", value=14, baseline=3)],
        )
        item = _burnout_items(generate_action_queue([member]))[0]

        assert "Burnout score" in item.context
        assert "After-hours commits" in item.context


class TestSkillGaps:
    def test_one_item_per_skill(self):
        team = [
            _member("a", skill_scores={"SQL": 40, "Python": 45}),
            _member("b", skill_scores={"SQL": 30, "Python": 90}),
            _member("c", skill_scores={"SQL": 20, "Python": 49}),
        ]
        gaps = [item for item in generate_action_queue(team) if item.type == ActionType.SKILL_GAP]

        assert [gap.id for gap in gaps] == ["action-skill-gap-sql", "action-skill-gap-python"]
        assert gaps[0].member_ids == ("a", "b", "c")
        assert gaps[1].member_ids == ("a", "c")
        assert all(gap.priority == ActionPriority.MEDIUM for gap in gaps)

    def test_single_low_score_is_not_a_gap(self):
        team = [_member("a", skill_scores={"SQL": 40}), _member("b", skill_scores={"SQL": 50})]
        assert not [item for item in generate_action_queue(team) if item.type == ActionType.SKILL_GAP]


class TestQueueOrder:
    def test_sample_team(self, team):
        queue = generate_action_queue(team)

        assert [(item.type, item.priority) for item in queue] == [
            (ActionType.BURNOUT, ActionPriority.HIGH),
            (ActionType.BURNOUT, ActionPriority.MEDIUM),
            (ActionType.SKILL_GAP, ActionPriority.MEDIUM),
            (ActionType.VISIBILITY, ActionPriority.LOW),
        ]
        assert queue[0].member_id == "tm-4"
        assert queue[1].member_id == "tm-2"
        assert "Jamie" in queue[2].context and "Casey" in queue[2].context

    def test_empty_team_still_has_visibility_nudge(self):
        queue = generate_action_queue([])
        assert [item.type for item in queue] == [ActionType.VISIBILITY]

    def test_low_never_before_higher(self, team):
        ranks = [PRIORITY_RANK[item.priority] for item in generate_action_queue(team)]
        assert ranks == sorted(ranks)

    def test_stable_within_priority(self):
        team = [_member("first", burnout=90), _member("second", burnout=90)]
        queue = generate_action_queue(team)
        assert [item.member_id for item in _burnout_items(queue)] == ["first", "second"]

    def test_recomputed_each_read(self, team):
        assert generate_action_queue(team) == generate_action_queue(team)


class TestAcknowledgements:
    def test_merge_fills_acknowledged(self, team):
        queue = generate_action_queue(team)
        acks = AcknowledgementSet()
        acks.acknowledge("action-burnout-tm-4", "reduce_load")

        merged = merge_acknowledgements(queue, acks)

        assert merged[0].acknowledged == "reduce_load"
        assert merged[1].acknowledged is None
        assert queue[0].acknowledged is None

    def test_fresh_queue_unaffected(self, team):
        acks = AcknowledgementSet()
        acks.acknowledge("nudge-recognition", "kudos")
        merge_acknowledgements(generate_action_queue(team), acks)

        assert all(item.acknowledged is None for item in generate_action_queue(team))


class TestStaffingPlan:
    def test_overload_raises_burnout(self, team):
        updated = apply_staffing_plan(team, [StaffingAssignment(member_id="tm-4", project="Billing", load=140)])
        casey = next(m for m in updated if m.id == "tm-4")

        assert casey.burnout_score == 98
        assert casey.current_load == 140
        assert casey.project == "Billing"

    def test_burnout_capped(self, team):
        updated = apply_staffing_plan(team, [StaffingAssignment(member_id="tm-4", load=150)])
        assert next(m for m in updated if m.id == "tm-4").burnout_score == 100

    def test_load_clamped(self):
        assert StaffingAssignment(member_id="x", load=200).load == 150
        assert StaffingAssignment(member_id="x", load=-10).load == 0

    def test_normal_load_keeps_burnout(self, team):
        updated = apply_staffing_plan(team, [StaffingAssignment(member_id="tm-2", load=80)])
        jamie = next(m for m in updated if m.id == "tm-2")

        assert jamie.burnout_score == 68
        assert jamie.current_load == 80

    def test_original_roster_untouched(self, team):
        apply_staffing_plan(team, [StaffingAssignment(member_id="tm-4", load=150)])
        assert team[3].burnout_score == 78
        assert team[3].current_load == 125

    def test_plan_changes_queue(self, team):
        updated = apply_staffing_plan(team, [StaffingAssignment(member_id="tm-1", load=130)])
        queue = generate_action_queue(updated)

        assert "action-burnout-tm-1" in [item.id for item in queue]

    def test_team_capacity(self, team):
        assert team_capacity(team) == 89
        assert team_capacity([]) == 0
