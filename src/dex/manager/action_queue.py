"""
Manager Action Queue.

Turns a team roster snapshot into a prioritized list of interventions:

- BURNOUT    one per member over the burnout or load threshold
- SKILL_GAP  one per skill where two or more members score below 50
- VISIBILITY one fixed recognition nudge, always last

The queue is derived fresh on every read and never stored. What the manager
did about an item lives in a separate AcknowledgementSet and is merged in
at read time. The only operation that changes team data is
apply_staffing_plan().
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum

from pydantic import BaseModel, field_validator

from dex.core.models import TeamMember

logger = logging.getLogger(__name__)


# Thresholds
BURNOUT_TRIGGER = 60
BURNOUT_HIGH = 75
LOAD_TRIGGER = 105
LOAD_HIGH = 120
SKILL_GAP_SCORE = 50
SKILL_GAP_MIN_MEMBERS = 2
MAX_LOAD = 150


class ActionPriority(Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ActionType(Enum):
    BURNOUT = "BURNOUT"
    SKILL_GAP = "SKILL_GAP"
    VISIBILITY = "VISIBILITY"


PRIORITY_RANK = {
    ActionPriority.HIGH: 0,
    ActionPriority.MEDIUM: 1,
    ActionPriority.LOW: 2,
}


@dataclass(frozen=True)
class SuggestedAction:
    label: str
    action: str  # key recorded on acknowledgement


@dataclass(frozen=True)
class ActionQueueItem:
    id: str
    priority: ActionPriority
    type: ActionType
    title: str
    context: str
    confidence: int
    suggested_actions: tuple[SuggestedAction, ...] = ()
    member_id: str | None = None
    member_ids: tuple[str, ...] = ()
    acknowledged: str | None = None  # set only on merged read views


# =============================================================================
# Generation
# =============================================================================


def _burnout_item(member: TeamMember) -> ActionQueueItem | None:
    if member.burnout_score < BURNOUT_TRIGGER and member.current_load <= LOAD_TRIGGER:
        return None

    load_extreme = member.current_load > LOAD_HIGH
    high = member.burnout_score >= BURNOUT_HIGH or load_extreme

    triggers = [signal.metric for signal in member.burnout_signals]
    if member.burnout_score >= BURNOUT_TRIGGER:
        triggers.insert(0, "Burnout score")
    if member.current_load > LOAD_TRIGGER:
        triggers.insert(0, "Load")

    signals = ", ".join(triggers)
    load = f"{member.current_load:g}"
    if load_extreme:
        title = f"Critical: {member.first_name} Overloaded"
        context = (
            f"Load at {load}% on {member.project or 'Project'}. "
            f"High risk of immediate departure. Signals: {signals}."
        )
    else:
        title = f"Intervention: {member.first_name}"
        context = f"Load at {load}%. Detected drift in {signals}."

    return ActionQueueItem(
        id=f"action-burnout-{member.id}",
        priority=ActionPriority.HIGH if high else ActionPriority.MEDIUM,
        type=ActionType.BURNOUT,
        title=title,
        context=context,
        confidence=94,
        suggested_actions=(
            SuggestedAction("Relieve Load", "reduce_load"),
            SuggestedAction("Connect (1:1)", "schedule_1on1"),
        ),
        member_id=member.id,
    )


def _skill_gap_items(team: list[TeamMember]) -> list[ActionQueueItem]:
    # Skills in first-seen roster order
    skills: list[str] = []
    for member in team:
        for skill in member.skill_scores:
            if skill not in skills:
                skills.append(skill)

    items = []
    for skill in skills:
        lacking = [
            member for member in team
            if skill in member.skill_scores and member.skill_scores[skill] < SKILL_GAP_SCORE
        ]
        if len(lacking) < SKILL_GAP_MIN_MEMBERS:
            continue
        slug = skill.lower().replace(" ", "-")
        items.append(
            ActionQueueItem(
                id=f"action-skill-gap-{slug}",
                priority=ActionPriority.MEDIUM,
                type=ActionType.SKILL_GAP,
                title=f"{len(lacking)} team members need {skill} training",
                context=f"{', '.join(m.first_name for m in lacking)} scored below {SKILL_GAP_SCORE}%",
                confidence=88,
                suggested_actions=(
                    SuggestedAction("Schedule Workshop", "workshop"),
                    SuggestedAction("Assign Peer Mentor", "mentor"),
                ),
                member_ids=tuple(m.id for m in lacking),
            )
        )
    return items


VISIBILITY_NUDGE = ActionQueueItem(
    id="nudge-recognition",
    priority=ActionPriority.LOW,
    type=ActionType.VISIBILITY,
    title="Nudge: Team Visibility",
    context="Recognition frequency is 15% lower than peers this month.",
    confidence=88,
    suggested_actions=(SuggestedAction("Send Batch Kudos", "kudos"),),
)


def generate_action_queue(team: list[TeamMember]) -> list[ActionQueueItem]:
    """
    Build the prioritized intervention list for a roster.

    Generation order is members, then skill gaps, then the visibility nudge;
    the sort is stable so that order holds within a priority.
    """
    actions: list[ActionQueueItem] = []
    for member in team:
        item = _burnout_item(member)
        if item:
            actions.append(item)
    actions.extend(_skill_gap_items(team))
    actions.append(VISIBILITY_NUDGE)

    return sorted(actions, key=lambda a: PRIORITY_RANK[a.priority])


# =============================================================================
# Acknowledgements
# =============================================================================


@dataclass
class AcknowledgementSet:
    """What the manager chose for each action id. Host-owned, never on team data."""

    actions: dict[str, str] = field(default_factory=dict)

    def acknowledge(self, action_id: str, action: str) -> None:
        logger.info("Action taken: %s for %s", action, action_id)
        self.actions[action_id] = action

    def get(self, action_id: str) -> str | None:
        return self.actions.get(action_id)

    def __contains__(self, action_id: str) -> bool:
        return action_id in self.actions


def merge_acknowledgements(
    queue: list[ActionQueueItem],
    acknowledgements: AcknowledgementSet,
) -> list[ActionQueueItem]:
    """Read view of the queue with acknowledgements filled in."""
    return [
        replace(item, acknowledged=acknowledgements.get(item.id)) if item.id in acknowledgements else item
        for item in queue
    ]


# =============================================================================
# Staffing plan
# =============================================================================


class StaffingAssignment(BaseModel):
    """One row of a resource-simulator plan."""
    member_id: str
    project: str = "Unassigned"
    load: float = 100.0

    @field_validator("load")
    @classmethod
    def clamp_load(cls, v: float) -> float:
        """Slider range is 0-150%."""
        return max(0.0, min(float(MAX_LOAD), v))


def recompute_burnout(burnout_score: float, load: float) -> float:
    """Burnout after taking on `load`% of capacity."""
    return min(100.0, burnout_score + max(0.0, load - 100) / 2)


def apply_staffing_plan(
    team: list[TeamMember],
    assignments: list[StaffingAssignment],
) -> list[TeamMember]:
    """
    Apply a staffing plan, returning the updated roster.

    Members without an assignment come back unchanged. Burnout only rises,
    and only for loads over 100%.
    """
    by_member = {a.member_id: a for a in assignments}
    updated = []
    for member in team:
        assignment = by_member.get(member.id)
        if assignment is None:
            updated.append(member)
            continue
        burnout = recompute_burnout(member.burnout_score, assignment.load)
        if burnout != member.burnout_score:
            logger.info(
                "Burnout for %s: %g -> %g at %g%% load",
                member.id, member.burnout_score, burnout, assignment.load,
            )
        updated.append(
            replace(
                member,
                project=assignment.project,
                current_load=assignment.load,
                burnout_score=burnout,
                skill_scores=dict(member.skill_scores),
                burnout_signals=list(member.burnout_signals),
            )
        )
    return updated


def team_capacity(team: list[TeamMember]) -> int:
    """Average load across the roster, rounded."""
    if not team:
        return 0
    return round(sum(member.current_load for member in team) / len(team))
