"""
"Why am I seeing this?" explainers for Daily 3 cards.

An explainer written by the card's author always wins. Otherwise one is
assembled from a template keyed by (slot, weekday bucket, workload bucket)
with the reader's role and title substituted in, plus short suffixes for
KPI alerts, pending deadlines and repeat cards.
"""

from dataclasses import dataclass, field
from typing import Literal

from dex.core.models import CardSlot, DailyCard, Role, WeekdayBucket

Workload = Literal["LOW", "MEDIUM", "HIGH"]

_S = CardSlot
_W = WeekdayBucket

# (slot, weekday, workload) -> template. Tokens: {role}, {job_title}
EXPLAINER_TEMPLATES: dict[tuple[CardSlot, WeekdayBucket, str], str] = {
    # Context anchors
    (_S.CONTEXT_ANCHOR, _W.DEFAULT, "LOW"): (
        "You have some breathing room today, so this is a good moment to catch up on "
        "context every {job_title} should have."
    ),
    (_S.CONTEXT_ANCHOR, _W.DEFAULT, "MEDIUM"): (
        "This is the company context most relevant to your work as a {job_title} right now."
    ),
    (_S.CONTEXT_ANCHOR, _W.DEFAULT, "HIGH"): (
        "Your plate is full, so we picked the one update a {job_title} can't afford to miss."
    ),
    (_S.CONTEXT_ANCHOR, _W.MONDAY_PLANNING, "MEDIUM"): (
        "Monday is for planning. This sets the context for your week as a {job_title}."
    ),
    (_S.CONTEXT_ANCHOR, _W.MONDAY_PLANNING, "HIGH"): (
        "Heavy week ahead. Anchor your plan on this before the meetings start."
    ),
    # Domain edge
    (_S.DOMAIN_EDGE, _W.DEFAULT, "LOW"): (
        "A quieter day is a good time to look outward. This trend is shaping the {job_title} field."
    ),
    (_S.DOMAIN_EDGE, _W.DEFAULT, "MEDIUM"): (
        "Staying current matters for a {job_title}. This is what changed in your domain."
    ),
    (_S.DOMAIN_EDGE, _W.DEFAULT, "HIGH"): (
        "Kept short on purpose: one shift in your domain worth two minutes of your time."
    ),
    # Micro-skills
    (_S.MICRO_SKILL, _W.DEFAULT, "LOW"): (
        "A small skill that {job_title}s in your role category build on. You have time to practice it today."
    ),
    (_S.MICRO_SKILL, _W.DEFAULT, "MEDIUM"): (
        "A five-minute skill picked for the work a {job_title} does every week."
    ),
    (_S.MICRO_SKILL, _W.DEFAULT, "HIGH"): (
        "A quick win: this skill saves time under exactly the kind of load you are carrying."
    ),
    (_S.MICRO_SKILL, _W.FRIDAY_REFLECTION, "MEDIUM"): (
        "Friday is for reflection. Looking back on the week is how a {job_title} compounds growth."
    ),
    # Simulator
    (_S.SIMULATOR, _W.DEFAULT, "MEDIUM"): (
        "Practice in a safe space: this scenario mirrors decisions a {job_title} makes on the job."
    ),
    (_S.SIMULATOR, _W.WEDNESDAY_SIMULATOR, "MEDIUM"): (
        "Wednesday is Simulator Day. This challenge builds the applied judgment a {job_title} needs."
    ),
}

KPI_ALERT_SUFFIX = " It relates to {count} KPI alert(s) on your team."
DEADLINE_SUFFIX = " Keep your {count} pending deadline(s) in mind."
REPEAT_SUFFIX = " You saw this recently; it is back because it is still relevant."


@dataclass
class ExplainerContext:
    role: Role = Role.EMPLOYEE
    job_title: str = ""
    weekday_bucket: WeekdayBucket = WeekdayBucket.DEFAULT
    recently_seen_card_ids: list[str] = field(default_factory=list)
    current_workload: str | float = "MEDIUM"  # bucket name or load percent
    recent_kpi_alerts: int = 0
    pending_deadlines: int = 0


def workload_bucket(current_workload: str | float | int) -> Workload:
    """Normalize a workload label or load percentage to LOW/MEDIUM/HIGH."""
    if isinstance(current_workload, str):
        label = current_workload.strip().upper()
        if label in ("LOW", "MEDIUM", "HIGH"):
            return label  # type: ignore[return-value]
        return "MEDIUM"
    if current_workload < 70:
        return "LOW"
    if current_workload <= 100:
        return "MEDIUM"
    return "HIGH"


def _template_for(slot: CardSlot, bucket: WeekdayBucket, workload: str) -> str:
    for key in (
        (slot, bucket, workload),
        (slot, bucket, "MEDIUM"),
        (slot, WeekdayBucket.DEFAULT, workload),
        (slot, WeekdayBucket.DEFAULT, "MEDIUM"),
    ):
        if key in EXPLAINER_TEMPLATES:
            return EXPLAINER_TEMPLATES[key]
    return "Selected for your role as a {job_title}."


def explain(card: DailyCard, context: ExplainerContext) -> str:
    """Explain why this card is in the user's feed."""
    if card.explainer:
        return card.explainer

    workload = workload_bucket(context.current_workload)
    template = _template_for(card.slot, context.weekday_bucket, workload)

    job_title = context.job_title or ("Manager" if context.role == Role.MANAGER else "Employee")
    text = template.format(role=context.role.value.lower(), job_title=job_title)

    if context.recent_kpi_alerts > 0:
        text += KPI_ALERT_SUFFIX.format(count=context.recent_kpi_alerts)
    if context.pending_deadlines > 0:
        text += DEADLINE_SUFFIX.format(count=context.pending_deadlines)
    if card.id in context.recently_seen_card_ids:
        text += REPEAT_SUFFIX
    return text
