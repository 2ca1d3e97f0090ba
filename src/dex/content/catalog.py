"""
Static Content Catalog.

Read-only source of Daily 3 card templates, preboarding checklist templates
and simulator scenarios. Catalog order is priority order: selection takes
cards front to back and never re-ranks them.

default_catalog() and sample_team() are the demo datasets the CLI runs on.
"""

from dataclasses import dataclass, field

from dex.core.models import (
    BurnoutSignal,
    CardSlot,
    DailyCard,
    PreboardingCategory,
    PreboardingItem,
    PreboardingStatus,
    RoleCategory,
    SimulatorDefinition,
    TeamMember,
)


@dataclass(frozen=True)
class ContentCatalog:
    """Immutable bundle of content templates."""

    cards: tuple[DailyCard, ...] = ()
    preboarding_items: tuple[PreboardingItem, ...] = ()
    simulators: tuple[SimulatorDefinition, ...] = ()

    def card(self, card_id: str) -> DailyCard | None:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def active_simulator(self) -> SimulatorDefinition | None:
        """The scenario Wednesday's simulator card is built from."""
        for simulator in self.simulators:
            if simulator.active:
                return simulator
        return None

    def __len__(self) -> int:
        return len(self.cards)


# =============================================================================
# Fixed weekday cards
# =============================================================================

MONDAY_CONTEXT_ANCHOR = DailyCard(
    id="monday-planning-anchor",
    slot=CardSlot.CONTEXT_ANCHOR,
    title="Weekly Priorities: Set Your Top 3",
    description="Review this week's team OKRs and pick the three outcomes you will own by Friday.",
    source="Living OS",
    source_type="SYSTEM",
    priority="HIGH",
    action_label="Plan My Week",
    explainer="Monday is planning day. Starting the week with clear priorities keeps the rest of it focused.",
)

FRIDAY_MICRO_SKILL = DailyCard(
    id="friday-reflection-skill",
    slot=CardSlot.MICRO_SKILL,
    title="Reflection: What Did You Learn This Week?",
    description="Spend five minutes writing down one win, one blocker and one thing you would do differently.",
    source="Living OS",
    source_type="SYSTEM",
    priority="LOW",
    action_label="Start Reflection",
    explainer="Friday is reflection day. A short weekly retro compounds into faster growth.",
)

SIMULATOR_CARD_ID = "simulator-card"
SIMULATOR_EXPLAINER = "Wednesday is Simulator Day! This challenge helps build applied judgment."


# =============================================================================
# Demo datasets
# =============================================================================

_DESK = [RoleCategory.DESK]
_FRONTLINE = [RoleCategory.FRONTLINE]


def _default_cards() -> tuple[DailyCard, ...]:
    return (
        DailyCard(
            id="pm-1",
            slot=CardSlot.CONTEXT_ANCHOR,
            title="Q3 Roadmap Shift: Mobile First",
            description="Leadership moved two mobile epics ahead of the web redesign. Check which of your specs move.",
            source="Product Council",
            source_type="INTERNAL",
            priority="HIGH",
            action_label="Review Roadmap",
            role_categories=_DESK,
            target_roles=["Product Manager"],
        ),
        DailyCard(
            id="pm-2",
            slot=CardSlot.DOMAIN_EDGE,
            title="Competitor Launch: Usage-Based Pricing",
            description="A direct competitor switched to usage-based pricing. Three customer accounts asked about it.",
            source="Market Intel",
            source_type="EXTERNAL",
            priority="MEDIUM",
            action_label="Read Analysis",
            role_categories=_DESK,
            target_roles=["Product Manager"],
        ),
        DailyCard(
            id="eng-1",
            slot=CardSlot.CONTEXT_ANCHOR,
            title="Incident Review: API Latency Spike",
            description="Tuesday's p99 spike traced to an N+1 query in the orders service. Postmortem is up.",
            source="SRE",
            source_type="INTERNAL",
            priority="HIGH",
            action_label="Read Postmortem",
            role_categories=_DESK,
            target_roles=["Software Engineer", "Senior Software Engineer"],
        ),
        DailyCard(
            id="eng-2",
            slot=CardSlot.MICRO_SKILL,
            title="Micro-Skill: Reading Flame Graphs",
            description="A ten-minute walkthrough of finding the hot path in a CPU profile.",
            source="Engineering Academy",
            source_type="INTERNAL",
            priority="MEDIUM",
            action_label="Start Lesson",
            role_categories=_DESK,
            target_roles=["Software Engineer", "Senior Software Engineer"],
        ),
        DailyCard(
            id="ops-1",
            slot=CardSlot.CONTEXT_ANCHOR,
            title="Zone 4 Safety Briefing",
            description="New forklift traffic pattern in Zone 4 starts this shift.",
            source="Site Safety",
            source_type="INTERNAL",
            priority="HIGH",
            action_label="Acknowledge",
            role_categories=_FRONTLINE,
        ),
        DailyCard(
            id="generic-1",
            slot=CardSlot.CONTEXT_ANCHOR,
            title="Company All-Hands Recap",
            description="Five takeaways from this month's all-hands, including the new hybrid work policy.",
            source="Internal Comms",
            source_type="INTERNAL",
            priority="MEDIUM",
            action_label="Read Recap",
        ),
        DailyCard(
            id="generic-2",
            slot=CardSlot.DOMAIN_EDGE,
            title="AI at Work: What Changed This Quarter",
            description="How three teams cut review time with AI-assisted drafting, and where it went wrong.",
            source="Innovation Lab",
            source_type="EXTERNAL",
            priority="MEDIUM",
            action_label="Explore",
        ),
        DailyCard(
            id="generic-3",
            slot=CardSlot.MICRO_SKILL,
            title="Micro-Skill: Writing a Crisp Status Update",
            description="Lead with the decision you need, then the risk, then the detail.",
            source="Learning Hub",
            source_type="INTERNAL",
            priority="LOW",
            action_label="Practice",
        ),
        DailyCard(
            id="generic-4",
            slot=CardSlot.MICRO_SKILL,
            title="Micro-Skill: Running a 15-Minute 1:1",
            description="A simple three-question agenda that keeps 1:1s useful when time is short.",
            source="Learning Hub",
            source_type="INTERNAL",
            priority="LOW",
            action_label="Practice",
            role_categories=_DESK,
        ),
        DailyCard(
            id="generic-5",
            slot=CardSlot.DOMAIN_EDGE,
            title="Customer Voice: Top Support Themes",
            description="The three themes that drove most support tickets last week.",
            source="Customer Success",
            source_type="INTERNAL",
            priority="MEDIUM",
            action_label="See Themes",
        ),
    )


def _default_preboarding_items() -> tuple[PreboardingItem, ...]:
    return (
        PreboardingItem(
            id="pre-sso",
            title="SSO & Okta Provisioning",
            category=PreboardingCategory.IDENTITY,
            owner="IT Identity",
            status=PreboardingStatus.READY,
        ),
        PreboardingItem(
            id="pre-badge",
            title="Building Badge",
            category=PreboardingCategory.FACILITY,
            owner="Facilities",
            status=PreboardingStatus.IN_PROGRESS,
            eta="1 day",
        ),
        PreboardingItem(
            id="pre-laptop",
            title="Laptop Shipment",
            category=PreboardingCategory.DEVICE,
            owner="IT Hardware",
            status=PreboardingStatus.BLOCKED,
            eta="Unknown",
            role_categories=[RoleCategory.DESK, RoleCategory.REMOTE, RoleCategory.LEADERSHIP],
        ),
        PreboardingItem(
            id="pre-scanner",
            title="Handheld Scanner Assignment",
            category=PreboardingCategory.DEVICE,
            owner="Site Operations",
            status=PreboardingStatus.PENDING,
            role_categories=[RoleCategory.FRONTLINE],
        ),
        PreboardingItem(
            id="pre-payroll",
            title="Payroll & Benefits Enrollment",
            category=PreboardingCategory.FINANCE,
            owner="HR Ops",
            status=PreboardingStatus.PENDING,
            eta="3 days",
        ),
        PreboardingItem(
            id="pre-buddy",
            title="Onboarding Buddy Assigned",
            category=PreboardingCategory.TEAM,
            owner="Hiring Manager",
            status=PreboardingStatus.READY,
        ),
    )


def _default_simulators() -> tuple[SimulatorDefinition, ...]:
    return (
        SimulatorDefinition(
            id="sim-deadline-tradeoff",
            title="Deadline vs. Quality Trade-off",
            description="A launch is two hours away and you found a non-blocking bug. Make the call and defend it.",
            difficulty="MEDIUM",
            active=True,
        ),
        SimulatorDefinition(
            id="sim-escalation",
            title="Customer Escalation Role-Play",
            description="An enterprise customer threatens to churn over a missed SLA.",
            difficulty="HARD",
        ),
    )


def default_catalog() -> ContentCatalog:
    """The demo catalog."""
    return ContentCatalog(
        cards=_default_cards(),
        preboarding_items=_default_preboarding_items(),
        simulators=_default_simulators(),
    )


def sample_team() -> list[TeamMember]:
    """Demo roster for the manager action queue."""
    return [
        TeamMember(
            id="tm-1",
            name="Alex Thompson",
            title="Senior QA",
            project="API Migration",
            burnout_score=45,
            current_load=75,
            skill_scores={"Test Automation": 85, "Python": 70, "Communication": 80},
        ),
        TeamMember(
            id="tm-2",
            name="Jamie Rodriguez",
            title="QA Engineer",
            project="Customer Portal",
            burnout_score=68,
            current_load=95,
            skill_scores={"Test Automation": 45, "Python": 80, "Communication": 75},
            burnout_signals=[
                BurnoutSignal(metric="After-hours commits", value=14, baseline=3),
                BurnoutSignal(metric="PTO skipped", value=2, baseline=0),
            ],
        ),
        TeamMember(
            id="tm-3",
            name="Sam Chen",
            title="QA Lead",
            project="Team Training",
            burnout_score=30,
            current_load=60,
            skill_scores={"Test Automation": 90, "Python": 85, "Communication": 90},
        ),
        TeamMember(
            id="tm-4",
            name="Casey Miller",
            title="Junior QA",
            project="Sprint Tasks",
            burnout_score=78,
            current_load=125,
            skill_scores={"Test Automation": 40, "Python": 50, "Communication": 70},
            burnout_signals=[
                BurnoutSignal(metric="Meeting load", value=28, baseline=15),
                BurnoutSignal(metric="Response latency", value=6.5, baseline=2),
            ],
        ),
    ]
