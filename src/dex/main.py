"""
DEX - CLI Entry Point.

Usage:
    dex start --name "Alex Rivera" --title "Product Manager"   Begin the journey
    dex journey                 Show day-by-day progress
    dex complete-day 1          Complete the active day
    dex graduate -s 4 -c 5      Run the Day 5 sign-off, feedback and graduation
    dex daily                   Today's Daily 3
    dex flag generic-1 INCORRECT OUTDATED INCORRECT
    dex queue                   Manager action queue for the sample team
    dex readiness               Day 1 readiness for a new hire
    dex --help                  Show help
"""

import asyncio
import logging
from datetime import date, datetime

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table

app = typer.Typer(
    name="dex",
    help="DEX - onboarding journey and daily engagement.",
    add_completion=False,
)
console = Console()

DEFAULT_USER = "dex_user"

_STATUS_STYLE = {
    "completed": "green",
    "active": "bold cyan",
    "available": "white",
    "locked": "dim",
}

_PRIORITY_STYLE = {
    "HIGH": "bold red",
    "MEDIUM": "yellow",
    "LOW": "dim",
}


@app.callback()
def main(ctx: typer.Context) -> None:
    """Configure logging and the session journal."""
    from dex.config import settings
    from dex.observability import close_session_logger, init_session_logger

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.dex_log_sessions:
        init_session_logger()
        ctx.call_on_close(close_session_logger)


def _progress_store(user: str):
    from dex.config import settings
    from dex.core.notifications import RecordingNotificationSink
    from dex.core.store import JsonFileProfileStore, UserProgressStore

    return UserProgressStore(
        JsonFileProfileStore(settings.profile_store_dir),
        user,
        sink=RecordingNotificationSink(),
    )


def _print_notices(progress) -> None:
    for message, severity in progress.sink.notices:
        console.print(f"[dim]({severity.value})[/dim] {message}")


@app.command()
def start(
    name: str = typer.Option(..., "--name", "-n", help="Full name"),
    title: str = typer.Option("", "--title", "-t", help="Job title"),
    role: str = typer.Option("EMPLOYEE", "--role", help="EMPLOYEE or MANAGER"),
    category: str = typer.Option("DESK", "--category", help="DESK, FRONTLINE, REMOTE or LEADERSHIP"),
    manager: str = typer.Option("", "--manager", help="Reporting manager"),
    preboarding: bool = typer.Option(False, "--preboarding", help="Start at Day 0 (managers only)"),
    user: str = typer.Option(DEFAULT_USER, "--user", "-u"),
) -> None:
    """Create a profile and begin the onboarding journey."""
    from dex.core.models import Role, RoleCategory

    try:
        role_value = Role(role.upper())
        category_value = RoleCategory(category.upper())
    except ValueError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    progress = _progress_store(user)
    outcome = progress.attempt("begin_journey", lambda: progress.begin_journey(
        preboarding,
        name=name,
        job_title=title,
        role=role_value,
        role_category=category_value,
        manager=manager,
    ))
    if not outcome.ok:
        console.print(f"[yellow]⚠️  {outcome.blocked_reason}[/yellow]")
        raise typer.Exit(1)

    console.print(f"✅ Welcome, {progress.profile.first_name}! Starting at Day {progress.profile.onboarding_day}.")


@app.command()
def journey(user: str = typer.Option(DEFAULT_USER, "--user", "-u")) -> None:
    """Show the journey with each day's status."""
    from onboarding.state import completed_days, journey_days

    profile = _progress_store(user).profile

    table = Table(title=f"Onboarding Journey - {profile.name or profile.id}")
    table.add_column("Day", justify="right")
    table.add_column("Title")
    table.add_column("Description")
    table.add_column("Status")
    for item in journey_days(profile):
        style = _STATUS_STYLE[item.status.value]
        table.add_row(str(item.day), item.title, item.description, f"[{style}]{item.status.value}[/{style}]")
    console.print(table)

    if profile.onboarding_complete:
        console.print("[green]🎓 Graduated[/green]")
    else:
        console.print(f"[dim]{completed_days(profile)}/5 days complete[/dim]")


@app.command("complete-day")
def complete_day_command(
    day: int = typer.Argument(..., help="Day to complete"),
    user: str = typer.Option(DEFAULT_USER, "--user", "-u"),
) -> None:
    """Complete the active onboarding day."""
    progress = _progress_store(user)
    outcome = progress.attempt("complete_day", lambda: progress.complete_day(day))
    if not outcome.ok:
        console.print(f"[yellow]🔒 {outcome.blocked_reason}[/yellow]")
        raise typer.Exit(1)

    _print_notices(progress)
    console.print(f"Active day is now {outcome.value.onboarding_day}")


@app.command()
def graduate(
    satisfaction: int = typer.Option(..., "--satisfaction", "-s", help="Overall satisfaction, 1-5"),
    confidence: int = typer.Option(..., "--confidence", "-c", help="Confidence level, 1-5"),
    friction: list[str] = typer.Option([], "--friction", help="Friction point (repeatable)"),
    highlight: list[str] = typer.Option([], "--highlight", help="Highlight (repeatable)"),
    user: str = typer.Option(DEFAULT_USER, "--user", "-u"),
) -> None:
    """Walk through Day 5: sign-off, feedback and graduation."""
    from pydantic import ValidationError

    from onboarding.forms import FeedbackForm
    from onboarding.graduation import GraduationPhase

    try:
        form = FeedbackForm(
            overall_satisfaction=satisfaction,
            confidence_level=confidence,
            friction_points=friction,
            highlights=highlight,
        )
    except ValidationError as e:
        console.print(f"[red]❌ Invalid feedback:[/red] {e}")
        raise typer.Exit(1)

    progress = _progress_store(user)
    if progress.profile.onboarding_day != 5:
        console.print(f"[yellow]🔒 Completion Day unlocks at Day 5 (currently Day {progress.profile.onboarding_day})[/yellow]")
        raise typer.Exit(1)

    flow = progress.graduation
    steps = [
        ("signoff", lambda: flow.advance_to(GraduationPhase.SIGNOFF)),
        ("request_signoff", lambda: flow.request_signoff(progress.sink)),
        ("approve_signoff", lambda: flow.approve_signoff()),
        ("feedback", lambda: flow.advance_to(GraduationPhase.FEEDBACK)),
        ("submit_feedback", lambda: flow.submit_feedback(form)),
        ("graduate", lambda: progress.graduate(flow)),
    ]
    for action, step in steps:
        outcome = progress.attempt(action, step)
        if not outcome.ok:
            console.print(f"[yellow]🔒 {action}: {outcome.blocked_reason}[/yellow]")
            raise typer.Exit(1)

    _print_notices(progress)
    for item in flow.completion_checklist():
        console.print(f"  {'✅' if item.done else '⬜'} {item.title}")
    if flow.feedback and flow.feedback.requires_follow_up:
        console.print("[yellow]Your manager will follow up on your feedback.[/yellow]")


@app.command()
def daily(
    on: str = typer.Option(None, "--date", "-d", help="ISO date (default: today)"),
    user: str = typer.Option(DEFAULT_USER, "--user", "-u"),
) -> None:
    """Show the Daily 3 briefing."""
    from dex.content.explainer import ExplainerContext, explain
    from dex.content.generation import BriefingService

    day = date.fromisoformat(on) if on else date.today()
    profile = _progress_store(user).profile
    service = BriefingService()

    with Live(Spinner("dots", text="Curating your briefing..."), console=console, transient=True):
        briefing = asyncio.run(service.load(profile, day))

    title, subtitle = briefing.header
    console.print(
        Panel.fit(
            f"[bold]{briefing.greeting_title}[/bold]\n{briefing.greeting_subtitle}",
            title=f"{title} - {subtitle}",
            border_style="green" if briefing.generated else "blue",
        )
    )

    context = ExplainerContext(
        role=profile.role,
        job_title=profile.job_title,
        weekday_bucket=briefing.weekday_bucket,
    )
    for index, card in enumerate(briefing.cards, 1):
        console.print(f"\n[bold]{index}. {card.title}[/bold] [dim]({card.slot.value}, {card.id})[/dim]")
        if card.description:
            console.print(f"   {card.description}")
        console.print(f"   [italic dim]Why: {explain(card, context)}[/italic dim]")

    if briefing.fallback_reason:
        console.print(f"\n[dim]Rule-based feed ({briefing.fallback_reason})[/dim]")


@app.command()
def flag(
    card_id: str = typer.Argument(..., help="Card to flag"),
    reasons: list[str] = typer.Argument(..., help="INCORRECT, OUTDATED or INAPPROPRIATE, one per flag"),
) -> None:
    """Flag a catalog card one or more times and show its moderation state."""
    from dex.content.catalog import default_catalog
    from dex.content.moderation import ModerationEngine
    from dex.core.errors import ModerationError
    from dex.core.notifications import RecordingNotificationSink

    catalog = default_catalog()
    sink = RecordingNotificationSink()
    engine = ModerationEngine(sink=sink)
    engine.track(list(catalog.cards))

    state = engine.state(card_id)
    for reason in reasons:
        try:
            state = engine.submit_flag(card_id, reason.upper())
        except ModerationError as e:
            console.print(f"[red]❌ {e}[/red]")
            raise typer.Exit(1)
        console.print(f"🚩 {reason.upper()} - {state.flag_count} flag(s)")

    for message in sink.messages:
        console.print(f"[yellow]⚠️  {message}[/yellow]")
    if state and state.is_quarantined:
        console.print(f"[red]{card_id} is quarantined and hidden from the feed[/red]")


@app.command()
def queue(
    ack: list[str] = typer.Option([], "--ack", help="ACTION_ID=ACTION to mark as handled (repeatable)"),
) -> None:
    """Show the manager action queue for the sample team."""
    from dex.content.catalog import sample_team
    from dex.manager.action_queue import (
        AcknowledgementSet,
        generate_action_queue,
        merge_acknowledgements,
        team_capacity,
    )

    team = sample_team()
    acknowledgements = AcknowledgementSet()
    for entry in ack:
        action_id, _, action = entry.partition("=")
        acknowledgements.acknowledge(action_id, action or "done")

    items = merge_acknowledgements(generate_action_queue(team), acknowledgements)

    table = Table(title=f"Action Queue - team capacity {team_capacity(team)}%")
    table.add_column("Priority")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Context")
    table.add_column("Actions")
    for item in items:
        style = _PRIORITY_STYLE[item.priority.value]
        if item.acknowledged:
            actions = f"✅ {item.acknowledged}"
        else:
            actions = ", ".join(f"{a.label} ({a.action})" for a in item.suggested_actions)
        table.add_row(
            f"[{style}]{item.priority.value}[/{style}]",
            item.type.value,
            item.title,
            item.context,
            actions,
        )
    console.print(table)


@app.command()
def readiness(
    category: str = typer.Option("DESK", "--category", help="New hire's role category"),
    escalate: list[str] = typer.Option([], "--escalate", help="Blocked item id to escalate (repeatable)"),
    refresh: int = typer.Option(0, "--refresh", help="Number of status polls to run"),
    seed: int = typer.Option(None, "--seed", help="Seed for simulated status updates"),
) -> None:
    """Show Day 1 readiness for a new hire's preboarding checklist."""
    from dex.content.catalog import default_catalog
    from dex.core.errors import StateError
    from dex.core.models import RoleCategory
    from dex.core.notifications import RecordingNotificationSink
    from onboarding.readiness import PreboardingTracker, SimulatedStatusProvider, relevant_items

    sink = RecordingNotificationSink()
    tracker = PreboardingTracker(
        relevant_items(default_catalog().preboarding_items, RoleCategory(category.upper())),
        sink=sink,
    )

    for item_id in escalate:
        try:
            tracker.escalate(item_id)
        except (StateError, KeyError) as e:
            console.print(f"[yellow]⚠️  {item_id}: {e}[/yellow]")

    provider = SimulatedStatusProvider(seed=seed)
    for _ in range(refresh):
        asyncio.run(tracker.refresh(provider))

    score = tracker.score
    table = Table(title=f"Day 1 Readiness - {score.overall_score}%")
    table.add_column("Item")
    table.add_column("Category")
    table.add_column("Owner")
    table.add_column("Status")
    for item in tracker.items:
        status = item.status.value
        if item.escalated_to:
            status = f"{status} → {item.escalated_to}"
        table.add_row(item.title, item.category.value, item.owner, status)
    console.print(table)
    console.print(f"Critical items ready: {score.critical_items_ready}/{score.critical_items_total}")
    if score.blocked_items:
        console.print(f"[red]Blocked: {', '.join(i.id for i in score.blocked_items)}[/red]")
    for message in sink.messages:
        console.print(f"[dim]{message}[/dim]")
    console.print(f"[dim]Updated {datetime.fromisoformat(score.last_updated):%H:%M:%S}[/dim]")


@app.command()
def health() -> None:
    """Check configuration."""
    from dex.config import get_settings

    console.print("\n[bold]DEX Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("✅ Configuration loaded")
        console.print(f"   Environment: {settings.dex_env}")
        console.print(f"   Log level: {settings.log_level}")
        console.print(f"   Profile store: {settings.profile_store_dir}")

        if settings.ai_enabled:
            console.print("✅ Gemini API key configured (simulated generation)")
        else:
            console.print("ℹ️  No Gemini API key; rule-based briefings only")

        console.print("\n[green]All checks passed![/green]")

    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from dex import __version__

    console.print(f"DEX version {__version__}")


if __name__ == "__main__":
    app()
