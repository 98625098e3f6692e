"""Implementation of 'creditpace setup' and 'creditpace prefs' commands."""

from datetime import date
from decimal import Decimal
from pathlib import Path

import typer
from pydantic import ValidationError

from creditpace.cli.utils import (
    console,
    format_currency,
    format_percentage,
    load_state,
    open_store,
    require_profile,
    resolve_today,
)
from creditpace.core.exceptions import CreditPaceError
from creditpace.core.models import NotificationThresholds, Profile, RiskTolerance, UserType
from creditpace.core.validation import ensure_valid, validate_setup, validate_thresholds
from creditpace.engine.calculator import compute_metrics


def setup_command(
    credits: float = typer.Option(None, "--credits", "-c", help="Credits for the period"),
    days: int = typer.Option(None, "--days", "-d", help="Days in the period (28-31)"),
    start: str = typer.Option(
        None,
        "--start",
        help="First day of the period, YYYY-MM-DD (default: first of this month)",
    ),
    user_type: UserType = typer.Option(
        UserType.HOSTEL_STUDENT, "--user-type", "-u", help="Kind of credit holder"
    ),
    vegetarian: bool = typer.Option(
        None, "--vegetarian/--no-vegetarian", help="Vegetarian diet (default: keep current)"
    ),
    state_file: Path = typer.Option(
        None,
        "--state-file",
        "-s",
        help="Path to state file (default: ~/.creditpace/state.json)",
    ),
) -> None:
    """Set up or replace the period profile.

    Missing values default to 6,000 credits over the current calendar
    month. Existing preferences and expenses are kept.
    """
    store = open_store(state_file)
    state = load_state(store)
    default = Profile.default(date.today())

    try:
        start_date = date.fromisoformat(start) if start else default.start_date
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid date '{start}', expected YYYY-MM-DD")
        raise typer.Exit(1)

    monthly_credits = Decimal(str(credits)) if credits is not None else default.monthly_credits
    period_days = days if days is not None else default.period_days
    preferences = state.profile.preferences if state.profile else default.preferences
    if vegetarian is not None:
        preferences = preferences.model_copy(update={"vegetarian": vegetarian})

    try:
        ensure_valid(validate_setup(monthly_credits, period_days, start_date))
        profile = Profile(
            user_type=user_type,
            monthly_credits=monthly_credits,
            period_days=period_days,
            start_date=start_date,
            preferences=preferences,
        )
        store.save(state.with_profile(profile))
    except CreditPaceError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(
        f"[green]Profile saved:[/green] {format_currency(profile.monthly_credits)} "
        f"from {profile.start_date} to {profile.end_date} ({profile.period_days} days)"
    )


def prefs_command(
    risk_tolerance: RiskTolerance = typer.Option(
        None, "--risk-tolerance", "-r", help="Risk tolerance"
    ),
    weekend_boost: bool = typer.Option(
        None, "--weekend-boost/--no-weekend-boost", help="Spend more on weekends"
    ),
    exam_mode: bool = typer.Option(
        None, "--exam-mode/--no-exam-mode", help="Slightly higher limit during exams"
    ),
    max_spend: float = typer.Option(None, "--max-spend", help="Cap on the daily safe limit"),
    no_max_spend: bool = typer.Option(False, "--no-max-spend", help="Remove the daily cap"),
    warning: int = typer.Option(None, "--warning", help="Warning threshold, percent of credits"),
    danger: int = typer.Option(None, "--danger", help="Danger threshold, percent of credits"),
    preview: bool = typer.Option(
        False, "--preview", help="Show the resulting safe limit without saving"
    ),
    today: str = typer.Option(
        None,
        "--today",
        "-t",
        help="Evaluate the safe limit as of this date, YYYY-MM-DD (default: current date)",
    ),
    state_file: Path = typer.Option(
        None,
        "--state-file",
        "-s",
        help="Path to state file (default: ~/.creditpace/state.json)",
    ),
) -> None:
    """Update preferences. With no options, show the current ones.

    The safe limit for today is recalculated with the new preferences and
    shown next to the current one.
    """
    store = open_store(state_file)
    state = load_state(store)

    try:
        profile = require_profile(state)
    except CreditPaceError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    on = resolve_today(today)
    current = profile.preferences
    changes: dict[str, object] = {}
    if risk_tolerance is not None:
        changes["risk_tolerance"] = risk_tolerance
    if weekend_boost is not None:
        changes["weekend_boost"] = weekend_boost
    if exam_mode is not None:
        changes["exam_mode"] = exam_mode
    if no_max_spend:
        changes["max_spend_per_day"] = None
    elif max_spend is not None:
        changes["max_spend_per_day"] = Decimal(str(max_spend))
    if warning is not None or danger is not None:
        thresholds = current.notification_thresholds
        warn = Decimal(warning) / 100 if warning is not None else thresholds.warning
        dang = Decimal(danger) / 100 if danger is not None else thresholds.danger
        try:
            ensure_valid(validate_thresholds(warn, dang))
        except CreditPaceError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        changes["notification_thresholds"] = NotificationThresholds(warning=warn, danger=dang)

    updated = profile
    if changes:
        try:
            updated = profile.with_preferences(**changes)
            if not preview:
                store.save(state.with_profile(updated))
        except ValidationError as e:
            console.print(f"[red]Error:[/red] {e.errors()[0]['msg']}")
            raise typer.Exit(1)
        except CreditPaceError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        if preview:
            console.print("[yellow]Preview only, nothing saved[/yellow]")
        else:
            console.print("[green]Preferences updated[/green]")

    prefs = updated.preferences
    cap = format_currency(prefs.max_spend_per_day) if prefs.max_spend_per_day else "none"
    console.print(f"  Risk tolerance: {prefs.risk_tolerance.value}")
    console.print(f"  Weekend boost:  {'on' if prefs.weekend_boost else 'off'}")
    console.print(f"  Exam mode:      {'on' if prefs.exam_mode else 'off'}")
    console.print(f"  Daily cap:      {cap}")
    console.print(f"  Warning at:     {format_percentage(prefs.notification_thresholds.warning)}")
    console.print(f"  Danger at:      {format_percentage(prefs.notification_thresholds.danger)}")

    before = compute_metrics(profile, state.expenses, on).daily_safe_limit
    after = compute_metrics(updated, state.expenses, on).daily_safe_limit
    limit_line = f"  Safe limit:     {format_currency(after)}"
    if after != before:
        limit_line += f" (was {format_currency(before)})"
    console.print(limit_line)
