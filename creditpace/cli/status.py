"""Implementation of 'creditpace status' and 'creditpace advice' commands.

Shows current period metrics, category breakdown, and advice.
"""

from pathlib import Path

import typer
from rich.panel import Panel
from rich.table import Table

from creditpace.cli.utils import (
    RISK_STYLES,
    console,
    format_currency,
    format_percentage,
    load_state,
    open_store,
    require_profile,
    resolve_today,
)
from creditpace.core.exceptions import ProfileNotConfiguredError
from creditpace.core.models import AdviceItem, DerivedMetrics, ItemType, Severity
from creditpace.engine.advisor import generate_advice
from creditpace.engine.calculator import (
    category_breakdown,
    compute_metrics,
    daily_spend_series,
    depletion_series,
)

SEVERITY_STYLES = {
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "green",
}


def print_advice(items: list[AdviceItem]) -> None:
    if not items:
        console.print("[dim]No advice right now. Keep logging expenses.[/dim]")
        return
    for item in items:
        style = SEVERITY_STYLES[item.severity]
        console.print(f"  [{style}]●[/{style}] [bold]{item.title}[/bold]")
        console.print(f"    {item.message}")


def _print_metrics(metrics: DerivedMetrics) -> None:
    console.print("[bold]Credits[/bold]")
    console.print(f"  Spent:      {format_currency(metrics.total_spent):>12}  ({format_percentage(metrics.credits_used_ratio)})")
    console.print(f"  Remaining:  {format_currency(metrics.remaining_credits):>12}")
    console.print(f"  Today:      {format_currency(metrics.today_spend):>12}")
    console.print(f"  Safe limit: {format_currency(metrics.daily_safe_limit):>12}")
    console.print()

    console.print("[bold]Pace[/bold]")
    console.print(f"  Target/day:   {format_currency(metrics.target_burn_rate):>12}")
    console.print(f"  Average/day:  {format_currency(metrics.burn_rate_overall):>12}")
    console.print(f"  Last 7 days:  {format_currency(metrics.burn_rate_7d):>12}")
    console.print(f"  Last 3 days:  {format_currency(metrics.burn_rate_3d):>12}")

    if metrics.exhaustion.is_finite:
        when = f"in {metrics.days_until_exhaustion} days"
        if metrics.predicted_exhaustion_date is not None:
            when = f"{metrics.predicted_exhaustion_date} ({when})"
        if metrics.days_short is None:
            console.print(f"  Runs out:     {when}, [green]lasts past period end[/green]")
        else:
            console.print(f"  Runs out:     {when}, [red]{metrics.days_short} day(s) short[/red]")
    else:
        console.print("  Runs out:     [green]not at current pace[/green]")

    if metrics.surplus_or_deficit >= 0:
        console.print(f"  [green]Projected surplus:  {format_currency(metrics.surplus_or_deficit):>10}[/green]")
    else:
        console.print(f"  [red]Projected shortfall: {format_currency(abs(metrics.surplus_or_deficit)):>9}[/red]")
    console.print()

    style = RISK_STYLES[metrics.risk_level]
    console.print(
        f"Risk: [{style}]{metrics.risk_level.value.upper()}[/{style}]   "
        f"Confidence: {metrics.confidence_level.value}"
    )
    console.print()


def status_command(
    today: str = typer.Option(
        None,
        "--today",
        "-t",
        help="Evaluate as of this date, YYYY-MM-DD (default: current date)",
    ),
    series: bool = typer.Option(
        False,
        "--series",
        help="Also show the day-by-day balance against the ideal pace",
    ),
    state_file: Path = typer.Option(
        None,
        "--state-file",
        "-s",
        help="Path to state file (default: ~/.creditpace/state.json)",
    ),
) -> None:
    """Show current period status.

    Displays spending progress, burn rates, the daily safe limit,
    the exhaustion forecast, top categories, and advice.
    """
    state = load_state(open_store(state_file))
    try:
        profile = require_profile(state)
    except ProfileNotConfiguredError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    on = resolve_today(today)
    metrics = compute_metrics(profile, state.expenses, on)

    title = f"Status for {profile.start_date} – {profile.end_date}"
    if metrics.remaining_days > 0:
        title += f" ({metrics.remaining_days} days remaining)"
    console.print()
    console.print(Panel(f"[bold]{title}[/bold]", style="cyan"))
    console.print()

    _print_metrics(metrics)

    breakdown = category_breakdown(state.expenses)
    if breakdown:
        console.print("[bold]Top Categories[/bold]")
        for cat in breakdown[:5]:
            label = ItemType.normalize(cat.item_type).value
            if label != cat.item_type:
                label = f"{cat.item_type} ({label})"
            console.print(
                f"  {label}: {format_currency(cat.total):>10} "
                f"({format_percentage(cat.share)}, {cat.count}x)"
            )
        console.print()

    if series:
        table = Table(title="Balance vs ideal pace")
        table.add_column("Day", justify="right")
        table.add_column("Date")
        table.add_column("Spent", justify="right")
        table.add_column("Ideal", justify="right")
        table.add_column("Actual", justify="right")
        table.add_column("Pace")
        table.add_column("Limit")
        daily = daily_spend_series(profile, state.expenses, on, metrics.daily_safe_limit)
        for day, point in zip(daily, depletion_series(profile, state.expenses, on)):
            spent = "" if day.spend is None else format_currency(day.spend)
            limit_flag = ""
            if day.over_limit:
                spent, limit_flag = f"[red]{spent}[/red]", "[red]over[/red]"
            elif day.near_limit:
                spent, limit_flag = f"[yellow]{spent}[/yellow]", "[yellow]near[/yellow]"
            actual = "" if point.actual_remaining is None else format_currency(point.actual_remaining)
            table.add_row(
                str(point.day_number),
                point.date.isoformat(),
                spent,
                format_currency(point.ideal_remaining),
                actual,
                point.pace.value,
                limit_flag,
            )
        console.print(table)
        console.print()

    console.print("[bold]Advice[/bold]")
    print_advice(generate_advice(profile, metrics, state.expenses))
    console.print()
    console.print(f"[dim]Expenses: {metrics.expense_count}[/dim]")


def advice_command(
    today: str = typer.Option(
        None,
        "--today",
        "-t",
        help="Evaluate as of this date, YYYY-MM-DD (default: current date)",
    ),
    state_file: Path = typer.Option(
        None,
        "--state-file",
        "-s",
        help="Path to state file (default: ~/.creditpace/state.json)",
    ),
) -> None:
    """Show advice for the current period."""
    state = load_state(open_store(state_file))
    try:
        profile = require_profile(state)
    except ProfileNotConfiguredError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    on = resolve_today(today)
    metrics = compute_metrics(profile, state.expenses, on)
    print_advice(generate_advice(profile, metrics, state.expenses))
