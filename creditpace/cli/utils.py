"""Shared helpers for CLI commands."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from uuid import UUID

import typer
from rich.console import Console

from creditpace.core.config import get_settings
from creditpace.core.exceptions import (
    ExpenseNotFoundError,
    ProfileNotConfiguredError,
    StateLoadError,
)
from creditpace.core.models import ExpenseRecord, PeriodState, Profile, RiskLevel
from creditpace.storage.state_store import JsonStateStore

console = Console()

RISK_STYLES = {
    RiskLevel.SAFE: "green",
    RiskLevel.WATCH: "yellow",
    RiskLevel.DANGER: "red",
}


def format_currency(amount: Decimal, symbol: str | None = None) -> str:
    """Format a whole-unit amount with thousands separators (e.g. ₹6,000)."""
    symbol = get_settings().currency_symbol if symbol is None else symbol
    whole = int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    sign = "-" if whole < 0 else ""
    return f"{sign}{symbol}{abs(whole):,}"


def format_percentage(ratio: Decimal) -> str:
    """Format a ratio as a percentage (0.25 -> 25.0%)."""
    return f"{ratio * 100:.1f}%"


def open_store(state_file: Path | None) -> JsonStateStore:
    """State store at the given path, or the configured default."""
    return JsonStateStore(state_file or get_settings().state_file)


def _report_load_error(error: StateLoadError) -> None:
    console.print("[yellow]Warning:[/yellow] Could not load saved data. Starting fresh.")


def load_state(store: JsonStateStore) -> PeriodState:
    """Load state; a corrupt file is reported and treated as empty."""
    return store.load_or_default(on_error=_report_load_error)


def require_profile(state: PeriodState) -> Profile:
    """Return the configured profile or raise ProfileNotConfiguredError."""
    if state.profile is None:
        raise ProfileNotConfiguredError("No profile found. Run 'creditpace setup' first.")
    return state.profile


def resolve_today(value: str | None) -> date:
    """Parse a --today option (YYYY-MM-DD), defaulting to the current date."""
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid date '{value}', expected YYYY-MM-DD")
        raise typer.Exit(1)


def find_expense(state: PeriodState, id_prefix: str) -> ExpenseRecord:
    """Find an expense by full id or unique id prefix.

    Raises:
        ExpenseNotFoundError: If nothing or more than one expense matches.
    """
    prefix = id_prefix.strip().lower()
    if not prefix:
        raise ExpenseNotFoundError("Expense id is required")

    try:
        exact = UUID(prefix)
    except ValueError:
        exact = None

    matches = [
        e for e in state.expenses
        if e.id == exact or str(e.id).startswith(prefix)
    ]
    if len(matches) != 1:
        reason = "No expense" if not matches else "More than one expense"
        raise ExpenseNotFoundError(f"{reason} matches '{id_prefix}'")
    return matches[0]
