"""Implementation of 'creditpace add', 'remove' and 'list' commands."""

from datetime import date
from decimal import Decimal
from pathlib import Path

import typer
from rich.table import Table

from creditpace.cli.utils import (
    console,
    find_expense,
    format_currency,
    load_state,
    open_store,
    require_profile,
)
from creditpace.core.exceptions import CreditPaceError
from creditpace.core.models import ExpenseRecord, ItemType, MealType
from creditpace.core.validation import ensure_valid, validate_expense


def add_command(
    cost: float = typer.Option(..., "--cost", "-c", help="Amount spent"),
    on: str = typer.Option(
        None,
        "--date",
        "-d",
        help="Date of purchase, YYYY-MM-DD (default: today)",
    ),
    meal: MealType = typer.Option(MealType.LUNCH, "--meal", "-m", help="Meal type"),
    item: ItemType = typer.Option(ItemType.VEG, "--item", "-i", help="Item type"),
    quantity: int = typer.Option(1, "--quantity", "-q", help="Number of items"),
    notes: str = typer.Option(None, "--notes", "-n", help="Optional notes"),
    state_file: Path = typer.Option(
        None,
        "--state-file",
        "-s",
        help="Path to state file (default: ~/.creditpace/state.json)",
    ),
) -> None:
    """Record an expense."""
    store = open_store(state_file)
    state = load_state(store)
    today = date.today()

    try:
        profile = require_profile(state)
        expense_date = date.fromisoformat(on) if on else today
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid date '{on}', expected YYYY-MM-DD")
        raise typer.Exit(1)
    except CreditPaceError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    amount = Decimal(str(cost))
    try:
        ensure_valid(validate_expense(expense_date, amount, quantity, profile, today))
        expense = ExpenseRecord(
            date=expense_date,
            meal_type=meal,
            item_type=item.value,
            quantity=quantity,
            cost=amount,
            notes=notes or None,
        )
        store.save(state.add_expense(expense))
    except CreditPaceError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(
        f"[green]Expense added:[/green] {format_currency(amount)} "
        f"({expense.meal_type.value}, {expense.item_type}) on {expense.date} "
        f"[dim]{str(expense.id)[:8]}[/dim]"
    )


def remove_command(
    expense_id: str = typer.Argument(..., help="Expense id or unique id prefix"),
    state_file: Path = typer.Option(
        None,
        "--state-file",
        "-s",
        help="Path to state file (default: ~/.creditpace/state.json)",
    ),
) -> None:
    """Delete an expense by id."""
    store = open_store(state_file)
    state = load_state(store)

    try:
        expense = find_expense(state, expense_id)
        store.save(state.remove_expense(expense.id))
    except CreditPaceError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(
        f"[green]Expense removed:[/green] {format_currency(expense.cost)} on {expense.date}"
    )


def list_command(
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum rows to show (0 = all)"),
    state_file: Path = typer.Option(
        None,
        "--state-file",
        "-s",
        help="Path to state file (default: ~/.creditpace/state.json)",
    ),
) -> None:
    """List expenses, newest first."""
    state = load_state(open_store(state_file))

    if not state.expenses:
        console.print("[yellow]No expenses recorded yet[/yellow]")
        raise typer.Exit(0)

    # Stable sort keeps insertion order within a day
    expenses = sorted(state.expenses, key=lambda e: e.date, reverse=True)
    if limit > 0:
        expenses = expenses[:limit]

    table = Table(title=f"Expenses ({len(state.expenses)} total)")
    table.add_column("Id")
    table.add_column("Date")
    table.add_column("Meal")
    table.add_column("Item")
    table.add_column("Qty", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Notes")

    for e in expenses:
        table.add_row(
            str(e.id)[:8],
            e.date.isoformat(),
            e.meal_type.value,
            e.item_type,
            str(e.quantity),
            format_currency(e.cost),
            e.notes or "",
        )
    console.print(table)
