"""Implementation of 'creditpace export', 'import' and 'reset' commands.

Back up, restore, or clear the stored period state.
"""

from datetime import date
from pathlib import Path

import typer

from creditpace.cli.utils import console, load_state, open_store
from creditpace.core.exceptions import CreditPaceError
from creditpace.storage.transfer import default_export_name, export_state, import_state


def export_command(
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (default: creditpace_backup_<date>.json)",
    ),
    state_file: Path = typer.Option(
        None,
        "--state-file",
        "-s",
        help="Path to state file (default: ~/.creditpace/state.json)",
    ),
) -> None:
    """Export profile and expenses to a JSON backup."""
    state = load_state(open_store(state_file))
    if state.profile is None:
        console.print("[yellow]Nothing to export: no profile set up[/yellow]")
        raise typer.Exit(1)

    output_path = output or Path(default_export_name(date.today()))
    try:
        output_path.write_text(export_state(state), encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Error:[/red] Could not write {output_path}: {e}")
        raise typer.Exit(1)

    console.print(
        f"[green]Exported[/green] {len(state.expenses)} expenses to {output_path}"
    )


def import_command(
    backup: Path = typer.Argument(..., help="Backup file to restore"),
    state_file: Path = typer.Option(
        None,
        "--state-file",
        "-s",
        help="Path to state file (default: ~/.creditpace/state.json)",
    ),
) -> None:
    """Restore profile and expenses from a JSON backup.

    Replaces the current state. The current state is kept if the
    backup cannot be read.
    """
    store = open_store(state_file)
    try:
        text = backup.read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Error:[/red] Could not read backup file: {e}")
        raise typer.Exit(1)

    try:
        state = import_state(text)
        store.save(state)
    except CreditPaceError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Imported[/green] {len(state.expenses)} expenses from {backup}")


def reset_command(
    confirm: bool = typer.Option(
        False,
        "--confirm",
        "-y",
        help="Confirm deletion (required)",
    ),
    state_file: Path = typer.Option(
        None,
        "--state-file",
        "-s",
        help="Path to state file (default: ~/.creditpace/state.json)",
    ),
) -> None:
    """Delete the profile and all expenses.

    Requires --confirm flag to execute.
    """
    store = open_store(state_file)
    if not store.exists():
        console.print("[yellow]Nothing to reset[/yellow]")
        raise typer.Exit(0)

    state = load_state(store)
    console.print(f"Current data: [cyan]{len(state.expenses)}[/cyan] expenses")

    if not confirm:
        console.print()
        console.print("[yellow]This will delete ALL data![/yellow]")
        console.print("Run with [bold]--confirm[/bold] to proceed")
        raise typer.Exit(0)

    store.clear()
    console.print("[green]All data deleted[/green]")
