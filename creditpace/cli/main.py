"""CreditPace command-line entry point."""

import typer

from creditpace.cli.backup_cmd import export_command, import_command, reset_command
from creditpace.cli.expenses import add_command, list_command, remove_command
from creditpace.cli.profile_cmd import prefs_command, setup_command
from creditpace.cli.status import advice_command, status_command
from creditpace.core.config import get_settings
from creditpace.observability import setup_logging

app = typer.Typer(
    name="creditpace",
    help="Track a depleting credit balance and spend it sustainably.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    settings = get_settings()
    setup_logging("DEBUG" if verbose else settings.log_level, settings.log_format)


app.command(name="setup")(setup_command)
app.command(name="prefs")(prefs_command)
app.command(name="add")(add_command)
app.command(name="remove")(remove_command)
app.command(name="list")(list_command)
app.command(name="status")(status_command)
app.command(name="advice")(advice_command)
app.command(name="export")(export_command)
app.command(name="import")(import_command)
app.command(name="reset")(reset_command)


if __name__ == "__main__":
    app()
