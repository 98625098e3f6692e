"""Tests for the command-line interface."""

import json
from datetime import date, timedelta

import pytest
from typer.testing import CliRunner

from creditpace.cli.main import app
from creditpace.storage.state_store import JsonStateStore

runner = CliRunner()

TODAY = date.today()
START = TODAY - timedelta(days=5)


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state.json"


def invoke(state_file, *args: str):
    return runner.invoke(app, [*args, "--state-file", str(state_file)])


@pytest.fixture
def configured(state_file):
    result = invoke(
        state_file, "setup", "--credits", "6000", "--days", "30", "--start", START.isoformat()
    )
    assert result.exit_code == 0, result.output
    return state_file


class TestSetup:
    """Tests for 'creditpace setup'."""

    def test_saves_profile(self, configured) -> None:
        """Test setup writes a profile."""
        state = JsonStateStore(configured).load()
        assert state.profile.period_days == 30
        assert state.profile.start_date == START

    def test_rejects_out_of_range_credits(self, state_file) -> None:
        """Test entry bounds are enforced."""
        result = invoke(state_file, "setup", "--credits", "100", "--days", "30")
        assert result.exit_code == 1
        assert "Credits must be between" in result.output
        assert not state_file.exists()

    def test_keeps_preferences(self, configured) -> None:
        """Test re-running setup keeps existing preferences."""
        invoke(configured, "prefs", "--weekend-boost")
        invoke(configured, "setup", "--credits", "7000", "--days", "30", "--start", START.isoformat())

        profile = JsonStateStore(configured).load().profile
        assert profile.preferences.weekend_boost
        assert profile.monthly_credits == 7000

    def test_keeps_vegetarian(self, configured) -> None:
        """Test omitting the diet flag keeps the stored value."""
        args = ("setup", "--credits", "6000", "--days", "30", "--start", START.isoformat())
        invoke(configured, *args, "--vegetarian")
        invoke(configured, *args)
        assert JsonStateStore(configured).load().profile.preferences.vegetarian

        invoke(configured, *args, "--no-vegetarian")
        assert not JsonStateStore(configured).load().profile.preferences.vegetarian


class TestExpenses:
    """Tests for 'creditpace add', 'remove' and 'list'."""

    def test_add_requires_profile(self, state_file) -> None:
        """Test adding before setup fails."""
        result = invoke(state_file, "add", "--cost", "80")
        assert result.exit_code == 1
        assert "No profile found" in result.output

    def test_add_and_list(self, configured) -> None:
        """Test an added expense is listed."""
        yesterday = (TODAY - timedelta(days=1)).isoformat()
        result = invoke(configured, "add", "--cost", "85.5", "--date", yesterday, "--item", "paneer")
        assert result.exit_code == 0, result.output
        assert "Expense added" in result.output

        listing = invoke(configured, "list")
        assert listing.exit_code == 0
        assert "1 total" in listing.output
        assert "paneer" in listing.output

    def test_add_rejects_future_date(self, configured) -> None:
        """Test future dates are rejected."""
        tomorrow = (TODAY + timedelta(days=1)).isoformat()
        result = invoke(configured, "add", "--cost", "80", "--date", tomorrow)
        assert result.exit_code == 1
        assert "Date cannot be in the future" in result.output

    def test_add_rejects_high_cost(self, configured) -> None:
        """Test implausible costs are rejected."""
        result = invoke(configured, "add", "--cost", "2500")
        assert result.exit_code == 1
        assert "Cost seems too high" in result.output

    def test_remove_by_prefix(self, configured) -> None:
        """Test removing an expense by id prefix."""
        invoke(configured, "add", "--cost", "80")
        expense = JsonStateStore(configured).load().expenses[0]

        result = invoke(configured, "remove", str(expense.id)[:8])

        assert result.exit_code == 0, result.output
        assert JsonStateStore(configured).load().expenses == []

    def test_remove_unknown(self, configured) -> None:
        """Test removing an unknown id fails."""
        result = invoke(configured, "remove", "ffffffff")
        assert result.exit_code == 1
        assert "No expense matches" in result.output

    def test_remove_empty_id(self, configured) -> None:
        """Test an empty id matches nothing, even with one expense stored."""
        invoke(configured, "add", "--cost", "80")

        result = invoke(configured, "remove", "")

        assert result.exit_code == 1
        assert "Expense id is required" in result.output
        assert len(JsonStateStore(configured).load().expenses) == 1

    def test_list_empty(self, configured) -> None:
        """Test listing with no expenses."""
        result = invoke(configured, "list")
        assert result.exit_code == 0
        assert "No expenses recorded yet" in result.output


class TestStatus:
    """Tests for 'creditpace status' and 'advice'."""

    def test_requires_profile(self, state_file) -> None:
        """Test status before setup fails."""
        result = invoke(state_file, "status")
        assert result.exit_code == 1
        assert "No profile found" in result.output

    def test_shows_metrics(self, configured) -> None:
        """Test status prints the main sections."""
        invoke(configured, "add", "--cost", "150", "--item", "chicken")
        result = invoke(configured, "status", "--today", TODAY.isoformat())

        assert result.exit_code == 0, result.output
        assert "Status for" in result.output
        assert "Safe limit" in result.output
        assert "Risk:" in result.output
        assert "chicken" in result.output
        assert "Expenses: 1" in result.output

    def test_series(self, configured) -> None:
        """Test --series prints the day-by-day table."""
        result = invoke(configured, "status", "--series", "--today", TODAY.isoformat())
        assert result.exit_code == 0, result.output
        assert "Balance vs ideal pace" in result.output

    def test_runs_out_before_period_end(self, configured) -> None:
        """Test the forecast is compared with the period end."""
        invoke(configured, "add", "--cost", "1900", "--date", START.isoformat())
        invoke(configured, "add", "--cost", "1900", "--date", START.isoformat())

        result = invoke(configured, "status", "--today", TODAY.isoformat())

        assert result.exit_code == 0, result.output
        assert "(in 4 days)" in result.output
        assert "20 day(s) short" in result.output

    def test_tiny_expense(self, configured) -> None:
        """Test a fractional expense gives a forecast past the period end."""
        added = invoke(configured, "add", "--cost", "0.001")
        assert added.exit_code == 0, added.output

        for command in ("status", "advice"):
            result = invoke(configured, command, "--today", TODAY.isoformat())
            assert result.exit_code == 0, result.output
        assert "lasts past period end" in invoke(configured, "status").output

    def test_series_near_limit(self, configured) -> None:
        """Test days close to the safe limit are marked in the series."""
        invoke(configured, "add", "--cost", "220")
        result = invoke(configured, "status", "--series", "--today", TODAY.isoformat())

        assert result.exit_code == 0, result.output
        assert "near" in result.output

    def test_invalid_today(self, configured) -> None:
        """Test a malformed --today value."""
        result = invoke(configured, "status", "--today", "tomorrow")
        assert result.exit_code == 1
        assert "Invalid date" in result.output

    def test_advice(self, configured) -> None:
        """Test heavy spending produces an alert."""
        invoke(configured, "add", "--cost", "1900", "--date", START.isoformat())
        invoke(configured, "add", "--cost", "1900", "--date", START.isoformat())

        result = invoke(configured, "advice", "--today", TODAY.isoformat())

        assert result.exit_code == 0, result.output
        assert "Credit Exhaustion Alert" in result.output

    def test_corrupt_state(self, state_file) -> None:
        """Test a corrupt file is reported and treated as empty."""
        state_file.write_text("{broken", encoding="utf-8")
        result = invoke(state_file, "status")
        assert "Could not load saved data" in result.output
        assert result.exit_code == 1


class TestPrefs:
    """Tests for 'creditpace prefs'."""

    def test_update(self, configured) -> None:
        """Test preferences are saved and shown."""
        result = invoke(configured, "prefs", "--risk-tolerance", "low", "--max-spend", "250")

        assert result.exit_code == 0, result.output
        assert "Preferences updated" in result.output
        prefs = JsonStateStore(configured).load().profile.preferences
        assert prefs.risk_tolerance.value == "low"
        assert prefs.max_spend_per_day == 250

    def test_remove_cap(self, configured) -> None:
        """Test --no-max-spend clears the cap."""
        invoke(configured, "prefs", "--max-spend", "250")
        invoke(configured, "prefs", "--no-max-spend")
        assert JsonStateStore(configured).load().profile.preferences.max_spend_per_day is None

    def test_threshold_order(self, configured) -> None:
        """Test warning must be below danger."""
        result = invoke(configured, "prefs", "--warning", "95", "--danger", "90")
        assert result.exit_code == 1
        assert "below danger" in result.output

    def test_show_only(self, configured) -> None:
        """Test no options shows current preferences without saving."""
        result = invoke(configured, "prefs")
        assert result.exit_code == 0
        assert "Preferences updated" not in result.output
        assert "Risk tolerance: medium" in result.output

    def test_safe_limit_shown(self, configured) -> None:
        """Test the safe limit reflects the new preferences."""
        result = invoke(configured, "prefs", "--max-spend", "100", "--today", TODAY.isoformat())

        assert result.exit_code == 0, result.output
        assert "Safe limit:     ₹100 (was ₹250)" in result.output

    def test_preview_does_not_save(self, configured) -> None:
        """Test --preview shows the new limit and keeps stored preferences."""
        result = invoke(
            configured, "prefs", "--max-spend", "100", "--preview", "--today", TODAY.isoformat()
        )

        assert result.exit_code == 0, result.output
        assert "Preview only" in result.output
        assert "₹100 (was ₹250)" in result.output
        assert JsonStateStore(configured).load().profile.preferences.max_spend_per_day is None


class TestBackup:
    """Tests for 'creditpace export', 'import' and 'reset'."""

    def test_export_import(self, configured, tmp_path) -> None:
        """Test a backup restores into a new state file."""
        invoke(configured, "add", "--cost", "80")
        backup = tmp_path / "backup.json"

        exported = invoke(configured, "export", "--output", str(backup))
        assert exported.exit_code == 0, exported.output
        assert "profile" in json.loads(backup.read_text(encoding="utf-8"))

        target = tmp_path / "restored.json"
        imported = invoke(target, "import", str(backup))
        assert imported.exit_code == 0, imported.output
        assert JsonStateStore(target).load() == JsonStateStore(configured).load()

    def test_export_without_profile(self, state_file, tmp_path) -> None:
        """Test nothing is exported before setup."""
        result = invoke(state_file, "export", "--output", str(tmp_path / "b.json"))
        assert result.exit_code == 1
        assert "Nothing to export" in result.output

    def test_import_invalid_keeps_state(self, configured, tmp_path) -> None:
        """Test a bad backup leaves the current state in place."""
        backup = tmp_path / "bad.json"
        backup.write_text(json.dumps({"expenses": []}), encoding="utf-8")
        before = JsonStateStore(configured).load()

        result = invoke(configured, "import", str(backup))

        assert result.exit_code == 1
        assert "Invalid backup file format" in result.output
        assert JsonStateStore(configured).load() == before

    def test_reset_requires_confirm(self, configured) -> None:
        """Test reset needs --confirm."""
        result = invoke(configured, "reset")
        assert result.exit_code == 0
        assert "--confirm" in result.output
        assert configured.exists()

        result = invoke(configured, "reset", "--confirm")
        assert result.exit_code == 0
        assert "All data deleted" in result.output
        assert not configured.exists()
