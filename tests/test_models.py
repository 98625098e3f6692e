"""Tests for domain models."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from creditpace.core.models import (
    ExpenseRecord,
    ItemType,
    PeriodState,
    Preferences,
    Profile,
    RiskTolerance,
    Severity,
)
from tests.dates import PERIOD_START, day


class TestProfile:
    """Tests for Profile model."""

    def test_end_date(self, profile) -> None:
        """Test the period end is inclusive."""
        assert profile.end_date == date(2024, 7, 2)
        assert profile.contains(day(30))
        assert not profile.contains(day(31))

    def test_defaults(self, profile) -> None:
        """Test default preferences."""
        prefs = profile.preferences
        assert prefs.risk_tolerance == RiskTolerance.MEDIUM
        assert not prefs.weekend_boost
        assert prefs.max_spend_per_day is None
        assert prefs.notification_thresholds.warning == Decimal("0.7")
        assert prefs.notification_thresholds.danger == Decimal("0.9")

    def test_rejects_non_positive_credits(self) -> None:
        """Test zero credits is rejected at construction."""
        with pytest.raises(ValidationError):
            Profile(monthly_credits=Decimal(0), period_days=30, start_date=PERIOD_START)

    def test_rejects_zero_days(self) -> None:
        """Test zero period days is rejected at construction."""
        with pytest.raises(ValidationError):
            Profile(monthly_credits=Decimal(6000), period_days=0, start_date=PERIOD_START)

    def test_accepts_values_outside_entry_bounds(self) -> None:
        """Test the model tolerates any positive allowance and period."""
        profile = Profile(monthly_credits=Decimal(50), period_days=3, start_date=PERIOD_START)
        assert profile.period_days == 3

    def test_frozen(self, profile) -> None:
        """Test fields cannot be reassigned."""
        with pytest.raises(ValidationError):
            profile.monthly_credits = Decimal(1)

    def test_with_preferences_returns_new_profile(self, profile) -> None:
        """Test preference updates leave the original untouched."""
        updated = profile.with_preferences(weekend_boost=True, risk_tolerance="high")

        assert updated.preferences.weekend_boost
        assert updated.preferences.risk_tolerance == RiskTolerance.HIGH
        assert not profile.preferences.weekend_boost
        assert updated.monthly_credits == profile.monthly_credits

    def test_with_preferences_validates(self, profile) -> None:
        """Test invalid preference values are rejected."""
        with pytest.raises(ValidationError):
            profile.with_preferences(max_spend_per_day=Decimal(-5))

    def test_default_profile(self) -> None:
        """Test the default profile covers the calendar month."""
        profile = Profile.default(date(2024, 2, 15))
        assert profile.start_date == date(2024, 2, 1)
        assert profile.period_days == 29
        assert profile.monthly_credits == Decimal(6000)


class TestPreferences:
    """Tests for Preferences model."""

    def test_thresholds_must_be_fractions(self) -> None:
        """Test thresholds outside (0, 1) are rejected."""
        with pytest.raises(ValidationError):
            Preferences(notification_thresholds={"warning": 0, "danger": "0.9"})

    def test_threshold_order_not_enforced(self) -> None:
        """Test warning above danger is accepted by the model."""
        prefs = Preferences(notification_thresholds={"warning": "0.95", "danger": "0.5"})
        assert prefs.notification_thresholds.warning == Decimal("0.95")


class TestExpenseRecord:
    """Tests for ExpenseRecord model."""

    def test_defaults(self) -> None:
        """Test default meal, item, and quantity."""
        record = ExpenseRecord(date=day(1), cost=Decimal(60))
        assert record.quantity == 1
        assert record.item_type == "veg"
        assert record.notes is None

    def test_unique_ids(self) -> None:
        """Test each record gets its own id."""
        a = ExpenseRecord(date=day(1), cost=Decimal(60))
        b = ExpenseRecord(date=day(1), cost=Decimal(60))
        assert a.id != b.id

    def test_unknown_item_type_kept(self) -> None:
        """Test unrecognized item types are stored as given."""
        record = ExpenseRecord(date=day(1), cost=Decimal(60), item_type="momos")
        assert record.item_type == "momos"
        assert ItemType.normalize(record.item_type) == ItemType.OTHER

    def test_zero_cost_accepted(self) -> None:
        """Test the model does not range-check cost."""
        assert ExpenseRecord(date=day(1), cost=Decimal(0)).cost == Decimal(0)

    def test_rejects_zero_quantity(self) -> None:
        """Test quantity must be at least one."""
        with pytest.raises(ValidationError):
            ExpenseRecord(date=day(1), cost=Decimal(60), quantity=0)

    def test_requires_cost(self) -> None:
        """Test cost is required."""
        with pytest.raises(ValidationError):
            ExpenseRecord(date=day(1))


class TestPeriodState:
    """Tests for PeriodState updates."""

    def test_add_and_remove(self, profile, make_expense) -> None:
        """Test add/remove return new states."""
        empty = PeriodState(profile=profile)
        expense = make_expense(day(1), 50)

        added = empty.add_expense(expense)
        removed = added.remove_expense(expense.id)

        assert empty.expenses == []
        assert added.expenses == [expense]
        assert removed.expenses == []

    def test_remove_unknown_id(self, profile, make_expense) -> None:
        """Test removing an unknown id changes nothing."""
        state = PeriodState(profile=profile, expenses=[make_expense(day(1), 50)])
        other = make_expense(day(1), 50)
        assert state.remove_expense(other.id).expenses == state.expenses


class TestSeverity:
    """Tests for Severity ranks."""

    def test_rank(self) -> None:
        """Test high sorts before medium before low."""
        assert [s.rank for s in (Severity.HIGH, Severity.MEDIUM, Severity.LOW)] == [0, 1, 2]
