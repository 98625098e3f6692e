"""Field-level validation for user-entered values.

These checks belong to the entry layer. The engine accepts anything the
models accept; the bounds here are what the setup and expense forms allow.
Each validator returns a mapping of field name to message (empty when valid).
"""

from datetime import date
from decimal import Decimal

from creditpace.core.exceptions import EntryValidationError
from creditpace.core.models import Profile

MIN_CREDITS = Decimal(3000)
MAX_CREDITS = Decimal(10000)
MIN_PERIOD_DAYS = 28
MAX_PERIOD_DAYS = 31
MAX_EXPENSE_COST = Decimal(2000)


def validate_setup(
    monthly_credits: Decimal | None,
    period_days: int | None,
    start_date: date | None,
) -> dict[str, str]:
    """Validate profile setup values."""
    errors: dict[str, str] = {}

    if monthly_credits is None or not MIN_CREDITS <= monthly_credits <= MAX_CREDITS:
        errors["monthly_credits"] = (
            f"Credits must be between {MIN_CREDITS:,} and {MAX_CREDITS:,}"
        )

    if period_days is None or not MIN_PERIOD_DAYS <= period_days <= MAX_PERIOD_DAYS:
        errors["period_days"] = (
            f"Days must be between {MIN_PERIOD_DAYS} and {MAX_PERIOD_DAYS}"
        )

    if start_date is None:
        errors["start_date"] = "Start date is required"

    return errors


def validate_expense(
    expense_date: date | None,
    cost: Decimal | None,
    quantity: int | None,
    profile: Profile | None,
    today: date,
) -> dict[str, str]:
    """Validate an expense entry against the profile's period.

    Args:
        expense_date: Date of purchase.
        cost: Amount spent.
        quantity: Number of items.
        profile: Current profile, if configured.
        today: Current date (future dates are rejected).

    Returns:
        Field errors, empty if the entry is valid.
    """
    errors: dict[str, str] = {}

    if expense_date is None:
        errors["date"] = "Date is required"
    elif expense_date > today:
        errors["date"] = "Date cannot be in the future"
    elif profile is not None and not profile.contains(expense_date):
        errors["date"] = "Date must be within your billing period"

    if cost is None or cost <= 0:
        errors["cost"] = "Cost must be greater than 0"
    elif cost > MAX_EXPENSE_COST:
        errors["cost"] = "Cost seems too high. Please verify."

    if quantity is None or quantity < 1:
        errors["quantity"] = "Quantity must be at least 1"

    return errors


def validate_thresholds(warning: Decimal, danger: Decimal) -> dict[str, str]:
    """Validate notification thresholds (fractions, warning below danger)."""
    errors: dict[str, str] = {}
    if not Decimal(0) < warning < Decimal(1):
        errors["warning"] = "Warning threshold must be between 0% and 100%"
    if not Decimal(0) < danger < Decimal(1):
        errors["danger"] = "Danger threshold must be between 0% and 100%"
    if not errors and warning >= danger:
        errors["warning"] = "Warning threshold must be below danger threshold"
    return errors


def ensure_valid(errors: dict[str, str]) -> None:
    """Raise EntryValidationError if any field errors were collected."""
    if errors:
        raise EntryValidationError(errors)
