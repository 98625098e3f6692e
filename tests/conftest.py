"""Shared fixtures for CreditPace tests."""

from collections.abc import Callable
from datetime import date
from decimal import Decimal

import pytest

from creditpace.core.models import ExpenseRecord, MealType, Preferences, Profile
from tests.dates import PERIOD_START


@pytest.fixture
def profile() -> Profile:
    """6,000 credits over 30 days starting Monday 2024-06-03."""
    return Profile(
        monthly_credits=Decimal(6000),
        period_days=30,
        start_date=PERIOD_START,
    )


@pytest.fixture
def make_profile() -> Callable[..., Profile]:
    """Factory for profiles with custom preferences."""

    def _make(**preferences: object) -> Profile:
        return Profile(
            monthly_credits=Decimal(6000),
            period_days=30,
            start_date=PERIOD_START,
            preferences=Preferences(**preferences),
        )

    return _make


@pytest.fixture
def make_expense() -> Callable[..., ExpenseRecord]:
    """Factory for expense records."""

    def _make(
        on: date,
        cost: Decimal | int | str,
        item_type: str = "veg",
        meal_type: MealType = MealType.LUNCH,
    ) -> ExpenseRecord:
        return ExpenseRecord(
            date=on,
            cost=Decimal(cost),
            item_type=item_type,
            meal_type=meal_type,
        )

    return _make
