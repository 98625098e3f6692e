"""Trailing-window burn rates."""

from collections.abc import Iterable
from datetime import date, timedelta
from decimal import Decimal

from creditpace.core.models import ExpenseRecord
from creditpace.engine.periods import inclusive_day_count


def window_burn_rate(
    records: Iterable[ExpenseRecord],
    window_days: int,
    period_start: date,
    today: date,
) -> Decimal:
    """Average daily spend over the trailing window ending today.

    The window is [today - window_days + 1, today], clipped so it never
    starts before the period. The divisor is the clipped window length,
    floored at 1.

    Args:
        records: Expense records (not modified).
        window_days: Window length in days (7 and 3 are used).
        period_start: First day of the period.
        today: Last day of the window.

    Returns:
        Non-negative average spend per day for non-negative costs.
    """
    window_start = max(today - timedelta(days=window_days - 1), period_start)

    window_total = sum(
        (r.cost for r in records if window_start <= r.date <= today),
        Decimal(0),
    )
    day_count = max(1, inclusive_day_count(window_start, today))

    return window_total / day_count
