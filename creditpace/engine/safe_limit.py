"""Adaptive daily safe-limit calculation."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from creditpace.core.config import DEFAULT_ENGINE_SETTINGS, EngineSettings
from creditpace.core.models import Preferences
from creditpace.engine.periods import is_weekend


def calculate_safe_limit(
    remaining_credits: Decimal,
    remaining_days: int,
    average_daily_spend: Decimal,
    target_burn_rate: Decimal,
    preferences: Preferences,
    today: date,
    settings: EngineSettings | None = None,
) -> Decimal:
    """Calculate the recommended spending ceiling for today.

    Starts from an even split of the remaining balance, then:
        1. Dampens it when the average spend overshoots the target rate
           (divides by overshoot ** dampening_exponent, a partial correction).
        2. Applies the risk tolerance factor.
        3. Applies the weekend boost on Saturday/Sunday if enabled.
        4. Applies the exam mode boost if enabled.
        5. Clamps to max_spend_per_day if set.

    The multipliers compound in that order.

    Args:
        remaining_credits: Balance left.
        remaining_days: Days left in the period after today.
        average_daily_spend: Whole-period burn rate.
        target_burn_rate: Even-pace burn rate (credits / period days).
        preferences: User preferences.
        today: Current date (for weekend detection).
        settings: Engine constants (defaults if None).

    Returns:
        Whole-unit limit, never negative. Zero when no days remain.
    """
    settings = settings or DEFAULT_ENGINE_SETTINGS

    if remaining_days <= 0:
        return Decimal(0)

    base = remaining_credits / remaining_days

    if 0 < target_burn_rate < average_daily_spend:
        overshoot = average_daily_spend / target_burn_rate
        base = base / overshoot ** settings.dampening_exponent

    base *= settings.tolerance_factor(preferences.risk_tolerance)

    if preferences.weekend_boost and is_weekend(today):
        base *= settings.weekend_multiplier

    if preferences.exam_mode:
        base *= settings.exam_multiplier

    cap = preferences.max_spend_per_day
    if cap is not None and cap > 0:
        base = min(base, cap)

    return max(Decimal(0), base).quantize(Decimal(1), rounding=ROUND_HALF_UP)
