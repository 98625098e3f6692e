"""Risk and confidence classification."""

from decimal import Decimal

from creditpace.core.config import DEFAULT_ENGINE_SETTINGS, EngineSettings
from creditpace.core.models import ConfidenceLevel, NotificationThresholds, RiskLevel

# Confidence needs both enough records and enough elapsed days
LOW_CONFIDENCE_MIN_EXPENSES = 3
LOW_CONFIDENCE_MIN_DAYS = 2
HIGH_CONFIDENCE_MIN_EXPENSES = 10
HIGH_CONFIDENCE_MIN_DAYS = 5


def usage_ratio(total_spent: Decimal, monthly_credits: Decimal) -> Decimal:
    """Share of the allowance already spent (0 if no allowance)."""
    if monthly_credits <= 0:
        return Decimal(0)
    return total_spent / monthly_credits


def time_ratio(days_elapsed: int, period_days: int) -> Decimal:
    """Share of the period already elapsed (0 if the period is empty)."""
    if period_days <= 0:
        return Decimal(0)
    return Decimal(days_elapsed) / period_days


def classify_risk(
    total_spent: Decimal,
    monthly_credits: Decimal,
    days_elapsed: int,
    period_days: int,
    days_until_exhaustion: int | None,
    remaining_days: int,
    thresholds: NotificationThresholds,
    settings: EngineSettings | None = None,
) -> RiskLevel:
    """Classify spending risk. Checks run in order; first match wins.

        1. Balance runs out more than 3 days before period end -> danger
        2. Usage ratio at or above the danger threshold         -> danger
        3. Usage ratio at or above the warning threshold        -> watch
        4. Usage ahead of elapsed time by more than 15 points   -> danger
        5. Usage ahead of elapsed time by more than 5 points    -> watch
        6. Otherwise                                            -> safe

    days_until_exhaustion=None means the balance is never exhausted.
    """
    settings = settings or DEFAULT_ENGINE_SETTINGS
    credits_used = usage_ratio(total_spent, monthly_credits)
    time_elapsed = time_ratio(days_elapsed, period_days)

    if (
        days_until_exhaustion is not None
        and days_until_exhaustion < remaining_days - settings.exhaustion_margin_days
    ):
        return RiskLevel.DANGER

    if credits_used >= thresholds.danger:
        return RiskLevel.DANGER

    if credits_used >= thresholds.warning:
        return RiskLevel.WATCH

    if credits_used > time_elapsed + settings.danger_pace_margin:
        return RiskLevel.DANGER

    if credits_used > time_elapsed + settings.watch_pace_margin:
        return RiskLevel.WATCH

    return RiskLevel.SAFE


def classify_confidence(expense_count: int, days_elapsed: int) -> ConfidenceLevel:
    """Rate how much data backs the projection."""
    if expense_count < LOW_CONFIDENCE_MIN_EXPENSES or days_elapsed < LOW_CONFIDENCE_MIN_DAYS:
        return ConfidenceLevel.LOW
    if expense_count < HIGH_CONFIDENCE_MIN_EXPENSES or days_elapsed < HIGH_CONFIDENCE_MIN_DAYS:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.HIGH
