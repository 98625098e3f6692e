"""Projection engine.

Turns a profile and its expense records into a DerivedMetrics snapshot,
plus the category and per-day aggregates used for breakdowns and charts.
All functions are pure: they read their inputs and return new values.
"""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from creditpace.core.config import DEFAULT_ENGINE_SETTINGS, EngineSettings
from creditpace.core.models import (
    CategoryTotal,
    DailySpendPoint,
    DepletionPoint,
    DerivedMetrics,
    ExpenseRecord,
    PaceStatus,
    Profile,
)
from creditpace.engine.forecast import predict_exhaustion
from creditpace.engine.periods import days_elapsed as count_days_elapsed
from creditpace.engine.periods import iterate_period_days
from creditpace.engine.risk import classify_confidence, classify_risk, time_ratio, usage_ratio
from creditpace.engine.safe_limit import calculate_safe_limit
from creditpace.engine.windows import window_burn_rate

CLOSE_PACE_RATIO = Decimal("0.9")
NEAR_LIMIT_RATIO = Decimal("0.8")


def total_cost(records: Sequence[ExpenseRecord]) -> Decimal:
    """Sum of cost over all records."""
    return sum((r.cost for r in records), Decimal(0))


def spend_on(records: Sequence[ExpenseRecord], day: date) -> Decimal:
    """Sum of cost for records dated exactly `day`."""
    return sum((r.cost for r in records if r.date == day), Decimal(0))


def compute_metrics(
    profile: Profile,
    records: Sequence[ExpenseRecord],
    today: date,
    settings: EngineSettings | None = None,
) -> DerivedMetrics:
    """Compute the derived metrics snapshot for a profile.

    Deterministic given `today`. Every division is guarded, so this always
    returns a complete snapshot.

    Args:
        profile: Current profile.
        records: All expense records for the period (not modified).
        today: Current date, supplied by the caller.
        settings: Engine constants (defaults if None).

    Returns:
        DerivedMetrics for `today`.
    """
    settings = settings or DEFAULT_ENGINE_SETTINGS
    credits = profile.monthly_credits

    # Time
    elapsed = count_days_elapsed(profile.start_date, today)
    remaining_days = max(0, profile.period_days - elapsed)

    # Totals
    total_spent = total_cost(records)
    remaining_credits = max(Decimal(0), credits - total_spent)
    today_spend = spend_on(records, today)

    # Burn rates
    burn_rate_overall = total_spent / elapsed if elapsed > 0 else Decimal(0)
    burn_rate_7d = window_burn_rate(records, 7, profile.start_date, today)
    burn_rate_3d = window_burn_rate(records, 3, profile.start_date, today)
    target_burn_rate = credits / profile.period_days

    daily_safe_limit = calculate_safe_limit(
        remaining_credits=remaining_credits,
        remaining_days=remaining_days,
        average_daily_spend=burn_rate_overall,
        target_burn_rate=target_burn_rate,
        preferences=profile.preferences,
        today=today,
        settings=settings,
    )

    # Prefer the recent rate; fall back to the whole-period rate when it is zero
    forecast_rate = burn_rate_7d if burn_rate_7d > 0 else burn_rate_overall
    exhaustion = predict_exhaustion(remaining_credits, forecast_rate, today)

    projected_total_spend = burn_rate_overall * profile.period_days
    surplus_or_deficit = credits - projected_total_spend

    risk_level = classify_risk(
        total_spent=total_spent,
        monthly_credits=credits,
        days_elapsed=elapsed,
        period_days=profile.period_days,
        days_until_exhaustion=exhaustion.days_until,
        remaining_days=remaining_days,
        thresholds=profile.preferences.notification_thresholds,
        settings=settings,
    )

    return DerivedMetrics(
        today=today,
        end_date=profile.end_date,
        expense_count=len(records),
        days_elapsed=elapsed,
        remaining_days=remaining_days,
        total_spent=total_spent,
        remaining_credits=remaining_credits,
        today_spend=today_spend,
        burn_rate_overall=burn_rate_overall,
        burn_rate_7d=burn_rate_7d,
        burn_rate_3d=burn_rate_3d,
        target_burn_rate=target_burn_rate,
        daily_safe_limit=daily_safe_limit,
        exhaustion=exhaustion,
        projected_total_spend=projected_total_spend,
        surplus_or_deficit=surplus_or_deficit,
        risk_level=risk_level,
        credits_used_ratio=usage_ratio(total_spent, credits),
        time_elapsed_ratio=time_ratio(elapsed, profile.period_days),
        confidence_level=classify_confidence(len(records), elapsed),
    )


def category_breakdown(records: Sequence[ExpenseRecord]) -> list[CategoryTotal]:
    """Aggregate spend by raw item type.

    Returns:
        One entry per item type, largest total first. Ties keep the order
        in which the item type first appears.
    """
    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = {}

    for r in records:
        totals[r.item_type] = totals.get(r.item_type, Decimal(0)) + r.cost
        counts[r.item_type] = counts.get(r.item_type, 0) + 1

    grand_total = sum(totals.values(), Decimal(0))
    breakdown = [
        CategoryTotal(
            item_type=item_type,
            total=amount,
            count=counts[item_type],
            share=(amount / grand_total).quantize(Decimal("0.0001"))
            if grand_total > 0
            else Decimal(0),
        )
        for item_type, amount in totals.items()
    ]
    return sorted(breakdown, key=lambda c: c.total, reverse=True)


def daily_spend_series(
    profile: Profile,
    records: Sequence[ExpenseRecord],
    today: date,
    daily_safe_limit: Decimal,
) -> list[DailySpendPoint]:
    """Spend per period day, flagged against the safe limit.

    A day is over the limit above daily_safe_limit, near it above 80% of
    the limit. Days after `today` have no spend value.
    """
    by_day: dict[date, Decimal] = {}
    for r in records:
        by_day[r.date] = by_day.get(r.date, Decimal(0)) + r.cost

    points = []
    for day_number, day in iterate_period_days(profile.start_date, profile.period_days):
        if day > today:
            points.append(DailySpendPoint(day_number=day_number, date=day))
            continue
        spend = by_day.get(day, Decimal(0))
        points.append(
            DailySpendPoint(
                day_number=day_number,
                date=day,
                spend=spend,
                over_limit=spend > daily_safe_limit,
                near_limit=daily_safe_limit * NEAR_LIMIT_RATIO < spend <= daily_safe_limit,
            )
        )
    return points


def depletion_series(
    profile: Profile,
    records: Sequence[ExpenseRecord],
    today: date,
) -> list[DepletionPoint]:
    """Ideal straight-line balance vs actual remaining balance per day.

    Pace per elapsed day:
        AHEAD  - actual >= ideal
        CLOSE  - actual >= 90% of ideal
        BEHIND - otherwise
    Days after `today` are PENDING with no actual value.
    """
    credits = profile.monthly_credits
    ideal_daily = credits / profile.period_days

    by_day: dict[date, Decimal] = {}
    for r in records:
        by_day[r.date] = by_day.get(r.date, Decimal(0)) + r.cost

    points = []
    cumulative = Decimal(0)
    for day_number, day in iterate_period_days(profile.start_date, profile.period_days):
        ideal = credits - ideal_daily * day_number
        if day > today:
            points.append(DepletionPoint(day_number=day_number, date=day, ideal_remaining=ideal))
            continue

        cumulative += by_day.get(day, Decimal(0))
        actual = credits - cumulative
        if actual >= ideal:
            pace = PaceStatus.AHEAD
        elif actual >= ideal * CLOSE_PACE_RATIO:
            pace = PaceStatus.CLOSE
        else:
            pace = PaceStatus.BEHIND

        points.append(
            DepletionPoint(
                day_number=day_number,
                date=day,
                ideal_remaining=ideal,
                actual_remaining=actual,
                pace=pace,
            )
        )
    return points
