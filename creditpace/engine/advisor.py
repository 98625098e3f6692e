"""Advisory engine.

Advice comes from a fixed, ordered table of rules. Each rule pairs a
predicate with a message builder and some metadata. Every predicate is
evaluated (rules are independent and may fire together); firing rules are
sorted by severity, keeping table order among equals, and truncated.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from creditpace.core.config import DEFAULT_ENGINE_SETTINGS, EngineSettings
from creditpace.core.models import (
    AdviceItem,
    DerivedMetrics,
    ExpenseRecord,
    Profile,
    RiskLevel,
    Severity,
)
from creditpace.engine.periods import is_weekend

MAX_ADVICE_ITEMS = 5

Predicate = Callable[[Profile, DerivedMetrics, Sequence[ExpenseRecord], EngineSettings], bool]
MessageBuilder = Callable[[Profile, DerivedMetrics, Sequence[ExpenseRecord], EngineSettings], str]


@dataclass(frozen=True)
class AdviceRule:
    """A declarative advice rule."""

    id: str
    title: str
    severity: Severity
    category: str
    when: Predicate
    message: MessageBuilder

    def evaluate(
        self,
        profile: Profile,
        metrics: DerivedMetrics,
        records: Sequence[ExpenseRecord],
        settings: EngineSettings,
    ) -> AdviceItem | None:
        """Build an AdviceItem if the rule fires, else None."""
        if not self.when(profile, metrics, records, settings):
            return None
        return AdviceItem(
            id=self.id,
            title=self.title,
            message=self.message(profile, metrics, records, settings),
            severity=self.severity,
            category=self.category,
        )


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _whole(value: Decimal) -> int:
    """Round half-up to a whole currency unit."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _percent(ratio: Decimal) -> int:
    return _whole(ratio * 100)


def _item_stats(records: Sequence[ExpenseRecord], item_type: str) -> tuple[int, Decimal]:
    """Return (purchase count, total cost) for one item type."""
    matching = [r.cost for r in records if r.item_type == item_type]
    return len(matching), sum(matching, Decimal(0))


# -----------------------------------------------------------------------------
# Rules
# -----------------------------------------------------------------------------


def _on_track_message(
    profile: Profile,
    metrics: DerivedMetrics,
    records: Sequence[ExpenseRecord],
    settings: EngineSettings,
) -> str:
    amount = abs(_whole(metrics.surplus_or_deficit))
    outcome = "surplus" if metrics.surplus_or_deficit >= 0 else "shortfall"
    return (
        "You're on track! Maintain your current spending pattern to finish "
        f"the period with ~₹{amount} {outcome}."
    )


def _overspending_early_message(
    profile: Profile,
    metrics: DerivedMetrics,
    records: Sequence[ExpenseRecord],
    settings: EngineSettings,
) -> str:
    ease_days = max(3, _whole(Decimal(metrics.remaining_days) / 3))
    return (
        f"You've used {_percent(metrics.credits_used_ratio)}% of credits in "
        f"{_percent(metrics.time_elapsed_ratio)}% of the period. Consider reducing "
        f"spending for the next {ease_days} days."
    )


def _exhaustion_message(
    profile: Profile,
    metrics: DerivedMetrics,
    records: Sequence[ExpenseRecord],
    settings: EngineSettings,
) -> str:
    shortfall = metrics.remaining_days - metrics.days_until_exhaustion
    required = _whole(metrics.remaining_credits / metrics.remaining_days)
    return (
        f"At current rate, credits will finish {shortfall} day(s) before the period "
        f"ends. You'll need to reduce daily spending to ₹{required} to last the "
        "full period."
    )


def _frequent_premium_message(
    profile: Profile,
    metrics: DerivedMetrics,
    records: Sequence[ExpenseRecord],
    settings: EngineSettings,
) -> str:
    item = settings.premium_item_type
    count, total = _item_stats(records, item)
    saving = _whole(total * settings.premium_saving_fraction)
    return (
        f"You've had {item} {count} times (₹{_whole(total)} total). Swapping some "
        f"for cheaper items could save ₹{saving}."
    )


def _indulgence_message(
    profile: Profile,
    metrics: DerivedMetrics,
    records: Sequence[ExpenseRecord],
    settings: EngineSettings,
) -> str:
    item = settings.indulgence_item_type
    _, total = _item_stats(records, item)
    share = _percent(total / profile.monthly_credits)
    return (
        f"{item.capitalize()} purchases account for ₹{_whole(total)} ({share}% of "
        "budget). Consider limiting them to weekends to save credits."
    )


def _daily_limit_message(
    profile: Profile,
    metrics: DerivedMetrics,
    records: Sequence[ExpenseRecord],
    settings: EngineSettings,
) -> str:
    over = _whole(metrics.today_spend - metrics.daily_safe_limit)
    return (
        f"Today's spending (₹{_whole(metrics.today_spend)}) exceeded your safe limit "
        f"(₹{_whole(metrics.daily_safe_limit)}) by ₹{over}. Consider a lighter dinner "
        "or skip snacks to balance."
    )


def _weekend_boost_message(
    profile: Profile,
    metrics: DerivedMetrics,
    records: Sequence[ExpenseRecord],
    settings: EngineSettings,
) -> str:
    return (
        'Tip: Enable "Weekend Boost" in preferences to save credits on weekdays '
        "and enjoy more on weekends."
    )


def _surplus_message(
    profile: Profile,
    metrics: DerivedMetrics,
    records: Sequence[ExpenseRecord],
    settings: EngineSettings,
) -> str:
    return (
        f"Great news! At current pace, you'll finish with ~₹{_whole(metrics.surplus_or_deficit)} "
        "surplus. You can afford a bit more flexibility."
    )


def _critical_balance_message(
    profile: Profile,
    metrics: DerivedMetrics,
    records: Sequence[ExpenseRecord],
    settings: EngineSettings,
) -> str:
    return (
        f"Credits are critically low (₹{_whole(metrics.remaining_credits)}). You may need "
        f"to pay cash for the remaining {metrics.remaining_days} days."
    )


DEFAULT_RULES: tuple[AdviceRule, ...] = (
    AdviceRule(
        id="on_track",
        title="Great Progress",
        severity=Severity.LOW,
        category="positive",
        when=lambda p, m, r, s: (
            m.risk_level == RiskLevel.SAFE and len(r) >= s.on_track_min_expenses
        ),
        message=_on_track_message,
    ),
    AdviceRule(
        id="overspending_early",
        title="Early Overspending",
        severity=Severity.HIGH,
        category="spend_control",
        when=lambda p, m, r, s: (
            m.days_elapsed <= Decimal(p.period_days) / 2
            and m.credits_used_ratio > m.time_elapsed_ratio + s.early_overspend_margin
        ),
        message=_overspending_early_message,
    ),
    AdviceRule(
        id="exhaustion_warning",
        title="Credit Exhaustion Alert",
        severity=Severity.HIGH,
        category="prediction",
        when=lambda p, m, r, s: (
            m.days_until_exhaustion is not None
            and m.days_until_exhaustion < m.remaining_days
        ),
        message=_exhaustion_message,
    ),
    AdviceRule(
        id="frequent_premium",
        title="Premium Item Frequency",
        severity=Severity.MEDIUM,
        category="category_mix",
        when=lambda p, m, r, s: (
            _item_stats(r, s.premium_item_type)[0] >= s.premium_count_threshold
        ),
        message=_frequent_premium_message,
    ),
    AdviceRule(
        id="indulgence_spending",
        title="Indulgence Alert",
        severity=Severity.MEDIUM,
        category="luxury",
        when=lambda p, m, r, s: (
            _item_stats(r, s.indulgence_item_type)[1] > p.monthly_credits * s.indulgence_share
        ),
        message=_indulgence_message,
    ),
    AdviceRule(
        id="daily_limit_exceeded",
        title="Daily Limit Exceeded",
        severity=Severity.HIGH,
        category="daily",
        when=lambda p, m, r, s: (
            m.daily_safe_limit > 0 and m.today_spend > m.daily_safe_limit
        ),
        message=_daily_limit_message,
    ),
    AdviceRule(
        id="weekend_boost_suggestion",
        title="Weekend Boost",
        severity=Severity.LOW,
        category="tip",
        when=lambda p, m, r, s: (
            not p.preferences.weekend_boost
            and not is_weekend(m.today)
            and m.today_spend < m.daily_safe_limit * s.weekday_headroom
        ),
        message=_weekend_boost_message,
    ),
    AdviceRule(
        id="surplus_projection",
        title="Surplus Projected",
        severity=Severity.LOW,
        category="positive",
        when=lambda p, m, r, s: (
            m.surplus_or_deficit > p.monthly_credits * s.surplus_share
            and len(r) >= s.surplus_min_expenses
        ),
        message=_surplus_message,
    ),
    AdviceRule(
        id="critical_balance",
        title="Critical Balance",
        severity=Severity.HIGH,
        category="warning",
        when=lambda p, m, r, s: (
            m.risk_level == RiskLevel.DANGER and m.remaining_credits < s.critical_balance
        ),
        message=_critical_balance_message,
    ),
)


def generate_advice(
    profile: Profile,
    metrics: DerivedMetrics,
    records: Sequence[ExpenseRecord],
    settings: EngineSettings | None = None,
    rules: Sequence[AdviceRule] = DEFAULT_RULES,
) -> list[AdviceItem]:
    """Evaluate all rules and return the most severe advice.

    Args:
        profile: Current profile.
        metrics: Metrics computed for the same profile and records.
        records: Expense records (not modified).
        settings: Engine constants (defaults if None).
        rules: Rule table, evaluated in order.

    Returns:
        At most five items, high severity first, table order among equals.
    """
    settings = settings or DEFAULT_ENGINE_SETTINGS

    fired = [
        item
        for item in (rule.evaluate(profile, metrics, records, settings) for rule in rules)
        if item is not None
    ]
    # sorted() is stable, so table order is kept within a severity
    fired = sorted(fired, key=lambda item: item.severity.rank)

    limit = min(settings.max_advice_items, MAX_ADVICE_ITEMS)
    return fired[:limit]
