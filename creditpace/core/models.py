"""Domain models for CreditPace.

All records are defined here using Pydantic v2 for validation. Models are
frozen: updates produce new instances instead of mutating shared values.
"""

import calendar
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from creditpace.engine.periods import get_period_end

SCHEMA_VERSION = 1


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class UserType(str, Enum):
    """Kind of credit holder. Informational only."""

    HOSTEL_STUDENT = "hostel_student"
    DAY_SCHOLAR = "day_scholar"


class RiskTolerance(str, Enum):
    """How aggressively the safe limit may be stretched."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    SNACKS = "snacks"
    DINNER = "dinner"
    OTHER = "other"


class ItemType(str, Enum):
    """Known item categories.

    ExpenseRecord.item_type is a plain string so that unknown values survive
    a load/save cycle. Display code maps unknown values to OTHER.
    """

    VEG = "veg"
    PANEER = "paneer"
    CHICKEN = "chicken"
    DESSERT = "dessert"
    BEVERAGE = "beverage"
    OTHER = "other"

    @classmethod
    def normalize(cls, value: str) -> "ItemType":
        """Map a raw item type to a known category (unknown -> OTHER)."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class RiskLevel(str, Enum):
    """Three-tier assessment of whether the balance will last."""

    SAFE = "safe"
    WATCH = "watch"
    DANGER = "danger"


class ConfidenceLevel(str, Enum):
    """How much data backs the current projection."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank: high=0, medium=1, low=2."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2}


class PaceStatus(str, Enum):
    """Position of the actual balance relative to the ideal depletion line."""

    AHEAD = "ahead"
    CLOSE = "close"
    BEHIND = "behind"
    PENDING = "pending"


# -----------------------------------------------------------------------------
# Profile
# -----------------------------------------------------------------------------

Fraction = Annotated[Decimal, Field(gt=0, lt=1)]


class NotificationThresholds(BaseModel):
    """Credit-usage ratios at which risk escalates.

    warning < danger is expected but not enforced here; entry code
    validates the ordering (see core.validation.validate_thresholds).
    """

    model_config = ConfigDict(frozen=True)

    warning: Fraction = Decimal("0.7")
    danger: Fraction = Decimal("0.9")


class Preferences(BaseModel):
    """User preferences that shape the safe limit."""

    model_config = ConfigDict(frozen=True)

    risk_tolerance: RiskTolerance = RiskTolerance.MEDIUM
    weekend_boost: bool = False
    exam_mode: bool = False
    max_spend_per_day: Annotated[Decimal, Field(gt=0)] | None = None
    vegetarian: bool = False
    notification_thresholds: NotificationThresholds = Field(
        default_factory=NotificationThresholds
    )


class Profile(BaseModel):
    """Credit allowance for a single accounting period.

    Attributes:
        user_type: Kind of credit holder (informational).
        monthly_credits: Total allowance for the period.
        period_days: Number of days in the period.
        start_date: First day of the period (inclusive).
        preferences: Safe-limit preferences.

    Entry bounds (3000..10000 credits, 28..31 days) are checked by
    core.validation. The model only rejects values the engine cannot
    work with.
    """

    model_config = ConfigDict(frozen=True)

    user_type: UserType = UserType.HOSTEL_STUDENT
    monthly_credits: Annotated[Decimal, Field(gt=0)]
    period_days: Annotated[int, Field(ge=1)]
    start_date: date
    preferences: Preferences = Field(default_factory=Preferences)

    @property
    def end_date(self) -> date:
        """Last day of the period (inclusive)."""
        return get_period_end(self.start_date, self.period_days)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def with_preferences(self, **changes: object) -> "Profile":
        """Return a new profile with updated preferences.

        Changes are re-validated, so an invalid value raises
        pydantic.ValidationError and leaves this profile untouched.
        """
        merged = {**self.preferences.model_dump(), **changes}
        return self.model_copy(update={"preferences": Preferences.model_validate(merged)})

    @classmethod
    def default(cls, today: date) -> "Profile":
        """Profile covering the calendar month that contains `today`."""
        _, days_in_month = calendar.monthrange(today.year, today.month)
        return cls(
            monthly_credits=Decimal(6000),
            period_days=days_in_month,
            start_date=today.replace(day=1),
        )


# -----------------------------------------------------------------------------
# Expense Record
# -----------------------------------------------------------------------------


class ExpenseRecord(BaseModel):
    """A single purchase.

    cost is not range-checked here: entry code rejects cost <= 0 and the
    engine sums whatever it is given.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    date: date
    meal_type: MealType = MealType.LUNCH
    item_type: str = ItemType.VEG.value
    quantity: Annotated[int, Field(ge=1)] = 1
    cost: Decimal
    notes: str | None = None


# -----------------------------------------------------------------------------
# Derived Metrics (output models)
# -----------------------------------------------------------------------------


class ExhaustionForecast(BaseModel):
    """Projected day the balance reaches zero.

    days_until is None when the balance is never exhausted (burn rate <= 0);
    exhaustion_date is None in the same case, and also when the projected
    day is past date.max.
    """

    model_config = ConfigDict(frozen=True)

    exhaustion_date: date | None = None
    days_until: int | None = None

    @property
    def is_finite(self) -> bool:
        return self.days_until is not None


class DerivedMetrics(BaseModel):
    """Snapshot of spending health for one profile on one day.

    Recomputed on every call, never persisted.
    """

    model_config = ConfigDict(frozen=True)

    today: date
    end_date: date
    expense_count: int = 0

    days_elapsed: int
    remaining_days: int

    total_spent: Decimal
    remaining_credits: Decimal  # Never negative, overspend is absorbed
    today_spend: Decimal

    burn_rate_overall: Decimal
    burn_rate_7d: Decimal
    burn_rate_3d: Decimal
    target_burn_rate: Decimal

    daily_safe_limit: Decimal
    exhaustion: ExhaustionForecast

    projected_total_spend: Decimal
    surplus_or_deficit: Decimal  # + = projected surplus

    risk_level: RiskLevel
    credits_used_ratio: Decimal
    time_elapsed_ratio: Decimal
    confidence_level: ConfidenceLevel

    @property
    def average_daily_spend(self) -> Decimal:
        """Alias for burn_rate_overall."""
        return self.burn_rate_overall

    @property
    def predicted_exhaustion_date(self) -> date | None:
        return self.exhaustion.exhaustion_date

    @property
    def days_until_exhaustion(self) -> int | None:
        return self.exhaustion.days_until

    @property
    def days_short(self) -> int | None:
        """Days between the projected exhaustion date and the period end.

        None when the balance lasts past the period end (or is never
        exhausted). 0 means it runs out on the last day.
        """
        exhausted_on = self.exhaustion.exhaustion_date
        if not self.exhaustion.is_finite or exhausted_on is None or exhausted_on > self.end_date:
            return None
        return (self.end_date - exhausted_on).days


class AdviceItem(BaseModel):
    """A single piece of advice produced by the advisory engine."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    message: str
    severity: Severity
    category: str


# -----------------------------------------------------------------------------
# Series Models (chart-ready data)
# -----------------------------------------------------------------------------


class DailySpendPoint(BaseModel):
    """Spend for one period day. spend is None for days after today.

    over_limit and near_limit are exclusive: near means above 80% of the
    safe limit without exceeding it.
    """

    model_config = ConfigDict(frozen=True)

    day_number: int
    date: date
    spend: Decimal | None = None
    over_limit: bool = False
    near_limit: bool = False


class DepletionPoint(BaseModel):
    """Ideal vs actual remaining balance at the end of one period day."""

    model_config = ConfigDict(frozen=True)

    day_number: int
    date: date
    ideal_remaining: Decimal
    actual_remaining: Decimal | None = None
    pace: PaceStatus = PaceStatus.PENDING


class CategoryTotal(BaseModel):
    """Aggregated spend for one item type."""

    model_config = ConfigDict(frozen=True)

    item_type: str
    total: Decimal
    count: int
    share: Decimal = Decimal(0)  # Share of total spend (0.25 = 25%)


# -----------------------------------------------------------------------------
# Period State (persisted unit)
# -----------------------------------------------------------------------------


class PeriodState(BaseModel):
    """Profile plus expense list for the current period.

    This is what the state store persists and what import/export exchanges.
    """

    model_config = ConfigDict(frozen=True)

    schema_version: int = SCHEMA_VERSION
    profile: Profile | None = None
    expenses: list[ExpenseRecord] = Field(default_factory=list)

    def with_profile(self, profile: Profile) -> "PeriodState":
        return self.model_copy(update={"profile": profile})

    def add_expense(self, expense: ExpenseRecord) -> "PeriodState":
        """Return a new state with the expense appended."""
        return self.model_copy(update={"expenses": [*self.expenses, expense]})

    def remove_expense(self, expense_id: UUID) -> "PeriodState":
        """Return a new state without the expense. Unknown ids are ignored."""
        remaining = [e for e in self.expenses if e.id != expense_id]
        return self.model_copy(update={"expenses": remaining})
