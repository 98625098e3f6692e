"""CreditPace: projection and advice for a depleting credit balance."""

from creditpace.core.models import (
    AdviceItem,
    DerivedMetrics,
    ExpenseRecord,
    PeriodState,
    Preferences,
    Profile,
)
from creditpace.engine.advisor import generate_advice
from creditpace.engine.calculator import compute_metrics

__version__ = "0.1.0"

__all__ = [
    "AdviceItem",
    "DerivedMetrics",
    "ExpenseRecord",
    "PeriodState",
    "Preferences",
    "Profile",
    "compute_metrics",
    "generate_advice",
]
