"""Configuration for CreditPace.

EngineSettings holds the tunable constants of the projection and advisory
engine. AppSettings holds process-level settings loaded from the environment
(prefix CREDITPACE_) or a .env file.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from creditpace.core.models import RiskTolerance


def _default_tolerance_factors() -> dict[RiskTolerance, Decimal]:
    return {
        RiskTolerance.LOW: Decimal("0.85"),
        RiskTolerance.MEDIUM: Decimal("1.0"),
        RiskTolerance.HIGH: Decimal("1.1"),
    }


class EngineSettings(BaseModel):
    """Tunable constants for the projection and advisory engine.

    Defaults reproduce the reference behaviour. Category bindings for the
    advice rules live here rather than on ItemType.
    """

    model_config = ConfigDict(frozen=True)

    # Safe limit
    dampening_exponent: Decimal = Decimal("0.5")  # Partial overshoot correction
    tolerance_factors: dict[RiskTolerance, Decimal] = Field(
        default_factory=_default_tolerance_factors
    )
    weekend_multiplier: Decimal = Decimal("1.15")
    exam_multiplier: Decimal = Decimal("1.05")

    # Risk
    exhaustion_margin_days: int = 3
    danger_pace_margin: Decimal = Decimal("0.15")
    watch_pace_margin: Decimal = Decimal("0.05")

    # Advice
    premium_item_type: str = "chicken"
    premium_count_threshold: int = 5
    premium_saving_fraction: Decimal = Decimal("0.3")
    indulgence_item_type: str = "dessert"
    indulgence_share: Decimal = Decimal("0.1")
    early_overspend_margin: Decimal = Decimal("0.1")
    surplus_share: Decimal = Decimal("0.1")
    surplus_min_expenses: int = 5
    on_track_min_expenses: int = 3
    critical_balance: Decimal = Decimal(500)
    weekday_headroom: Decimal = Decimal("0.8")
    max_advice_items: Annotated[int, Field(ge=0, le=5)] = 5

    def tolerance_factor(self, tolerance: RiskTolerance) -> Decimal:
        return self.tolerance_factors.get(tolerance, Decimal(1))


DEFAULT_ENGINE_SETTINGS = EngineSettings()


class AppSettings(BaseSettings):
    """Process configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CREDITPACE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    state_file: Path = Path.home() / ".creditpace" / "state.json"
    log_level: str = "WARNING"
    log_format: Literal["rich", "json"] = "rich"
    currency_symbol: str = "₹"


@lru_cache
def get_settings() -> AppSettings:
    """Return process settings (cached after first call)."""
    return AppSettings()
