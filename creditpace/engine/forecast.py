"""Balance exhaustion forecast."""

from datetime import date, timedelta
from decimal import ROUND_CEILING, Decimal

from creditpace.core.models import ExhaustionForecast


def predict_exhaustion(
    remaining_credits: Decimal,
    burn_rate: Decimal,
    today: date,
) -> ExhaustionForecast:
    """Project when the balance reaches zero at the given burn rate.

    Returns:
        - today and 0 days if the balance is already exhausted,
        - no date and days_until=None if burn_rate <= 0 (never),
        - otherwise ceil(remaining / rate) days from today. The date is
          None when it falls past the last representable calendar day.
    """
    if remaining_credits <= 0:
        return ExhaustionForecast(exhaustion_date=today, days_until=0)

    if burn_rate <= 0:
        return ExhaustionForecast()

    days_until = int((remaining_credits / burn_rate).to_integral_value(rounding=ROUND_CEILING))
    if days_until > (date.max - today).days:
        return ExhaustionForecast(days_until=days_until)

    return ExhaustionForecast(
        exhaustion_date=today + timedelta(days=days_until),
        days_until=days_until,
    )
