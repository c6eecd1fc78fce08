"""Tariffs turning consumed kWh into an amount due."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from smartmeter.core.config import settings


class Tariff(Protocol):
    """Pricing rule for a billing window."""

    def amount_due(
        self, total_consumption: Decimal, window: tuple[datetime, datetime]
    ) -> Decimal: ...


class FlatRateTariff:
    """Single price per kWh, independent of the window."""

    def __init__(self, rate_per_kwh: Decimal) -> None:
        if rate_per_kwh < 0:
            raise ValueError("Tariff rate must not be negative")
        self.rate = Decimal(rate_per_kwh)

    def amount_due(self, total_consumption: Decimal, window: tuple[datetime, datetime]) -> Decimal:
        # ROUND_HALF_UP to whole cents
        return (total_consumption * self.rate).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def get_tariff() -> Tariff:
    """Build the default tariff from settings."""
    return FlatRateTariff(settings.TARIFF_RATE_PER_KWH)
