"""Compound annual growth rate.

    CAGR = (EV / BV) ** (1 / years) - 1

Computed with ``Decimal`` exponentiation at the engine's context
precision; nothing is rounded until presentation (``outcomes.to_percent``).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from assetflow.config.defaults import DAYS_PER_YEAR, DECIMAL_PRECISION
from assetflow.engine.outcomes import MetricResult, Unavailable, UnavailableReason, engine_context


def years_between(start: date, end: date, days_per_year: Decimal = Decimal(DAYS_PER_YEAR)) -> Decimal:
    """Elapsed calendar days as fractional years."""
    return Decimal((end - start).days) / days_per_year


def cagr(
    beginning_value: Decimal,
    ending_value: Decimal,
    years_elapsed: Decimal | int,
    precision: int = DECIMAL_PRECISION,
) -> MetricResult:
    """Annualise the growth from *beginning_value* to *ending_value*."""
    years = Decimal(years_elapsed)
    if beginning_value <= 0:
        return Unavailable(UnavailableReason.NON_POSITIVE_BEGINNING_VALUE)
    if years <= 0:
        return Unavailable(UnavailableReason.NON_POSITIVE_PERIOD)
    if ending_value < 0:
        return Unavailable(UnavailableReason.NEGATIVE_ENDING_VALUE)

    with engine_context(precision):
        ratio = ending_value / beginning_value
        if ratio == 0:
            return Decimal(-1)
        return ratio ** (Decimal(1) / years) - 1
