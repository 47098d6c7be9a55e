"""Simple growth rate between two composite views."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from assetflow.config.defaults import DECIMAL_PRECISION, STALENESS_THRESHOLD_DAYS
from assetflow.engine.carry_forward import CompositeSnapshotView
from assetflow.engine.outcomes import MetricResult, Unavailable, UnavailableReason, engine_context

logger = logging.getLogger(__name__)


def simple_growth(
    begin_value: Decimal,
    end_value: Decimal,
    precision: int = DECIMAL_PRECISION,
) -> MetricResult:
    """``(end - begin) / begin``; DIVISION_BY_ZERO when *begin* is zero."""
    if begin_value == 0:
        return Unavailable(UnavailableReason.DIVISION_BY_ZERO)
    with engine_context(precision):
        return (end_value - begin_value) / begin_value


def growth_rate(
    current: CompositeSnapshotView,
    prior: CompositeSnapshotView | None,
    *,
    ideal_date: date | None = None,
    tolerance_days: int = STALENESS_THRESHOLD_DAYS,
    precision: int = DECIMAL_PRECISION,
) -> MetricResult:
    """Growth from *prior* to *current*.

    Parameters
    ----------
    current : CompositeSnapshotView
        View at the end of the period.
    prior : CompositeSnapshotView | None
        View at the start of the period; None when the caller found no
        snapshot inside the lookback window.
    ideal_date : date | None
        The exact lookback date the period wanted.  When given, a *prior*
        dated more than *tolerance_days* earlier is treated as stale.
    tolerance_days : int
        Staleness tolerance in days.

    Returns
    -------
    Decimal | Unavailable
        Fractional growth, or NO_DATA_IN_WINDOW / DIVISION_BY_ZERO.
    """
    if prior is None:
        return Unavailable(UnavailableReason.NO_DATA_IN_WINDOW)

    if ideal_date is not None:
        gap = (ideal_date - prior.date).days
        if gap > tolerance_days:
            logger.debug(
                "Prior snapshot %s is %d days before %s (tolerance %d)",
                prior.date, gap, ideal_date, tolerance_days,
            )
            return Unavailable(UnavailableReason.NO_DATA_IN_WINDOW)

    return simple_growth(prior.total, current.total, precision)
