"""Lookback periods for period metrics (1M / 3M / 1Y).

Finding the snapshot that stands in for "one month ago" is a lookup over
the index, not part of the growth calculation itself.  The growth
calculator only checks the staleness tolerance of whatever it is handed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

import pandas as pd

from assetflow.config.defaults import LOOKBACK_MONTHS
from assetflow.engine.index import RecordIndex


class Period(Enum):
    """Standard lookback periods; ``value`` is the stored identifier."""
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    ONE_YEAR = "1Y"

    @property
    def months(self) -> int:
        return LOOKBACK_MONTHS[self.value]

    @property
    def label(self) -> str:
        return PERIOD_LABELS[self]


PERIOD_LABELS: dict[Period, str] = {
    Period.ONE_MONTH: "1 month",
    Period.THREE_MONTHS: "3 months",
    Period.ONE_YEAR: "1 year",
}


@dataclass(frozen=True)
class LookbackWindow:
    """Where a period metric should start, and the snapshot available for it."""

    ideal_date: date
    snapshot_date: date

    @property
    def gap_days(self) -> int:
        return (self.ideal_date - self.snapshot_date).days


def subtract_months(anchor: date, months: int) -> date:
    """Calendar-month subtraction, clamped to month end (Mar 31 - 1M = Feb 28/29)."""
    return (pd.Timestamp(anchor) - pd.DateOffset(months=months)).date()


def find_lookback_snapshot(
    index: RecordIndex,
    end_date: date,
    months: int,
) -> LookbackWindow | None:
    """Closest snapshot at or before ``end_date - months``.

    Returns None when the index holds nothing that early.  The staleness
    check is left to the growth calculator.
    """
    ideal = subtract_months(end_date, months)
    snap = index.snapshot_on_or_before(ideal)
    if snap is None:
        return None
    return LookbackWindow(ideal_date=ideal, snapshot_date=snap.date)
