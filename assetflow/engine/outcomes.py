"""Typed "cannot calculate" outcomes.

Every calculator returns either a ``Decimal`` (a fraction: ``0.2`` is 20%)
or an :class:`Unavailable` carrying a reason from a closed vocabulary.
Presentation layers map the reason to their own wording; the labels in
``REASON_LABELS`` are the English defaults and are kept apart
from the enum values, which are persistence identifiers.
"""

from __future__ import annotations

import decimal
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterator, Union

from assetflow.config.defaults import DECIMAL_PRECISION, PERCENT_PLACES


class UnavailableReason(Enum):
    """Why a metric could not be produced from otherwise valid input."""
    DIVISION_BY_ZERO = "division_by_zero"
    NO_DATA_IN_WINDOW = "no_data_in_window"
    NON_POSITIVE_BEGINNING_VALUE = "non_positive_beginning_value"
    NON_POSITIVE_DENOMINATOR = "non_positive_denominator"
    INSUFFICIENT_SNAPSHOTS = "insufficient_snapshots"
    NON_POSITIVE_PERIOD = "non_positive_period"
    NEGATIVE_ENDING_VALUE = "negative_ending_value"


REASON_LABELS: dict[UnavailableReason, str] = {
    UnavailableReason.DIVISION_BY_ZERO: "Cannot calculate: starting value is zero",
    UnavailableReason.NO_DATA_IN_WINDOW: "Cannot calculate: no snapshot near the lookback date",
    UnavailableReason.NON_POSITIVE_BEGINNING_VALUE: "Cannot calculate: starting value is not positive",
    UnavailableReason.NON_POSITIVE_DENOMINATOR: "Cannot calculate: cash flows exceed the starting value",
    UnavailableReason.INSUFFICIENT_SNAPSHOTS: "Cannot calculate: insufficient data",
    UnavailableReason.NON_POSITIVE_PERIOD: "Cannot calculate: period has no length",
    UnavailableReason.NEGATIVE_ENDING_VALUE: "Cannot calculate: ending value is negative",
}


@dataclass(frozen=True)
class Unavailable:
    """A metric that is undefined for the given input.

    ``required`` is set when the reason has a natural threshold, e.g. the
    number of snapshots needed for ``INSUFFICIENT_SNAPSHOTS``.
    """

    reason: UnavailableReason
    required: int | None = None

    @property
    def label(self) -> str:
        return REASON_LABELS[self.reason]

    def to_dict(self) -> dict[str, object]:
        d: dict[str, object] = {"unavailable": self.reason.value}
        if self.required is not None:
            d["required"] = self.required
        return d


MetricResult = Union[Decimal, Unavailable]


def is_available(result: MetricResult) -> bool:
    return not isinstance(result, Unavailable)


@contextmanager
def engine_context(precision: int = DECIMAL_PRECISION) -> Iterator[decimal.Context]:
    """Local decimal context used for every calculation.

    Rounds half-even at ``precision`` significant digits.  Nothing is
    quantised inside this block; that only happens in :func:`to_percent`.
    """
    with decimal.localcontext() as ctx:
        ctx.prec = precision
        ctx.rounding = decimal.ROUND_HALF_EVEN
        yield ctx


def to_percent(result: MetricResult, places: int = PERCENT_PLACES) -> Decimal | Unavailable:
    """Convert a fraction to a percentage rounded for display (0.1234 -> 12.34)."""
    if isinstance(result, Unavailable):
        return result
    quantum = Decimal(1).scaleb(-places)
    return (result * 100).quantize(quantum, rounding=decimal.ROUND_HALF_UP)


def format_metric(result: MetricResult, places: int = PERCENT_PLACES) -> str:
    """Short human string for logs and the CLI."""
    pct = to_percent(result, places)
    if isinstance(pct, Unavailable):
        return pct.label
    return f"{pct}%"
