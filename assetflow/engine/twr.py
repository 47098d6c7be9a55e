"""Time-weighted return: chaining Modified Dietz sub-period returns.

    TWR = (1 + r1) * (1 + r2) * ... * (1 + rn) - 1

Each sub-period runs between two consecutive snapshots.  The cash flows of
a sub-period are the ones recorded on snapshots in ``(begin, end]``; with
consecutive snapshots that is just the end snapshot, weighted 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from assetflow.config.defaults import DECIMAL_PRECISION
from assetflow.engine.carry_forward import CompositeSnapshotView, resolve_all
from assetflow.engine.dietz import modified_dietz
from assetflow.engine.index import RecordIndex
from assetflow.engine.outcomes import MetricResult, Unavailable, UnavailableReason, engine_context

logger = logging.getLogger(__name__)

MIN_SNAPSHOTS = 2


@dataclass(frozen=True)
class SubPeriodReturn:
    """Modified Dietz return between two consecutive snapshots."""

    start: date
    end: date
    result: MetricResult


def cumulative_twr(
    sub_period_returns: Iterable[MetricResult],
    precision: int = DECIMAL_PRECISION,
) -> MetricResult:
    """Compound an ordered sequence of sub-period returns.

    An empty sequence means fewer than two snapshots and is
    INSUFFICIENT_SNAPSHOTS.  The first Unavailable element is returned
    as-is; there is no partial chaining.
    """
    product = Decimal(1)
    count = 0
    with engine_context(precision):
        for r in sub_period_returns:
            if isinstance(r, Unavailable):
                return r
            product *= 1 + r
            count += 1
        if count == 0:
            return Unavailable(UnavailableReason.INSUFFICIENT_SNAPSHOTS, required=MIN_SNAPSHOTS)
        return product - 1


def sub_period_returns(
    index: RecordIndex,
    views: Sequence[CompositeSnapshotView] | None = None,
    precision: int = DECIMAL_PRECISION,
) -> list[SubPeriodReturn]:
    """Modified Dietz return for every consecutive pair of snapshots.

    *views* may be passed when the caller has already resolved every
    snapshot (ascending); otherwise they are resolved here.
    """
    if views is None:
        views = resolve_all(index)

    returns: list[SubPeriodReturn] = []
    for begin, end in zip(views, views[1:]):
        flows = index.cash_flows_between(begin.date, end.date)
        result = modified_dietz(
            begin.total, end.total, flows, begin.date, end.date, precision=precision
        )
        if isinstance(result, Unavailable):
            logger.debug("Sub-period %s..%s unavailable: %s", begin.date, end.date, result.reason.value)
        returns.append(SubPeriodReturn(start=begin.date, end=end.date, result=result))
    return returns


def twr_history(
    returns: Sequence[SubPeriodReturn],
    precision: int = DECIMAL_PRECISION,
) -> list[tuple[date, MetricResult]]:
    """Cumulative TWR at each snapshot date, starting at 0 on the first.

    Once a sub-period is unavailable every later point carries that
    outcome; the chain is never patched over a gap.
    """
    if not returns:
        return []

    history: list[tuple[date, MetricResult]] = [(returns[0].start, Decimal(0))]
    product = Decimal(1)
    broken: Unavailable | None = None
    with engine_context(precision):
        for sp in returns:
            if broken is None and isinstance(sp.result, Unavailable):
                broken = sp.result
            if broken is not None:
                history.append((sp.end, broken))
                continue
            product *= 1 + sp.result
            history.append((sp.end, product - 1))
    return history
