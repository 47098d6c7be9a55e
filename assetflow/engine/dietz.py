"""Modified Dietz return.

    R = (EV - BV - sum(CF)) / (BV + sum(CF_i * W_i))
    W_i = (period_end - date_i) / (period_end - period_start)

A contribution on the first day of the period is weighted 1.0 (it was in
the portfolio the whole time); one on the last day is weighted 0.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Sequence

from assetflow.config.defaults import DECIMAL_PRECISION
from assetflow.engine.faults import CashFlowOutOfRange, InvalidPeriod
from assetflow.engine.outcomes import MetricResult, Unavailable, UnavailableReason, engine_context
from assetflow.engine.records import CashFlowOperation

logger = logging.getLogger(__name__)


def cash_flow_weight(flow_date: date, period_start: date, period_end: date) -> Decimal:
    """Fraction of the period a cash flow dated *flow_date* was invested."""
    total_days = (period_end - period_start).days
    return Decimal((period_end - flow_date).days) / Decimal(total_days)


def modified_dietz(
    beginning_value: Decimal,
    ending_value: Decimal,
    cash_flows: Sequence[CashFlowOperation],
    period_start: date,
    period_end: date,
    precision: int = DECIMAL_PRECISION,
) -> MetricResult:
    """Modified Dietz return for one period.

    Parameters:
        beginning_value: Composite value at *period_start* (BV).
        ending_value: Composite value at *period_end* (EV).
        cash_flows: External flows dated within ``[period_start, period_end]``.
        period_start: First day of the period.
        period_end: Last day of the period.

    Returns:
        Fractional return, or Unavailable with NON_POSITIVE_BEGINNING_VALUE,
        DIVISION_BY_ZERO (zero-length period) or NON_POSITIVE_DENOMINATOR.

    Raises:
        InvalidPeriod: *period_end* precedes *period_start*.
        CashFlowOutOfRange: a cash flow is dated outside the period.
    """
    if period_end < period_start:
        logger.warning("Inverted period %s..%s", period_start, period_end)
        raise InvalidPeriod(period_start, period_end)

    for cf in cash_flows:
        if not period_start <= cf.date <= period_end:
            logger.warning(
                "Cash flow on %s outside %s..%s", cf.date, period_start, period_end
            )
            raise CashFlowOutOfRange(cf.date, period_start, period_end)

    if beginning_value <= 0:
        return Unavailable(UnavailableReason.NON_POSITIVE_BEGINNING_VALUE)

    if period_end == period_start:
        return Unavailable(UnavailableReason.DIVISION_BY_ZERO)

    with engine_context(precision):
        net_flow = sum((cf.amount for cf in cash_flows), Decimal(0))
        weighted_flow = sum(
            (cf.amount * cash_flow_weight(cf.date, period_start, period_end) for cf in cash_flows),
            Decimal(0),
        )
        denominator = beginning_value + weighted_flow
        if denominator <= 0:
            return Unavailable(UnavailableReason.NON_POSITIVE_DENOMINATOR)
        return (ending_value - beginning_value - net_flow) / denominator
