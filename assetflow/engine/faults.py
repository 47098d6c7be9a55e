"""Structural faults.

These signal a broken data-loading contract (duplicate dates, a cash flow
outside its period, a date the index does not know).  They abort the
computation.  Expected numeric gaps are not faults; see ``outcomes``.
"""

from __future__ import annotations

from datetime import date
from enum import Enum


class FaultCode(Enum):
    """Stable machine-readable code per fault kind."""
    DUPLICATE_SNAPSHOT_DATE = "duplicate_snapshot_date"
    SNAPSHOT_NOT_FOUND = "snapshot_not_found"
    CASH_FLOW_OUT_OF_RANGE = "cash_flow_out_of_range"
    INVALID_PERIOD = "invalid_period"


class EngineFault(ValueError):
    """Base class for structural faults raised by the engine."""

    code: FaultCode


class DuplicateSnapshotDate(EngineFault):
    code = FaultCode.DUPLICATE_SNAPSHOT_DATE

    def __init__(self, snapshot_date: date) -> None:
        self.snapshot_date = snapshot_date
        super().__init__(f"more than one snapshot dated {snapshot_date.isoformat()}")


class SnapshotNotFound(EngineFault):
    code = FaultCode.SNAPSHOT_NOT_FOUND

    def __init__(self, snapshot_date: date) -> None:
        self.snapshot_date = snapshot_date
        super().__init__(f"no snapshot dated {snapshot_date.isoformat()} in the index")


class CashFlowOutOfRange(EngineFault):
    code = FaultCode.CASH_FLOW_OUT_OF_RANGE

    def __init__(self, cash_flow_date: date, start: date, end: date) -> None:
        self.cash_flow_date = cash_flow_date
        self.start = start
        self.end = end
        super().__init__(
            f"cash flow dated {cash_flow_date.isoformat()} falls outside "
            f"[{start.isoformat()}, {end.isoformat()}]"
        )


class InvalidPeriod(EngineFault):
    code = FaultCode.INVALID_PERIOD

    def __init__(self, start: date, end: date) -> None:
        self.start = start
        self.end = end
        super().__init__(
            f"period end {end.isoformat()} is before period start {start.isoformat()}"
        )
