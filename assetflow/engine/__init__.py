"""Valuation and performance engine.

Public API:
  build_index          RecordIndex from unordered snapshots
  resolve              CompositeSnapshotView for one snapshot date
  growth_rate          simple growth between two views
  modified_dietz       cash-flow-weighted return for one period
  cumulative_twr       chain sub-period returns
  cagr                 annualised growth
  rebalance            suggestions against category targets
  Unavailable          typed "cannot calculate" outcome

All functions are pure and synchronous.  A built RecordIndex is read-only
and may be shared between threads; each resolution is independent.
"""

from assetflow.engine.cagr import cagr, years_between
from assetflow.engine.carry_forward import (
    CompositeSnapshotView,
    Provenance,
    iter_views,
    resolve,
    resolve_all,
)
from assetflow.engine.dietz import modified_dietz
from assetflow.engine.faults import (
    CashFlowOutOfRange,
    DuplicateSnapshotDate,
    EngineFault,
    FaultCode,
    InvalidPeriod,
    SnapshotNotFound,
)
from assetflow.engine.growth import growth_rate
from assetflow.engine.index import RecordIndex, build_index, validate_records
from assetflow.engine.outcomes import Unavailable, UnavailableReason, is_available
from assetflow.engine.rebalancing import RebalancingPlan, RebalancingSuggestion, rebalance
from assetflow.engine.records import (
    Asset,
    CashFlowOperation,
    Category,
    Snapshot,
    SnapshotAssetValue,
)
from assetflow.engine.twr import cumulative_twr, sub_period_returns

__all__ = [
    "Asset",
    "CashFlowOperation",
    "Category",
    "Snapshot",
    "SnapshotAssetValue",
    "RecordIndex",
    "build_index",
    "validate_records",
    "CompositeSnapshotView",
    "Provenance",
    "resolve",
    "resolve_all",
    "iter_views",
    "growth_rate",
    "modified_dietz",
    "cumulative_twr",
    "sub_period_returns",
    "cagr",
    "years_between",
    "RebalancingPlan",
    "RebalancingSuggestion",
    "rebalance",
    "Unavailable",
    "UnavailableReason",
    "is_available",
    "EngineFault",
    "FaultCode",
    "DuplicateSnapshotDate",
    "SnapshotNotFound",
    "CashFlowOutOfRange",
    "InvalidPeriod",
]
