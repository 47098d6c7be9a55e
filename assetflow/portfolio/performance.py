"""Portfolio performance report built from a record index.

Resolves every snapshot's composite view once, then derives:
  - latest composite value and asset count
  - growth and Modified Dietz return over each lookback period (1M/3M/1Y)
  - cumulative TWR and CAGR since the first snapshot
  - value, TWR and per-category value history for charts
  - rebalancing plan for the latest view

History series convert to pandas DataFrames for charting collaborators.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

import pandas as pd

from assetflow.config.schema import AssetFlowConfig
from assetflow.engine.cagr import cagr, years_between
from assetflow.engine.carry_forward import CompositeSnapshotView, resolve_all
from assetflow.engine.dietz import modified_dietz
from assetflow.engine.goals import achievement_rate, distance_to_goal, is_goal_reached
from assetflow.engine.growth import growth_rate
from assetflow.engine.index import RecordIndex
from assetflow.engine.outcomes import MetricResult, Unavailable, UnavailableReason
from assetflow.engine.periods import LookbackWindow, find_lookback_snapshot
from assetflow.engine.rebalancing import RebalancingPlan, rebalance
from assetflow.engine.records import Category
from assetflow.engine.twr import MIN_SNAPSHOTS, cumulative_twr, sub_period_returns, twr_history

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HistoryPoint:
    """One dated value on a chart series."""

    date: date
    value: MetricResult


@dataclass
class PeriodMetrics:
    """Growth and return over one lookback period."""

    label: str
    months: int
    window: LookbackWindow | None = None
    growth: MetricResult = Unavailable(UnavailableReason.NO_DATA_IN_WINDOW)
    return_rate: MetricResult = Unavailable(UnavailableReason.NO_DATA_IN_WINDOW)


@dataclass(frozen=True)
class RecentSnapshot:
    date: date
    total_value: Decimal
    asset_count: int


@dataclass
class GoalProgress:
    goal: Decimal
    achievement_pct: Decimal
    remaining: Decimal
    reached: bool


@dataclass
class PerformanceReport:
    """Everything the dashboard shows, as value objects."""

    as_of_date: date | None = None
    snapshots_count: int = 0
    total_value: Decimal = Decimal(0)
    asset_count: int = 0
    periods: dict[str, PeriodMetrics] = field(default_factory=dict)
    cumulative_twr: MetricResult = Unavailable(
        UnavailableReason.INSUFFICIENT_SNAPSHOTS, required=MIN_SNAPSHOTS
    )
    cagr: MetricResult = Unavailable(
        UnavailableReason.INSUFFICIENT_SNAPSHOTS, required=MIN_SNAPSHOTS
    )
    value_history: list[HistoryPoint] = field(default_factory=list)
    twr_history: list[HistoryPoint] = field(default_factory=list)
    category_value_history: dict[str, list[HistoryPoint]] = field(default_factory=dict)
    recent_snapshots: list[RecentSnapshot] = field(default_factory=list)
    rebalancing: RebalancingPlan | None = None
    goal: GoalProgress | None = None

    @property
    def is_empty(self) -> bool:
        return self.snapshots_count == 0


# ---------------------------------------------------------------------------
# Report generation
# ---------------------------------------------------------------------------

def generate_performance_report(
    index: RecordIndex,
    categories: Iterable[Category] = (),
    config: AssetFlowConfig | None = None,
    goal: Decimal | None = None,
) -> PerformanceReport:
    """Build a :class:`PerformanceReport` from a record index.

    Parameters
    ----------
    index : RecordIndex
        Index over every snapshot of the portfolio.
    categories : Iterable[Category]
        Reference categories for rebalancing and labelling.
    config : AssetFlowConfig | None
        Lookback, staleness and precision settings.  Defaults if None.
    goal : Decimal | None
        Optional financial goal amount.

    Returns
    -------
    PerformanceReport
        Empty report (``snapshots_count == 0``) for an empty index.
    """
    cats = list(categories)
    if config is None:
        config = AssetFlowConfig()
    precision = config.precision.decimal_precision

    if len(index) == 0:
        return PerformanceReport()

    views = resolve_all(index)
    by_date = {v.date: v for v in views}
    latest = views[-1]
    first = views[0]

    report = PerformanceReport(
        as_of_date=latest.date,
        snapshots_count=len(views),
        total_value=latest.total,
        asset_count=latest.asset_count,
    )

    # Period metrics
    for label, months in config.performance.lookback_months.items():
        report.periods[label] = _period_metrics(
            label, months, index, by_date, latest, config
        )

    # Since-inception metrics
    returns = sub_period_returns(index, views, precision=precision)
    if len(views) >= MIN_SNAPSHOTS:
        report.cumulative_twr = cumulative_twr((r.result for r in returns), precision=precision)
        years = years_between(first.date, latest.date, config.performance.days_per_year)
        report.cagr = cagr(first.total, latest.total, years, precision=precision)

    # History
    report.value_history = [HistoryPoint(v.date, v.total) for v in views]
    report.twr_history = [
        HistoryPoint(d, r) for d, r in twr_history(returns, precision=precision)
    ]
    report.category_value_history = _category_history(views, cats, config)

    n_recent = config.report.recent_snapshot_count
    report.recent_snapshots = [
        RecentSnapshot(date=v.date, total_value=v.total, asset_count=v.asset_count)
        for v in reversed(views[-n_recent:])
    ]

    if cats:
        report.rebalancing = rebalance(
            latest, cats,
            minimum_adjustment=config.rebalancing.minimum_adjustment,
            precision=precision,
        )

    if goal is not None:
        report.goal = GoalProgress(
            goal=goal,
            achievement_pct=achievement_rate(latest.total, goal),
            remaining=distance_to_goal(latest.total, goal),
            reached=is_goal_reached(latest.total, goal),
        )

    logger.info(
        "Performance report as of %s: %d snapshots, total=%s",
        report.as_of_date, report.snapshots_count, report.total_value,
    )
    return report


def _period_metrics(
    label: str,
    months: int,
    index: RecordIndex,
    by_date: dict[date, CompositeSnapshotView],
    latest: CompositeSnapshotView,
    config: AssetFlowConfig,
) -> PeriodMetrics:
    tolerance = config.performance.staleness_threshold_days
    window = find_lookback_snapshot(index, latest.date, months)
    metrics = PeriodMetrics(label=label, months=months, window=window)

    # the return shares the window, so a missing or stale window blanks both
    if window is None or window.gap_days > tolerance:
        return metrics

    prior = by_date[window.snapshot_date]
    metrics.growth = growth_rate(
        latest, prior,
        ideal_date=window.ideal_date,
        tolerance_days=tolerance,
        precision=config.precision.decimal_precision,
    )
    metrics.return_rate = modified_dietz(
        prior.total,
        latest.total,
        index.cash_flows_between(prior.date, latest.date),
        prior.date,
        latest.date,
        precision=config.precision.decimal_precision,
    )
    return metrics


def _category_history(
    views: list[CompositeSnapshotView],
    categories: Iterable[Category],
    config: AssetFlowConfig,
) -> dict[str, list[HistoryPoint]]:
    """Per-category value at each snapshot, keyed by display name."""
    names = {c.key: c.name for c in categories}
    names.setdefault("", config.report.uncategorized_label)
    history: dict[str, list[HistoryPoint]] = {}
    for view in views:
        for key, value in view.category_totals.items():
            history.setdefault(names.get(key, key), []).append(HistoryPoint(view.date, value))
    return history


# ---------------------------------------------------------------------------
# DataFrame conversion
# ---------------------------------------------------------------------------

def history_frame(points: Iterable[HistoryPoint]) -> pd.DataFrame:
    """Chart-ready frame indexed by date.

    ``value`` is float (NaN where unavailable); ``unavailable`` holds the
    reason identifier or None.
    """
    rows = []
    for p in points:
        if isinstance(p.value, Unavailable):
            rows.append({"date": p.date, "value": float("nan"), "unavailable": p.value.reason.value})
        else:
            rows.append({"date": p.date, "value": float(p.value), "unavailable": None})
    df = pd.DataFrame(rows, columns=["date", "value", "unavailable"])
    if not df.empty:
        df["date"] = pd.to_datetime(df["date"])
    return df.set_index("date")


def category_history_frame(history: dict[str, list[HistoryPoint]]) -> pd.DataFrame:
    """Wide frame: one column per category, one row per snapshot date."""
    series = {
        name: history_frame(points)["value"]
        for name, points in history.items()
    }
    if not series:
        return pd.DataFrame()
    return pd.DataFrame(series).sort_index()
