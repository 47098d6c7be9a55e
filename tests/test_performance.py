"""Tests for the performance report and its DataFrame conversions."""

from __future__ import annotations

import math
from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from assetflow.config.schema import AssetFlowConfig
from assetflow.engine.index import build_index
from assetflow.engine.outcomes import Unavailable, UnavailableReason
from assetflow.engine.rebalancing import RebalancingAction
from assetflow.engine.records import Asset, Category, make_snapshot
from assetflow.portfolio.performance import (
    HistoryPoint,
    category_history_frame,
    generate_performance_report,
    history_frame,
)

APR_25 = date(2025, 4, 30)
JAN_26 = date(2026, 1, 31)
FEB_26 = date(2026, 2, 28)
MAR_26 = date(2026, 3, 31)

INSUFFICIENT = Unavailable(UnavailableReason.INSUFFICIENT_SNAPSHOTS, required=2)
NO_DATA = Unavailable(UnavailableReason.NO_DATA_IN_WINDOW)


@pytest.fixture
def monthly_index():
    """An old snapshot, then month-end snapshots; deposit on the last one."""
    fund = Asset("VTI", "Broker", "Equities")
    return build_index([
        make_snapshot(APR_25, [(fund, "1000")]),
        make_snapshot(JAN_26, [(fund, "1200")]),
        make_snapshot(FEB_26, [(fund, "1250")]),
        make_snapshot(MAR_26, [(fund, "1300")], cash_flows=[("50", "deposit")]),
    ])


# ---------------------------------------------------------------------------
# Report generation
# ---------------------------------------------------------------------------

class TestEmptyAndSparse:
    def test_empty_index(self):
        """An empty index gives an empty report."""
        report = generate_performance_report(build_index([]))
        assert report.is_empty
        assert report.as_of_date is None
        assert report.total_value == Decimal(0)
        assert report.cumulative_twr == INSUFFICIENT
        assert report.value_history == []

    def test_single_snapshot(self):
        """One snapshot has no returns yet."""
        index = build_index([make_snapshot(JAN_26, [(Asset("X", "A"), "100")])])
        report = generate_performance_report(index)
        assert report.snapshots_count == 1
        assert report.total_value == Decimal("100")
        assert report.cumulative_twr == INSUFFICIENT
        assert report.cagr == INSUFFICIENT
        assert report.twr_history == []
        assert all(pm.growth == NO_DATA for pm in report.periods.values())
        assert report.rebalancing is None
        assert report.goal is None


class TestPerformanceReport:
    def test_headline(self, monthly_index):
        """Headline figures come from the latest view."""
        report = generate_performance_report(monthly_index)
        assert report.as_of_date == MAR_26
        assert report.snapshots_count == 4
        assert report.total_value == Decimal("1300")
        assert report.asset_count == 1

    def test_one_month_period(self, monthly_index):
        """1M growth and return from the month-end snapshot."""
        pm = generate_performance_report(monthly_index).periods["1M"]
        assert pm.window.snapshot_date == FEB_26
        assert pm.growth == Decimal("0.04")
        # the deposit accounts for the whole gain
        assert pm.return_rate == Decimal(0)

    def test_stale_window(self, monthly_index):
        """A window far from its ideal date is unavailable."""
        pm = generate_performance_report(monthly_index).periods["3M"]
        assert pm.window.snapshot_date == APR_25
        assert pm.window.gap_days > 14
        assert pm.growth == NO_DATA
        assert pm.return_rate == NO_DATA

    def test_no_window(self, monthly_index):
        """Nothing early enough leaves the period unavailable."""
        pm = generate_performance_report(monthly_index).periods["1Y"]
        assert pm.window is None
        assert pm.growth == NO_DATA

    def test_wider_tolerance(self, monthly_index):
        """A wider tolerance accepts the old snapshot."""
        config = AssetFlowConfig(performance={"staleness_threshold_days": 300})
        pm = generate_performance_report(monthly_index, config=config).periods["3M"]
        assert pm.growth == Decimal("0.3")
        assert pm.return_rate == Decimal("0.25")

    def test_custom_lookbacks(self, monthly_index):
        """Lookbacks follow the config."""
        config = AssetFlowConfig(performance={"lookback_months": {"2M": 2}})
        report = generate_performance_report(monthly_index, config=config)
        assert list(report.periods) == ["2M"]
        assert report.periods["2M"].window.snapshot_date == JAN_26

    def test_since_inception(self, monthly_index):
        """TWR and CAGR since the first snapshot."""
        report = generate_performance_report(monthly_index)
        assert abs(report.cumulative_twr - Decimal("0.25")) < Decimal("1e-20")
        assert Decimal("0.3") < report.cagr < Decimal("0.35")

    def test_history(self, monthly_index):
        """Value and TWR history per snapshot."""
        report = generate_performance_report(monthly_index)
        assert [p.value for p in report.value_history] == [
            Decimal("1000"), Decimal("1200"), Decimal("1250"), Decimal("1300"),
        ]
        assert report.twr_history[0] == HistoryPoint(APR_25, Decimal(0))
        assert report.twr_history[1].value == Decimal("0.2")

    def test_recent_snapshots_newest_first(self, monthly_index):
        """Recent snapshots are newest first and capped."""
        config = AssetFlowConfig(report={"recent_snapshot_count": 2})
        report = generate_performance_report(monthly_index, config=config)
        assert [r.date for r in report.recent_snapshots] == [MAR_26, FEB_26]

    def test_rebalancing_and_goal(self, monthly_index):
        """Rebalancing and goal progress use the latest view."""
        report = generate_performance_report(
            monthly_index,
            [Category("Equities", Decimal("100"))],
            goal=Decimal("2600"),
        )
        (s,) = report.rebalancing.suggestions
        assert s.action is RebalancingAction.NO_ACTION
        assert report.goal.achievement_pct == Decimal(50)
        assert report.goal.remaining == Decimal("1300")
        assert not report.goal.reached

    def test_category_history_by_display_name(self, sample_index, categories):
        """Category history is keyed by display name."""
        report = generate_performance_report(sample_index, categories)
        history = report.category_value_history
        assert set(history) == {"Equities", "Bonds", "Cash", "Crypto"}
        assert len(history["Equities"]) == 3
        assert [p.date for p in history["Crypto"]] == [date(2026, 3, 1)]

    def test_categories_from_generator(self, sample_index, categories):
        """A one-shot iterable feeds both the history names and rebalancing."""
        report = generate_performance_report(sample_index, (c for c in categories))
        assert report.rebalancing is not None
        assert len(report.rebalancing.suggestions) == 3
        assert "Equities" in report.category_value_history

    def test_uncategorised_label(self):
        """Uncategorised holdings use the configured label."""
        index = build_index([make_snapshot(JAN_26, [(Asset("Gold", "Vault"), "5")])])
        report = generate_performance_report(index)
        assert list(report.category_value_history) == ["Uncategorized"]


# ---------------------------------------------------------------------------
# DataFrame conversion
# ---------------------------------------------------------------------------

class TestFrames:
    def test_history_frame(self, monthly_index):
        """History converts to a date-indexed frame."""
        report = generate_performance_report(monthly_index)
        df = history_frame(report.value_history)
        assert isinstance(df.index, pd.DatetimeIndex)
        assert df.index.name == "date"
        assert df["value"].tolist() == [1000.0, 1200.0, 1250.0, 1300.0]
        assert df["unavailable"].isna().all()

    def test_unavailable_points_are_nan(self):
        """Unavailable points become NaN with a reason."""
        df = history_frame([
            HistoryPoint(JAN_26, Decimal(0)),
            HistoryPoint(FEB_26, NO_DATA),
        ])
        assert math.isnan(df.loc[pd.Timestamp(FEB_26), "value"])
        assert df.loc[pd.Timestamp(FEB_26), "unavailable"] == "no_data_in_window"

    def test_empty_history_frame(self):
        """Empty history keeps the frame columns."""
        df = history_frame([])
        assert df.empty
        assert list(df.columns) == ["value", "unavailable"]

    def test_category_history_frame(self, sample_index, categories):
        """One column per category, aligned by date."""
        report = generate_performance_report(sample_index, categories)
        df = category_history_frame(report.category_value_history)
        assert set(df.columns) == {"Equities", "Bonds", "Cash", "Crypto"}
        assert len(df) == 3
        assert df.index.is_monotonic_increasing
        assert math.isnan(df.loc[pd.Timestamp(2026, 1, 1), "Crypto"])
        assert df.loc[pd.Timestamp(2026, 3, 1), "Crypto"] == 400.0

    def test_category_history_frame_empty(self):
        """No categories gives an empty frame."""
        assert category_history_frame({}).empty
