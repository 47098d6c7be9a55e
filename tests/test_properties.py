"""Property-based tests using Hypothesis.

Tests universal invariants that should hold for ANY valid input:
- Carry-forward matches a brute-force walk through history
- Composite totals equal the sum of included values
- Rebalancing adjustments sum to zero when targets sum to 100
- Modified Dietz without cash flows equals simple growth
- TWR of all-zero sub-period returns is zero
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from assetflow.engine.carry_forward import Provenance, resolve_all
from assetflow.engine.dietz import modified_dietz
from assetflow.engine.growth import simple_growth
from assetflow.engine.index import build_index
from assetflow.engine.rebalancing import rebalance
from assetflow.engine.records import Asset, Category, make_snapshot
from assetflow.engine.twr import cumulative_twr

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

PLATFORMS = ["alpha", "beta", "gamma", "delta"]
BASE_DAY = date(2026, 1, 1)

money = st.integers(min_value=0, max_value=10_000_000).map(lambda cents: Decimal(cents) / 100)

# one snapshot: day offset plus {platform: [values]}
snapshot_layouts = st.lists(
    st.tuples(
        st.integers(min_value=0, max_value=3650),
        st.dictionaries(
            st.sampled_from(PLATFORMS),
            st.lists(money, min_size=1, max_size=3),
            max_size=len(PLATFORMS),
        ),
    ),
    min_size=1,
    max_size=12,
    unique_by=lambda layout: layout[0],
)


def _build(layouts):
    snaps = []
    for offset, platforms in layouts:
        values = []
        for platform, amounts in platforms.items():
            for i, amount in enumerate(amounts):
                values.append((Asset(f"{platform}-{i}", platform), amount))
        snaps.append(make_snapshot(BASE_DAY + timedelta(days=offset), values))
    return snaps


# ---------------------------------------------------------------------------
# Carry-forward
# ---------------------------------------------------------------------------

class TestCarryForwardProperties:
    @given(layouts=snapshot_layouts)
    @settings(max_examples=100)
    def test_matches_brute_force(self, layouts):
        """Resolution matches a walk back through history."""
        snaps = _build(layouts)
        index = build_index(snaps)
        ordered = sorted(snaps, key=lambda s: s.date)

        for pos, view in enumerate(resolve_all(index)):
            expected: dict[str, tuple[date, Decimal]] = {}
            for snap in reversed(ordered[: pos + 1]):
                for platform in snap.platforms:
                    if platform not in expected:
                        total = sum(
                            (v.market_value for v in snap.asset_values if v.platform_key == platform),
                            Decimal(0),
                        )
                        expected[platform] = (snap.date, total)

            actual = {p: (pv.source_date, pv.total) for p, pv in view.platforms.items()}
            assert actual == expected

    @given(layouts=snapshot_layouts)
    def test_provenance_consistent(self, layouts):
        """Direct values are dated today, carried ones earlier."""
        index = build_index(_build(layouts))
        for view in resolve_all(index):
            for pv in view.platforms.values():
                assert pv.source_date <= view.date
                assert (pv.provenance is Provenance.DIRECT) == (pv.source_date == view.date)

    @given(layouts=snapshot_layouts)
    def test_total_is_sum_of_values(self, layouts):
        """Grand total equals the included values."""
        index = build_index(_build(layouts))
        for view in resolve_all(index):
            assert view.total == sum((v.market_value for v in view.values()), Decimal(0))
            assert view.total == sum(view.category_totals.values(), Decimal(0))

    @given(layouts=snapshot_layouts)
    def test_lookups_bounded_by_platform_count(self, layouts):
        """Lookups equal platforms missing from the date."""
        index = build_index(_build(layouts))
        for view in resolve_all(index):
            assert view.timeline_lookups == len(index.platforms) - len(view.direct_platforms)


# ---------------------------------------------------------------------------
# Rebalancing
# ---------------------------------------------------------------------------

class TestRebalancingProperties:
    @given(
        holdings=st.tuples(money, money, money),
        split=st.tuples(
            st.integers(min_value=0, max_value=100),
            st.integers(min_value=0, max_value=100),
        ).filter(lambda t: t[0] + t[1] <= 100),
    )
    def test_adjustments_sum_to_zero(self, holdings, split):
        """Adjustments net to zero when targets sum to 100."""
        names = ["Equities", "Bonds", "Cash"]
        snap = make_snapshot(BASE_DAY, [
            (Asset(name, "Broker", name), value) for name, value in zip(names, holdings)
        ])
        view = resolve_all(build_index([snap]))[0]
        targets = [split[0], split[1], 100 - split[0] - split[1]]
        plan = rebalance(view, [Category(n, Decimal(t)) for n, t in zip(names, targets)])

        if view.total == 0:
            assert all(not s.is_available for s in plan.suggestions)
        else:
            assert sum((s.adjustment for s in plan.suggestions), Decimal(0)) == 0

    @given(holdings=st.tuples(money, money, money))
    def test_sorted_by_gap(self, holdings):
        """Suggestions are ordered by gap size."""
        names = ["Equities", "Bonds", "Cash"]
        snap = make_snapshot(BASE_DAY, [
            (Asset(name, "Broker", name), value) for name, value in zip(names, holdings)
        ])
        view = resolve_all(build_index([snap]))[0]
        plan = rebalance(view, [Category(n, Decimal("33")) for n in names])
        if view.total > 0:
            gaps = [abs(s.delta_pct) for s in plan.suggestions]
            assert gaps == sorted(gaps, reverse=True)


# ---------------------------------------------------------------------------
# Returns
# ---------------------------------------------------------------------------

class TestReturnProperties:
    @given(
        bv=money.filter(lambda v: v > 0),
        ev=money,
        days=st.integers(min_value=1, max_value=3650),
    )
    def test_dietz_without_flows_is_simple_growth(self, bv, ev, days):
        """Without flows Dietz equals simple growth."""
        end = BASE_DAY + timedelta(days=days)
        assert modified_dietz(bv, ev, [], BASE_DAY, end) == simple_growth(bv, ev)

    @given(n=st.integers(min_value=1, max_value=50))
    def test_zero_returns_chain_to_zero(self, n):
        """Chaining zero returns stays at zero."""
        assert cumulative_twr([Decimal(0)] * n) == 0
