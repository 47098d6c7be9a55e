"""Shared test fixtures for AssetFlow.

Provides a small three-platform portfolio whose platforms report on
different days, so every carry-forward path is exercised:

  2026-01-01  Broker A (VTI, BND)  Bank (Cash)
  2026-02-01  Broker A (VTI, BND)                       Bank carried
  2026-03-01                       Bank (Cash)  Crypto  Broker A carried,
                                                         +100 deposit
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from assetflow.config.schema import AssetFlowConfig
from assetflow.engine.index import RecordIndex, build_index
from assetflow.engine.records import Asset, Category, Snapshot, make_snapshot

JAN = date(2026, 1, 1)
FEB = date(2026, 2, 1)
MAR = date(2026, 3, 1)


# ---------------------------------------------------------------------------
# Core infrastructure
# ---------------------------------------------------------------------------

@pytest.fixture
def test_config() -> AssetFlowConfig:
    """All-defaults config."""
    return AssetFlowConfig()


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

@pytest.fixture
def assets() -> dict[str, Asset]:
    return {
        "vti": Asset("VTI", "Broker A", "Equities"),
        "bnd": Asset("BND", "Broker A", "Bonds"),
        "cash": Asset("Cash", "Bank", "Cash"),
        "btc": Asset("BTC", "Crypto", "Crypto"),
    }


@pytest.fixture
def categories() -> list[Category]:
    return [
        Category("Equities", Decimal("60")),
        Category("Bonds", Decimal("30")),
        Category("Cash", Decimal("10")),
        Category("Crypto"),
    ]


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_snapshots(assets) -> list[Snapshot]:
    """Three snapshots, out of date order."""
    return [
        make_snapshot(MAR, [
            (assets["cash"], "300"),
            (assets["btc"], "400"),
        ], cash_flows=[("100", "Monthly deposit")]),
        make_snapshot(JAN, [
            (assets["vti"], "1000"),
            (assets["bnd"], "500"),
            (assets["cash"], "200"),
        ]),
        make_snapshot(FEB, [
            (assets["vti"], "1100"),
            (assets["bnd"], "510"),
        ]),
    ]


@pytest.fixture
def sample_index(sample_snapshots) -> RecordIndex:
    return build_index(sample_snapshots)
