"""Input records consumed by the engine.

Everything here is an immutable value object.  The persistence layer is
expected to hand over fully materialised records: snapshots already carry
their asset values and cash flows, and assets already carry their platform
and category.  Nothing in the engine follows a lazy relationship.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_identifier(raw: str) -> str:
    """Normalise a name or platform for comparison.

    Trims, collapses internal whitespace runs to one space, lowercases.
    """
    return _WHITESPACE_RUN.sub(" ", raw.strip()).lower()


def _require_decimal(value: object, what: str) -> Decimal:
    # bool is an int subclass; neither belongs in a money field
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Decimal(value)
    if isinstance(value, str):
        return Decimal(value)
    raise TypeError(f"{what} must be an exact decimal, got {type(value).__name__}")


def _require_day(value: object, what: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"{what} must be a date, got {type(value).__name__}")


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Category:
    """An allocation category, optionally with a target percentage (0-100)."""

    name: str
    target_allocation: Decimal | None = None

    def __post_init__(self) -> None:
        if self.target_allocation is not None:
            target = _require_decimal(self.target_allocation, "target_allocation")
            if not Decimal(0) <= target <= Decimal(100):
                raise ValueError(
                    f"target_allocation for {self.name!r} must be within 0-100, got {target}"
                )
            object.__setattr__(self, "target_allocation", target)

    @property
    def key(self) -> str:
        return normalize_identifier(self.name)

    @property
    def has_target(self) -> bool:
        return self.target_allocation is not None


@dataclass(frozen=True)
class Asset:
    """An asset identified by the normalised (name, platform) pair."""

    name: str
    platform: str = ""
    category: str | None = None

    @property
    def platform_key(self) -> str:
        return normalize_identifier(self.platform)

    @property
    def category_key(self) -> str:
        """Normalised category identifier; empty string when uncategorised."""
        return normalize_identifier(self.category) if self.category else ""

    @property
    def identity(self) -> tuple[str, str]:
        return (normalize_identifier(self.name), self.platform_key)


# ---------------------------------------------------------------------------
# Snapshot records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SnapshotAssetValue:
    """Market value of one asset as recorded on one snapshot date."""

    asset: Asset
    market_value: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "market_value", _require_decimal(self.market_value, "market_value")
        )

    @property
    def platform_key(self) -> str:
        return self.asset.platform_key


@dataclass(frozen=True)
class CashFlowOperation:
    """External contribution (positive) or withdrawal (negative)."""

    amount: Decimal
    date: date
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _require_decimal(self.amount, "amount"))
        object.__setattr__(self, "date", _require_day(self.date, "cash flow date"))


@dataclass(frozen=True)
class Snapshot:
    """Everything recorded directly on one calendar day."""

    date: date
    asset_values: tuple[SnapshotAssetValue, ...] = field(default_factory=tuple)
    cash_flows: tuple[CashFlowOperation, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", _require_day(self.date, "snapshot date"))
        object.__setattr__(self, "asset_values", tuple(self.asset_values))
        object.__setattr__(self, "cash_flows", tuple(self.cash_flows))

    @property
    def platforms(self) -> frozenset[str]:
        return frozenset(v.platform_key for v in self.asset_values)

    @property
    def net_cash_flow(self) -> Decimal:
        return sum((cf.amount for cf in self.cash_flows), Decimal(0))


def make_snapshot(
    snapshot_date: date,
    values: Iterable[tuple[Asset, Decimal | str | int]] = (),
    cash_flows: Iterable[tuple[Decimal | str | int, str]] = (),
) -> Snapshot:
    """Convenience constructor.

    ``values`` is ``(asset, market_value)`` pairs; ``cash_flows`` is
    ``(amount, description)`` pairs dated on ``snapshot_date``.
    """
    day = _require_day(snapshot_date, "snapshot date")
    return Snapshot(
        date=day,
        asset_values=tuple(SnapshotAssetValue(asset, v) for asset, v in values),
        cash_flows=tuple(
            CashFlowOperation(amount=amount, date=day, description=desc)
            for amount, desc in cash_flows
        ),
    )
