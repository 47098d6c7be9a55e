"""Carry-forward resolution: composite snapshot views.

Carry-forward works at the platform level:

  - A platform with at least one value recorded on the target date is
    represented only by those direct values.
  - A platform with nothing recorded on the target date is represented by
    *all* of its values from the most recent earlier snapshot that
    recorded it.  Never a blend of dates, never a look forward.
  - A platform that never reported before the target date is omitted.

Resolution cost is one binary search per non-direct platform, so it does
not grow with the number of snapshots in history.  Views are built fresh
for every call and carried values are never written back anywhere.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Callable, Iterable, Iterator, Mapping

from assetflow.engine.index import PlatformValueRecord, RecordIndex
from assetflow.engine.records import SnapshotAssetValue

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# View types
# ---------------------------------------------------------------------------

class Provenance(Enum):
    DIRECT = "direct"
    CARRIED_FORWARD = "carried_forward"


@dataclass(frozen=True)
class PlatformValue:
    """One platform's contribution to a composite view."""

    record: PlatformValueRecord
    provenance: Provenance

    @property
    def platform(self) -> str:
        return self.record.platform

    @property
    def source_date(self) -> date:
        """Date the values were actually recorded."""
        return self.record.date

    @property
    def is_carried_forward(self) -> bool:
        return self.provenance is Provenance.CARRIED_FORWARD

    @property
    def total(self) -> Decimal:
        return self.record.total


@dataclass(frozen=True)
class CompositeAssetValue:
    """An asset value as it appears in a composite view."""

    value: SnapshotAssetValue
    provenance: Provenance
    source_date: date

    @property
    def is_carried_forward(self) -> bool:
        return self.provenance is Provenance.CARRIED_FORWARD

    @property
    def market_value(self) -> Decimal:
        return self.value.market_value


@dataclass(frozen=True)
class CompositeSnapshotView:
    """Resolved portfolio state for one snapshot date."""

    date: date
    platforms: Mapping[str, PlatformValue]
    total: Decimal
    category_totals: Mapping[str, Decimal]
    timeline_lookups: int = 0
    """Per-platform timeline searches performed while resolving."""

    @property
    def direct_platforms(self) -> frozenset[str]:
        return frozenset(p for p, v in self.platforms.items() if not v.is_carried_forward)

    @property
    def carried_platforms(self) -> frozenset[str]:
        return frozenset(p for p, v in self.platforms.items() if v.is_carried_forward)

    @property
    def asset_count(self) -> int:
        return sum(len(v.record.asset_values) for v in self.platforms.values())

    def values(self) -> Iterator[CompositeAssetValue]:
        """Every included asset value, platform by platform."""
        for platform in sorted(self.platforms):
            pv = self.platforms[platform]
            for sav in pv.record.asset_values:
                yield CompositeAssetValue(
                    value=sav, provenance=pv.provenance, source_date=pv.source_date
                )

    def category_total(self, category_key: str) -> Decimal:
        return self.category_totals.get(category_key, Decimal(0))

    def category_allocation(self, category_key: str) -> Decimal:
        """Share of the total held in a category, in percent; 0 when empty."""
        if self.total <= 0:
            return Decimal(0)
        return self.category_total(category_key) / self.total * 100


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve(target_date: date, index: RecordIndex) -> CompositeSnapshotView:
    """Resolve the composite view for the snapshot dated *target_date*.

    Raises
    ------
    SnapshotNotFound
        *target_date* is not a snapshot date in *index*.
    """
    snapshot = index.snapshot_at(target_date)

    direct: dict[str, list[SnapshotAssetValue]] = {}
    for sav in snapshot.asset_values:
        direct.setdefault(sav.platform_key, []).append(sav)

    platforms: dict[str, PlatformValue] = {
        platform: PlatformValue(
            record=PlatformValueRecord(
                platform=platform, date=target_date, asset_values=tuple(values)
            ),
            provenance=Provenance.DIRECT,
        )
        for platform, values in direct.items()
    }

    lookups = 0
    for platform, timeline in index.timelines().items():
        if platform in direct:
            continue
        lookups += 1
        record = timeline.latest_before(target_date)
        if record is None:
            continue
        platforms[platform] = PlatformValue(record=record, provenance=Provenance.CARRIED_FORWARD)

    total = Decimal(0)
    category_totals: dict[str, Decimal] = {}
    for pv in platforms.values():
        for sav in pv.record.asset_values:
            total += sav.market_value
            key = sav.asset.category_key
            category_totals[key] = category_totals.get(key, Decimal(0)) + sav.market_value

    logger.debug(
        "Resolved %s: %d direct, %d carried, total=%s",
        target_date, len(direct), len(platforms) - len(direct), total,
    )
    return CompositeSnapshotView(
        date=target_date,
        platforms=MappingProxyType(platforms),
        total=total,
        category_totals=MappingProxyType(category_totals),
        timeline_lookups=lookups,
    )


def composite_total(target_date: date, index: RecordIndex) -> Decimal:
    """Grand total of the composite view for *target_date*."""
    return resolve(target_date, index).total


def iter_views(
    dates: Iterable[date],
    index: RecordIndex,
    should_continue: Callable[[], bool] | None = None,
) -> Iterator[CompositeSnapshotView]:
    """Resolve views for many dates, one at a time.

    *should_continue* is polled before each resolution; returning False
    stops the run.  Breaking out of the loop works the same way.
    """
    for target in dates:
        if should_continue is not None and not should_continue():
            logger.debug("Bulk resolution stopped before %s", target)
            return
        yield resolve(target, index)


def resolve_all(index: RecordIndex) -> list[CompositeSnapshotView]:
    """Composite views for every snapshot in the index, ascending by date."""
    return list(iter_views(index.dates, index))
