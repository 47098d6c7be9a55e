"""Record index: snapshots by date plus a per-platform timeline.

Built once in a single pass over every asset-value record and shared
read-only by all later resolutions.  The per-platform timelines are what
let the carry-forward resolver answer "when did this platform last report
before D?" with a binary search instead of a walk through history.

The index is immutable after construction (tuples and mapping proxies) and
can be shared between threads without locking.
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping

from assetflow.engine.faults import CashFlowOutOfRange, DuplicateSnapshotDate, SnapshotNotFound
from assetflow.engine.records import CashFlowOperation, Snapshot, SnapshotAssetValue

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Index entries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlatformValueRecord:
    """All values one platform reported on one snapshot date."""

    platform: str
    date: date
    asset_values: tuple[SnapshotAssetValue, ...]

    @property
    def total(self) -> Decimal:
        return sum((v.market_value for v in self.asset_values), Decimal(0))


@dataclass(frozen=True)
class PlatformTimeline:
    """Ascending-by-date reports for one platform.

    ``dates`` mirrors ``records`` so ``bisect`` can run on plain dates.
    """

    platform: str
    dates: tuple[date, ...]
    records: tuple[PlatformValueRecord, ...]

    def latest_before(self, target: date) -> PlatformValueRecord | None:
        """Most recent record strictly before *target*, or None."""
        pos = bisect_left(self.dates, target)
        if pos == 0:
            return None
        return self.records[pos - 1]


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------

class RecordIndex:
    """Read-only lookup structure over a universe of snapshots.

    Usage::

        index = build_index(snapshots)
        snap = index.snapshot_at(date(2026, 2, 1))
        record = index.timeline("broker a").latest_before(snap.date)
    """

    def __init__(
        self,
        snapshots: tuple[Snapshot, ...],
        timelines: Mapping[str, PlatformTimeline],
    ) -> None:
        self._snapshots = snapshots
        self._dates = tuple(s.date for s in snapshots)
        self._by_date = MappingProxyType({s.date: s for s in snapshots})
        self._timelines = MappingProxyType(dict(timelines))
        self._platforms = tuple(sorted(self._timelines))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def snapshots(self) -> tuple[Snapshot, ...]:
        """All snapshots, ascending by date."""
        return self._snapshots

    @property
    def dates(self) -> tuple[date, ...]:
        return self._dates

    @property
    def platforms(self) -> tuple[str, ...]:
        """Every normalised platform observed anywhere, sorted."""
        return self._platforms

    @property
    def first_date(self) -> date | None:
        return self._dates[0] if self._dates else None

    @property
    def latest_date(self) -> date | None:
        return self._dates[-1] if self._dates else None

    def __len__(self) -> int:
        return len(self._snapshots)

    def __contains__(self, snapshot_date: object) -> bool:
        return snapshot_date in self._by_date

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def snapshot_at(self, snapshot_date: date) -> Snapshot:
        """The snapshot recorded on *snapshot_date*; raises SnapshotNotFound."""
        try:
            return self._by_date[snapshot_date]
        except KeyError:
            logger.warning("Resolution requested for unknown date %s", snapshot_date)
            raise SnapshotNotFound(snapshot_date) from None

    def timeline(self, platform: str) -> PlatformTimeline | None:
        return self._timelines.get(platform)

    def timelines(self) -> Mapping[str, PlatformTimeline]:
        return self._timelines

    def snapshot_on_or_before(self, target: date) -> Snapshot | None:
        """Latest snapshot dated on or before *target*."""
        pos = bisect_right(self._dates, target)
        if pos == 0:
            return None
        return self._snapshots[pos - 1]

    def snapshots_between(self, start: date, end: date) -> tuple[Snapshot, ...]:
        """Snapshots dated in the half-open interval ``(start, end]``."""
        lo = bisect_right(self._dates, start)
        hi = bisect_right(self._dates, end)
        return self._snapshots[lo:hi]

    def cash_flows_between(self, start: date, end: date) -> tuple[CashFlowOperation, ...]:
        """Cash flows recorded on snapshots dated in ``(start, end]``.

        Flows on the start snapshot are already reflected in its value, so
        they belong to the previous period.
        """
        flows: list[CashFlowOperation] = []
        for snap in self.snapshots_between(start, end):
            flows.extend(snap.cash_flows)
        return tuple(flows)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def build_index(snapshots: Iterable[Snapshot]) -> RecordIndex:
    """Build a :class:`RecordIndex` from an unordered snapshot collection.

    Parameters
    ----------
    snapshots : Iterable[Snapshot]
        Fully materialised snapshots in any order.

    Returns
    -------
    RecordIndex
        Snapshots sorted ascending plus one timeline per platform.

    Raises
    ------
    DuplicateSnapshotDate
        Two snapshots share a calendar date.
    CashFlowOutOfRange
        A cash flow is dated on a different day from its snapshot.
    """
    ordered = sorted(snapshots, key=lambda s: s.date)

    timeline_dates: dict[str, list[date]] = {}
    timeline_records: dict[str, list[PlatformValueRecord]] = {}
    n_values = 0
    previous: date | None = None

    for snap in ordered:
        if snap.date == previous:
            logger.warning("Duplicate snapshot date %s", snap.date)
            raise DuplicateSnapshotDate(snap.date)
        previous = snap.date

        for cf in snap.cash_flows:
            if cf.date != snap.date:
                logger.warning(
                    "Cash flow dated %s attached to snapshot %s", cf.date, snap.date
                )
                raise CashFlowOutOfRange(cf.date, snap.date, snap.date)

        by_platform: dict[str, list[SnapshotAssetValue]] = {}
        for value in snap.asset_values:
            by_platform.setdefault(value.platform_key, []).append(value)
            n_values += 1

        # snapshots arrive in date order, so appends keep each timeline sorted
        for platform, values in by_platform.items():
            timeline_dates.setdefault(platform, []).append(snap.date)
            timeline_records.setdefault(platform, []).append(
                PlatformValueRecord(platform=platform, date=snap.date, asset_values=tuple(values))
            )

    timelines = {
        platform: PlatformTimeline(
            platform=platform,
            dates=tuple(timeline_dates[platform]),
            records=tuple(timeline_records[platform]),
        )
        for platform in timeline_dates
    }

    logger.debug(
        "Indexed %d snapshots, %d asset values, %d platforms",
        len(ordered), n_values, len(timelines),
    )
    return RecordIndex(snapshots=tuple(ordered), timelines=timelines)


def validate_records(snapshots: Iterable[Snapshot]) -> None:
    """Validation gate for import collaborators.

    Raises the same structural faults as :func:`build_index` and nothing
    else; callers must treat a raise as a hard failure.
    """
    build_index(snapshots)
