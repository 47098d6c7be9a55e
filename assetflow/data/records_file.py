"""Portfolio records file (YAML) for the command line.

The engine itself never reads files; this loader exists so the CLI can be
pointed at a hand-written or exported document.  Example::

    goal: 500000
    categories:
      - {name: Equities, target: 60}
      - {name: Bonds, target: 40}
      - {name: Cash}
    snapshots:
      - date: 2026-01-31
        values:
          - {name: VTI, platform: Broker A, category: Equities, value: "12000.00"}
        cash_flows:
          - {amount: "500", description: Monthly deposit}
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, BeforeValidator, Field, model_validator

from assetflow.engine.records import (
    Asset,
    CashFlowOperation,
    Category,
    Snapshot,
    SnapshotAssetValue,
)

logger = logging.getLogger(__name__)


def _float_to_str(v: Any) -> Any:
    # YAML turns 1000.10 into a float; go through repr to keep the written digits
    if isinstance(v, float):
        return repr(v)
    return v


FileDecimal = Annotated[Decimal, BeforeValidator(_float_to_str)]


# ---------------------------------------------------------------------------
# File schema
# ---------------------------------------------------------------------------

class CategoryEntry(BaseModel):
    name: str
    target: FileDecimal | None = None


class ValueEntry(BaseModel):
    name: str
    platform: str = ""
    category: str | None = None
    value: FileDecimal


class CashFlowEntry(BaseModel):
    amount: FileDecimal
    description: str = ""


class SnapshotEntry(BaseModel):
    date: dt.date
    values: list[ValueEntry] = Field(default_factory=list)
    cash_flows: list[CashFlowEntry] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def coerce_none_to_defaults(cls, data: Any) -> Any:
        """YAML parses empty keys as None. Coerce to proper defaults."""
        if isinstance(data, dict):
            for key in ("values", "cash_flows"):
                if key in data and data[key] is None:
                    data[key] = []
        return data


class RecordsFile(BaseModel):
    goal: FileDecimal | None = None
    categories: list[CategoryEntry] = Field(default_factory=list)
    snapshots: list[SnapshotEntry] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def coerce_none_to_defaults(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for key in ("categories", "snapshots"):
                if key in data and data[key] is None:
                    data[key] = []
        return data


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

@dataclass
class PortfolioRecords:
    """Engine records loaded from a file."""

    snapshots: list[Snapshot]
    categories: list[Category]
    goal: Decimal | None = None


def to_records(doc: RecordsFile) -> PortfolioRecords:
    """Convert a validated file document into engine records.

    Raises ValueError for a category listed twice (names compare
    normalised) or a target outside 0-100.
    """
    categories = [Category(name=c.name, target_allocation=c.target) for c in doc.categories]
    seen: set[str] = set()
    for cat in categories:
        if cat.key in seen:
            raise ValueError(f"category {cat.name!r} is listed more than once")
        seen.add(cat.key)
    snapshots = []
    for entry in doc.snapshots:
        snapshots.append(Snapshot(
            date=entry.date,
            asset_values=tuple(
                SnapshotAssetValue(
                    asset=Asset(name=v.name, platform=v.platform, category=v.category),
                    market_value=v.value,
                )
                for v in entry.values
            ),
            cash_flows=tuple(
                CashFlowOperation(amount=cf.amount, date=entry.date, description=cf.description)
                for cf in entry.cash_flows
            ),
        ))
    return PortfolioRecords(snapshots=snapshots, categories=categories, goal=doc.goal)


def load_records(path: str | Path) -> PortfolioRecords:
    """Read and validate a records file.

    Raises FileNotFoundError for a missing file and pydantic's
    ValidationError for a malformed one.
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Records file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    doc = RecordsFile.model_validate(raw)
    logger.debug(
        "Loaded %s: %d snapshots, %d categories",
        path, len(doc.snapshots), len(doc.categories),
    )
    return to_records(doc)
