"""Pydantic models for config.yaml validation."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from assetflow.config.defaults import (
    DAYS_PER_YEAR,
    DECIMAL_PRECISION,
    LOOKBACK_MONTHS,
    PERCENT_PLACES,
    REBALANCE_MINIMUM_ADJUSTMENT,
    RECENT_SNAPSHOT_COUNT,
    STALENESS_THRESHOLD_DAYS,
    UNCATEGORIZED_LABEL,
)


# ---------------------------------------------------------------------------
# Performance Config
# ---------------------------------------------------------------------------

class PerformanceConfig(BaseModel):
    staleness_threshold_days: int = STALENESS_THRESHOLD_DAYS
    lookback_months: dict[str, int] = Field(
        default_factory=lambda: dict(LOOKBACK_MONTHS)
    )
    days_per_year: Decimal = Decimal(DAYS_PER_YEAR)

    @field_validator("staleness_threshold_days")
    @classmethod
    def tolerance_not_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"staleness_threshold_days must be >= 0, got {v}")
        return v

    @field_validator("lookback_months")
    @classmethod
    def lookbacks_positive(cls, v: dict[str, int]) -> dict[str, int]:
        for label, months in v.items():
            if months <= 0:
                raise ValueError(f"lookback {label} must be a positive month count, got {months}")
        return v

    @field_validator("days_per_year")
    @classmethod
    def days_per_year_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError(f"days_per_year must be positive, got {v}")
        return v


# ---------------------------------------------------------------------------
# Precision Config
# ---------------------------------------------------------------------------

class PrecisionConfig(BaseModel):
    decimal_precision: int = DECIMAL_PRECISION
    percent_places: int = PERCENT_PLACES

    @model_validator(mode="after")
    def check_ranges(self) -> "PrecisionConfig":
        if self.decimal_precision < 10:
            raise ValueError(
                f"decimal_precision must be at least 10 digits, got {self.decimal_precision}"
            )
        if self.percent_places < 0:
            raise ValueError(f"percent_places must be >= 0, got {self.percent_places}")
        return self


# ---------------------------------------------------------------------------
# Rebalancing Config
# ---------------------------------------------------------------------------

class RebalancingConfig(BaseModel):
    minimum_adjustment: Decimal = Decimal(REBALANCE_MINIMUM_ADJUSTMENT)

    @field_validator("minimum_adjustment")
    @classmethod
    def minimum_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError(f"minimum_adjustment must be >= 0, got {v}")
        return v


# ---------------------------------------------------------------------------
# Report Config
# ---------------------------------------------------------------------------

class ReportConfig(BaseModel):
    recent_snapshot_count: int = RECENT_SNAPSHOT_COUNT
    uncategorized_label: str = UNCATEGORIZED_LABEL


# ---------------------------------------------------------------------------
# Top-Level Config
# ---------------------------------------------------------------------------

class AssetFlowConfig(BaseModel):
    """Root configuration model for the AssetFlow engine."""

    version: int = 1
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)
    precision: PrecisionConfig = Field(default_factory=PrecisionConfig)
    rebalancing: RebalancingConfig = Field(default_factory=RebalancingConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @model_validator(mode="before")
    @classmethod
    def coerce_none_to_defaults(cls, data: Any) -> Any:
        """YAML parses empty keys as None. Coerce to proper defaults."""
        if isinstance(data, dict):
            for key in ("performance", "precision", "rebalancing", "report"):
                if key in data and data[key] is None:
                    data[key] = {}
        return data
