"""Default values for the valuation and performance engine.

These are product constants rather than calibrated parameters.  They are
kept here as named values so a config file can override them without any
module carrying a hidden magic number.
"""

# ---------------------------------------------------------------------------
# Period metrics
# ---------------------------------------------------------------------------
STALENESS_THRESHOLD_DAYS = 14
"""Max gap between an ideal lookback date and the snapshot standing in for it."""

LOOKBACK_MONTHS = {
    "1M": 1,
    "3M": 3,
    "1Y": 12,
}

DAYS_PER_YEAR = "365.25"  # kept as a string so it converts to Decimal exactly

# ---------------------------------------------------------------------------
# Decimal arithmetic
# ---------------------------------------------------------------------------
DECIMAL_PRECISION = 28  # significant digits used for every calculation
PERCENT_PLACES = 2  # presentation only

# ---------------------------------------------------------------------------
# Rebalancing
# ---------------------------------------------------------------------------
REBALANCE_MINIMUM_ADJUSTMENT = "1"  # adjustments under this are "no action"

# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------
RECENT_SNAPSHOT_COUNT = 5
UNCATEGORIZED_LABEL = "Uncategorized"
