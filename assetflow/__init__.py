"""AssetFlow: portfolio valuation and performance engine."""

__version__ = "1.0.0"
