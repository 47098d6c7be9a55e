"""Configuration loading, validation, and defaults."""

from assetflow.config.loader import load_config
from assetflow.config.schema import AssetFlowConfig

__all__ = ["load_config", "AssetFlowConfig"]
