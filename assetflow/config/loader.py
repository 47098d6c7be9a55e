"""Configuration loading with YAML parsing and a default search path."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from assetflow.config.schema import AssetFlowConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS = [
    Path("assetflow.yaml"),
    Path("~/.assetflow/config.yaml"),
]


def _find_config_file(explicit_path: str | Path | None = None) -> Path | None:
    """First existing config file, or None to run on defaults."""
    if explicit_path is not None:
        path = Path(explicit_path).expanduser()
        if path.exists():
            return path
        logger.warning("Config file not found: %s", path)
        return None

    for candidate in DEFAULT_CONFIG_PATHS:
        resolved = candidate.expanduser()
        if resolved.exists():
            return resolved
    return None


def load_config(path: str | Path | None = None) -> AssetFlowConfig:
    """Load and validate configuration.

    Resolution order:
    1. Explicit path argument
    2. assetflow.yaml in current directory
    3. ~/.assetflow/config.yaml
    4. All defaults (no file needed)

    Raises pydantic's ValidationError for an invalid document and OSError
    when the file cannot be read.
    """
    config_path = _find_config_file(path)
    if config_path is None:
        logger.debug("No config file found, using defaults")
        return AssetFlowConfig()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}
    config = AssetFlowConfig.model_validate(raw)
    logger.info(
        "Loaded config %s (staleness %d days, lookbacks %s)",
        config_path,
        config.performance.staleness_threshold_days,
        ",".join(config.performance.lookback_months),
    )
    return config
