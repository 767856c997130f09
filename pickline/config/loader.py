"""Configuration loading with fail-fast behavior and layered merging.

Layers (later overrides earlier):
1. Global user config (~/.pickline/config.json)
2. Project local config (cwd/.pickline/config.json)

With no config files at all, pydantic defaults are used.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pickline.config.load_utils import merge_layers, read_layer
from pickline.config.schema import Config
from pickline.core.constants import get_default_config_path, get_local_config_path
from pickline.core.errors import ConfigError, LoadError

logger = logging.getLogger(__name__)


def load_config(path: Path | None = None, cwd: Path | None = None) -> Config:
    """Load configuration from file with layered merging.

    Args:
        path: Explicit config file path. If provided, skips layered loading.
        cwd: Working directory for local lookup. Defaults to Path.cwd().

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If any config file contains invalid JSON or merged config
            fails validation.
    """
    if path is not None:
        return _load_from_path(path)

    effective_cwd = cwd or Path.cwd()
    found: list[dict[str, Any]] = []
    loaded_from: list[Path] = []

    layers = [get_default_config_path(), get_local_config_path(effective_cwd)]
    for layer in layers:
        # Global and local coincide when cwd is the home directory
        if layer in loaded_from:
            continue
        try:
            data = read_layer(layer)
        except LoadError as e:
            raise ConfigError(e.message) from e
        if data:
            found.append(data)
            loaded_from.append(layer)

    if not loaded_from:
        logger.debug("No config files found, using defaults")
        return Config()

    logger.info("Config loaded from: %s", [str(p) for p in loaded_from])
    try:
        return Config.model_validate(merge_layers(*found))
    except ValidationError as e:
        sources = ", ".join(str(p) for p in loaded_from)
        raise ConfigError(f"Config validation failed (merged from {sources}): {e}") from e


def _load_from_path(path: Path) -> Config:
    """Load and validate config from a specific path.

    Raises:
        ConfigError: If file doesn't exist, contains invalid JSON, or fails validation.
    """
    try:
        data = read_layer(path, required=True)
    except LoadError as e:
        raise ConfigError(e.message) from e

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed for {path}: {e}") from e
