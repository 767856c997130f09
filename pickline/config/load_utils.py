"""Reading and merging JSON config layers.

A layer is one config file holding a (possibly partial) JSON object. Layers
are merged before validation, so a project file only needs the keys it
changes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pickline.core.errors import LoadError

logger = logging.getLogger(__name__)


def read_layer(path: Path, *, required: bool = False) -> dict[str, Any] | None:
    """Read one config layer.

    A missing file gives None, unless ``required``. A blank file is an
    empty layer. A UTF-8 BOM is tolerated.

    Raises:
        LoadError: On a missing required file, an unreadable file, invalid
            JSON, or a top level that is not an object.
    """
    resolved = path.expanduser()
    if not resolved.is_file():
        if required:
            raise LoadError(f"config file not found: {path}")
        logger.debug("No config layer at %s", resolved)
        return None

    try:
        text = resolved.read_text(encoding="utf-8-sig").strip()
    except OSError as e:
        raise LoadError(f"cannot read config {path}: {e.strerror or e}") from e
    if not text:
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(
            f"invalid JSON in {path} at line {e.lineno} column {e.colno}: {e.msg}"
        ) from e
    if not isinstance(data, dict):
        raise LoadError(f"{path}: top level must be a JSON object, not {type(data).__name__}")

    logger.debug("Read config layer %s (%d sections)", resolved, len(data))
    return data


def merge_layers(*layers: dict[str, Any]) -> dict[str, Any]:
    """Overlay layers left to right.

    Nested objects merge key by key. Any other value from a later layer,
    lists included, replaces the earlier one. Inputs are not modified.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        merged = _overlay(merged, layer)
    return merged


def _overlay(base: dict[str, Any], top: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in top.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = _overlay(current, value)
        else:
            result[key] = value
    return result
