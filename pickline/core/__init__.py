"""Core errors, constants and helpers."""

from pickline.core.encoding import ENCODING, ENCODING_ERRORS, configure_stdio
from pickline.core.errors import (
    ConfigError,
    DecodeError,
    HandlerError,
    InvalidParamsError,
    LoadError,
    PicklineError,
)

__all__ = [
    "ENCODING",
    "ENCODING_ERRORS",
    "configure_stdio",
    "ConfigError",
    "DecodeError",
    "HandlerError",
    "InvalidParamsError",
    "LoadError",
    "PicklineError",
]
