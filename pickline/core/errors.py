"""Typed exception hierarchy for pickline."""

from __future__ import annotations


class PicklineError(Exception):
    """Base class for all pickline errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(PicklineError):
    """Raised for configuration issues (invalid JSON, validation failure)."""


class LoadError(PicklineError):
    """Raised when a JSON file cannot be found, read or parsed."""


class DecodeError(PicklineError):
    """Raised when an input line cannot be decoded into a Message.

    Attributes:
        request_id: The id recovered from the raw line, if it was a valid uint64.
    """

    def __init__(self, message: str, request_id: int | None = None) -> None:
        self.request_id = request_id
        super().__init__(message)


class HandlerError(PicklineError):
    """Raised by a handler when a collaborator fails or a precondition is unmet."""


class InvalidParamsError(HandlerError):
    """Raised when method parameters are missing or have the wrong shape."""
