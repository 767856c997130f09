"""Method handlers for the dispatch loop."""

from pickline.handlers.base import EventHandler, HandlerFn, call_collaborator, parse_params
from pickline.handlers.default import DefaultEventHandler

__all__ = [
    "DefaultEventHandler",
    "EventHandler",
    "HandlerFn",
    "call_collaborator",
    "parse_params",
]
