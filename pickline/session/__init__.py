"""Session state shared by concurrent dispatch tasks."""

from pickline.session.context import SessionContext, Stream, StreamMarkers

__all__ = ["SessionContext", "Stream", "StreamMarkers"]
