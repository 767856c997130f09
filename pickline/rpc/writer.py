"""Framed response output shared by all dispatch tasks."""

from __future__ import annotations

import logging
import threading
from typing import BinaryIO

from pickline.rpc.protocol import encode_frame, serialize_response
from pickline.rpc.types import Response

logger = logging.getLogger(__name__)


class ResponseWriter:
    """Writes one length-prefixed frame per response.

    Each frame is a single ``write()`` plus ``flush()`` inside a lock, so
    frames from concurrent tasks and the reader thread never interleave.
    After the first failed write the writer is closed and drops everything.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._lock = threading.Lock()
        self._closed = False
        self.frames_written = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, response: Response) -> bool:
        """Serialize and write a response.

        Returns:
            True if the frame was written, False if the writer is closed.

        Raises:
            TypeError: If the response data is not JSON serializable.
        """
        return self.write_frame(encode_frame(serialize_response(response)), response.id)

    def write_frame(self, frame: bytes, request_id: int | None = None) -> bool:
        """Write an already encoded frame.

        Returns:
            True if the frame was written, False if the writer is closed.
        """
        with self._lock:
            if self._closed:
                logger.debug("Writer closed, dropping response id=%s", request_id)
                return False
            try:
                self._stream.write(frame)
                self._stream.flush()
            except (OSError, ValueError) as e:
                # ValueError: write to a closed file
                logger.error("Output stream failed, closing writer: %s", e)
                self._closed = True
                return False
            self.frames_written += 1
        logger.debug("Wrote response id=%s (%d bytes)", request_id, len(frame))
        return True
