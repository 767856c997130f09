"""Line reader feeding decoded messages to the dispatch loop.

A dedicated daemon thread blocks on ``readline()`` so the event loop never
does. Decoded messages are handed over through an unbounded asyncio.Queue.

The queue has no bound: if handlers fall behind, messages pile up in
memory and the reader keeps going.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, TextIO

from pickline.core.errors import DecodeError
from pickline.rpc.protocol import decode_message, make_error_response
from pickline.rpc.types import Message

if TYPE_CHECKING:
    from pickline.rpc.writer import ResponseWriter

logger = logging.getLogger(__name__)

# Queue item meaning "no more input will ever arrive"
END_OF_INPUT = None

MessageQueue = asyncio.Queue[Message | None]


class TransportReader:
    """Reads newline-delimited requests from a text stream.

    Malformed lines are logged and dropped; when the id can be recovered
    an error frame is written for it. End of stream and I/O errors both
    stop the reader and enqueue END_OF_INPUT.

    Attributes:
        lines_read: Non-blank lines seen so far.
        lines_dropped: Lines that failed to decode.
    """

    def __init__(
        self,
        stream: TextIO,
        queue: MessageQueue,
        writer: ResponseWriter | None = None,
    ) -> None:
        self._stream = stream
        self._queue = queue
        self._writer = writer
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._stopped = False
        self.lines_read = 0
        self.lines_dropped = 0

    @property
    def stopped(self) -> bool:
        """True once the reader has finished with its input stream."""
        return self._stopped

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> threading.Thread:
        """Start the reader thread, delivering into ``loop`` (default: running loop)."""
        self._loop = loop or asyncio.get_running_loop()
        self._thread = threading.Thread(target=self._read_loop, name="reader", daemon=True)
        self._thread.start()
        return self._thread

    def _read_loop(self) -> None:
        try:
            while True:
                try:
                    line = self._stream.readline()
                except (OSError, UnicodeDecodeError, ValueError) as e:
                    logger.error("Input stream failed, stopping reader: %s", e)
                    break
                if not line:
                    logger.debug("Input stream closed")
                    break
                line = line.strip()
                if not line:
                    continue
                self.lines_read += 1
                message = self._decode(line)
                if message is not None and not self._enqueue(message):
                    return
        finally:
            self._stopped = True
            self._enqueue(END_OF_INPUT)

    def _decode(self, line: str) -> Message | None:
        try:
            return decode_message(line)
        except DecodeError as e:
            self.lines_dropped += 1
            logger.warning("Dropping malformed request: %s", e.message)
            if e.request_id is not None and self._writer is not None:
                self._writer.write(make_error_response(e.request_id, e.message))
            return None

    def _enqueue(self, item: Message | None) -> bool:
        assert self._loop is not None
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            # Event loop already closed
            logger.debug("Event loop closed, reader exiting")
            return False
        return True
