"""Shared session state and the per-stream staleness markers.

Several tasks for the same stream (``typed`` or ``move``) can be in flight
at once and finish in any order. Each task carries a stamp, and a response
is only delivered if its stamp is newer than the last one delivered for
that stream. Older results are discarded, never written over newer ones.

All marker reads and writes go through the methods below, each a single
critical section on one lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pickline.config.schema import Config
from pickline.core.errors import HandlerError

logger = logging.getLogger(__name__)


class Stream(str, Enum):
    """Independent ordering streams."""

    TYPED = "typed"
    MOVE = "move"


@dataclass
class StreamMarkers:
    """Sequence bookkeeping for one stream.

    Attributes:
        issued: Highest stamp any task has started with.
        delivered: Highest stamp whose response was written.
        last_result: Data of the most recently delivered response.
    """

    issued: int = -1
    delivered: int = -1
    last_result: Any = None


class SessionContext:
    """State of the single editor session served by this process."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self._lock = threading.Lock()
        self._cwd: Path | None = None
        self._source: list[str] | None = None
        self._last_query: str | None = None
        self._generation = 0
        self._markers: dict[Stream, StreamMarkers] = {s: StreamMarkers() for s in Stream}

    # === Session fields ===

    @property
    def initialized(self) -> bool:
        return self._cwd is not None

    @property
    def cwd(self) -> Path:
        """Working directory set by ``init``.

        Raises:
            HandlerError: If the session has not been initialized.
        """
        if self._cwd is None:
            raise HandlerError("session not initialized")
        return self._cwd

    @property
    def source(self) -> list[str]:
        """Candidate lines the ``typed`` stream filters."""
        if self._source is None:
            raise HandlerError("session not initialized")
        return self._source

    @property
    def last_query(self) -> str | None:
        return self._last_query

    @property
    def generation(self) -> int:
        """Number of times ``init`` has run; work carries it to be delivered."""
        with self._lock:
            return self._generation

    def initialize(self, cwd: Path, source: list[str]) -> None:
        """Start a fresh session: new cwd and source, all markers reset.

        Work started under the previous generation can no longer deliver.
        """
        with self._lock:
            self._generation += 1
            self._cwd = cwd
            self._source = source
            self._last_query = None
            self._markers = {s: StreamMarkers() for s in Stream}
        logger.info("Session initialized: cwd=%s, %d candidates", cwd, len(source))

    def observe_query(self, query: str) -> None:
        with self._lock:
            self._last_query = query

    # === Staleness protocol ===

    def begin(self, stream: Stream, stamp: int) -> int:
        """Register a task starting with ``stamp`` and return it."""
        with self._lock:
            markers = self._markers[stream]
            if stamp > markers.issued:
                markers.issued = stamp
        return stamp

    def is_stale(self, stream: Stream, stamp: int) -> bool:
        """True if a response at least as new as ``stamp`` was already delivered."""
        with self._lock:
            return stamp <= self._markers[stream].delivered

    def try_deliver(
        self,
        stream: Stream,
        stamp: int,
        result: Any = None,
        generation: int | None = None,
    ) -> bool:
        """Claim delivery of ``stamp``.

        Compare-and-set: succeeds only when ``stamp`` is newer than the last
        delivered stamp, in which case the marker and cached result are
        updated together. A ``generation`` other than the current one always
        fails.

        Returns:
            True if the caller should write its response, False if it is stale.
        """
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            markers = self._markers[stream]
            if stamp <= markers.delivered:
                return False
            markers.delivered = stamp
            markers.last_result = result
            return True

    def issued(self, stream: Stream) -> int:
        with self._lock:
            return self._markers[stream].issued

    def delivered(self, stream: Stream) -> int:
        with self._lock:
            return self._markers[stream].delivered

    def last_result(self, stream: Stream) -> Any:
        """Data of the newest delivered response on ``stream``, or None."""
        with self._lock:
            return self._markers[stream].last_result
