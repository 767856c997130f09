"""Dispatch loop: one concurrent task per incoming message."""

from __future__ import annotations

import asyncio
import logging

from pickline.handlers.base import EventHandler, HandlerFn
from pickline.rpc.dispatch_core import run_handler
from pickline.rpc.protocol import (
    UNKNOWN_METHOD,
    encode_frame,
    make_error_response,
    serialize_response,
)
from pickline.rpc.transport import MessageQueue
from pickline.rpc.types import Message, Response
from pickline.rpc.writer import ResponseWriter
from pickline.session.context import SessionContext, Stream

logger = logging.getLogger(__name__)

EXIT_METHOD = "exit"
# Session setup: later messages wait for it so they see an initialized session
INIT_METHOD = "init"


class DispatchLoop:
    """Consumes the message queue and starts a task per message.

    The loop never waits for a task before taking the next message, except
    for ``init``, which completes before anything after it is dispatched
    (the reader keeps queueing meanwhile). A failing task never reaches
    the loop: run_handler() turns exceptions into error responses.
    Streamed responses (``typed``, ``move``) go through the session's
    compare-and-set before being written; the check and the write run back
    to back with no await in between. Responses are encoded first, and one
    that cannot be encoded is answered with an internal error instead.

    Attributes:
        tasks_started: Number of tasks created so far.
    """

    def __init__(
        self,
        queue: MessageQueue,
        handler: EventHandler,
        context: SessionContext,
        writer: ResponseWriter,
        max_concurrent_tasks: int | None = None,
        drain_timeout: float = 5.0,
    ) -> None:
        self._queue = queue
        self._handlers: dict[str, HandlerFn] = handler.routes()
        self._context = context
        self._writer = writer
        self._semaphore = (
            asyncio.Semaphore(max_concurrent_tasks) if max_concurrent_tasks else None
        )
        self._drain_timeout = drain_timeout
        self._tasks: set[asyncio.Task[None]] = set()
        self.tasks_started = 0

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def run(self) -> None:
        """Dispatch until input ends or ``exit`` arrives, then drain tasks."""
        while True:
            message = await self._queue.get()
            if message is None:
                logger.info("Input ended, no more requests")
                break
            task = self.dispatch(message)
            if message.method == EXIT_METHOD:
                break
            if message.method == INIT_METHOD and task is not None:
                await asyncio.wait({task})
        await self.drain()

    def dispatch(self, message: Message) -> asyncio.Task[None] | None:
        """Route one message, starting its task without waiting for it.

        Returns:
            The started task, or None for an unknown method (answered inline).
        """
        handler = self._handlers.get(message.method)
        if handler is None:
            logger.warning("Unknown method %r (id=%s)", message.method, message.id)
            self._writer.write(make_error_response(message.id, UNKNOWN_METHOD))
            return None

        logger.debug("Dispatching %s (id=%s)", message.method, message.id)
        task = asyncio.create_task(
            self._run_task(handler, message),
            name=f"{message.method}-{message.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self.tasks_started += 1
        return task

    async def _run_task(self, handler: HandlerFn, message: Message) -> None:
        if self._semaphore is not None:
            async with self._semaphore:
                response = await run_handler(handler, message, self._context)
        else:
            response = await run_handler(handler, message, self._context)
        if response is not None:
            self._deliver(response)

    def _deliver(self, response: Response) -> None:
        try:
            frame = encode_frame(serialize_response(response))
        except (TypeError, ValueError) as e:
            # Failed responses never advance the stream's delivered marker
            logger.error(
                "Cannot serialize response id=%s: %s", response.id, e, exc_info=True
            )
            self._writer.write(
                make_error_response(response.id, f"Internal error: {type(e).__name__}: {e}")
            )
            return

        if response.stream is not None and response.stamp is not None:
            stream = Stream(response.stream)
            if not self._context.try_deliver(
                stream, response.stamp, response.data, generation=response.generation
            ):
                logger.debug(
                    "Discarding stale %s response id=%s stamp=%d",
                    stream.value,
                    response.id,
                    response.stamp,
                )
                return
        self._writer.write_frame(frame, response.id)

    async def drain(self) -> None:
        """Wait up to the drain timeout for in-flight tasks, then cancel the rest."""
        if not self._tasks:
            return
        logger.debug("Draining %d in-flight tasks", len(self._tasks))
        _, pending = await asyncio.wait(set(self._tasks), timeout=self._drain_timeout)
        for task in pending:
            logger.warning("Cancelling unfinished task %s", task.get_name())
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
