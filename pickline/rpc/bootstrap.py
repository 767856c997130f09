"""Logging setup and object graph wiring for the stdio server.

Usage:
    configure_logging(logging.INFO, Path("~/.pickline/logs/server.log"))
    await serve(config, sys.stdin, sys.stdout.buffer)
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import BinaryIO, TextIO

from pickline.config.schema import Config
from pickline.handlers.base import EventHandler
from pickline.handlers.default import DefaultEventHandler
from pickline.rpc.dispatcher import DispatchLoop
from pickline.rpc.transport import MessageQueue, TransportReader
from pickline.rpc.writer import ResponseWriter
from pickline.session.context import SessionContext

logger = logging.getLogger(__name__)

LOGGER_NAMESPACE = "pickline"
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: int = logging.WARNING, log_file: Path | None = None) -> Path | None:
    """Configure the pickline logger namespace.

    Console output goes to stderr; stdout carries protocol frames only.
    With ``log_file`` set, a rotating file handler is added as well
    (max 5MB per file, 3 backup files).

    Args:
        level: Level for both handlers.
        log_file: Optional log file path. Parent directories are created.

    Returns:
        The resolved log file path, or None when file logging is off.
    """
    pickline_logger = logging.getLogger(LOGGER_NAMESPACE)
    pickline_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates on reconfigure
    for handler in list(pickline_logger.handlers):
        pickline_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%H:%M:%S"))
    pickline_logger.addHandler(console_handler)

    resolved: Path | None = None
    if log_file is not None:
        resolved = log_file.expanduser().resolve()
        resolved.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            resolved,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        pickline_logger.addHandler(file_handler)

    # Don't propagate to root logger
    pickline_logger.propagate = False

    logger.debug("Logging configured: level=%s file=%s", logging.getLevelName(level), resolved)
    return resolved


@dataclass
class ServerComponents:
    """The wired server graph, exposed for inspection after a run."""

    queue: MessageQueue
    writer: ResponseWriter
    context: SessionContext
    reader: TransportReader
    dispatcher: DispatchLoop


def build_server(
    config: Config,
    stdin: TextIO,
    stdout: BinaryIO,
    handler: EventHandler | None = None,
) -> ServerComponents:
    """Wire reader, queue, dispatcher, context and writer.

    Must be called with a running event loop (the queue and semaphore bind
    to it). Nothing is started.
    """
    queue: MessageQueue = asyncio.Queue()
    writer = ResponseWriter(stdout)
    context = SessionContext(config)
    reader = TransportReader(stdin, queue, writer)
    dispatcher = DispatchLoop(
        queue,
        handler or DefaultEventHandler(),
        context,
        writer,
        max_concurrent_tasks=config.server.max_concurrent_tasks,
        drain_timeout=config.server.drain_timeout,
    )
    return ServerComponents(queue, writer, context, reader, dispatcher)


async def serve(
    config: Config,
    stdin: TextIO,
    stdout: BinaryIO,
    handler: EventHandler | None = None,
) -> ServerComponents:
    """Run the server until input ends or ``exit`` is received.

    Returns:
        The components, after all in-flight tasks have drained.
    """
    components = build_server(config, stdin, stdout, handler)
    components.reader.start()
    logger.info("Serving on stdio")
    await components.dispatcher.run()
    logger.info(
        "Stopped: %d lines read, %d dropped, %d frames written",
        components.reader.lines_read,
        components.reader.lines_dropped,
        components.writer.frames_written,
    )
    return components
