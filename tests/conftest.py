"""Shared pytest fixtures for pickline tests."""

from __future__ import annotations

import asyncio
import io
from collections.abc import Sequence
from pathlib import Path

import pytest

from pickline.config.schema import Config
from pickline.handlers.default import DefaultEventHandler
from pickline.providers.matcher import MatchedItem
from pickline.rpc.dispatcher import DispatchLoop
from pickline.rpc.protocol import parse_frames
from pickline.rpc.writer import ResponseWriter
from pickline.session.context import SessionContext

SOURCE = ["ab.md", "abc.txt", "alpha.py", "beta.py", "src/abacus.rs"]


class DelayedMatcher:
    """Async matcher whose latency depends on the query."""

    def __init__(self, delays: dict[str, float] | None = None) -> None:
        self.delays = delays or {}
        self.calls: list[str] = []

    async def __call__(self, query: str, lines: Sequence[str]) -> list[MatchedItem]:
        self.calls.append(query)
        await asyncio.sleep(self.delays.get(query, 0))
        return [MatchedItem(line, 1) for line in lines if query in line]


class DelayedPreviewer:
    """Async previewer that echoes its target after a per-path delay."""

    def __init__(self, delays: dict[str, float] | None = None) -> None:
        self.delays = delays or {}

    async def __call__(
        self, path: Path, lnum: int, size: int, context_above: int
    ) -> tuple[int, list[str]]:
        await asyncio.sleep(self.delays.get(path.name, 0))
        return 1, [f"preview of {path.name}"]


class Harness:
    """A dispatch loop writing into memory."""

    def __init__(self, loop: DispatchLoop, queue: asyncio.Queue, output: io.BytesIO) -> None:
        self.loop = loop
        self.queue = queue
        self.output = output

    def frames(self) -> list[dict]:
        return parse_frames(self.output.getvalue())


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def context(tmp_path: Path, config: Config) -> SessionContext:
    ctx = SessionContext(config)
    ctx.initialize(tmp_path, list(SOURCE))
    return ctx


@pytest.fixture
def make_harness(context: SessionContext):
    """Build a DispatchLoop over an in-memory writer (call inside a running loop)."""

    def _make(handler=None, **kwargs) -> Harness:
        output = io.BytesIO()
        queue: asyncio.Queue = asyncio.Queue()
        loop = DispatchLoop(
            queue,
            handler or DefaultEventHandler(matcher=DelayedMatcher()),
            context,
            ResponseWriter(output),
            **kwargs,
        )
        return Harness(loop, queue, output)

    return _make
