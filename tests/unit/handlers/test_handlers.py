"""Tests for the method handlers against real files."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from pickline.config.schema import Config
from pickline.core.errors import HandlerError, InvalidParamsError
from pickline.handlers import on_init
from pickline.handlers.default import DefaultEventHandler
from pickline.rpc.types import Message
from pickline.session.context import SessionContext, Stream
from tests.conftest import DelayedMatcher


def msg(method: str, msg_id: int = 1, **params) -> Message:
    return Message(method=method, params=params, id=msg_id)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.py").write_text(
        "".join(f"line {i}\n" for i in range(1, 51)), encoding="utf-8"
    )
    (tmp_path / "README.md").write_text("hello\n", encoding="utf-8")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "HEAD").write_text("ref\n", encoding="utf-8")
    return tmp_path


class TestOnInit:
    @pytest.mark.asyncio
    async def test_collects_source_from_cwd(self, project: Path) -> None:
        ctx = SessionContext()
        handler = DefaultEventHandler()

        response = await handler.handle_on_init(msg("init", cwd=str(project)), ctx)

        assert response.data == {"cwd": str(project.resolve()), "ready": True, "total": 2}
        assert ctx.source == ["README.md", "src/main.py"]
        assert ctx.cwd == project.resolve()

    @pytest.mark.asyncio
    async def test_explicit_source(self, project: Path) -> None:
        ctx = SessionContext()

        response = await DefaultEventHandler().handle_on_init(
            msg("init", cwd=str(project), source=["x", "y"]), ctx
        )

        assert response.data["total"] == 2
        assert ctx.source == ["x", "y"]

    @pytest.mark.asyncio
    async def test_directory_check_runs_in_thread(
        self, project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        offloaded = []
        to_thread = asyncio.to_thread

        async def recording_to_thread(fn, /, *args, **kwargs):
            offloaded.append(fn)
            return await to_thread(fn, *args, **kwargs)

        monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)

        response = await DefaultEventHandler().handle_on_init(
            msg("init", cwd=str(project), source=[]), SessionContext()
        )

        assert response.data["cwd"] == str(project.resolve())
        assert on_init._resolve_dir in offloaded

    @pytest.mark.asyncio
    async def test_bad_directory(self, tmp_path: Path) -> None:
        with pytest.raises(HandlerError, match="not a directory"):
            await DefaultEventHandler().handle_on_init(
                msg("init", cwd=str(tmp_path / "missing")), SessionContext()
            )

    @pytest.mark.asyncio
    async def test_missing_cwd(self) -> None:
        with pytest.raises(InvalidParamsError, match="cwd"):
            await DefaultEventHandler().handle_on_init(msg("init"), SessionContext())


class TestOnMove:
    @pytest.mark.asyncio
    async def test_preview_plain_path(self, project: Path) -> None:
        ctx = SessionContext()
        ctx.initialize(project, [])

        response = await DefaultEventHandler().handle_on_move(
            msg("move", 3, curline="src/main.py"), ctx
        )

        assert response.stream == Stream.MOVE
        assert response.stamp == 3
        assert response.data["fname"] == "src/main.py"
        assert response.data["start"] == 1
        assert response.data["lines"][0] == "line 1"
        assert len(response.data["lines"]) == Config().preview.size

    @pytest.mark.asyncio
    async def test_preview_grep_line(self, project: Path) -> None:
        ctx = SessionContext()
        ctx.initialize(project, [])

        response = await DefaultEventHandler().handle_on_move(
            msg("move", 1, curline="src/main.py:30:5:line 30", size=3, seq=8), ctx
        )

        assert response.stamp == 8
        assert response.data["lnum"] == 30
        assert response.data["start"] == 25
        assert response.data["lines"] == ["line 25", "line 26", "line 27"]

    @pytest.mark.asyncio
    async def test_missing_file(self, project: Path) -> None:
        ctx = SessionContext()
        ctx.initialize(project, [])

        with pytest.raises(HandlerError, match="nope.txt"):
            await DefaultEventHandler().handle_on_move(msg("move", curline="nope.txt"), ctx)

    @pytest.mark.asyncio
    async def test_requires_init(self) -> None:
        with pytest.raises(HandlerError, match="not initialized"):
            await DefaultEventHandler().handle_on_move(
                msg("move", curline="a.txt"), SessionContext()
            )


class TestOnTyped:
    @pytest.mark.asyncio
    async def test_ranked_lines_with_indices(self, tmp_path: Path) -> None:
        ctx = SessionContext()
        ctx.initialize(tmp_path, ["src/main.py", "README.md", "setup.py"])

        response = await DefaultEventHandler().handle_on_typed(
            msg("typed", 2, query="main", seq=5), ctx
        )

        assert response.stream == Stream.TYPED
        assert response.stamp == 5
        assert response.data["query"] == "main"
        assert response.data["total"] == 1
        assert response.data["lines"] == ["src/main.py"]
        assert response.data["indices"] == [[4, 5, 6, 7]]
        assert ctx.last_query == "main"

    @pytest.mark.asyncio
    async def test_results_capped(self, tmp_path: Path) -> None:
        config = Config.model_validate({"matcher": {"max_results": 2}})
        ctx = SessionContext(config)
        ctx.initialize(tmp_path, [f"file{i}.py" for i in range(5)])

        response = await DefaultEventHandler().handle_on_typed(msg("typed", query="py"), ctx)

        assert response.data["total"] == 5
        assert len(response.data["lines"]) == 2

    @pytest.mark.asyncio
    async def test_sync_matcher_runs_in_thread(self, tmp_path: Path) -> None:
        ctx = SessionContext()
        ctx.initialize(tmp_path, ["a", "b"])
        seen = []

        def matcher(query, lines):
            seen.append((query, list(lines)))
            return []

        response = await DefaultEventHandler(matcher=matcher).handle_on_typed(
            msg("typed", query="z"), ctx
        )

        assert seen == [("z", ["a", "b"])]
        assert response.data["total"] == 0

    @pytest.mark.asyncio
    async def test_repeated_query_reuses_delivered_result(self, tmp_path: Path) -> None:
        ctx = SessionContext()
        ctx.initialize(tmp_path, ["a.py", "b.rs"])
        matcher = DelayedMatcher()
        handler = DefaultEventHandler(matcher=matcher)

        first = await handler.handle_on_typed(msg("typed", 1, query="py"), ctx)
        assert ctx.try_deliver(Stream.TYPED, first.stamp, first.data, first.generation)
        second = await handler.handle_on_typed(msg("typed", 2, query="py"), ctx)
        third = await handler.handle_on_typed(msg("typed", 3, query="rs"), ctx)

        assert matcher.calls == ["py", "rs"]
        assert second.data == first.data
        assert second.stamp == 2
        assert third.data["lines"] == ["b.rs"]

    @pytest.mark.asyncio
    async def test_missing_query(self, tmp_path: Path) -> None:
        ctx = SessionContext()
        ctx.initialize(tmp_path, [])
        with pytest.raises(InvalidParamsError, match="query"):
            await DefaultEventHandler().handle_on_typed(msg("typed", seq=1), ctx)


class TestOpenFile:
    @pytest.mark.asyncio
    async def test_lists_entries(self, project: Path) -> None:
        response = await DefaultEventHandler().handle_open_file(
            msg("open_file", 4, cwd=str(project)), SessionContext()
        )

        assert response.data == [".git/", "README.md", "src/"]
        assert response.extra == {"dir": str(project), "total": 3}

    @pytest.mark.asyncio
    async def test_unreadable_dir(self, tmp_path: Path) -> None:
        missing = str(tmp_path / "gone")
        with pytest.raises(HandlerError) as exc_info:
            await DefaultEventHandler().handle_open_file(
                msg("open_file", cwd=missing), SessionContext()
            )
        assert exc_info.value.message.startswith(f"{missing}:")
