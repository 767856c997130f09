"""Event handler interface and helpers shared by the method modules."""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from pickline.core.errors import InvalidParamsError
from pickline.rpc.types import Message, Response
from pickline.session.context import SessionContext

ParamsT = TypeVar("ParamsT", bound=BaseModel)

# Signature every routed method implements
HandlerFn = Callable[[Message, SessionContext], Coroutine[Any, Any, Response | None]]


class EventHandler(ABC):
    """The operation set the dispatch loop routes to.

    Each method takes a Message and the shared SessionContext and returns
    at most one Response. Returning None means nothing is written (the
    request went stale before its work started).
    """

    @abstractmethod
    async def handle_on_init(self, msg: Message, context: SessionContext) -> Response | None:
        ...

    @abstractmethod
    async def handle_on_move(self, msg: Message, context: SessionContext) -> Response | None:
        ...

    @abstractmethod
    async def handle_on_typed(self, msg: Message, context: SessionContext) -> Response | None:
        ...

    @abstractmethod
    async def handle_open_file(self, msg: Message, context: SessionContext) -> Response | None:
        ...

    @abstractmethod
    async def handle_exit(self, msg: Message, context: SessionContext) -> Response | None:
        ...

    def routes(self) -> dict[str, HandlerFn]:
        """Method name to handler table."""
        return {
            "init": self.handle_on_init,
            "move": self.handle_on_move,
            "typed": self.handle_on_typed,
            "open_file": self.handle_open_file,
            "exit": self.handle_exit,
        }


def parse_params(model: type[ParamsT], params: dict[str, Any]) -> ParamsT:
    """Validate a message's params against a method's parameter model.

    Raises:
        InvalidParamsError: Naming the first offending field.
    """
    try:
        return model.model_validate(params)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or "params"
        raise InvalidParamsError(f"{field}: {first['msg']}") from e


async def call_collaborator(fn: Callable[..., Any], *args: Any) -> Any:
    """Run a collaborator: coroutine functions are awaited, others run in a thread."""
    if inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    ):
        return await fn(*args)
    return await asyncio.to_thread(fn, *args)


def stamp_for(msg: Message, seq: int | None) -> int:
    """Sequence stamp of a streamed request: explicit ``seq``, else the id."""
    return seq if seq is not None else msg.id
