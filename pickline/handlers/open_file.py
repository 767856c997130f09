"""``open_file``: list a directory for the file explorer."""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from pickline.core.errors import HandlerError
from pickline.handlers.base import call_collaborator, parse_params
from pickline.rpc.protocol import make_success_response
from pickline.rpc.types import Message, Response


class OpenFileParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cwd: str


async def handle_open_file(
    msg: Message,
    lister: Callable[[str], list[str]],
) -> Response:
    params = parse_params(OpenFileParams, msg.params)
    try:
        entries = await call_collaborator(lister, params.cwd)
    except OSError as e:
        raise HandlerError(f"{params.cwd}:{e.strerror or e}") from e
    return make_success_response(msg.id, entries, dir=params.cwd, total=len(entries))
