"""``move``: preview the line under the cursor."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from pickline.handlers.base import call_collaborator, parse_params, stamp_for
from pickline.providers.preview import parse_curline
from pickline.rpc.types import Message, Response
from pickline.session.context import SessionContext, Stream

logger = logging.getLogger(__name__)


class MoveParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    curline: str
    seq: int | None = Field(default=None, ge=0)
    size: int | None = Field(default=None, ge=1)


async def handle_on_move(
    msg: Message,
    context: SessionContext,
    previewer: Callable[..., tuple[int, list[str]]],
) -> Response | None:
    params = parse_params(MoveParams, msg.params)
    generation = context.generation
    stamp = context.begin(Stream.MOVE, stamp_for(msg, params.seq))
    if context.is_stale(Stream.MOVE, stamp):
        logger.debug("Skipping stale move id=%s stamp=%d", msg.id, stamp)
        return None

    target = parse_curline(params.curline)
    path = Path(target.path)
    if not path.is_absolute():
        path = context.cwd / path

    preview_config = context.config.preview
    start, lines = await call_collaborator(
        previewer,
        path,
        target.lnum,
        params.size or preview_config.size,
        preview_config.context_above,
    )
    data = {"fname": target.path, "lnum": target.lnum, "start": start, "lines": lines}
    return Response(
        id=msg.id, data=data, stream=Stream.MOVE, stamp=stamp, generation=generation
    )
