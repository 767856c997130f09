"""``init``: bind the session to a working directory and load its source."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from pickline.core.errors import HandlerError
from pickline.handlers.base import call_collaborator, parse_params
from pickline.rpc.protocol import make_success_response
from pickline.rpc.types import Message, Response
from pickline.session.context import SessionContext

logger = logging.getLogger(__name__)


class InitParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cwd: str
    source: list[str] | None = None


async def handle_on_init(
    msg: Message,
    context: SessionContext,
    lister: Callable[..., list[str]],
) -> Response:
    params = parse_params(InitParams, msg.params)
    cwd = Path(params.cwd).expanduser()
    resolved = await asyncio.to_thread(_resolve_dir, cwd)
    if resolved is None:
        raise HandlerError(f"{params.cwd}: not a directory")

    if params.source is not None:
        source = params.source
    else:
        logger.debug("Collecting source under %s", cwd)
        try:
            source = await call_collaborator(lister, cwd, context.config.source)
        except OSError as e:
            raise HandlerError(f"{params.cwd}: {e.strerror or e}") from e

    context.initialize(resolved, source)
    return make_success_response(
        msg.id, {"cwd": str(resolved), "ready": True, "total": len(source)}
    )


def _resolve_dir(cwd: Path) -> Path | None:
    return cwd.resolve() if cwd.is_dir() else None
