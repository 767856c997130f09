"""``typed``: filter the session source for the current query."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pickline.handlers.base import call_collaborator, parse_params, stamp_for
from pickline.providers.matcher import MatchedItem
from pickline.rpc.types import Message, Response
from pickline.session.context import SessionContext, Stream

logger = logging.getLogger(__name__)


class TypedParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    query: str
    seq: int | None = Field(default=None, ge=0)


async def handle_on_typed(
    msg: Message,
    context: SessionContext,
    matcher: Callable[[str, Sequence[str]], list[MatchedItem]],
) -> Response | None:
    params = parse_params(TypedParams, msg.params)
    generation = context.generation
    stamp = context.begin(Stream.TYPED, stamp_for(msg, params.seq))
    if context.is_stale(Stream.TYPED, stamp):
        logger.debug("Skipping stale typed id=%s stamp=%d", msg.id, stamp)
        return None

    source = context.source
    context.observe_query(params.query)
    cached = context.last_result(Stream.TYPED)
    if isinstance(cached, dict) and cached.get("query") == params.query:
        # Same query as the last delivered result, e.g. a refresh
        logger.debug("Reusing delivered matches for %r (id=%s)", params.query, msg.id)
        data = cached
    else:
        matched = await call_collaborator(matcher, params.query, source)
        data = _format_matches(params.query, matched, context.config.matcher.max_results)
    return Response(
        id=msg.id, data=data, stream=Stream.TYPED, stamp=stamp, generation=generation
    )


def _format_matches(query: str, matched: list[MatchedItem], limit: int) -> dict[str, Any]:
    top = matched[:limit]
    return {
        "query": query,
        "total": len(matched),
        "lines": [m.text for m in top],
        "indices": [list(m.indices) for m in top],
    }
