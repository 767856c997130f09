"""Event handler wired to the default collaborators."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from pickline.handlers import on_init, on_move, on_typed, open_file
from pickline.handlers.base import EventHandler
from pickline.providers.listing import read_entries, walk_files
from pickline.providers.matcher import MatchedItem, SubsequenceMatcher
from pickline.providers.preview import read_preview
from pickline.rpc.protocol import make_success_response
from pickline.rpc.types import Message, Response
from pickline.session.context import SessionContext

logger = logging.getLogger(__name__)


class DefaultEventHandler(EventHandler):
    """Routes each method to its module, passing in the collaborators.

    Any collaborator can be swapped, sync or async, e.g. to plug in a
    different matching engine.
    """

    def __init__(
        self,
        matcher: Callable[[str, Sequence[str]], list[MatchedItem]] | None = None,
        previewer: Callable[..., tuple[int, list[str]]] | None = None,
        source_lister: Callable[..., list[str]] | None = None,
        entry_lister: Callable[[str], list[str]] | None = None,
    ) -> None:
        self._matcher = matcher
        self._previewer = previewer or read_preview
        self._source_lister = source_lister or walk_files
        self._entry_lister = entry_lister or read_entries

    def _matcher_for(self, context: SessionContext) -> Callable[..., Any]:
        if self._matcher is None:
            self._matcher = SubsequenceMatcher(context.config.matcher.case_matching)
        return self._matcher

    async def handle_on_init(self, msg: Message, context: SessionContext) -> Response | None:
        return await on_init.handle_on_init(msg, context, self._source_lister)

    async def handle_on_move(self, msg: Message, context: SessionContext) -> Response | None:
        return await on_move.handle_on_move(msg, context, self._previewer)

    async def handle_on_typed(self, msg: Message, context: SessionContext) -> Response | None:
        return await on_typed.handle_on_typed(msg, context, self._matcher_for(context))

    async def handle_open_file(self, msg: Message, context: SessionContext) -> Response | None:
        return await open_file.handle_open_file(msg, self._entry_lister)

    async def handle_exit(self, msg: Message, context: SessionContext) -> Response | None:
        logger.info("Exit requested (id=%s)", msg.id)
        return make_success_response(msg.id, {"exiting": True})
