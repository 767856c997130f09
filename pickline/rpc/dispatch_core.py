"""Task-boundary error handling for dispatched handlers.

run_handler() is the only place a handler is awaited. Whatever the handler
raises becomes an error Response for the original id:

- InvalidParamsError -> "invalid params: <detail>"
- other PicklineError -> its message
- any other Exception -> "Internal error: <Type>: <detail>", logged with traceback

Nothing escapes to the dispatch loop. CancelledError is a BaseException and
is left to propagate so the loop can cancel tasks at shutdown.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pickline.core.errors import InvalidParamsError, PicklineError
from pickline.rpc.protocol import make_error_response
from pickline.rpc.types import Message, Response

if TYPE_CHECKING:
    from pickline.handlers.base import HandlerFn
    from pickline.session.context import SessionContext

logger = logging.getLogger(__name__)


async def run_handler(
    handler: HandlerFn,
    message: Message,
    context: SessionContext,
) -> Response | None:
    """Invoke a handler and convert any failure into an error response.

    Args:
        handler: The routed handler coroutine function.
        message: The decoded request.
        context: The shared session context.

    Returns:
        The handler's Response, an error Response, or None when the handler
        produced nothing.
    """
    try:
        return await handler(message, context)

    except InvalidParamsError as e:
        logger.warning("Invalid params for %s (id=%s): %s", message.method, message.id, e.message)
        return make_error_response(message.id, f"invalid params: {e.message}")

    except PicklineError as e:
        logger.warning("Handler %s failed (id=%s): %s", message.method, message.id, e.message)
        return make_error_response(message.id, e.message)

    except Exception as e:
        logger.error(
            "Unexpected error in %s (id=%s): %s",
            message.method,
            message.id,
            e,
            exc_info=True,
        )
        return make_error_response(message.id, f"Internal error: {type(e).__name__}: {e}")
