"""Wire format: request decoding, response serialization and output framing."""

import json
import re
from typing import Any

from pydantic import ValidationError

from pickline.core.constants import FRAME_HEADER, MAX_REQUEST_ID
from pickline.core.errors import DecodeError
from pickline.rpc.types import Message, Response

UNKNOWN_METHOD = "unknown method"

_HEADER_RE = re.compile(rb"Content-length: (\d+)\n\n")


def decode_message(line: str) -> Message:
    """Decode one stripped input line into a Message.

    Args:
        line: A single line of JSON text.

    Returns:
        The decoded Message.

    Raises:
        DecodeError: If the line is not valid JSON or violates the schema.
            ``request_id`` carries the id when it could still be recovered.
    """
    try:
        return Message.model_validate_json(line)
    except ValidationError as e:
        raise DecodeError(
            f"invalid request: {_summarize(e)}",
            request_id=recover_request_id(line),
        ) from e


def recover_request_id(line: str) -> int | None:
    """Best-effort extraction of a valid uint64 id from a rejected line."""
    try:
        data = json.loads(line)
    except (json.JSONDecodeError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None
    request_id = data.get("id")
    # bool is an int subclass
    if type(request_id) is not int or not 0 <= request_id <= MAX_REQUEST_ID:
        return None
    return request_id


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "request"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def serialize_response(response: Response) -> str:
    """Serialize a Response to compact JSON text.

    Args:
        response: The Response object to serialize.

    Returns:
        JSON text with either ``error`` or ``data``, any extra fields, and
        ``id`` when known.
    """
    data: dict[str, Any] = {}
    if response.error is not None:
        data["error"] = response.error
    else:
        data["data"] = response.data
    data.update(response.extra)
    if response.id is not None:
        data["id"] = response.id
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def encode_frame(payload: str) -> bytes:
    """Prefix a payload with its byte-length header."""
    body = payload.encode("utf-8")
    return FRAME_HEADER.format(length=len(body)).encode("ascii") + body


def make_error_response(request_id: int | None, message: str) -> Response:
    """Create an error response."""
    return Response(id=request_id, error=message)


def make_success_response(
    request_id: int | None,
    data: Any,
    **extra: Any,
) -> Response:
    """Create a success response, with optional extra top-level fields."""
    return Response(id=request_id, data=data, extra=extra)


# === Client-side functions ===


def parse_frames(raw: bytes) -> list[dict[str, Any]]:
    """Split an output byte stream back into decoded frame payloads.

    Args:
        raw: Concatenated frames as written by ResponseWriter.

    Returns:
        The decoded JSON objects, in stream order.

    Raises:
        DecodeError: If a header is missing, the stream is truncated, or a
            payload is not a JSON object.
    """
    frames: list[dict[str, Any]] = []
    pos = 0
    while pos < len(raw):
        match = _HEADER_RE.match(raw, pos)
        if match is None:
            raise DecodeError(f"Missing frame header at byte {pos}")
        length = int(match.group(1))
        start = match.end()
        end = start + length
        if end > len(raw):
            raise DecodeError(f"Truncated frame at byte {pos}: expected {length} bytes")
        try:
            payload = json.loads(raw[start:end].decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(f"Invalid frame payload at byte {pos}: {e}") from e
        if not isinstance(payload, dict):
            raise DecodeError(f"Frame payload at byte {pos} is not an object")
        frames.append(payload)
        pos = end
    return frames
