"""Request and response types for the stdio protocol."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pickline.core.constants import MAX_REQUEST_ID


class Message(BaseModel):
    """One decoded request line.

    Unknown top-level keys are rejected and no coercion is applied, so
    ``"id": "1"`` or ``"id": true`` fail validation.

    Attributes:
        method: Name of the operation to invoke.
        params: Named parameters for the operation, in the order received.
        id: Caller-assigned correlation id (uint64).
    """

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    method: str
    params: dict[str, Any]
    id: int = Field(ge=0, le=MAX_REQUEST_ID)

    def to_json(self) -> str:
        """Encode back to a single JSON line (no trailing newline)."""
        return self.model_dump_json()


@dataclass
class Response:
    """One response frame.

    Attributes:
        id: Request identifier from the original message, if known.
        data: Result payload (mutually exclusive with error).
        error: Human-readable error message.
        extra: Additional top-level fields written next to data/error.
        stream: Ordering stream this response belongs to ("typed", "move"),
            or None when it is written unconditionally. Not serialized.
        stamp: Sequence stamp within ``stream``. Not serialized.
        generation: Session generation the work started in. Not serialized.
    """

    id: int | None
    data: Any = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    stream: str | None = None
    stamp: int | None = None
    generation: int | None = None
