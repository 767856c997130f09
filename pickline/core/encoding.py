"""UTF-8 encoding constants and helpers for pickline."""

import sys

ENCODING = "utf-8"
ENCODING_ERRORS = "replace"


def configure_stdio() -> None:
    """Reconfigure stdin and stderr to UTF-8 with replace error handling.

    stdout is left alone: frames are written as bytes to ``sys.stdout.buffer``.
    """
    for stream in (sys.stdin, sys.stderr):
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding=ENCODING, errors=ENCODING_ERRORS)
