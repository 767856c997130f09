"""Stdio request transport, framing and dispatch for pickline.

The editor writes one JSON request per line to stdin:

    {"method":"typed","params":{"query":"ab","seq":1},"id":1}

and reads length-framed responses from stdout:

    Content-length: 52

    {"data":{"query":"ab","total":0,"lines":[],"indices":[]},"id":1}

The dispatch loop lives in pickline.rpc.dispatcher and the object graph
is built by pickline.rpc.bootstrap.
"""

from pickline.rpc.protocol import (
    UNKNOWN_METHOD,
    decode_message,
    encode_frame,
    make_error_response,
    make_success_response,
    parse_frames,
    serialize_response,
)
from pickline.rpc.transport import END_OF_INPUT, TransportReader
from pickline.rpc.types import Message, Response
from pickline.rpc.writer import ResponseWriter

__all__ = [
    "END_OF_INPUT",
    "Message",
    "Response",
    "ResponseWriter",
    "TransportReader",
    "UNKNOWN_METHOD",
    "decode_message",
    "encode_frame",
    "make_error_response",
    "make_success_response",
    "parse_frames",
    "serialize_response",
]
