"""TFTP helpers for enumbuster."""

from .client import TFTPClient, parse_server_address
from .packets import (
    OP_ACK,
    OP_DATA,
    OP_ERROR,
    OP_OACK,
    OP_RRQ,
    TFTPReply,
    build_error,
    build_read_request,
    parse_reply,
)

__all__ = [
    "OP_ACK",
    "OP_DATA",
    "OP_ERROR",
    "OP_OACK",
    "OP_RRQ",
    "TFTPClient",
    "TFTPReply",
    "build_error",
    "build_read_request",
    "parse_reply",
    "parse_server_address",
]
