"""HTTP helpers for enumbuster."""

from .client import HTTPClient, HTTPResponse, parse_header

__all__ = [
    "HTTPClient",
    "HTTPResponse",
    "parse_header",
]
