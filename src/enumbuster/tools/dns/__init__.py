"""DNS resolution helpers for enumbuster."""

from .resolver import DNSClient, DNSResult, parse_resolver_address

__all__ = [
    "DNSClient",
    "DNSResult",
    "parse_resolver_address",
]
