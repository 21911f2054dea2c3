"""Transport layer for enumbuster: HTTP, DNS and TFTP clients."""

from enumbuster.tools.dns import DNSClient, DNSResult
from enumbuster.tools.http import HTTPClient, HTTPResponse
from enumbuster.tools.tftp import TFTPClient
from enumbuster.tools.transport import Transport

__all__ = [
    "DNSClient",
    "DNSResult",
    "HTTPClient",
    "HTTPResponse",
    "TFTPClient",
    "Transport",
]
