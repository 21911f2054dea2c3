"""Error taxonomy for enumeration runs."""

import ssl
from enum import Enum

import dns.exception
import dns.resolver
import httpx


class EnumbusterError(Exception):
    """Base class for enumbuster errors."""


class SetupError(EnumbusterError):
    """Fatal error raised before any candidate is probed."""


class OutputError(EnumbusterError):
    """The result file cannot be opened or written."""


class ErrorKind(str, Enum):
    """Classification of a per-candidate failure."""

    CONNECTION = "connection"
    TLS = "tls"
    TIMEOUT = "timeout"
    PROTOCOL = "protocol"
    RESOLVER = "resolver"
    OTHER = "other"


class ProbeError(EnumbusterError):
    """A single probe request failed; recorded as an ``Error`` outcome."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ProbeError":
        """Wrap a transport exception with its error kind."""
        if isinstance(exc, ProbeError):
            return exc
        message = str(exc) or exc.__class__.__name__
        return cls(error_kind_for(exc), message)


def _looks_like_tls(exc: BaseException) -> bool:
    if isinstance(exc, ssl.SSLError):
        return True
    cause = exc.__cause__ or exc.__context__
    if isinstance(cause, ssl.SSLError):
        return True
    text = str(exc).lower()
    return "ssl" in text or "certificate" in text or "tls" in text


def error_kind_for(exc: BaseException) -> ErrorKind:
    """Map an httpx, dnspython or socket exception onto an ``ErrorKind``."""
    if isinstance(exc, ProbeError):
        return exc.kind
    # Timeouts first: httpx.TimeoutException and dns.exception.Timeout are
    # both subclasses of broader transport errors.
    if isinstance(exc, (httpx.TimeoutException, dns.exception.Timeout, TimeoutError)):
        return ErrorKind.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return ErrorKind.TLS if _looks_like_tls(exc) else ErrorKind.CONNECTION
    if isinstance(exc, (httpx.RemoteProtocolError, httpx.LocalProtocolError, httpx.DecodingError)):
        return ErrorKind.PROTOCOL
    if isinstance(exc, (httpx.ProxyError, httpx.ReadError, httpx.WriteError, httpx.NetworkError)):
        return ErrorKind.CONNECTION
    if isinstance(exc, dns.resolver.NoNameservers):
        return ErrorKind.RESOLVER
    if isinstance(exc, dns.exception.DNSException):
        return ErrorKind.PROTOCOL
    if isinstance(exc, ssl.SSLError):
        return ErrorKind.TLS
    if isinstance(exc, (ConnectionError, OSError)):
        return ErrorKind.CONNECTION
    # Names that cannot be encoded into a URL or Host header.
    if isinstance(exc, (httpx.InvalidURL, ValueError)):
        return ErrorKind.PROTOCOL
    return ErrorKind.OTHER
