"""Per-run transport bundle: pooled HTTP client, DNS client, TFTP client."""

from __future__ import annotations

from enumbuster.errors import SetupError
from enumbuster.modules.engine.models import ScanConfig

from .dns import DNSClient
from .http import HTTPClient, parse_header
from .tftp import TFTPClient, parse_server_address

HTTP_MODES = ("dir", "vhost", "fuzz", "s3", "gcs")


class Transport:
    """Clients shared read-only by every worker of one run.

    Only the client a mode needs is created. Nothing per-request is kept
    here beyond the HTTP connection pool.
    """

    def __init__(
        self,
        http: HTTPClient | None = None,
        dns: DNSClient | None = None,
        tftp: TFTPClient | None = None,
    ):
        self.http = http
        self.dns = dns
        self.tftp = tftp

    @classmethod
    def for_config(cls, config: ScanConfig) -> Transport:
        """Build the clients required by ``config.mode``."""
        if config.mode in HTTP_MODES:
            return cls(http=build_http_client(config))
        if config.mode == "dns":
            try:
                return cls(dns=DNSClient(config.resolver, timeout=config.timeout))
            except ValueError as e:
                raise SetupError(str(e)) from e
        if config.mode == "tftp":
            try:
                host, port = parse_server_address(config.target)
            except ValueError as e:
                raise SetupError(str(e)) from e
            return cls(tftp=TFTPClient(host, port))
        raise SetupError(f"Unknown mode: {config.mode}")

    async def __aenter__(self) -> Transport:
        if self.http is not None:
            await self.http.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.http is not None:
            await self.http.__aexit__(exc_type, exc_val, exc_tb)

    def require_http(self) -> HTTPClient:
        if self.http is None:
            raise RuntimeError("HTTP client not configured for this run")
        return self.http

    def require_dns(self) -> DNSClient:
        if self.dns is None:
            raise RuntimeError("DNS client not configured for this run")
        return self.dns

    def require_tftp(self) -> TFTPClient:
        if self.tftp is None:
            raise RuntimeError("TFTP client not configured for this run")
        return self.tftp


def build_http_client(config: ScanConfig) -> HTTPClient:
    options = config.http
    auth = None
    if options.username is not None:
        auth = (options.username, options.password or "")
    if options.proxy and not options.proxy.startswith(("http://", "https://", "socks5://", "socks5h://")):
        raise SetupError(f"Unsupported proxy URL {options.proxy!r}; use http://, https:// or socks5://")
    return HTTPClient(
        timeout=config.timeout,
        follow_redirects=options.follow_redirects,
        verify_ssl=not options.insecure,
        proxy=options.proxy,
        headers=dict(options.headers),
        cookies=options.cookies,
        user_agent=options.user_agent,
        auth=auth,
        max_connections=config.threads,
    )


__all__ = ["HTTP_MODES", "Transport", "build_http_client", "parse_header"]
