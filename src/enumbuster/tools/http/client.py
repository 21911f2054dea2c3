"""Pooled HTTP client shared by the HTTP-based probes."""

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass
class HTTPResponse:
    """Represents an HTTP response."""

    url: str
    status_code: int
    body: str
    size: int
    location: str | None = None


def parse_header(raw: str) -> tuple[str, str]:
    """Split a ``Name: value`` header string."""
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise ValueError(f"Invalid header {raw!r}, expected 'Name: value'")
    return name.strip(), value.strip()


class HTTPClient:
    """Async HTTP client built once per run and reused by every worker."""

    def __init__(
        self,
        timeout: float = 10.0,
        follow_redirects: bool = False,
        verify_ssl: bool = True,
        proxy: str | None = None,
        headers: dict[str, str] | None = None,
        cookies: str | None = None,
        user_agent: str | None = None,
        auth: tuple[str, str] | None = None,
        max_connections: int = 10,
    ):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.verify_ssl = verify_ssl
        self.proxy = proxy
        self.headers = dict(headers or {})
        self.cookies = cookies
        self.user_agent = user_agent
        self.auth = auth
        self.max_connections = max(1, max_connections)
        self.client: httpx.AsyncClient | None = None

    def client_options(self) -> dict[str, Any]:
        """Keyword arguments passed to ``httpx.AsyncClient``."""
        headers = dict(self.headers)
        if self.user_agent and not any(k.lower() == "user-agent" for k in headers):
            headers["User-Agent"] = self.user_agent
        if self.cookies:
            headers["Cookie"] = self.cookies

        options: dict[str, Any] = {
            "timeout": self.timeout,
            "follow_redirects": self.follow_redirects,
            "verify": self.verify_ssl,
            "headers": headers,
            "limits": httpx.Limits(
                max_connections=self.max_connections,
                max_keepalive_connections=self.max_connections,
            ),
            # Picks up HTTP_PROXY / HTTPS_PROXY / ALL_PROXY when no proxy flag is set.
            "trust_env": True,
        }
        if self.proxy:
            options["proxy"] = self.proxy
        if self.auth:
            options["auth"] = httpx.BasicAuth(*self.auth)
        return options

    async def __aenter__(self):
        self.client = httpx.AsyncClient(**self.client_options())
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()
            self.client = None

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        content: str | bytes | None = None,
    ) -> HTTPResponse:
        """Make an HTTP request and read the full body."""
        if not self.client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        response = await self.client.request(
            method=method,
            url=url,
            headers=headers,
            content=content,
        )

        size = len(response.content)
        if not size and method.upper() == "HEAD":
            try:
                size = int(response.headers.get("content-length", 0))
            except ValueError:
                size = 0

        return HTTPResponse(
            url=str(response.url),
            status_code=response.status_code,
            body=response.text,
            size=size,
            location=response.headers.get("location"),
        )

