"""Async DNS client wrapping dnspython's resolver."""

import ipaddress
import logging
from dataclasses import dataclass, field
from typing import Any

import dns.asyncresolver
import dns.exception
import dns.resolver

from enumbuster.utils.names import random_label

logger = logging.getLogger(__name__)

_MISSING = (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer, dns.resolver.YXDOMAIN)


@dataclass
class DNSResult:
    """Addresses and aliases returned for one name."""

    name: str
    ips: list[str] = field(default_factory=list)
    cnames: list[str] = field(default_factory=list)

    @property
    def exists(self) -> bool:
        return bool(self.ips or self.cnames)


def parse_resolver_address(addr: str) -> tuple[str, int]:
    """Parse ``IP``, ``IP:port`` or ``[IPv6]:port`` into a (host, port) pair."""
    text = addr.strip()
    host, port = text, 53
    if text.startswith("["):
        host, _, rest = text[1:].partition("]")
        if rest.startswith(":"):
            port = _parse_port(rest[1:], addr)
    elif text.count(":") == 1:
        host, _, raw_port = text.partition(":")
        port = _parse_port(raw_port, addr)
    try:
        ipaddress.ip_address(host)
    except ValueError:
        raise ValueError(f"Invalid resolver address '{addr}': expected an IP address") from None
    return host, port


def _parse_port(raw: str, addr: str) -> int:
    try:
        port = int(raw)
    except ValueError:
        raise ValueError(f"Invalid resolver port in '{addr}'") from None
    if not 0 < port < 65536:
        raise ValueError(f"Invalid resolver port in '{addr}'")
    return port


class DNSClient:
    """Resolve names through the system resolver or one explicit server.

    The resolver cache stays disabled so every lookup reaches the server.
    """

    def __init__(
        self,
        resolver_address: str | None = None,
        timeout: float = 5.0,
        resolver: Any | None = None,
    ):
        self.resolver_address = resolver_address
        self.timeout = timeout
        self._resolver = resolver if resolver is not None else self._build_resolver()

    def _build_resolver(self) -> dns.asyncresolver.Resolver:
        if self.resolver_address:
            host, port = parse_resolver_address(self.resolver_address)
            resolver = dns.asyncresolver.Resolver(configure=False)
            resolver.nameservers = [host]
            resolver.port = port
        else:
            resolver = dns.asyncresolver.Resolver()
        resolver.cache = None
        resolver.timeout = self.timeout
        resolver.lifetime = max(self.timeout * 2, self.timeout + 1.0)
        return resolver

    async def _query(self, name: str, rdtype: str) -> Any | None:
        try:
            return await self._resolver.resolve(name, rdtype, raise_on_no_answer=False)
        except _MISSING:
            return None

    async def resolve(self, name: str, include_cname: bool = False) -> DNSResult:
        """Resolve A/AAAA (and CNAME when asked or when no address came back).

        Missing names yield an empty result; timeouts and server failures raise.
        """
        result = DNSResult(name=name)

        a_answer = await self._query(name, "A")
        self._collect(a_answer, result)
        if a_answer is not None:
            self._collect(await self._query(name, "AAAA"), result)

        if include_cname or not result.ips:
            answer = await self._query(name, "CNAME")
            for rr in _records(answer):
                alias = str(getattr(rr, "target", rr)).rstrip(".")
                if alias and alias not in result.cnames:
                    result.cnames.append(alias)
        return result

    @staticmethod
    def _collect(answer: Any | None, result: DNSResult) -> None:
        chaining = getattr(answer, "chaining_result", None)
        for rrset in getattr(chaining, "cnames", None) or []:
            for rr in rrset:
                alias = str(getattr(rr, "target", rr)).rstrip(".")
                if alias and alias not in result.cnames:
                    result.cnames.append(alias)
        for rr in _records(answer):
            ip_text = str(rr).strip()
            try:
                ipaddress.ip_address(ip_text)
            except ValueError:
                continue
            if ip_text not in result.ips:
                result.ips.append(ip_text)

    async def detect_wildcard(self, domain: str) -> set[str]:
        """Resolve a random name under *domain*; any answer means a catch-all."""
        probe_name = f"enumbuster-wildcard-{random_label()}.{domain}"
        try:
            result = await self.resolve(probe_name)
        except (dns.exception.DNSException, OSError) as exc:
            logger.debug("Wildcard check for %s failed: %s", domain, exc)
            return set()
        return set(result.ips)


def _records(answer: Any | None) -> list[Any]:
    if answer is None:
        return []
    rrset = getattr(answer, "rrset", None)
    return list(rrset) if rrset is not None else []
