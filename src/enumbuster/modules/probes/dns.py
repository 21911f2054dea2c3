"""Subdomain enumeration by name resolution."""

import logging
from typing import Any

from enumbuster.errors import SetupError
from enumbuster.modules.engine.models import Candidate, OutcomeKind, ProbeOutcome, ProbeRequest
from enumbuster.tools.dns import DNSResult
from enumbuster.tools.transport import Transport

from .base import Probe, WarnCallback

logger = logging.getLogger(__name__)


class DnsProbe(Probe):
    """Resolve ``word.domain``; any address or alias means the name exists."""

    mode = "dns"

    def __init__(self, config):
        super().__init__(config)
        self.wildcard_ips: set[str] = set()

    @property
    def domain(self) -> str:
        return (self.config.domain or self.config.target).strip().lstrip(".").rstrip(".")

    def validate(self) -> None:
        if not self.domain:
            raise SetupError("A domain is required for dns mode")

    async def prepare(self, transport: Transport, warn: WarnCallback) -> None:
        if self.config.force_wildcard:
            return
        self.wildcard_ips = await transport.require_dns().detect_wildcard(self.domain)
        if self.wildcard_ips:
            ips = ", ".join(sorted(self.wildcard_ips))
            warn(
                f"Wildcard DNS found for {self.domain}: random names resolve to [{ips}]. "
                "Matching results are suppressed; use --wildcard to show them."
            )

    def build(self, candidate: Candidate) -> list[ProbeRequest]:
        word = candidate.word.strip().strip(".")
        if not word:
            return []
        name = f"{word}.{self.domain}"
        return [ProbeRequest(candidate=candidate, target=name, label=name)]

    async def execute(self, request: ProbeRequest, transport: Transport, timeout: float) -> Any:
        return await transport.require_dns().resolve(
            request.target, include_cname=self.config.show_cname
        )

    def classify(self, request: ProbeRequest, raw: Any) -> ProbeOutcome:
        result: DNSResult = raw
        kind = OutcomeKind.FOUND if result.exists else OutcomeKind.NOT_FOUND
        if kind is OutcomeKind.FOUND and self._is_wildcard(result):
            logger.debug("Suppressing wildcard answer for %s", request.target)
            kind = OutcomeKind.NOT_FOUND
        return self.outcome(kind, request, ips=list(result.ips), cnames=list(result.cnames))

    def _is_wildcard(self, result: DNSResult) -> bool:
        return bool(self.wildcard_ips and result.ips) and set(result.ips) <= self.wildcard_ips
