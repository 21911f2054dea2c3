"""Base contract shared by every probe variant."""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import dns.exception
import httpx

from enumbuster.errors import ProbeError
from enumbuster.modules.engine.models import (
    Candidate,
    OutcomeKind,
    ProbeOutcome,
    ProbeRequest,
    ScanConfig,
)
from enumbuster.tools.transport import Transport

from .retry import RetryPolicy

_TRANSPORT_ERRORS = (
    httpx.HTTPError,
    httpx.InvalidURL,
    dns.exception.DNSException,
    OSError,
    TimeoutError,
    ValueError,
)

WarnCallback = Callable[[str], None]


class Probe(ABC):
    """One enumeration protocol.

    A probe turns a candidate into requests (``build``), sends each request
    (``execute``) and turns the raw reply into an outcome (``classify``).
    Network failures become ``Error`` outcomes and never escape ``run``.
    """

    mode: str
    # Stop at the first Found request and report one outcome per candidate.
    aggregate: bool = False
    # Upper bound on workers, regardless of --threads.
    max_concurrency: int | None = None

    def __init__(self, config: ScanConfig):
        self.config = config

    def validate(self) -> None:
        """Reject invalid flag combinations with ``SetupError``."""

    async def prepare(self, transport: Transport, warn: WarnCallback) -> None:
        """Run baseline probes once before the scan starts."""

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=1, timeout=self.config.timeout)

    def outcomes_for(self, word: str) -> int:
        """How many outcomes one wordlist entry produces."""
        return 1

    @abstractmethod
    def build(self, candidate: Candidate) -> list[ProbeRequest]:
        """Derive the request(s) for one candidate."""

    @abstractmethod
    async def execute(self, request: ProbeRequest, transport: Transport, timeout: float) -> Any:
        """Send one request and return the raw reply."""

    @abstractmethod
    def classify(self, request: ProbeRequest, raw: Any) -> ProbeOutcome:
        """Turn a raw reply into an outcome."""

    async def attempt(self, request: ProbeRequest, transport: Transport) -> ProbeOutcome:
        """Execute one request under the retry policy and classify it."""
        started = time.perf_counter()

        async def once(timeout: float) -> Any:
            try:
                return await self.execute(request, transport, timeout)
            except ProbeError:
                raise
            except _TRANSPORT_ERRORS as exc:
                raise ProbeError.from_exception(exc) from exc

        try:
            raw = await self.retry_policy().run(once)
        except ProbeError as exc:
            elapsed = time.perf_counter() - started
            return ProbeOutcome.failure(self.mode, request, exc.kind, str(exc), elapsed)

        outcome = self.classify(request, raw)
        outcome.elapsed = time.perf_counter() - started
        return outcome

    async def run(self, candidate: Candidate, transport: Transport) -> list[ProbeOutcome]:
        """Probe one candidate and return its outcomes."""
        requests = self.build(candidate)
        if not requests:
            return [self.skipped(candidate, "invalid name")]

        outcomes: list[ProbeOutcome] = []
        for request in requests:
            outcome = await self.attempt(request, transport)
            if self.aggregate and outcome.found:
                return [outcome]
            outcomes.append(outcome)
        if self.aggregate:
            return [self._pick(outcomes)]
        return outcomes

    @staticmethod
    def _pick(outcomes: list[ProbeOutcome]) -> ProbeOutcome:
        # Prefer a definite NotFound over an error from an alternate endpoint.
        for outcome in outcomes:
            if outcome.kind is OutcomeKind.NOT_FOUND:
                return outcome
        return outcomes[-1]

    def skipped(self, candidate: Candidate, reason: str) -> ProbeOutcome:
        return ProbeOutcome(
            kind=OutcomeKind.NOT_FOUND,
            mode=self.mode,
            candidate=candidate,
            target=candidate.word,
            error=reason,
        )

    def outcome(self, kind: OutcomeKind, request: ProbeRequest, **fields: Any) -> ProbeOutcome:
        return ProbeOutcome(
            kind=kind,
            mode=self.mode,
            candidate=request.candidate,
            target=request.target,
            label=request.label,
            **fields,
        )


class HTTPProbe(Probe):
    """Probe whose requests go through the pooled HTTP client."""

    async def execute(self, request: ProbeRequest, transport: Transport, timeout: float) -> Any:
        client = transport.require_http()
        # httpx timeouts apply per read; bound the whole exchange.
        return await asyncio.wait_for(
            client.request(
                request.method,
                request.url or request.target,
                headers=dict(request.headers) or None,
                content=request.content,
            ),
            timeout,
        )
