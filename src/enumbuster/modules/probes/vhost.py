"""Virtual host discovery through the Host header."""

import hashlib
from dataclasses import dataclass
from typing import Any

import httpx

from enumbuster.errors import ProbeError, SetupError
from enumbuster.modules.engine.models import Candidate, OutcomeKind, ProbeOutcome, ProbeRequest
from enumbuster.tools.http import HTTPResponse
from enumbuster.tools.transport import Transport
from enumbuster.utils.names import random_label

from .base import HTTPProbe, WarnCallback

BASELINE_MATCHES = ("length", "hash", "fuzzy")


@dataclass(frozen=True)
class Baseline:
    """Response of the target to a host name that cannot exist."""

    status_code: int
    size: int
    digest: str

    @classmethod
    def from_response(cls, response: HTTPResponse) -> "Baseline":
        return cls(response.status_code, response.size, body_digest(response.body))


def body_digest(body: str) -> str:
    return hashlib.sha256(body.encode("utf-8", errors="replace")).hexdigest()


class VhostProbe(HTTPProbe):
    mode = "vhost"

    def __init__(self, config):
        super().__init__(config)
        self.baseline: Baseline | None = None

    def validate(self) -> None:
        if not self.config.target.startswith(("http://", "https://")):
            raise SetupError(f"Target URL must start with http:// or https://: {self.config.target}")
        if self.config.append_domain and not self.config.domain:
            raise SetupError("--append-domain requires --domain")
        if self.config.baseline_match not in BASELINE_MATCHES:
            raise SetupError(
                f"Unknown baseline match '{self.config.baseline_match}'; "
                f"use one of {', '.join(BASELINE_MATCHES)}"
            )
        if self.config.length_tolerance < 0:
            raise SetupError("--length-tolerance must not be negative")

    def host_for(self, word: str) -> str:
        if self.config.append_domain and self.config.domain:
            return f"{word}.{self.config.domain.strip('.')}"
        return word

    async def prepare(self, transport: Transport, warn: WarnCallback) -> None:
        host = self.host_for(f"enumbuster-baseline-{random_label()}")
        try:
            response = await transport.require_http().request(
                self.config.http.method, self.config.target, headers={"Host": host}
            )
        except (httpx.HTTPError, OSError) as exc:
            kind = ProbeError.from_exception(exc).kind.value
            raise SetupError(f"Could not obtain a baseline from {self.config.target} ({kind}): {exc}") from exc
        self.baseline = Baseline.from_response(response)

    def build(self, candidate: Candidate) -> list[ProbeRequest]:
        word = candidate.word.strip()
        if not word:
            return []
        host = self.host_for(word)
        return [
            ProbeRequest(
                candidate=candidate,
                target=host,
                url=self.config.target,
                method=self.config.http.method,
                headers=(("Host", host),),
                label=host,
            )
        ]

    def matches_baseline(self, response: HTTPResponse) -> bool:
        baseline = self.baseline
        if baseline is None or response.status_code != baseline.status_code:
            return False
        match self.config.baseline_match:
            case "hash":
                return body_digest(response.body) == baseline.digest
            case "fuzzy":
                return abs(response.size - baseline.size) <= self.config.length_tolerance
            case _:
                return response.size == baseline.size

    def classify(self, request: ProbeRequest, raw: Any) -> ProbeOutcome:
        response: HTTPResponse = raw
        if (
            response.status_code == 400
            or response.size in self.config.exclude_lengths
            or self.matches_baseline(response)
        ):
            kind = OutcomeKind.NOT_FOUND
        else:
            kind = OutcomeKind.FOUND
        return self.outcome(
            kind,
            request,
            status_code=response.status_code,
            size=response.size,
            redirect=response.location,
        )
