"""TFTP file discovery with read requests."""

from typing import Any

from enumbuster.errors import ErrorKind, ProbeError, SetupError
from enumbuster.modules.engine.models import Candidate, OutcomeKind, ProbeOutcome, ProbeRequest
from enumbuster.tools.tftp import TFTPReply, build_read_request, parse_reply
from enumbuster.tools.transport import Transport

from .base import Probe, WarnCallback
from .retry import RetryPolicy

MAX_CONCURRENCY = 50


class TftpProbe(Probe):
    """Send an RRQ per filename; DATA or OACK means the file is readable."""

    mode = "tftp"
    max_concurrency = MAX_CONCURRENCY

    def validate(self) -> None:
        if self.config.retries < 1:
            raise SetupError("--retries must be at least 1")

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.config.retries, timeout=self.config.timeout)

    async def prepare(self, transport: Transport, warn: WarnCallback) -> None:
        client = transport.require_tftp()
        try:
            await client.connect()
        except OSError as exc:
            raise SetupError(f"Cannot resolve TFTP server {client.host}: {exc}") from exc

    def build(self, candidate: Candidate) -> list[ProbeRequest]:
        filename = candidate.word.strip()
        if not filename:
            return []
        return [ProbeRequest(candidate=candidate, target=filename, label=filename)]

    async def execute(self, request: ProbeRequest, transport: Transport, timeout: float) -> Any:
        datagram = await transport.require_tftp().exchange(
            build_read_request(request.target), timeout
        )
        try:
            return parse_reply(datagram)
        except ValueError as exc:
            raise ProbeError(ErrorKind.PROTOCOL, str(exc)) from exc

    def classify(self, request: ProbeRequest, raw: Any) -> ProbeOutcome:
        reply: TFTPReply = raw
        if reply.exists:
            return self.outcome(OutcomeKind.FOUND, request)
        detail = f"TFTP error {reply.error_code}: {reply.message}".rstrip(": ")
        return self.outcome(OutcomeKind.NOT_FOUND, request, error=detail)
