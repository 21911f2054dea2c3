"""Directory and file enumeration over HTTP."""

from typing import Any

import httpx

from enumbuster.errors import ProbeError, SetupError
from enumbuster.modules.engine.models import Candidate, OutcomeKind, ProbeOutcome, ProbeRequest
from enumbuster.tools.http import HTTPResponse
from enumbuster.tools.transport import Transport
from enumbuster.utils.names import random_label

from .base import HTTPProbe, WarnCallback

BACKUP_SUFFIXES = (".bak", ".backup", ".old", ".orig", ".save", "~", ".swp", ".tmp", ".copy")


def status_allowed(status: int, allow: frozenset[int], deny: frozenset[int] = frozenset()) -> bool:
    """True when *status* is in the allow-set and not explicitly denied."""
    return status in allow and status not in deny


class DirProbe(HTTPProbe):
    """Request ``base_url/word`` (plus slash and extension variants)."""

    mode = "dir"

    @property
    def base_url(self) -> str:
        return self.config.target.rstrip("/")

    def validate(self) -> None:
        if not self.config.target.startswith(("http://", "https://")):
            raise SetupError(f"Target URL must start with http:// or https://: {self.config.target}")
        if not self.config.status_codes:
            raise SetupError("Status code allow-set is empty")

    def outcomes_for(self, word: str) -> int:
        return len(self.paths(Candidate(word)))

    async def prepare(self, transport: Transport, warn: WarnCallback) -> None:
        if self.config.force_wildcard:
            return
        url = f"{self.base_url}/enumbuster-wildcard-{random_label()}"
        try:
            response = await transport.require_http().request(self.config.http.method, url)
        except (httpx.HTTPError, OSError) as exc:
            kind = ProbeError.from_exception(exc).kind.value
            raise SetupError(f"Target {self.base_url} is unreachable ({kind}): {exc}") from exc
        if self._matches(response):
            raise SetupError(
                f"Wildcard response detected: {url} => {response.status_code} "
                f"(Size: {response.size}). Use --wildcard to force enumeration."
            )

    def paths(self, candidate: Candidate) -> list[str]:
        word = candidate.word
        path = word if word.startswith("/") else f"/{word}"
        if not candidate.expand:
            return [path]

        paths = [path]
        if self.config.add_slash and not path.endswith("/"):
            paths.append(f"{path}/")
        for ext in self.config.extensions:
            paths.append(f"{path}{ext}" if ext.startswith(".") else f"{path}.{ext}")
        return paths

    def build(self, candidate: Candidate) -> list[ProbeRequest]:
        return [
            ProbeRequest(
                candidate=candidate,
                target=f"{self.base_url}{path}",
                url=f"{self.base_url}{path}",
                method=self.config.http.method,
                label=path,
            )
            for path in self.paths(candidate)
        ]

    def backup_candidates(self, found: list[ProbeOutcome]) -> list[Candidate]:
        """Candidates for backup copies of found files (``index.php.bak`` ...)."""
        candidates: list[Candidate] = []
        seen: set[str] = set()
        for outcome in found:
            path = outcome.label or outcome.candidate.word
            if path.endswith("/"):
                continue
            for suffix in BACKUP_SUFFIXES:
                word = f"{path}{suffix}"
                if word not in seen:
                    seen.add(word)
                    candidates.append(Candidate(word=word, line=outcome.candidate.line, expand=False))
        return candidates

    def _matches(self, response: HTTPResponse) -> bool:
        return (
            status_allowed(response.status_code, self.config.status_codes, self.config.status_blacklist)
            and response.size not in self.config.exclude_lengths
        )

    def classify(self, request: ProbeRequest, raw: Any) -> ProbeOutcome:
        response: HTTPResponse = raw
        kind = OutcomeKind.FOUND if self._matches(response) else OutcomeKind.NOT_FOUND
        return self.outcome(
            kind,
            request,
            status_code=response.status_code,
            size=response.size,
            redirect=response.location,
        )
