"""Data models shared by probes, the worker pool and the result sink."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from enumbuster.errors import ErrorKind

DEFAULT_STATUS_CODES = frozenset(range(200, 400))


@dataclass(frozen=True)
class HTTPOptions:
    """Transport settings for the HTTP-based modes."""

    headers: tuple[tuple[str, str], ...] = ()
    cookies: str | None = None
    user_agent: str = "enumbuster"
    insecure: bool = False
    proxy: str | None = None
    username: str | None = None
    password: str | None = None
    follow_redirects: bool = False
    method: str = "GET"


@dataclass(frozen=True)
class ScanConfig:
    """Immutable run configuration, resolved once before the run starts."""

    mode: str
    target: str
    wordlist: Path
    threads: int = 10
    delay: float = 0.0
    timeout: float = 10.0
    output: Path | None = None
    output_format: str = "auto"
    output_required: bool = True
    quiet: bool = False
    verbose: bool = False
    no_progress: bool = False
    no_color: bool = False
    http: HTTPOptions = field(default_factory=HTTPOptions)
    # dir / fuzz
    extensions: tuple[str, ...] = ()
    status_codes: frozenset[int] = DEFAULT_STATUS_CODES
    status_blacklist: frozenset[int] = frozenset()
    exclude_lengths: frozenset[int] = frozenset()
    add_slash: bool = False
    expanded: bool = False
    show_length: bool = False
    discover_backup: bool = False
    force_wildcard: bool = False
    # dns / vhost
    domain: str | None = None
    append_domain: bool = False
    resolver: str | None = None
    show_ips: bool = False
    show_cname: bool = False
    baseline_match: str = "length"
    length_tolerance: int = 0
    # fuzz
    data: str | None = None
    exclude_status: frozenset[int] = frozenset()
    filter_string: str | None = None
    # s3 / gcs
    max_files: int = 5
    # tftp
    retries: int = 3


@dataclass(frozen=True)
class Candidate:
    """One wordlist token being tested against the target."""

    word: str
    line: int = 0
    expand: bool = True


@dataclass(frozen=True)
class ProbeRequest:
    """Protocol-specific request derived from a candidate and the config."""

    candidate: Candidate
    target: str
    method: str = "GET"
    url: str | None = None
    headers: tuple[tuple[str, str], ...] = ()
    content: str | None = None
    label: str = ""

    @property
    def display(self) -> str:
        return self.label or self.target


class OutcomeKind(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class ProbeOutcome:
    """Classified result of one probe request."""

    kind: OutcomeKind
    mode: str
    candidate: Candidate
    target: str
    label: str = ""
    status_code: int | None = None
    size: int | None = None
    redirect: str | None = None
    ips: list[str] = field(default_factory=list)
    cnames: list[str] = field(default_factory=list)
    words: int | None = None
    lines: int | None = None
    bucket_state: str | None = None
    files: list[str] = field(default_factory=list)
    error_kind: ErrorKind | None = None
    error: str | None = None
    elapsed: float = 0.0

    @property
    def found(self) -> bool:
        return self.kind is OutcomeKind.FOUND

    @property
    def is_error(self) -> bool:
        return self.kind is OutcomeKind.ERROR

    @property
    def display(self) -> str:
        return self.label or self.target

    @classmethod
    def failure(
        cls,
        mode: str,
        request: ProbeRequest,
        kind: ErrorKind,
        message: str,
        elapsed: float = 0.0,
    ) -> ProbeOutcome:
        return cls(
            kind=OutcomeKind.ERROR,
            mode=mode,
            candidate=request.candidate,
            target=request.target,
            label=request.label,
            error_kind=kind,
            error=message,
            elapsed=elapsed,
        )

    def to_record(self) -> dict[str, Any]:
        """Serializable record used by the JSON output format."""
        record: dict[str, Any] = {
            "candidate": self.candidate.word,
            "mode": self.mode,
            "result": self.kind.value,
            "found": self.found,
            "target": self.display,
        }
        optional = {
            "status_code": self.status_code,
            "size": self.size,
            "redirect": self.redirect,
            "ips": self.ips or None,
            "cnames": self.cnames or None,
            "words": self.words,
            "lines": self.lines,
            "bucket_state": self.bucket_state,
            "files": self.files if self.bucket_state else None,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error": self.error,
        }
        record.update({key: value for key, value in optional.items() if value is not None})
        record["elapsed"] = round(self.elapsed, 4)
        return record
