"""Shared run counters and the final run summary."""

import threading
import time
from dataclasses import dataclass
from enum import Enum

from .models import OutcomeKind, ProbeOutcome


class RunStatus(str, Enum):
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"
    FAILED = "failed"


EXIT_CODES = {
    RunStatus.COMPLETED: 0,
    RunStatus.FAILED: 1,
    RunStatus.INTERRUPTED: 130,
}


@dataclass(frozen=True)
class RunSnapshot:
    total: int
    processed: int
    found: int
    not_found: int
    errors: int
    elapsed: float

    @property
    def remaining(self) -> float | None:
        """Estimated seconds left, once at least one outcome has arrived."""
        if not self.processed or self.elapsed <= 0:
            return None
        rate = self.processed / self.elapsed
        return max(0.0, (self.total - self.processed) / rate)


class RunState:
    """Counters updated by every worker and read by the progress renderer.

    Counters only grow while a run is active.
    """

    def __init__(self, total: int = 0):
        self._lock = threading.Lock()
        self.total = total
        self.processed = 0
        self.found = 0
        self.not_found = 0
        self.errors = 0
        self.started_at = time.monotonic()
        self.finished_at: float | None = None

    def record(self, outcome: ProbeOutcome) -> None:
        with self._lock:
            self.processed += 1
            if outcome.kind is OutcomeKind.FOUND:
                self.found += 1
            elif outcome.kind is OutcomeKind.ERROR:
                self.errors += 1
            else:
                self.not_found += 1

    def add_total(self, count: int) -> None:
        with self._lock:
            self.total += count

    def finish(self) -> None:
        with self._lock:
            if self.finished_at is None:
                self.finished_at = time.monotonic()

    @property
    def elapsed(self) -> float:
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at

    def snapshot(self) -> RunSnapshot:
        with self._lock:
            return RunSnapshot(
                total=self.total,
                processed=self.processed,
                found=self.found,
                not_found=self.not_found,
                errors=self.errors,
                elapsed=self.elapsed,
            )


@dataclass(frozen=True)
class RunSummary:
    """What a run reports once it is over."""

    status: RunStatus
    snapshot: RunSnapshot
    message: str = ""

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.status]
