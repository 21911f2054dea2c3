"""Per-variant retry policy for probe requests."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from enumbuster.errors import ErrorKind, ProbeError

T = TypeVar("T")

RETRYABLE_KINDS = frozenset({ErrorKind.TIMEOUT, ErrorKind.CONNECTION})


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget for one probe request.

    ``timeout`` bounds each attempt; ``backoff`` is the pause before the
    second attempt and grows by ``backoff_factor`` after that. With the default
    zero backoff a request gives up within ``max_attempts * timeout``.
    """

    max_attempts: int = 1
    timeout: float = 10.0
    backoff: float = 0.0
    backoff_factor: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    def delays(self) -> list[float]:
        """Pause before each retry (one entry per attempt after the first)."""
        return [
            self.backoff * (self.backoff_factor**index) for index in range(self.max_attempts - 1)
        ]

    @property
    def deadline(self) -> float:
        """Worst-case seconds spent on one request."""
        return self.max_attempts * self.timeout + sum(self.delays())

    async def run(self, attempt: Callable[[float], Awaitable[T]]) -> T:
        """Call ``attempt(timeout)`` until it succeeds or the budget is spent.

        ``attempt`` raises ``ProbeError``; only timeout and connection kinds
        are retried. The last error propagates.
        """
        delays = self.delays()
        for index in range(self.max_attempts):
            try:
                return await attempt(self.timeout)
            except ProbeError as exc:
                last_attempt = index == self.max_attempts - 1
                if last_attempt or exc.kind not in RETRYABLE_KINDS:
                    raise
            if delays[index] > 0:
                await asyncio.sleep(delays[index])
        raise AssertionError("unreachable")
