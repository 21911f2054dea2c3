"""Bounded worker pool that drives a probe over a candidate stream."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING

from enumbuster.errors import ErrorKind

from .models import Candidate, OutcomeKind, ProbeOutcome

if TYPE_CHECKING:
    from enumbuster.modules.probes import Probe
    from enumbuster.tools.transport import Transport

logger = logging.getLogger(__name__)

Emit = Callable[[ProbeOutcome], Awaitable[None]]


class WorkerPool:
    """N workers fed by one producer through a queue of size N.

    Every candidate taken from the stream is probed exactly once, unless a
    stop was requested, in which case queued candidates are dropped and only
    in-flight probes finish.
    """

    def __init__(
        self,
        probe: Probe,
        transport: Transport,
        concurrency: int,
        delay: float = 0.0,
        stop_event: asyncio.Event | None = None,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.probe = probe
        self.transport = transport
        self.concurrency = concurrency
        self.delay = max(0.0, delay)
        self.stop_event = stop_event or asyncio.Event()
        self.dispatched = 0

    @property
    def stopped(self) -> bool:
        return self.stop_event.is_set()

    def stop(self) -> None:
        self.stop_event.set()

    async def run(self, candidates: Iterable[Candidate], emit: Emit) -> None:
        """Probe every candidate and hand each outcome to *emit*."""
        queue: asyncio.Queue[Candidate | None] = asyncio.Queue(maxsize=self.concurrency)
        producer = asyncio.create_task(self._produce(candidates, queue), name="producer")
        workers = [
            asyncio.create_task(self._work(queue, emit), name=f"worker-{index}")
            for index in range(self.concurrency)
        ]
        try:
            await asyncio.gather(producer, *workers)
        finally:
            for task in (producer, *workers):
                if not task.done():
                    task.cancel()
            await asyncio.gather(producer, *workers, return_exceptions=True)

    async def _produce(self, candidates: Iterable[Candidate], queue: asyncio.Queue) -> None:
        for candidate in candidates:
            if self.stopped:
                break
            await queue.put(candidate)
        # One sentinel per worker. A failing stream propagates instead and
        # run() cancels the workers.
        for _ in range(self.concurrency):
            await queue.put(None)

    async def _work(self, queue: asyncio.Queue, emit: Emit) -> None:
        while True:
            candidate = await queue.get()
            if candidate is None:
                return
            if self.stopped:
                continue
            if self.delay:
                await self._pause()
                if self.stopped:
                    continue
            self.dispatched += 1
            for outcome in await self._probe(candidate):
                await emit(outcome)

    async def _pause(self) -> None:
        """Sleep for the configured delay, waking early on stop."""
        try:
            await asyncio.wait_for(self.stop_event.wait(), self.delay)
        except TimeoutError:
            pass

    async def _probe(self, candidate: Candidate) -> list[ProbeOutcome]:
        try:
            return await self.probe.run(candidate, self.transport)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Shown as an Error outcome in verbose mode; traceback only with --debug.
            logger.debug("Probe failed for %r", candidate.word, exc_info=True)
            return [
                ProbeOutcome(
                    kind=OutcomeKind.ERROR,
                    mode=self.probe.mode,
                    candidate=candidate,
                    target=candidate.word,
                    error_kind=ErrorKind.OTHER,
                    error=str(exc) or exc.__class__.__name__,
                )
            ]
