"""Single consumer that owns console results, progress and the result file."""

import asyncio
import logging
from collections.abc import Callable

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from enumbuster.errors import OutputError
from enumbuster.modules.engine.models import OutcomeKind, ProbeOutcome, ScanConfig
from enumbuster.modules.engine.state import RunSnapshot, RunState, RunStatus, RunSummary

from .display import render_error, render_found
from .writer import ResultFileWriter

logger = logging.getLogger(__name__)


def format_duration(seconds: float | None) -> str:
    if seconds is None:
        return "--:--"
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def create_progress_panel(snapshot: RunSnapshot, mode: str, target: str) -> Panel:
    """Panel showing processed/total, found, errors and timing."""
    line = Text()
    line.append("● ", style="cyan")
    line.append(f"{snapshot.processed}/{snapshot.total}", style="bold white")
    line.append(f"    {snapshot.found} found", style="green")
    line.append(f"    {snapshot.errors} errors", style="red" if snapshot.errors else "dim")
    line.append(
        f"    ⏱ {format_duration(snapshot.elapsed)} / ETA {format_duration(snapshot.remaining)}",
        style="dim",
    )
    return Panel(
        line,
        title=f"[bold cyan]enumbuster[/] [dim]({mode})[/]",
        subtitle=f"[dim]{target}[/]",
        border_style="cyan",
        padding=(0, 1),
    )


class _ProgressView:
    """Renderable rebuilt from RunState on every Live refresh."""

    def __init__(self, state: RunState, mode: str, target: str):
        self.state = state
        self.mode = mode
        self.target = target

    def __rich__(self) -> Panel:
        return create_progress_panel(self.state.snapshot(), self.mode, self.target)


def create_summary_table(summary: RunSummary) -> Table:
    snapshot = summary.snapshot
    style = {
        RunStatus.COMPLETED: "green",
        RunStatus.INTERRUPTED: "yellow",
        RunStatus.FAILED: "red",
    }[summary.status]

    table = Table(title="Summary", show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="dim")
    table.add_column("Value", style="bold")
    table.add_row("Processed", f"{snapshot.processed}/{snapshot.total}")
    table.add_row("Found", f"[green]{snapshot.found}[/green]")
    table.add_row("Not found", str(snapshot.not_found))
    table.add_row("Errors", f"[red]{snapshot.errors}[/red]" if snapshot.errors else "0")
    table.add_row("Elapsed", f"{snapshot.elapsed:.2f}s")
    table.add_row("Status", f"[{style}]{summary.status.value}[/{style}]")
    if summary.message:
        table.add_row("Message", summary.message)
    return table


class ResultSink:
    """Receives outcomes from every worker through one queue.

    The consumer task is the only code that prints results, updates the
    counters or touches the output file.
    """

    def __init__(
        self,
        config: ScanConfig,
        state: RunState,
        console: Console,
        writer: ResultFileWriter | None = None,
        on_fatal: Callable[[], None] | None = None,
    ):
        self.config = config
        self.state = state
        self.console = console
        self.writer = writer
        self.on_fatal = on_fatal
        self.found: list[ProbeOutcome] = []
        self.output_error: OutputError | None = None
        self._write_failed = False
        self._queue: asyncio.Queue[ProbeOutcome | None] = asyncio.Queue()
        self._consumer: asyncio.Task | None = None
        self._live: Live | None = None

    @property
    def show_progress(self) -> bool:
        return not (self.config.quiet or self.config.no_progress)

    async def start(self) -> None:
        if self.show_progress:
            self._live = Live(
                _ProgressView(self.state, self.config.mode, self.config.target),
                console=self.console,
                refresh_per_second=4,
                transient=True,
            )
            self._live.start()
        self._consumer = asyncio.create_task(self._consume(), name="result-sink")

    async def emit(self, outcome: ProbeOutcome) -> None:
        """Entry point used by the workers."""
        await self._queue.put(outcome)

    async def _consume(self) -> None:
        while True:
            outcome = await self._queue.get()
            try:
                if outcome is None:
                    return
                self.handle(outcome)
            except Exception as e:
                logger.error("Could not record result for %s: %s", outcome.display, e)
                logger.debug("Result handling failed", exc_info=True)
            finally:
                self._queue.task_done()

    def handle(self, outcome: ProbeOutcome) -> None:
        self.state.record(outcome)
        if outcome.kind is OutcomeKind.FOUND:
            self.found.append(outcome)
            self.console.print(render_found(outcome, self.config), highlight=False)
            self._persist(outcome)
        elif outcome.kind is OutcomeKind.ERROR:
            if self.config.verbose:
                self.console.print(render_error(outcome), highlight=False)
            logger.debug("%s failed: %s", outcome.display, outcome.error)

    def _persist(self, outcome: ProbeOutcome) -> None:
        if self.writer is None or self._write_failed:
            return
        try:
            self.writer.write(outcome)
        except OutputError as e:
            self._write_failed = True
            if self.config.output_required:
                self.output_error = e
                self.console.print(f"[red]{e}[/red]")
                if self.on_fatal:
                    self.on_fatal()
            else:
                logger.warning("%s; continuing with console output only", e)

    async def drain(self) -> None:
        """Wait until every emitted outcome has been handled."""
        if self._consumer is not None and not self._consumer.done():
            await self._queue.join()

    async def close(self) -> None:
        """Drain pending outcomes, stop the progress display and finalize the file."""
        try:
            if self._consumer is not None:
                if not self._consumer.done():
                    await self._queue.put(None)
                await self._consumer
        finally:
            self._consumer = None
            if self._live is not None:
                self._live.stop()
                self._live = None
            self.state.finish()
            self.finalize()

    def finalize(self) -> None:
        if self.writer is None:
            return
        writer, self.writer = self.writer, None
        try:
            writer.finalize()
        except OutputError as e:
            if self.config.output_required:
                self.output_error = self.output_error or e
            logger.warning("%s", e)

    def print_summary(self, summary: RunSummary) -> None:
        if self.config.quiet:
            return
        self.console.print()
        self.console.print(create_summary_table(summary))
