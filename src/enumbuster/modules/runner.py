"""Run lifecycle: setup, baseline probes, the worker pool and the summary."""

import asyncio
import logging

from rich.console import Console
from rich.panel import Panel

from enumbuster.errors import OutputError, SetupError
from enumbuster.modules.engine import RunState, RunStatus, RunSummary, ScanConfig, WorkerPool
from enumbuster.modules.output import ResultFileWriter, ResultSink
from enumbuster.modules.probes import DirProbe, Probe, create_probe
from enumbuster.modules.wordlist import WordlistSource
from enumbuster.tools.transport import Transport
from enumbuster.utils.debug import debug_print

logger = logging.getLogger(__name__)


class RunController:
    """Owns one enumeration run from configuration to summary.

    ``run`` never raises for setup or output problems; they come back as a
    ``FAILED`` summary. A cooperative stop (``request_stop``) yields
    ``INTERRUPTED`` once in-flight probes are done.
    """

    def __init__(
        self,
        config: ScanConfig,
        console: Console | None = None,
        transport: Transport | None = None,
    ):
        self.config = config
        self.console = console or Console(no_color=config.no_color)
        self.transport = transport
        self.stop_event = asyncio.Event()
        self.state = RunState()
        self.sink: ResultSink | None = None

    def request_stop(self) -> None:
        if not self.stop_event.is_set():
            logger.info("Stop requested; waiting for in-flight probes")
            if not self.config.quiet:
                self.console.print("[yellow]Interrupted, finishing in-flight probes...[/yellow]")
            self.stop_event.set()

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]Warning:[/yellow] {message}")

    def concurrency_for(self, probe: Probe) -> int:
        if self.config.threads < 1:
            raise SetupError("--threads must be at least 1")
        if probe.max_concurrency is not None and self.config.threads > probe.max_concurrency:
            logger.info("Concurrency capped at %d for %s mode", probe.max_concurrency, probe.mode)
            return probe.max_concurrency
        return self.config.threads

    def open_writer(self) -> ResultFileWriter | None:
        if self.config.output is None:
            return None
        try:
            writer = ResultFileWriter(self.config.output, self.config.output_format)
        except ValueError as e:
            raise SetupError(str(e)) from e
        try:
            writer.open()
        except OutputError as e:
            if self.config.output_required:
                raise
            self.warn(f"{e}; results will only be shown on the console")
            return None
        return writer

    def print_banner(self, concurrency: int) -> None:
        if self.config.quiet:
            return
        config = self.config
        lines = [
            f"[bold]Mode:[/bold] {config.mode}",
            f"[bold]Target:[/bold] {config.target}",
            f"[bold]Wordlist:[/bold] {config.wordlist}",
            f"[bold]Threads:[/bold] {concurrency}",
        ]
        if config.delay:
            lines.append(f"[bold]Delay:[/bold] {config.delay * 1000:.0f}ms")
        if config.extensions:
            lines.append(f"[bold]Extensions:[/bold] {', '.join(config.extensions)}")
        if config.output:
            lines.append(f"[bold]Output:[/bold] {config.output}")
        self.console.print(Panel("\n".join(lines), title="enumbuster", border_style="cyan"))

    async def run(self) -> RunSummary:
        writer: ResultFileWriter | None = None
        try:
            wordlist = WordlistSource(self.config.wordlist)
            wordlist.check()
            probe = create_probe(self.config)
            concurrency = self.concurrency_for(probe)
            transport = self.transport or Transport.for_config(self.config)
            writer = self.open_writer()
        except (SetupError, OutputError) as e:
            return self._fail(e, writer)

        self.print_banner(concurrency)
        try:
            async with transport:
                await probe.prepare(transport, self.warn)
                self.state.add_total(wordlist.count(probe.outcomes_for))
                debug_print(
                    "setup",
                    "Baseline probes done",
                    mode=probe.mode,
                    concurrency=concurrency,
                    total=self.state.total,
                    output=self.config.output,
                )
                self.sink = ResultSink(
                    self.config, self.state, self.console, writer, on_fatal=self.request_stop
                )
                writer = None
                await self.sink.start()
                try:
                    await self._scan(probe, transport, wordlist, concurrency)
                finally:
                    await self.sink.close()
        except (SetupError, OutputError) as e:
            return self._fail(e, writer)

        return self._finish()

    async def _scan(
        self, probe: Probe, transport: Transport, wordlist: WordlistSource, concurrency: int
    ) -> None:
        assert self.sink is not None
        pool = WorkerPool(probe, transport, concurrency, self.config.delay, self.stop_event)
        await pool.run(wordlist, self.sink.emit)

        if isinstance(probe, DirProbe) and self.config.discover_backup and not pool.stopped:
            await self.sink.drain()
            backups = probe.backup_candidates(list(self.sink.found))
            if backups:
                logger.info("Probing %d backup candidates", len(backups))
                self.state.add_total(len(backups))
                await pool.run(backups, self.sink.emit)

    def _fail(self, error: Exception, writer: ResultFileWriter | None) -> RunSummary:
        if writer is not None:
            try:
                writer.finalize()
            except OutputError as e:
                logger.warning("%s", e)
        self.state.finish()
        self.console.print(f"[red]Error: {error}[/red]")
        summary = RunSummary(RunStatus.FAILED, self.state.snapshot(), str(error))
        if self.sink is not None:
            self.sink.print_summary(summary)
        return summary

    def _finish(self) -> RunSummary:
        assert self.sink is not None
        if self.sink.output_error is not None:
            status, message = RunStatus.FAILED, str(self.sink.output_error)
        elif self.stop_event.is_set():
            status, message = RunStatus.INTERRUPTED, ""
        else:
            status, message = RunStatus.COMPLETED, ""
        summary = RunSummary(status, self.state.snapshot(), message)
        self.sink.print_summary(summary)
        return summary
