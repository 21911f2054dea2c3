"""Tests for outcome rendering, the result file writer and the result sink."""

import asyncio
import io
import json

import pytest
from rich.console import Console

from enumbuster.errors import ErrorKind, OutputError
from enumbuster.modules.engine import (
    Candidate,
    OutcomeKind,
    ProbeOutcome,
    RunSnapshot,
    RunState,
    RunStatus,
    RunSummary,
)
from enumbuster.modules.output import (
    ResultFileWriter,
    ResultSink,
    create_progress_panel,
    create_summary_table,
    format_line,
    render_error,
    render_found,
    resolve_format,
    status_style,
)
from enumbuster.modules.output.sink import format_duration


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, no_color=True, record=True)


def _found(word: str = "admin", status: int = 200, **fields) -> ProbeOutcome:
    mode = fields.pop("mode", "dir")
    defaults = {"target": f"http://target.test/{word}", "label": f"/{word}", "status_code": status, "size": 42}
    defaults.update(fields)
    return ProbeOutcome(kind=OutcomeKind.FOUND, mode=mode, candidate=Candidate(word), **defaults)


def _error(word: str = "slow") -> ProbeOutcome:
    return ProbeOutcome(
        kind=OutcomeKind.ERROR,
        mode="dir",
        candidate=Candidate(word),
        target=f"http://target.test/{word}",
        label=f"/{word}",
        error_kind=ErrorKind.TIMEOUT,
        error="read timed out",
    )


def _not_found(word: str = "nope") -> ProbeOutcome:
    return ProbeOutcome(
        kind=OutcomeKind.NOT_FOUND, mode="dir", candidate=Candidate(word), target=word, status_code=404
    )


class TestFormatLine:
    """One line per mode."""

    def test_dir(self):
        outcome = _found(status=301, redirect="http://target.test/admin/")
        assert format_line(outcome) == "/admin (Status: 301) [Size: 42] [--> http://target.test/admin/]"

    def test_dir_expanded_without_length(self):
        line = format_line(_found(), expanded=True, show_length=False)
        assert line == "http://target.test/admin (Status: 200)"

    def test_dns(self):
        outcome = ProbeOutcome(
            kind=OutcomeKind.FOUND,
            mode="dns",
            candidate=Candidate("www"),
            target="www.example.com",
            ips=["10.0.0.1", "10.0.0.2"],
            cnames=["edge.example.net"],
        )
        assert format_line(outcome) == "www.example.com [10.0.0.1, 10.0.0.2] (CNAME: edge.example.net)"
        assert format_line(outcome, show_ips=False, show_cname=False) == "www.example.com"

    def test_vhost(self):
        outcome = ProbeOutcome(
            kind=OutcomeKind.FOUND,
            mode="vhost",
            candidate=Candidate("dev"),
            target="http://target.test",
            label="dev",
            status_code=200,
            size=1234,
        )
        assert format_line(outcome) == "dev (Status: 200) [Size: 1234]"

    def test_fuzz(self):
        outcome = ProbeOutcome(
            kind=OutcomeKind.FOUND,
            mode="fuzz",
            candidate=Candidate("admin"),
            target="http://target.test/?q=admin",
            label="admin",
            status_code=200,
            size=17,
            words=3,
            lines=2,
        )
        assert format_line(outcome) == "admin [Status: 200, Size: 17, Words: 3, Lines: 2]"

    def test_public_bucket(self):
        outcome = ProbeOutcome(
            kind=OutcomeKind.FOUND,
            mode="s3",
            candidate=Candidate("assets"),
            target="https://assets.s3.amazonaws.com",
            label="assets",
            bucket_state="public",
            files=["a.txt", "b.txt"],
        )
        assert format_line(outcome) == "assets [public] files: 2"

    def test_private_bucket(self):
        outcome = ProbeOutcome(
            kind=OutcomeKind.FOUND,
            mode="gcs",
            candidate=Candidate("backups"),
            target="backups",
            bucket_state="private",
        )
        assert format_line(outcome) == "backups [private]"

    def test_tftp(self):
        outcome = ProbeOutcome(
            kind=OutcomeKind.FOUND, mode="tftp", candidate=Candidate("boot.cfg"), target="boot.cfg"
        )
        assert format_line(outcome) == "boot.cfg"


class TestRendering:
    @pytest.mark.parametrize(
        ("status", "style"), [(200, "green"), (301, "cyan"), (403, "yellow"), (500, "red"), (None, "white")]
    )
    def test_status_style(self, status, style):
        assert status_style(status) == style

    def test_found_colours_status(self, make_config):
        markup = render_found(_found(status=403), make_config())
        assert "Status: [yellow]403[/yellow]" in markup

    def test_tftp_found_prefix(self, make_config):
        outcome = ProbeOutcome(
            kind=OutcomeKind.FOUND, mode="tftp", candidate=Candidate("boot.cfg"), target="boot.cfg"
        )
        assert render_found(outcome, make_config("tftp")).startswith("[green]Found:[/green]")

    def test_markup_in_names_is_escaped(self, make_config):
        markup = render_found(_found(word="[red]x"), make_config())
        assert "\\[red]x" in markup

    def test_error(self):
        markup = render_error(_error())
        assert "timeout" in markup
        assert "read timed out" in markup

    @pytest.mark.parametrize(
        ("seconds", "text"), [(None, "--:--"), (0, "00:00"), (75, "01:15"), (3725, "1:02:05")]
    )
    def test_format_duration(self, seconds, text):
        assert format_duration(seconds) == text

    def test_progress_panel(self):
        snapshot = RunSnapshot(total=10, processed=4, found=1, not_found=2, errors=1, elapsed=2.0)
        console = _console()

        console.print(create_progress_panel(snapshot, "dir", "http://target.test"))
        text = console.export_text()

        assert "4/10" in text
        assert "1 found" in text
        assert "ETA 00:03" in text

    def test_summary_table(self):
        snapshot = RunSnapshot(total=3, processed=3, found=1, not_found=1, errors=1, elapsed=1.5)
        console = _console()

        console.print(create_summary_table(RunSummary(RunStatus.INTERRUPTED, snapshot, "stopped")))
        text = console.export_text()

        assert "3/3" in text
        assert "interrupted" in text
        assert "stopped" in text


class TestResolveFormat:
    @pytest.mark.parametrize(
        ("name", "fmt", "expected"),
        [
            ("out.json", "auto", "json"),
            ("OUT.JSON", "auto", "json"),
            ("out.txt", "auto", "text"),
            ("results", "auto", "text"),
            ("out.txt", "json", "json"),
            ("out.json", "text", "text"),
        ],
    )
    def test_resolve(self, temp_dir, name, fmt, expected):
        assert resolve_format(temp_dir / name, fmt) == expected

    def test_unknown(self, temp_dir):
        with pytest.raises(ValueError):
            resolve_format(temp_dir / "out", "xml")


class TestResultFileWriter:
    """Text and JSON persistence."""

    def test_text_lines(self, temp_dir):
        writer = ResultFileWriter(temp_dir / "out.txt")
        writer.open()
        writer.write(_found("admin"))
        writer.write(_found("login", status=302))
        writer.finalize()

        assert (temp_dir / "out.txt").read_text().splitlines() == [
            "/admin (Status: 200) [Size: 42]",
            "/login (Status: 302) [Size: 42]",
        ]

    def test_json_keeps_every_record(self, temp_dir):
        path = temp_dir / "out.json"
        writer = ResultFileWriter(path)
        writer.open()
        for _ in range(3):
            writer.write(_found("admin"))
        writer.finalize()

        records = json.loads(path.read_text())
        assert len(records) == 3
        assert all(record["candidate"] == "admin" for record in records)
        assert records[0]["status_code"] == 200
        assert records[0]["found"] is True

    def test_json_empty_run_is_valid(self, temp_dir):
        path = temp_dir / "out.json"
        writer = ResultFileWriter(path)
        writer.open()
        writer.finalize()

        assert json.loads(path.read_text()) == []

    def test_finalize_twice(self, temp_dir):
        path = temp_dir / "out.json"
        writer = ResultFileWriter(path)
        writer.open()
        writer.write(_found())
        writer.finalize()
        writer.finalize()

        assert len(json.loads(path.read_text())) == 1

    def test_creates_parent_directories(self, temp_dir):
        writer = ResultFileWriter(temp_dir / "nested" / "dir" / "out.txt")
        writer.open()
        writer.finalize()

        assert (temp_dir / "nested" / "dir" / "out.txt").exists()

    def test_unwritable_path(self, temp_dir):
        blocker = temp_dir / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(OutputError):
            ResultFileWriter(blocker / "out.txt").open()

    def test_write_before_open(self, temp_dir):
        with pytest.raises(OutputError):
            ResultFileWriter(temp_dir / "out.txt").write(_found())


class FailingWriter(ResultFileWriter):
    def write(self, outcome):
        raise OutputError("disk full")


class BrokenWriter(ResultFileWriter):
    """Raises an unexpected error for the word ``admin``."""

    def write(self, outcome):
        if outcome.candidate.word == "admin":
            raise RuntimeError("encoder bug")
        super().write(outcome)


class TestResultSink:
    """Single-consumer result handling."""

    async def _run(self, sink: ResultSink, outcomes) -> None:
        await sink.start()
        for outcome in outcomes:
            await sink.emit(outcome)
        await sink.close()

    async def test_counts_and_persists_found_only(self, make_config, temp_dir):
        path = temp_dir / "out.json"
        writer = ResultFileWriter(path)
        writer.open()
        state = RunState(total=4)
        console = _console()
        sink = ResultSink(make_config(), state, console, writer)

        await self._run(sink, [_found("admin"), _not_found(), _error(), _found("login")])

        snapshot = state.snapshot()
        assert (snapshot.processed, snapshot.found, snapshot.not_found, snapshot.errors) == (4, 2, 1, 1)
        assert [o.candidate.word for o in sink.found] == ["admin", "login"]
        assert [r["candidate"] for r in json.loads(path.read_text())] == ["admin", "login"]
        text = console.export_text()
        assert "/admin" in text
        assert "nope" not in text
        assert "Error" not in text
        assert state.finished_at is not None

    async def test_errors_shown_when_verbose(self, make_config):
        console = _console()
        sink = ResultSink(make_config(verbose=True), RunState(), console)

        await self._run(sink, [_error("slow")])

        assert "Error: /slow (timeout) read timed out" in console.export_text()

    async def test_optional_output_failure_only_warns(self, make_config, temp_dir):
        fatal = []
        writer = FailingWriter(temp_dir / "out.txt")
        writer.open()
        sink = ResultSink(
            make_config(output_required=False), RunState(), _console(), writer, on_fatal=lambda: fatal.append(1)
        )

        await self._run(sink, [_found("admin"), _found("login")])

        assert sink.output_error is None
        assert fatal == []
        assert len(sink.found) == 2

    async def test_required_output_failure_is_fatal(self, make_config, temp_dir):
        fatal = []
        writer = FailingWriter(temp_dir / "out.txt")
        writer.open()
        sink = ResultSink(make_config(), RunState(), _console(), writer, on_fatal=lambda: fatal.append(1))

        await self._run(sink, [_found("admin"), _found("login")])

        assert isinstance(sink.output_error, OutputError)
        assert fatal == [1]

    async def test_drain_waits_for_pending_outcomes(self, make_config):
        state = RunState()
        sink = ResultSink(make_config(), state, _console())
        await sink.start()
        for word in ("a", "b", "c"):
            await sink.emit(_found(word))

        await sink.drain()

        assert state.snapshot().found == 3
        await sink.close()

    async def test_handler_failure_keeps_consumer_running(self, make_config, temp_dir):
        writer = BrokenWriter(temp_dir / "out.txt")
        writer.open()
        state = RunState()
        sink = ResultSink(make_config(), state, _console(), writer)
        await sink.start()
        for word in ("admin", "login", "api"):
            await sink.emit(_found(word))

        await asyncio.wait_for(sink.drain(), 1)

        assert state.snapshot().found == 3
        await sink.close()
        assert (temp_dir / "out.txt").read_text().splitlines() == [
            "/login (Status: 200) [Size: 42]",
            "/api (Status: 200) [Size: 42]",
        ]

    async def test_summary_skipped_when_quiet(self, make_config):
        console = _console()
        sink = ResultSink(make_config(), RunState(), console)
        snapshot = RunState().snapshot()

        sink.print_summary(RunSummary(RunStatus.COMPLETED, snapshot))

        assert console.export_text() == ""
