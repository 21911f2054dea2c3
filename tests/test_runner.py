"""End-to-end runs through RunController with mocked transports."""

import io
import json

import httpx
import respx
from fakes import FakeResolver
from httpx import Response
from rich.console import Console

from enumbuster.modules.engine import RunStatus
from enumbuster.modules.probes import TftpProbe
from enumbuster.modules.runner import RunController
from enumbuster.tools.dns import DNSClient
from enumbuster.tools.http import HTTPClient
from enumbuster.tools.transport import Transport

BASE = "http://target.test"


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, no_color=True, record=True)


def _http() -> Transport:
    return Transport(http=HTTPClient(timeout=2.0))


def _mock_paths(found: dict[str, int]) -> None:
    """Answer the listed paths with their status, everything else with 404."""

    def handler(request: httpx.Request) -> Response:
        return Response(found.get(request.url.path, 404), text="page")

    respx.route(host="target.test").mock(side_effect=handler)


class TestDirRuns:
    """Dir mode runs."""

    @respx.mock
    async def test_one_found_two_not_found(self, make_config, make_wordlist):
        _mock_paths({"/admin": 200})
        config = make_config("dir", wordlist=make_wordlist("admin", "login", "secret"))
        console = _console()

        summary = await RunController(config, console=console, transport=_http()).run()

        assert summary.status is RunStatus.COMPLETED
        assert summary.exit_code == 0
        snapshot = summary.snapshot
        assert (snapshot.total, snapshot.found, snapshot.not_found, snapshot.errors) == (3, 1, 2, 0)
        assert "/admin (Status: 200)" in console.export_text()

    @respx.mock
    async def test_json_output(self, make_config, make_wordlist, temp_dir):
        _mock_paths({"/admin": 200, "/login": 302})
        path = temp_dir / "results" / "out.json"
        config = make_config("dir", wordlist=make_wordlist("admin", "login", "secret"), output=path)

        summary = await RunController(config, console=_console(), transport=_http()).run()

        records = json.loads(path.read_text())
        assert summary.status is RunStatus.COMPLETED
        assert sorted(record["candidate"] for record in records) == ["admin", "login"]

    @respx.mock
    async def test_backup_discovery(self, make_config, make_wordlist):
        _mock_paths({"/index.php": 200, "/index.php.bak": 200})
        config = make_config("dir", wordlist=make_wordlist("index.php", "nothing"), discover_backup=True)
        controller = RunController(config, console=_console(), transport=_http())

        summary = await controller.run()

        found = sorted(outcome.display for outcome in controller.sink.found)
        assert found == ["/index.php", "/index.php.bak"]
        assert summary.snapshot.total == 2 + 9
        assert summary.snapshot.processed == summary.snapshot.total

    @respx.mock
    async def test_total_skips_slash_variant_of_trailing_slash_words(self, make_config, make_wordlist):
        _mock_paths({"/admin/": 200})
        config = make_config("dir", wordlist=make_wordlist("admin", "static/"), add_slash=True)

        summary = await RunController(config, console=_console(), transport=_http()).run()

        assert summary.snapshot.total == 3
        assert summary.snapshot.processed == summary.snapshot.total

    @respx.mock
    async def test_wildcard_response_aborts_run(self, make_config, make_wordlist):
        respx.route(host="target.test").respond(200, text="everything exists")
        config = make_config("dir", wordlist=make_wordlist("admin"))
        console = _console()

        summary = await RunController(config, console=console, transport=_http()).run()

        assert summary.status is RunStatus.FAILED
        assert "Wildcard" in summary.message
        assert summary.snapshot.processed == 0

    @respx.mock
    async def test_wildcard_flag_forces_scan(self, make_config, make_wordlist):
        respx.route(host="target.test").respond(200, text="everything exists")
        config = make_config("dir", wordlist=make_wordlist("admin", "login"), force_wildcard=True)

        summary = await RunController(config, console=_console(), transport=_http()).run()

        assert summary.status is RunStatus.COMPLETED
        assert summary.snapshot.found == 2

    @respx.mock
    async def test_unreachable_target_fails(self, make_config, make_wordlist):
        respx.route(host="target.test").mock(side_effect=httpx.ConnectError("refused"))
        config = make_config("dir", wordlist=make_wordlist("admin"))

        summary = await RunController(config, console=_console(), transport=_http()).run()

        assert summary.status is RunStatus.FAILED
        assert "unreachable" in summary.message

    @respx.mock
    async def test_stop_request_interrupts(self, make_config, make_wordlist, temp_dir):
        words = [f"w{index}" for index in range(50)]
        path = temp_dir / "out.json"
        config = make_config("dir", wordlist=make_wordlist(*words), threads=1, output=path)
        controller = RunController(config, console=_console(), transport=_http())

        def handler(request: httpx.Request) -> Response:
            if request.url.path == "/w5":
                controller.request_stop()
            return Response(200 if request.url.path == "/w2" else 404)

        respx.route(host="target.test").mock(side_effect=handler)

        summary = await controller.run()

        assert summary.status is RunStatus.INTERRUPTED
        assert summary.exit_code == 130
        assert summary.snapshot.processed < 50
        assert [record["candidate"] for record in json.loads(path.read_text())] == ["w2"]


class TestOtherModes:
    @respx.mock
    async def test_vhost_single_match(self, make_config, make_wordlist):
        def handler(request: httpx.Request) -> Response:
            if request.headers["host"] == "dev":
                return Response(200, text="developer portal")
            return Response(200, text="default site")

        respx.get(BASE).mock(side_effect=handler)
        config = make_config("vhost", wordlist=make_wordlist("www", "dev", "mail"))

        summary = await RunController(config, console=_console(), transport=_http()).run()

        assert summary.status is RunStatus.COMPLETED
        assert summary.snapshot.found == 1

    async def test_dns_www_api_ghost(self, make_config, make_wordlist):
        resolver = FakeResolver(
            {
                ("www.example.com", "A"): ["93.184.216.34"],
                ("api.example.com", "A"): ["93.184.216.35"],
            }
        )
        config = make_config(
            "dns", target="example.com", domain="example.com", wordlist=make_wordlist("www", "api", "ghost")
        )
        controller = RunController(config, console=_console(), transport=Transport(dns=DNSClient(resolver=resolver)))

        summary = await controller.run()

        assert summary.status is RunStatus.COMPLETED
        assert sorted(outcome.target for outcome in controller.sink.found) == [
            "api.example.com",
            "www.example.com",
        ]
        assert summary.snapshot.not_found == 1

    def test_tftp_concurrency_capped(self, make_config):
        config = make_config("tftp", target="127.0.0.1", threads=100)

        assert RunController(config).concurrency_for(TftpProbe(config)) == 50


class TestSetupFailures:
    """Failures that end the run before any probe."""

    async def test_missing_wordlist(self, make_config, temp_dir):
        config = make_config("dir", wordlist=temp_dir / "missing.txt")

        summary = await RunController(config, console=_console(), transport=_http()).run()

        assert summary.status is RunStatus.FAILED
        assert summary.exit_code == 1
        assert "Wordlist not found" in summary.message

    async def test_invalid_threads(self, make_config, make_wordlist):
        config = make_config("dir", wordlist=make_wordlist("admin"), threads=0)

        summary = await RunController(config, console=_console(), transport=_http()).run()

        assert summary.status is RunStatus.FAILED

    async def test_unwritable_required_output(self, make_config, make_wordlist, temp_dir):
        blocker = temp_dir / "blocker"
        blocker.write_text("")
        config = make_config("dir", wordlist=make_wordlist("admin"), output=blocker / "out.txt")

        summary = await RunController(config, console=_console(), transport=_http()).run()

        assert summary.status is RunStatus.FAILED
        assert "Cannot open output file" in summary.message

    @respx.mock
    async def test_unwritable_default_output_only_warns(self, make_config, make_wordlist, temp_dir):
        _mock_paths({"/admin": 200})
        blocker = temp_dir / "blocker"
        blocker.write_text("")
        config = make_config(
            "dir",
            wordlist=make_wordlist("admin"),
            output=blocker / "out.txt",
            output_required=False,
        )
        console = _console()

        summary = await RunController(config, console=console, transport=_http()).run()

        assert summary.status is RunStatus.COMPLETED
        assert summary.snapshot.found == 1
        assert "Warning:" in console.export_text()
