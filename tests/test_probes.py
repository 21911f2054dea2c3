"""Tests for the DNS and TFTP probes, retry policy and probe registry."""

import asyncio
import time

import dns.exception
import pytest
from fakes import FakeResolver

from enumbuster.errors import ErrorKind, ProbeError, SetupError
from enumbuster.modules.engine import Candidate, OutcomeKind
from enumbuster.modules.probes import PROBES, DnsProbe, RetryPolicy, TftpProbe, create_probe
from enumbuster.tools.dns import DNSClient
from enumbuster.tools.tftp import TFTPClient
from enumbuster.tools.transport import Transport


def _dns_transport(resolver: FakeResolver) -> Transport:
    return Transport(dns=DNSClient(resolver=resolver))


class TestRegistry:
    def test_every_mode_has_a_probe(self):
        assert set(PROBES) == {"dir", "dns", "vhost", "fuzz", "s3", "gcs", "tftp"}

    def test_unknown_mode(self, make_config):
        with pytest.raises(SetupError):
            create_probe(make_config("gopher"))


class TestRetryPolicy:
    """RetryPolicy attempt accounting."""

    async def test_retries_timeouts_until_budget_spent(self):
        calls = []

        async def attempt(timeout):
            calls.append(timeout)
            raise ProbeError(ErrorKind.TIMEOUT, "no reply")

        with pytest.raises(ProbeError):
            await RetryPolicy(max_attempts=3, timeout=0.5).run(attempt)

        assert calls == [0.5, 0.5, 0.5]

    async def test_protocol_errors_are_not_retried(self):
        calls = []

        async def attempt(timeout):
            calls.append(timeout)
            raise ProbeError(ErrorKind.PROTOCOL, "garbage")

        with pytest.raises(ProbeError):
            await RetryPolicy(max_attempts=3).run(attempt)

        assert len(calls) == 1

    async def test_success_after_retry(self):
        results = iter([ProbeError(ErrorKind.CONNECTION, "reset"), "ok"])

        async def attempt(timeout):
            value = next(results)
            if isinstance(value, Exception):
                raise value
            return value

        assert await RetryPolicy(max_attempts=2).run(attempt) == "ok"

    def test_backoff_delays_and_deadline(self):
        policy = RetryPolicy(max_attempts=3, timeout=1.0, backoff=0.5, backoff_factor=2.0)
        assert policy.delays() == [0.5, 1.0]
        assert policy.deadline == 4.5

    @pytest.mark.parametrize("kwargs", [{"max_attempts": 0}, {"timeout": 0}])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)


class TestDnsProbe:
    """Dns mode against a fake resolver."""

    RECORDS = {
        ("www.example.com", "A"): ["93.184.216.34"],
        ("api.example.com", "A"): ["93.184.216.35", "93.184.216.36"],
    }

    async def test_www_api_ghost(self, make_config):
        probe = DnsProbe(make_config("dns", target="example.com", domain=".example.com"))
        transport = _dns_transport(FakeResolver(self.RECORDS))

        outcomes = {
            word: (await probe.run(Candidate(word), transport))[0] for word in ("www", "api", "ghost")
        }

        assert outcomes["www"].found and outcomes["www"].ips == ["93.184.216.34"]
        assert outcomes["api"].found and len(outcomes["api"].ips) == 2
        assert outcomes["ghost"].kind is OutcomeKind.NOT_FOUND
        assert outcomes["www"].target == "www.example.com"

    async def test_timeout_is_error(self, make_config):
        probe = DnsProbe(make_config("dns", target="example.com"))
        resolver = FakeResolver({("slow.example.com", "A"): dns.exception.Timeout()})

        outcome = (await probe.run(Candidate("slow"), _dns_transport(resolver)))[0]

        assert outcome.is_error
        assert outcome.error_kind is ErrorKind.TIMEOUT

    async def test_wildcard_answers_suppressed(self, make_config):
        probe = DnsProbe(make_config("dns", target="example.com"))
        resolver = FakeResolver(
            {
                ("real.example.com", "A"): ["10.0.0.9"],
                ("junk.example.com", "A"): ["10.0.0.1"],
            },
            wildcard={"A": ["10.0.0.1"]},
        )
        transport = _dns_transport(resolver)
        warnings: list[str] = []

        await probe.prepare(transport, warnings.append)
        real = (await probe.run(Candidate("real"), transport))[0]
        junk = (await probe.run(Candidate("junk"), transport))[0]

        assert warnings and "Wildcard" in warnings[0]
        assert real.found
        assert junk.kind is OutcomeKind.NOT_FOUND

    async def test_wildcard_flag_skips_detection(self, make_config):
        probe = DnsProbe(make_config("dns", target="example.com", force_wildcard=True))
        resolver = FakeResolver(wildcard={"A": ["10.0.0.1"]})
        warnings: list[str] = []

        await probe.prepare(_dns_transport(resolver), warnings.append)

        assert warnings == []
        assert resolver.queries == []


class TestTftpProbe:
    """Tftp mode against a local UDP server."""

    async def test_found_and_not_found(self, make_config, tftp_server):
        _, host, port = await tftp_server({"startup-config"})
        probe = TftpProbe(make_config("tftp", target=f"{host}:{port}"))
        transport = Transport(tftp=TFTPClient(host, port))

        await probe.prepare(transport, lambda _: None)
        found = (await probe.run(Candidate("startup-config"), transport))[0]
        missing = (await probe.run(Candidate("nothing"), transport))[0]

        assert found.found
        assert missing.kind is OutcomeKind.NOT_FOUND
        assert "File not found" in missing.error

    async def test_oack_counts_as_found(self, make_config, tftp_server):
        _, host, port = await tftp_server({"pxelinux.0"}, oack=True)
        probe = TftpProbe(make_config("tftp", target=f"{host}:{port}"))

        outcome = (await probe.run(Candidate("pxelinux.0"), Transport(tftp=TFTPClient(host, port))))[0]

        assert outcome.found

    async def test_silent_server_resolves_within_budget(self, make_config, tftp_server):
        server, host, port = await tftp_server(set(), silent=True)
        probe = TftpProbe(make_config("tftp", target=f"{host}:{port}", timeout=0.2, retries=3))

        started = time.monotonic()
        outcome = await asyncio.wait_for(
            probe.run(Candidate("x"), Transport(tftp=TFTPClient(host, port))), timeout=5
        )
        elapsed = time.monotonic() - started

        assert outcome[0].error_kind is ErrorKind.TIMEOUT
        assert len(server.requests) == 3
        assert elapsed < 3 * 0.2 + 0.5

    def test_concurrency_capped(self):
        assert TftpProbe.max_concurrency == 50

    def test_invalid_retries(self, make_config):
        with pytest.raises(SetupError):
            create_probe(make_config("tftp", target="127.0.0.1", retries=0))

    async def test_unresolvable_server_is_setup_error(self, make_config):
        probe = TftpProbe(make_config("tftp", target="host.invalid"))

        with pytest.raises(SetupError):
            await probe.prepare(Transport(tftp=TFTPClient("host.invalid")), lambda _: None)
