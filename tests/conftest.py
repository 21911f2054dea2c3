"""Test configuration and fixtures for enumbuster."""

import asyncio
import tempfile
from collections.abc import Callable, Generator
from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest
from fakes import FakeTFTPServer

from enumbuster.config import CONFIG_KEYS
from enumbuster.modules.engine import ScanConfig


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Keep the user's ~/.enumbuster and ENUMBUSTER_* variables out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)
    return home


@pytest.fixture
def make_wordlist(temp_dir: Path) -> Callable[..., Path]:
    """Write the given words (one per line) to a wordlist file."""

    def _make(*words: str, name: str = "words.txt") -> Path:
        path = temp_dir / name
        path.write_text("\n".join(words) + "\n")
        return path

    return _make


@pytest.fixture
def make_config(temp_dir: Path) -> Callable[..., ScanConfig]:
    """Build a quiet ScanConfig for *mode*, overriding any field."""

    def _make(mode: str = "dir", target: str = "http://target.test", **fields: Any) -> ScanConfig:
        wordlist = fields.pop("wordlist", temp_dir / "unused.txt")
        config = ScanConfig(
            mode=mode,
            target=target,
            wordlist=wordlist,
            threads=4,
            timeout=2.0,
            quiet=True,
            no_progress=True,
        )
        return replace(config, **fields)

    return _make


@pytest.fixture
async def tftp_server():
    """Start a FakeTFTPServer on localhost; yields a factory."""
    transports = []

    async def _start(files=(), **kwargs):
        loop = asyncio.get_running_loop()
        transport, protocol = await loop.create_datagram_endpoint(
            lambda: FakeTFTPServer(set(files), **kwargs), local_addr=("127.0.0.1", 0)
        )
        transports.append(transport)
        host, port = transport.get_extra_info("sockname")[:2]
        return protocol, host, port

    yield _start
    for transport in transports:
        transport.close()
