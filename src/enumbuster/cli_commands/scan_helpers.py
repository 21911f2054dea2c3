"""Helpers that turn command-line values into a ScanConfig."""

from pathlib import Path
from typing import Any

import typer

from enumbuster import __version__
from enumbuster.config import (
    get_default_output,
    get_default_threads,
    get_default_timeout,
    get_user_agent,
    is_debug_enabled,
    is_verbose_enabled,
)
from enumbuster.errors import SetupError
from enumbuster.modules.engine import DEFAULT_STATUS_CODES, HTTPOptions, ScanConfig
from enumbuster.modules.output import OUTPUT_FORMATS
from enumbuster.tools.http import parse_header
from enumbuster.utils.debug import configure_logging

from .deps import cli_module


def parse_csv(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated flag value, dropping empty items."""
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def parse_status_codes(raw: str | None, default: frozenset[int] = frozenset()) -> frozenset[int]:
    """Parse ``200,204,300-399`` into a set of status codes."""
    if raw is None or not raw.strip():
        return default
    codes: set[int] = set()
    for item in parse_csv(raw):
        start, sep, end = item.partition("-")
        try:
            low = int(start)
            high = int(end) if sep else low
        except ValueError:
            raise SetupError(f"Invalid status code '{item}'") from None
        if low > high or low < 100 or high > 599:
            raise SetupError(f"Invalid status code range '{item}'")
        codes.update(range(low, high + 1))
    return frozenset(codes)


def parse_lengths(raw: str | None) -> frozenset[int]:
    """Parse ``--exclude-length 0,1234``."""
    lengths: set[int] = set()
    for item in parse_csv(raw):
        try:
            value = int(item)
        except ValueError:
            raise SetupError(f"Invalid length '{item}'") from None
        if value < 0:
            raise SetupError(f"Invalid length '{item}'")
        lengths.add(value)
    return frozenset(lengths)


def parse_headers(raw: list[str] | None) -> tuple[tuple[str, str], ...]:
    try:
        return tuple(parse_header(item) for item in raw or [])
    except ValueError as e:
        raise SetupError(str(e)) from e


def coerce_positive_int(value: int | None, default: int) -> int:
    """Return value when given, otherwise the configured default."""
    if value is None:
        return default
    if value < 1:
        raise SetupError(f"Value must be at least 1, got {value}")
    return value


def coerce_positive_float(value: float | None, default: float) -> float:
    if value is None:
        return default
    if value <= 0:
        raise SetupError(f"Timeout must be positive, got {value}")
    return value


def global_settings(
    *,
    wordlist: Path,
    threads: int | None,
    output: Path | None,
    output_format: str,
    quiet: bool,
    verbose: bool,
    no_progress: bool,
    delay: int,
    no_color: bool,
    timeout: float | None,
    default_timeout: float = 10.0,
) -> dict[str, Any]:
    """ScanConfig fields shared by every mode."""
    if output_format not in OUTPUT_FORMATS:
        raise SetupError(
            f"Unknown output format '{output_format}'; use one of {', '.join(OUTPUT_FORMATS)}"
        )
    if delay < 0:
        raise SetupError("--delay must not be negative")

    output_required = output is not None
    if output is None:
        output = get_default_output()

    return {
        "wordlist": wordlist,
        "threads": coerce_positive_int(threads, get_default_threads()),
        "delay": delay / 1000.0,
        "timeout": coerce_positive_float(timeout, get_default_timeout(default_timeout)),
        "output": output,
        "output_format": output_format,
        "output_required": output_required,
        "quiet": quiet,
        "verbose": verbose or is_verbose_enabled(),
        "no_progress": no_progress,
        "no_color": no_color,
    }


def http_settings(
    *,
    headers: list[str] | None = None,
    cookies: str | None = None,
    user_agent: str | None = None,
    insecure: bool = False,
    proxy: str | None = None,
    username: str | None = None,
    password: str | None = None,
    follow_redirects: bool = False,
    method: str = "GET",
) -> HTTPOptions:
    if password is not None and username is None:
        raise SetupError("--password requires --username")
    return HTTPOptions(
        headers=parse_headers(headers),
        cookies=cookies,
        user_agent=user_agent or get_user_agent(__version__),
        insecure=insecure,
        proxy=proxy,
        username=username,
        password=password,
        follow_redirects=follow_redirects,
        method=method.strip().upper() or "GET",
    )


def status_settings(status_codes: str | None, blacklist: str | None = None) -> dict[str, Any]:
    return {
        "status_codes": parse_status_codes(status_codes, DEFAULT_STATUS_CODES),
        "status_blacklist": parse_status_codes(blacklist),
    }


def run_scan(build: Any) -> None:
    """Build the ScanConfig via *build()* and run it, exiting with the run's code.

    ``build`` raises SetupError for invalid flag values; that is reported
    before any network activity.
    """
    cli = cli_module()
    console = cli.console
    try:
        config: ScanConfig = build()
    except SetupError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    configure_logging(verbose=config.verbose, debug=is_debug_enabled())
    if config.no_color:
        console.no_color = True

    controller = cli.RunController(config, console=console)
    try:
        summary = cli.safe_async_run(controller.run(), on_interrupt=controller.request_stop)
    except KeyboardInterrupt:
        console.print("[yellow]Aborted.[/yellow]")
        raise typer.Exit(130) from None

    if summary.exit_code:
        raise typer.Exit(summary.exit_code)
