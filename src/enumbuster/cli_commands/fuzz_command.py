"""FUZZ-marker fuzzing command."""

from pathlib import Path

import typer

from enumbuster.modules.engine import ScanConfig

from . import options as opt
from .scan_helpers import (
    global_settings,
    http_settings,
    parse_lengths,
    parse_status_codes,
    run_scan,
    status_settings,
)
from .shared import app


@app.command("fuzz")
def fuzz_command(
    url: str = opt.url_option(),
    wordlist: Path = opt.wordlist_option(),
    data: str | None = typer.Option(None, "--data", "-d", help="Request body; may contain FUZZ"),
    status_codes: str | None = opt.status_codes_option(),
    exclude_status: str | None = typer.Option(
        None, "--exclude-status", help="Status codes or ranges to ignore"
    ),
    exclude_length: str | None = opt.exclude_length_option(),
    filter_string: str | None = typer.Option(
        None, "--filter-string", help="Ignore responses whose body contains this text"
    ),
    header: list[str] | None = opt.header_option(),
    cookie: str | None = opt.cookie_option(),
    user_agent: str | None = opt.user_agent_option(),
    insecure: bool = opt.insecure_option(),
    proxy: str | None = opt.proxy_option(),
    username: str | None = opt.username_option(),
    password: str | None = opt.password_option(),
    follow_redirects: bool = opt.follow_redirects_option(),
    method: str = opt.method_option(),
    timeout: float | None = opt.timeout_option(),
    threads: int | None = opt.threads_option(),
    output: Path | None = opt.output_option(),
    output_format: str = opt.output_format_option(),
    quiet: bool = opt.quiet_option(),
    verbose: bool = opt.verbose_option(),
    no_progress: bool = opt.no_progress_option(),
    delay: int = opt.delay_option(),
    no_color: bool = opt.no_color_option(),
) -> None:
    """Replace FUZZ in the URL, body, headers or cookie with each word."""

    def build() -> ScanConfig:
        return ScanConfig(
            mode="fuzz",
            target=url,
            data=data,
            exclude_status=parse_status_codes(exclude_status),
            exclude_lengths=parse_lengths(exclude_length),
            filter_string=filter_string,
            http=http_settings(
                headers=header,
                cookies=cookie,
                user_agent=user_agent,
                insecure=insecure,
                proxy=proxy,
                username=username,
                password=password,
                follow_redirects=follow_redirects,
                method=method,
            ),
            **status_settings(status_codes),
            **global_settings(
                wordlist=wordlist,
                threads=threads,
                output=output,
                output_format=output_format,
                quiet=quiet,
                verbose=verbose,
                no_progress=no_progress,
                delay=delay,
                no_color=no_color,
                timeout=timeout,
            ),
        )

    run_scan(build)
