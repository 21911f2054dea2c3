"""Virtual host discovery command."""

from pathlib import Path

import typer

from enumbuster.modules.engine import ScanConfig

from . import options as opt
from .scan_helpers import global_settings, http_settings, parse_lengths, run_scan
from .shared import app


@app.command("vhost")
def vhost_command(
    url: str = opt.url_option(),
    wordlist: Path = opt.wordlist_option(),
    domain: str | None = typer.Option(None, "--domain", "-d", help="Domain appended to each word"),
    append_domain: bool = typer.Option(
        False, "--append-domain", help="Send word.domain as the Host header"
    ),
    exclude_length: str | None = opt.exclude_length_option(),
    baseline_match: str = typer.Option(
        "length", "--baseline-match", help="Baseline comparison: length, hash or fuzzy"
    ),
    length_tolerance: int = typer.Option(
        0, "--length-tolerance", help="Byte tolerance for --baseline-match fuzzy"
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
    """Discover virtual hosts by varying the Host header."""

    def build() -> ScanConfig:
        return ScanConfig(
            mode="vhost",
            target=url,
            domain=domain,
            append_domain=append_domain,
            exclude_lengths=parse_lengths(exclude_length),
            baseline_match=baseline_match.strip().lower(),
            length_tolerance=length_tolerance,
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
