"""Directory/file enumeration command."""

from pathlib import Path

import typer

from enumbuster.modules.engine import ScanConfig

from . import options as opt
from .scan_helpers import (
    global_settings,
    http_settings,
    parse_csv,
    parse_lengths,
    run_scan,
    status_settings,
)
from .shared import app


@app.command("dir")
def dir_command(
    url: str = opt.url_option(),
    wordlist: Path = opt.wordlist_option(),
    extensions: str | None = typer.Option(
        None, "--extensions", "-x", help="File extensions to append, e.g. php,txt"
    ),
    status_codes: str | None = opt.status_codes_option(),
    status_codes_blacklist: str | None = typer.Option(
        None, "--status-codes-blacklist", "-b", help="Status codes to never report"
    ),
    exclude_length: str | None = opt.exclude_length_option(),
    add_slash: bool = typer.Option(False, "--add-slash", "-f", help="Also request each path with a trailing /"),
    expanded: bool = typer.Option(False, "--expanded", "-e", help="Print full URLs"),
    show_length: bool = typer.Option(False, "--show-length", "-l", help="Print response size"),
    discover_backup: bool = typer.Option(
        False, "--discover-backup", help="Probe backup copies (.bak, ~, ...) of every match"
    ),
    wildcard: bool = opt.wildcard_option(),
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
    """Brute-force directories and files on a web server."""

    def build() -> ScanConfig:
        return ScanConfig(
            mode="dir",
            target=url,
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
            extensions=parse_csv(extensions),
            exclude_lengths=parse_lengths(exclude_length),
            add_slash=add_slash,
            expanded=expanded,
            show_length=show_length,
            discover_backup=discover_backup,
            force_wildcard=wildcard,
            **status_settings(status_codes, status_codes_blacklist),
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
