"""Subdomain enumeration command."""

from pathlib import Path

import typer

from enumbuster.errors import SetupError
from enumbuster.modules.engine import ScanConfig
from enumbuster.tools.dns import parse_resolver_address

from . import options as opt
from .scan_helpers import global_settings, run_scan
from .shared import app


@app.command("dns")
def dns_command(
    domain: str = typer.Option(..., "--domain", "-d", help="Domain to enumerate"),
    wordlist: Path = opt.wordlist_option(),
    resolver: str | None = typer.Option(
        None, "--resolver", "-r", help="DNS server IP[:PORT] instead of the system resolver"
    ),
    show_ips: bool = typer.Option(False, "--show-ips", "-i", help="Print resolved addresses"),
    show_cname: bool = typer.Option(False, "--show-cname", "-c", help="Query and print CNAME records"),
    wildcard: bool = opt.wildcard_option(),
    timeout: float | None = opt.timeout_option("5"),
    threads: int | None = opt.threads_option(),
    output: Path | None = opt.output_option(),
    output_format: str = opt.output_format_option(),
    quiet: bool = opt.quiet_option(),
    verbose: bool = opt.verbose_option(),
    no_progress: bool = opt.no_progress_option(),
    delay: int = opt.delay_option(),
    no_color: bool = opt.no_color_option(),
) -> None:
    """Brute-force subdomains of a domain."""

    def build() -> ScanConfig:
        if resolver:
            try:
                parse_resolver_address(resolver)
            except ValueError as e:
                raise SetupError(str(e)) from e
        name = domain.strip().strip(".")
        return ScanConfig(
            mode="dns",
            target=name,
            domain=name,
            resolver=resolver,
            show_ips=show_ips,
            show_cname=show_cname,
            force_wildcard=wildcard,
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
                default_timeout=5.0,
            ),
        )

    run_scan(build)
