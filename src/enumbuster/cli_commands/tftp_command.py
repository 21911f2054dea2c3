"""TFTP file discovery command."""

from pathlib import Path

import typer

from enumbuster.errors import SetupError
from enumbuster.modules.engine import ScanConfig
from enumbuster.tools.tftp import parse_server_address

from . import options as opt
from .scan_helpers import coerce_positive_int, global_settings, run_scan
from .shared import app


@app.command("tftp")
def tftp_command(
    server: str = typer.Option(..., "--server", "-s", help="TFTP server HOST[:PORT] (port 69)"),
    wordlist: Path = opt.wordlist_option(),
    retries: int = typer.Option(3, "--retries", help="Attempts per filename"),
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
    """Find readable files on a TFTP server."""

    def build() -> ScanConfig:
        try:
            parse_server_address(server)
        except ValueError as e:
            raise SetupError(str(e)) from e
        return ScanConfig(
            mode="tftp",
            target=server.strip(),
            retries=coerce_positive_int(retries, 3),
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
