"""Cloud bucket enumeration commands (s3, gcs)."""

from pathlib import Path

import typer

from enumbuster.modules.engine import ScanConfig

from . import options as opt
from .scan_helpers import global_settings, http_settings, run_scan
from .shared import app

ENDPOINTS = {"s3": "s3.amazonaws.com", "gcs": "storage.googleapis.com"}


def _bucket_scan(
    mode: str,
    *,
    wordlist: Path,
    max_files: int,
    user_agent: str | None,
    insecure: bool,
    proxy: str | None,
    timeout: float | None,
    threads: int | None,
    output: Path | None,
    output_format: str,
    quiet: bool,
    verbose: bool,
    no_progress: bool,
    delay: int,
    no_color: bool,
) -> None:
    def build() -> ScanConfig:
        return ScanConfig(
            mode=mode,
            target=ENDPOINTS[mode],
            max_files=max_files,
            http=http_settings(user_agent=user_agent, insecure=insecure, proxy=proxy),
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


@app.command("s3")
def s3_command(
    wordlist: Path = opt.wordlist_option(),
    max_files: int = typer.Option(5, "--max-files", "-m", help="Object keys to list for public buckets"),
    user_agent: str | None = opt.user_agent_option(),
    insecure: bool = opt.insecure_option(),
    proxy: str | None = opt.proxy_option(),
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
    """Find AWS S3 buckets."""
    _bucket_scan(
        "s3",
        wordlist=wordlist,
        max_files=max_files,
        user_agent=user_agent,
        insecure=insecure,
        proxy=proxy,
        timeout=timeout,
        threads=threads,
        output=output,
        output_format=output_format,
        quiet=quiet,
        verbose=verbose,
        no_progress=no_progress,
        delay=delay,
        no_color=no_color,
    )


@app.command("gcs")
def gcs_command(
    wordlist: Path = opt.wordlist_option(),
    max_files: int = typer.Option(5, "--max-files", "-m", help="Object names to list for public buckets"),
    user_agent: str | None = opt.user_agent_option(),
    insecure: bool = opt.insecure_option(),
    proxy: str | None = opt.proxy_option(),
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
    """Find Google Cloud Storage buckets."""
    _bucket_scan(
        "gcs",
        wordlist=wordlist,
        max_files=max_files,
        user_agent=user_agent,
        insecure=insecure,
        proxy=proxy,
        timeout=timeout,
        threads=threads,
        output=output,
        output_format=output_format,
        quiet=quiet,
        verbose=verbose,
        no_progress=no_progress,
        delay=delay,
        no_color=no_color,
    )
