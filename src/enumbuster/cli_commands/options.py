"""Reusable typer option declarations."""

from typing import Any

import typer


def wordlist_option() -> Any:
    return typer.Option(..., "--wordlist", "-w", help="Path to the wordlist")


def threads_option() -> Any:
    return typer.Option(
        None, "--threads", "-t", help="Concurrent probes (default 10 or ENUMBUSTER_THREADS)"
    )


def output_option() -> Any:
    return typer.Option(None, "--output", "-o", help="Write matches to this file")


def output_format_option() -> Any:
    return typer.Option(
        "auto", "--output-format", help="Output file format: auto, text, json (auto = by suffix)"
    )


def quiet_option() -> Any:
    return typer.Option(False, "--quiet", "-q", help="Only print results")


def verbose_option() -> Any:
    return typer.Option(False, "--verbose", "-v", help="Show errors and extra detail")


def no_progress_option() -> Any:
    return typer.Option(False, "--no-progress", "-z", help="Hide the progress display")


def delay_option() -> Any:
    return typer.Option(0, "--delay", help="Delay in milliseconds before each request")


def no_color_option() -> Any:
    return typer.Option(False, "--no-color", help="Disable colored output")


def timeout_option(default_help: str = "10") -> Any:
    return typer.Option(
        None, "--timeout", help=f"Per-request timeout in seconds (default {default_help})"
    )


def url_option() -> Any:
    return typer.Option(..., "--url", "-u", help="Target URL")


def header_option() -> Any:
    return typer.Option(None, "--header", "-H", help="Extra header 'Name: value' (repeatable)")


def cookie_option() -> Any:
    return typer.Option(None, "--cookie", "-c", help="Cookie string sent with every request")


def user_agent_option() -> Any:
    return typer.Option(None, "--useragent", "-a", help="User-Agent header")


def insecure_option() -> Any:
    return typer.Option(False, "--insecure", "-k", help="Skip TLS certificate verification")


def proxy_option() -> Any:
    return typer.Option(None, "--proxy", "-p", help="Proxy URL (http://, https://, socks5://)")


def username_option() -> Any:
    return typer.Option(None, "--username", "-U", help="HTTP Basic auth username")


def password_option() -> Any:
    return typer.Option(None, "--password", "-P", help="HTTP Basic auth password")


def follow_redirects_option() -> Any:
    return typer.Option(False, "--follow-redirects", "-r", help="Follow redirects")


def method_option() -> Any:
    return typer.Option("GET", "--method", help="HTTP method")


def status_codes_option() -> Any:
    return typer.Option(
        None, "--status-codes", "-s", help="Status codes or ranges to report (default 200-399)"
    )


def exclude_length_option() -> Any:
    return typer.Option(None, "--exclude-length", help="Response sizes to ignore, comma-separated")


def wildcard_option() -> Any:
    return typer.Option(False, "--wildcard", help="Continue even when wildcard answers are seen")

