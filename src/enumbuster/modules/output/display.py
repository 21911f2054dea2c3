"""Text rendering of probe outcomes for the console and text files."""

from rich.markup import escape

from enumbuster.modules.engine.models import ProbeOutcome, ScanConfig


def status_style(status: int | None) -> str:
    """Rich style for an HTTP status code."""
    if status is None:
        return "white"
    if status < 300:
        return "green"
    if status < 400:
        return "cyan"
    if status < 500:
        return "yellow"
    return "red"


def format_line(
    outcome: ProbeOutcome,
    *,
    expanded: bool = False,
    show_length: bool = True,
    show_ips: bool = True,
    show_cname: bool = True,
) -> str:
    """One plain-text line describing an outcome."""
    name = outcome.target if expanded else outcome.display
    match outcome.mode:
        case "dir":
            line = f"{name} (Status: {outcome.status_code})"
            if show_length:
                line += f" [Size: {outcome.size}]"
            if outcome.redirect:
                line += f" [--> {outcome.redirect}]"
            return line
        case "vhost":
            return f"{outcome.display} (Status: {outcome.status_code}) [Size: {outcome.size}]"
        case "fuzz":
            return (
                f"{outcome.display} [Status: {outcome.status_code}, Size: {outcome.size}, "
                f"Words: {outcome.words}, Lines: {outcome.lines}]"
            )
        case "dns":
            line = outcome.display
            if show_ips and outcome.ips:
                line += f" [{', '.join(outcome.ips)}]"
            if show_cname and outcome.cnames:
                line += f" (CNAME: {', '.join(outcome.cnames)})"
            return line
        case "s3" | "gcs":
            line = f"{outcome.display} [{outcome.bucket_state}]"
            if outcome.bucket_state == "public":
                line += f" files: {len(outcome.files)}"
            return line
        case _:
            return outcome.display


def console_line(outcome: ProbeOutcome, config: ScanConfig) -> str:
    """Plain console line, honouring the display flags of the run."""
    return format_line(
        outcome,
        expanded=config.expanded,
        show_length=config.show_length,
        show_ips=config.show_ips,
        show_cname=config.show_cname,
    )


def render_found(outcome: ProbeOutcome, config: ScanConfig) -> str:
    """Rich markup for a Found outcome."""
    text = escape(console_line(outcome, config))
    if outcome.status_code is not None:
        style = status_style(outcome.status_code)
        needle = f"Status: {outcome.status_code}"
        text = text.replace(needle, f"Status: [{style}]{outcome.status_code}[/{style}]", 1)
    if outcome.mode in ("s3", "gcs") and outcome.files:
        listing = "\n".join(f"    [dim]{escape(name)}[/dim]" for name in outcome.files)
        text = f"{text}\n{listing}"
    if outcome.mode == "tftp":
        return f"[green]Found:[/green] [bold]{text}[/bold]"
    return f"[green]{text}[/green]" if outcome.status_code is None else text


def render_error(outcome: ProbeOutcome) -> str:
    """Rich markup for an Error outcome (verbose mode only)."""
    kind = outcome.error_kind.value if outcome.error_kind else "other"
    return f"[red]Error:[/red] {escape(outcome.display)} [dim]({kind})[/dim] {escape(outcome.error or '')}"
