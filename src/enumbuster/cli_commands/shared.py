"""Shared CLI app objects."""

import typer
from rich.console import Console

app = typer.Typer(
    name="enumbuster",
    help="Enumerate directories, DNS names, virtual hosts, buckets and TFTP files",
    no_args_is_help=True,
)
console = Console()
