"""enumbuster CLI - multi-protocol enumeration over a wordlist."""

from enumbuster.cli_commands import (  # noqa: F401  (registers commands)
    bucket_commands,
    dir_command,
    dns_command,
    fuzz_command,
    tftp_command,
    version_command,
    vhost_command,
)
from enumbuster.cli_commands.shared import app, console
from enumbuster.modules.runner import RunController
from enumbuster.utils.async_utils import safe_async_run

__all__ = ["RunController", "app", "console", "main", "safe_async_run"]


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
