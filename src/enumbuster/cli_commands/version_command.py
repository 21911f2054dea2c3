"""Version command."""

from importlib.metadata import PackageNotFoundError, version as pkg_version

from enumbuster import __version__

from .shared import app, console


def installed_version() -> str:
    try:
        return pkg_version("enumbuster")
    except PackageNotFoundError:
        return __version__


@app.command()
def version() -> None:
    """Show the installed enumbuster version."""
    console.print(f"enumbuster {installed_version()}")
