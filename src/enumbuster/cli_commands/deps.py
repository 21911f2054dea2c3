"""Late lookup of the scan entry points.

``run_scan`` fetches ``RunController`` and ``safe_async_run`` from
``enumbuster.cli`` on every call, so replacing them on that module swaps the
engine out for every mode command at once.
"""

from importlib import import_module
from types import ModuleType


def cli_module() -> ModuleType:
    """Return ``enumbuster.cli``, which re-exports the scan entry points."""
    return import_module("enumbuster.cli")
