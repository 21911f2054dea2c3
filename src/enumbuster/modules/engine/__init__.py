"""Scheduling core: data models, run state and the worker pool."""

from .models import (
    DEFAULT_STATUS_CODES,
    Candidate,
    HTTPOptions,
    OutcomeKind,
    ProbeOutcome,
    ProbeRequest,
    ScanConfig,
)
from .pool import WorkerPool
from .state import EXIT_CODES, RunSnapshot, RunState, RunStatus, RunSummary

__all__ = [
    "Candidate",
    "DEFAULT_STATUS_CODES",
    "EXIT_CODES",
    "HTTPOptions",
    "OutcomeKind",
    "ProbeOutcome",
    "ProbeRequest",
    "RunSnapshot",
    "RunState",
    "RunStatus",
    "RunSummary",
    "ScanConfig",
    "WorkerPool",
]
