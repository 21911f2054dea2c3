"""Probe variants, one per enumeration mode."""

from enumbuster.errors import SetupError
from enumbuster.modules.engine.models import ScanConfig

from .base import HTTPProbe, Probe
from .buckets import GcsProbe, S3Probe
from .dir import DirProbe
from .dns import DnsProbe
from .fuzz import FuzzProbe
from .retry import RetryPolicy
from .tftp import TftpProbe
from .vhost import VhostProbe

PROBES: dict[str, type[Probe]] = {
    "dir": DirProbe,
    "dns": DnsProbe,
    "vhost": VhostProbe,
    "fuzz": FuzzProbe,
    "s3": S3Probe,
    "gcs": GcsProbe,
    "tftp": TftpProbe,
}


def create_probe(config: ScanConfig) -> Probe:
    """Instantiate and validate the probe for ``config.mode``."""
    try:
        probe_class = PROBES[config.mode]
    except KeyError:
        raise SetupError(f"Unknown mode: {config.mode}") from None
    probe = probe_class(config)
    probe.validate()
    return probe


__all__ = [
    "DirProbe",
    "DnsProbe",
    "FuzzProbe",
    "GcsProbe",
    "HTTPProbe",
    "PROBES",
    "Probe",
    "RetryPolicy",
    "S3Probe",
    "TftpProbe",
    "VhostProbe",
    "create_probe",
]
