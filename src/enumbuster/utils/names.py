"""Random names for baseline and wildcard probes."""

import random
import string

_ALPHABET = string.ascii_lowercase + string.digits


def random_label(length: int = 16) -> str:
    """Return a random DNS-safe label that is very unlikely to exist."""
    return "".join(random.choice(_ALPHABET) for _ in range(length))
