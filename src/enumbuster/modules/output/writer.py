"""Result file persistence (plain text or JSON array)."""

import json
import logging
from pathlib import Path
from typing import IO

from enumbuster.errors import OutputError
from enumbuster.modules.engine.models import ProbeOutcome

from .display import format_line

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("auto", "text", "json")


def resolve_format(path: Path, output_format: str = "auto") -> str:
    """Pick ``text`` or ``json``; ``auto`` uses JSON for a ``.json`` suffix."""
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format '{output_format}'")
    if output_format == "auto":
        return "json" if Path(path).suffix.lower() == ".json" else "text"
    return output_format


class ResultFileWriter:
    """Owns the output file handle for one run.

    JSON output is streamed as an array: ``[`` on open, one record per match
    and ``]`` on ``finalize``, so the file is a valid document as long as
    ``finalize`` runs.
    """

    def __init__(self, path: Path, output_format: str = "auto"):
        self.path = Path(path)
        self.format = resolve_format(self.path, output_format)
        self.count = 0
        self._handle: IO[str] | None = None
        self._finalized = False

    @property
    def is_json(self) -> bool:
        return self.format == "json"

    def open(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = open(self.path, "w", encoding="utf-8")
            if self.is_json:
                self._handle.write("[\n")
            self._handle.flush()
        except OSError as e:
            raise OutputError(f"Cannot open output file {self.path}: {e}") from e

    def write(self, outcome: ProbeOutcome) -> None:
        if self._handle is None:
            raise OutputError("Output file is not open")
        try:
            if self.is_json:
                separator = ",\n" if self.count else ""
                self._handle.write(separator + json.dumps(outcome.to_record()))
            else:
                self._handle.write(format_line(outcome) + "\n")
            self._handle.flush()
        except OSError as e:
            raise OutputError(f"Cannot write to output file {self.path}: {e}") from e
        self.count += 1

    def finalize(self) -> None:
        """Close the document and the file; safe to call more than once."""
        if self._finalized or self._handle is None:
            return
        self._finalized = True
        try:
            if self.is_json:
                self._handle.write("\n]\n" if self.count else "]\n")
            self._handle.close()
        except OSError as e:
            raise OutputError(f"Cannot finalize output file {self.path}: {e}") from e
        finally:
            self._handle = None
        logger.info("Wrote %d result(s) to %s", self.count, self.path)
