"""Lazy wordlist reader."""

from collections.abc import Callable, Iterator
from pathlib import Path

from enumbuster.errors import SetupError
from enumbuster.modules.engine.models import Candidate


def _usable(line: str) -> str | None:
    word = line.strip()
    if not word or word.startswith("#"):
        return None
    return word


class WordlistSource:
    """Forward-only stream of candidates read from a wordlist file.

    Blank lines and ``#`` comments are skipped. The file is read one line at a
    time and the stream can be consumed only once.
    """

    def __init__(self, path: Path, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        self._consumed = False

    def check(self) -> None:
        """Fail with SetupError if the wordlist cannot be read."""
        if not self.path.exists():
            raise SetupError(f"Wordlist not found: {self.path}")
        if not self.path.is_file():
            raise SetupError(f"Wordlist is not a file: {self.path}")
        try:
            with open(self.path, "rb"):
                pass
        except OSError as e:
            raise SetupError(f"Cannot read wordlist {self.path}: {e}") from e

    def count(self, weight: Callable[[str], int] | None = None) -> int:
        """Count usable lines with a separate streaming pass.

        *weight* maps a word to the number of outcomes it produces.
        """
        self.check()
        total = 0
        with open(self.path, encoding=self.encoding, errors="ignore") as f:
            for line in f:
                word = _usable(line)
                if word is not None:
                    total += weight(word) if weight else 1
        return total

    def __iter__(self) -> Iterator[Candidate]:
        if self._consumed:
            raise RuntimeError("Wordlist stream has already been consumed")
        self._consumed = True
        self.check()
        return self._read()

    def _read(self) -> Iterator[Candidate]:
        with open(self.path, encoding=self.encoding, errors="ignore") as f:
            for number, line in enumerate(f, start=1):
                word = _usable(line)
                if word is not None:
                    yield Candidate(word=word, line=number)
