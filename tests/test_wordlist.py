"""Tests for the wordlist source."""

from pathlib import Path

import pytest

from enumbuster.errors import SetupError
from enumbuster.modules.wordlist import WordlistSource


class TestWordlistSource:
    """Tests for WordlistSource."""

    def test_skips_blank_and_comment_lines(self, temp_dir: Path) -> None:
        path = temp_dir / "words.txt"
        path.write_text("# header\nadmin\n\n   \nlogin\n#backup\n  api  \n")

        words = [candidate.word for candidate in WordlistSource(path)]

        assert words == ["admin", "login", "api"]

    def test_candidates_carry_line_numbers(self, temp_dir: Path) -> None:
        path = temp_dir / "words.txt"
        path.write_text("admin\n\nlogin\n")

        lines = [candidate.line for candidate in WordlistSource(path)]

        assert lines == [1, 3]

    def test_count_matches_iteration(self, temp_dir: Path) -> None:
        path = temp_dir / "words.txt"
        path.write_text("a\n#b\nc\n\nd\n")

        assert WordlistSource(path).count() == 3
        assert len(list(WordlistSource(path))) == 3

    def test_stream_cannot_be_restarted(self, temp_dir: Path) -> None:
        path = temp_dir / "words.txt"
        path.write_text("a\n")
        source = WordlistSource(path)
        list(source)

        with pytest.raises(RuntimeError):
            iter(source)

    def test_missing_file_is_setup_error(self, temp_dir: Path) -> None:
        with pytest.raises(SetupError, match="not found"):
            WordlistSource(temp_dir / "missing.txt").check()

    def test_directory_is_setup_error(self, temp_dir: Path) -> None:
        with pytest.raises(SetupError, match="not a file"):
            WordlistSource(temp_dir).check()

    def test_invalid_utf8_is_ignored(self, temp_dir: Path) -> None:
        path = temp_dir / "words.txt"
        path.write_bytes(b"adm\xffin\nlogin\n")

        words = [candidate.word for candidate in WordlistSource(path)]

        assert words == ["admin", "login"]
