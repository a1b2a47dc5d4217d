"""test_text_file_parser.py
Comprehensive test suite for:
  - TextFileParser
"""

import pytest

from resume_builder.exceptions import FileOpenError
from resume_builder.file_parser.text_file_parser import TextFileParser


class TestTextFileParser:
    """Tests for the TextFileParser class."""

    def test_reads_utf8(self, tmp_path):
        path = tmp_path / "resume.txt"
        path.write_text("Zoë Müller\nSkills\nPython • Go", encoding="utf-8")
        assert TextFileParser(str(path)).parse() == "Zoë Müller\nSkills\nPython • Go"

    def test_invalid_utf8_raises_file_open_error(self, tmp_path):
        path = tmp_path / "resume.txt"
        path.write_bytes(b"\xff\xfe\xfa broken")
        with pytest.raises(FileOpenError):
            TextFileParser(str(path)).parse()
