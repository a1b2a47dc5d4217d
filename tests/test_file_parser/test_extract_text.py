"""test_extract_text.py
Comprehensive test suite for:
  - extract_text_from_file
"""

import pytest

from resume_builder.exceptions import FileNotSupportedError, FileTooLargeError
from resume_builder.file_parser.extract_text import FILETYPE_PARSER_MAP, extract_text_from_file
from resume_builder.file_parser.file_parser import FileParser
from resume_builder.file_parser.pdf_parser import PDFParser
from resume_builder.file_parser.text_file_parser import TextFileParser
from resume_builder.file_parser.word_document_parser import WordDocumentParser
from resume_builder.importer.text_importer import import_text
from resume_builder.test_helpers.file_fixtures import write_docx, write_pdf

LINES = ["Jane Doe", "jane@x.com", "SKILLS", "Python, Go"]


class TestExtractTextFromFile:
    """Tests for parser selection by extension."""

    def test_map_covers_allowed_extensions(self):
        assert sorted(FILETYPE_PARSER_MAP) == sorted(FileParser.ALLOWED_EXTENSIONS)

    @pytest.mark.parametrize("writer,name", [(write_pdf, "resume.pdf"), (write_docx, "resume.docx")])
    def test_every_format_feeds_the_importer(self, tmp_path, writer, name):
        path = writer(tmp_path / name, LINES)
        partial = import_text(extract_text_from_file(str(path)))
        assert partial["personalInfo"]["fullName"] == "Jane Doe"
        assert partial["personalInfo"]["email"] == "jane@x.com"
        assert partial["skills"] == ["Python", "Go"]

    def test_txt(self, tmp_path):
        path = tmp_path / "resume.txt"
        path.write_text("\n".join(LINES), encoding="utf-8")
        assert extract_text_from_file(str(path)) == "\n".join(LINES)

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "resume.rtf"
        path.write_text("Jane Doe")
        with pytest.raises(FileNotSupportedError):
            extract_text_from_file(str(path))

    def test_size_limit(self, tmp_path):
        path = tmp_path / "resume.txt"
        path.write_text("Jane Doe")
        with pytest.raises(FileTooLargeError):
            extract_text_from_file(str(path), max_file_size_mb=0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            extract_text_from_file(str(tmp_path / "missing.pdf"))

    @pytest.mark.parametrize("name,parser_class", [
        ("resume.pdf", PDFParser),
        ("resume.docx", WordDocumentParser),
        ("resume.txt", TextFileParser),
    ])
    def test_parser_selected_by_extension(self, mocker, tmp_path, name, parser_class):
        path = tmp_path / name
        path.write_bytes(b"placeholder")
        mock_parse = mocker.patch.object(parser_class, "parse", return_value="Jane Doe")

        assert extract_text_from_file(str(path)) == "Jane Doe"
        mock_parse.assert_called_once()
