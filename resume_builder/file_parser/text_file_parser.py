"""text_file_parser.py

Holds TextFileParser class for plain-text resumes.
"""
from resume_builder.exceptions import FileOpenError
from resume_builder.file_parser.file_parser import FileParser


class TextFileParser(FileParser):
    """Concrete parser for plain text files (.txt), read as UTF-8."""

    SUPPORTED_EXTENSIONS = ['.txt']

    def _read_text(self) -> str:
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileOpenError(self.file_path, str(e))
