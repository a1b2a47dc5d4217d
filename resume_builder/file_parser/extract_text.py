"""extract_text.py
Selects the right FileParser for an uploaded resume and returns its text.
"""
from typing import Optional

from resume_builder.config import BUILDER_DEFAULTS
from resume_builder.file_parser.helpers.check_file_extension import check_file_extension
from resume_builder.file_parser.pdf_parser import PDFParser
from resume_builder.file_parser.text_file_parser import TextFileParser
from resume_builder.file_parser.word_document_parser import WordDocumentParser

FILETYPE_PARSER_MAP = {
    ".pdf": PDFParser,
    ".docx": WordDocumentParser,
    ".txt": TextFileParser,
}


def extract_text_from_file(
    file_path: str,
    max_file_size_mb: Optional[float] = BUILDER_DEFAULTS.MAX_FILE_SIZE_MB,
) -> str:
    """
    Parse ``file_path`` with the parser registered for its extension.

    Args:
        file_path (str): Path to a ``.pdf``, ``.docx`` or ``.txt`` resume.
        max_file_size_mb (float | None): Maximum allowed file size in MB.

    Returns:
        str: The text of the document.

    Raises:
        FileNotSupportedError: If the extension has no registered parser.
        FileTooLargeError: If the file exceeds ``max_file_size_mb``.
        FileOpenError: If the file cannot be read.
        FileEmptyError: If the file contains no text.
    """
    ext = check_file_extension(
        file_path=file_path,
        supported_extensions=list(FILETYPE_PARSER_MAP.keys())
    )
    parser_class = FILETYPE_PARSER_MAP[ext]
    parser = parser_class(file_path=file_path, max_file_size_mb=max_file_size_mb)
    return parser.parse()
