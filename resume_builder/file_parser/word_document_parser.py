"""word_document_parser.py

Holds WordDocumentParser class using docx2txt for text extraction.
"""
import docx2txt

from resume_builder.exceptions import FileOpenError
from resume_builder.file_parser.file_parser import FileParser


class WordDocumentParser(FileParser):
    """
    Concrete parser for Microsoft Word documents (.docx).

    Uses ``docx2txt``, which also picks up text inside textboxes.

    Attributes:
        SUPPORTED_EXTENSIONS (List[str]): Only ``.docx``.
    """

    SUPPORTED_EXTENSIONS = ['.docx']

    def _read_text(self) -> str:
        """
        Raises:
            FileOpenError: If the Word document cannot be opened or read.
        """
        try:
            full_text = docx2txt.process(self.file_path)
        except Exception as e:
            raise FileOpenError(self.file_path, str(e))

        return full_text or ""
