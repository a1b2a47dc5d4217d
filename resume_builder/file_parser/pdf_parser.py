"""pdf_parser.py

Holds PDFParser class.
"""
import pymupdf

from resume_builder.exceptions import FileOpenError
from resume_builder.file_parser.file_parser import FileParser

class PDFParser(FileParser):
    """
    Concrete parser for PDF documents (.pdf).

    Uses PyMuPDF to extract the text of every page, one page after another.

    Attributes:
        SUPPORTED_EXTENSIONS (List[str]): Only ``.pdf``.
    """
    SUPPORTED_EXTENSIONS = ['.pdf']

    def _read_text(self) -> str:
        """
        Opens the PDF file using PyMuPDF, combines any pages, and returns
        its contents as a string.

        Raises:
            FileOpenError: If the PDF file cannot be opened.
        """
        try:
            doc = pymupdf.open(self.file_path)
        except Exception as e:
            raise FileOpenError(self.file_path, str(e))

        full_text = ""
        for page_number in range(doc.page_count):
            page = doc.load_page(page_number)
            full_text += page.get_text("text") + "\n"

        doc.close()

        return full_text
