"""file_fixtures.py
Helper functions that write small resume files to test the file parsers with.
"""
from pathlib import Path
from typing import List

from docx import Document
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def write_pdf(path: Path, lines: List[str]) -> Path:
    """Write ``lines`` to a one-page PDF at ``path``. No lines gives a blank page."""
    c = canvas.Canvas(str(path), pagesize=letter)
    y = 720
    for line in lines:
        c.drawString(72, y, line)
        y -= 16
    c.showPage()
    c.save()
    return path


def write_docx(path: Path, lines: List[str]) -> Path:
    """Write each of ``lines`` as its own paragraph in a .docx at ``path``."""
    document = Document()
    for line in lines:
        document.add_paragraph(line)
    document.save(str(path))
    return path
