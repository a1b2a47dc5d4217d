"""thumbnail.py
Captures a small PNG thumbnail of a resume for document listings.
"""
import base64
import io
from typing import Any, List

import pymupdf
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from resume_builder.config import BUILDER_DEFAULTS
from resume_builder.form_state import DraftSnapshot
from resume_builder.models import ResumeContent, TemplateId
from resume_builder.preview.projector import normalize_for_preview
from resume_builder.validation import resolve_template_id

MARGIN = 56
LINE_HEIGHT = 14
SIDEBAR_RATIO = 0.32


def _summary_lines(content: ResumeContent) -> List[str]:
    """Text drawn below the name, top to bottom."""
    info = content.personal_info
    lines = [" | ".join(part for part in (info.email, info.phone, info.address) if part)]
    if info.summary:
        lines += ["", info.summary]
    if content.experience:
        lines += ["", "EXPERIENCE"]
        lines += [f"{exp.position} - {exp.company}".strip(" -") for exp in content.experience]
    if content.education:
        lines += ["", "EDUCATION"]
        lines += [f"{edu.school} - {edu.degree}".strip(" -") for edu in content.education]
    if content.skills:
        lines += ["", "SKILLS", ", ".join(content.skills)]
    if not (content.experience or content.education or content.skills) and info.custom_text:
        lines += [""] + info.custom_text.splitlines()
    return lines


def render_thumbnail_pdf(content: Any, template_id: Any = None) -> bytes:
    """
    Draw a single A4 page summarizing ``content`` and return the PDF bytes.

    Layout loosely follows the template: ``modern`` gets a dark sidebar,
    ``classic`` a centered name, ``raw`` the pasted text under the name.
    """
    normalized = normalize_for_preview(content)
    template = resolve_template_id(template_id)
    width, height = A4

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    left = MARGIN
    if template == TemplateId.MODERN:
        c.setFillColorRGB(0.06, 0.09, 0.16)
        c.rect(0, 0, width * SIDEBAR_RATIO, height, stroke=0, fill=1)
        c.setFillColorRGB(0, 0, 0)
        left = width * SIDEBAR_RATIO + MARGIN / 2

    y = height - MARGIN
    name = normalized.personal_info.full_name or "Your Name"
    c.setFont("Helvetica-Bold", 22)
    if template == TemplateId.CLASSIC:
        c.drawCentredString(width / 2, y, name)
    else:
        c.drawString(left, y, name)
    y -= LINE_HEIGHT * 2

    if template == TemplateId.RAW:
        lines = normalized.personal_info.custom_text.splitlines()
    else:
        lines = _summary_lines(normalized)

    c.setFont("Helvetica", 10)
    for line in lines:
        if y < MARGIN:
            break
        c.drawString(left, y, line[:110])
        y -= LINE_HEIGHT

    c.showPage()
    c.save()
    return buffer.getvalue()


def capture_thumbnail(
    content: Any,
    template_id: Any = None,
    zoom: float = BUILDER_DEFAULTS.THUMBNAIL_ZOOM,
) -> str:
    """
    Rasterize the first page of ``render_thumbnail_pdf`` with PyMuPDF.

    Returns:
        str: ``data:image/png;base64,...`` URI.
    """
    pdf_bytes = render_thumbnail_pdf(content, template_id)
    doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")
    try:
        pixmap = doc.load_page(0).get_pixmap(matrix=pymupdf.Matrix(zoom, zoom))
        png_bytes = pixmap.tobytes("png")
    finally:
        doc.close()
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


def capture_snapshot_thumbnail(snapshot: DraftSnapshot) -> str:
    """Thumbnail capturer for ``AutosaveEngine``."""
    return capture_thumbnail(snapshot.content, snapshot.template_id)
