"""test_thumbnail.py
Comprehensive test suite for:
  - render_thumbnail_pdf
  - capture_thumbnail
"""

import base64

import pymupdf
import pytest

from resume_builder.form_state import DraftSnapshot
from resume_builder.preview.thumbnail import (
    capture_snapshot_thumbnail,
    capture_thumbnail,
    render_thumbnail_pdf,
)

CONTENT = {
    "personalInfo": {"fullName": "Jane Doe", "email": "jane@x.com", "customText": "Pasted text"},
    "experience": [{"id": "x1", "company": "Acme", "position": "Engineer"}],
    "skills": ["Python"],
}
PNG_PREFIX = "data:image/png;base64,"


def decode_png(data_uri: str) -> bytes:
    assert data_uri.startswith(PNG_PREFIX)
    return base64.b64decode(data_uri[len(PNG_PREFIX):])


def png_width(png: bytes) -> int:
    # IHDR width field
    return int.from_bytes(png[16:20], "big")


class TestThumbnail:
    """Tests for thumbnail rendering."""

    @pytest.mark.parametrize("template_id", ["modern", "classic", "raw", "unknown"])
    def test_pdf_has_one_page_with_name(self, template_id):
        doc = pymupdf.open(stream=render_thumbnail_pdf(CONTENT, template_id), filetype="pdf")
        try:
            assert doc.page_count == 1
            assert "Jane Doe" in doc.load_page(0).get_text("text")
        finally:
            doc.close()

    def test_capture_returns_png_data_uri(self):
        png = decode_png(capture_thumbnail(CONTENT, "modern"))
        assert png.startswith(b"\x89PNG")

    def test_zoom_controls_size(self):
        small = decode_png(capture_thumbnail(CONTENT, "classic", zoom=0.1))
        large = decode_png(capture_thumbnail(CONTENT, "classic", zoom=0.3))
        assert png_width(small) < png_width(large)

    def test_invalid_content_still_renders(self):
        assert capture_thumbnail("garbage").startswith(PNG_PREFIX)

    def test_snapshot_capturer(self):
        snapshot = DraftSnapshot(title="CV", template_id="raw", content=CONTENT)
        assert capture_snapshot_thumbnail(snapshot).startswith(PNG_PREFIX)
