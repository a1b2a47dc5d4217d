"""projector.py
Maps resume content and a template id to rendered preview HTML.
"""
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import ValidationError

from resume_builder.models import ResumeContent, TemplateId
from resume_builder.validation import resolve_template_id

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


@dataclass(frozen=True)
class PreviewRender:
    """
    Attributes:
        template_id (TemplateId): Template actually used (after fallback).
        title (str): Document title, used as the page title.
        content (ResumeContent): Normalized content that was rendered.
        html (str): Complete HTML page.
    """
    template_id: TemplateId
    title: str
    content: ResumeContent
    html: str


@lru_cache(maxsize=1)
def _env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def normalize_for_preview(content: Any) -> ResumeContent:
    """
    Lenient normalization: content that does not fit the schema renders as
    an empty document instead of failing.
    """
    if isinstance(content, ResumeContent):
        return content
    try:
        return ResumeContent.model_validate(content)
    except ValidationError:
        return ResumeContent()


def project_preview(content: Any, template_id: Any, title: str = "") -> PreviewRender:
    """
    Render ``content`` with the template named by ``template_id``.

    Pure function of its inputs. Unknown template ids fall back to ``modern``.

    Args:
        content (Any): ResumeContent or its wire form (validated or not).
        template_id (Any): Requested template.
        title (str): Document title.

    Returns:
        PreviewRender: The rendered page.
    """
    resolved_template = resolve_template_id(template_id)
    normalized = normalize_for_preview(content)
    personal_info = normalized.personal_info

    html = _env().get_template(f"{resolved_template.value}.html").render(
        title=title or personal_info.full_name or "Resume",
        info=personal_info,
        initial=personal_info.full_name[:1].upper(),
        experience=normalized.experience,
        education=normalized.education,
        projects=normalized.projects,
        skills=normalized.skills,
    )
    return PreviewRender(
        template_id=resolved_template,
        title=title,
        content=normalized,
        html=html,
    )
