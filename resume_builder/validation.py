"""validation.py
Validates untrusted resume content against the ResumeContent schema.

Used by the autosave engine before every persistence attempt and again by
the storage service on every write.
"""
from typing import Any, Dict

from pydantic import ValidationError

from resume_builder.config import BUILDER_DEFAULTS
from resume_builder.exceptions import ContentValidationError
from resume_builder.models import LIST_SECTION_MODELS, ResumeContent, TemplateId


def validate_content(data: Any) -> ResumeContent:
    """
    Validate and normalize resume content.

    Optional fields missing from ``data`` are filled with their empty form
    (empty string, empty list). Validating already-valid content returns an
    equal ``ResumeContent``.

    Args:
        data (Any): Untrusted content, usually a dict decoded from JSON.

    Returns:
        ResumeContent: Normalized content.

    Raises:
        ContentValidationError: Identifies the first offending field path.
    """
    try:
        content = ResumeContent.model_validate(data)
    except ValidationError as e:
        first_error = e.errors()[0]
        field_path = ".".join(str(part) for part in first_error["loc"])
        raise ContentValidationError(
            field_path=field_path,
            message=first_error["msg"],
        ) from e

    _check_unique_item_ids(content)
    return content


def _check_unique_item_ids(content: ResumeContent) -> None:
    """Every list item id must be unique within its section."""
    for section in LIST_SECTION_MODELS:
        seen = set()
        for index, item in enumerate(getattr(content, section)):
            if item.id in seen:
                raise ContentValidationError(
                    field_path=f"{section}.{index}.id",
                    message=f"Duplicate id '{item.id}'",
                )
            seen.add(item.id)


def serialize_content(content: ResumeContent) -> Dict[str, Any]:
    """Return the JSON-compatible camelCase form of ``content``."""
    return content.model_dump(by_alias=True, mode="json")


def validate_template_id(value: Any) -> TemplateId:
    """
    Strict template check used before persistence.

    Raises:
        ContentValidationError: If ``value`` is not a known template id.
    """
    try:
        return TemplateId(value)
    except ValueError:
        raise ContentValidationError(
            field_path="templateId",
            message=f"Unknown template '{value}'. Expected one of {[t.value for t in TemplateId]}",
        )


def resolve_template_id(value: Any) -> TemplateId:
    """Lenient template lookup for rendering. Unknown values fall back to the default."""
    try:
        return TemplateId(value)
    except ValueError:
        return TemplateId(BUILDER_DEFAULTS.DEFAULT_TEMPLATE_ID)
