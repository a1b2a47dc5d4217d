"""models.py
Holds standardized data models used across various functions.

The JSON wire format uses camelCase keys (``personalInfo.fullName``); the
Python attributes are snake_case. Models accept either form.
"""
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class TemplateId(str, Enum):
    """Known preview templates."""
    MODERN = "modern"
    CLASSIC = "classic"
    RAW = "raw"


class CreationMode(str, Enum):
    """Editing surface chosen for a document. Set once and never reverted."""
    UNSET = "unset"
    MANUAL = "manual"
    MAGIC = "magic"


class ResumeModel(BaseModel):
    """
    Base for all resume models. ``None`` values are treated as missing so
    optional fields fall back to their empty defaults.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_null_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class ListItem(ResumeModel):
    """
    A record inside an ordered list section.

    Attributes:
        id (str): Client-generated identifier. The only stable key of an
            item across reorders.
    """
    id: str = Field(min_length=1)

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("id must not be blank")
        return value


class SocialLink(ResumeModel):
    platform: str = ""
    url: str = ""


class PersonalInfo(ResumeModel):
    """
    Contact details and free text shown in the resume header.

    Attributes:
        profile_image (str): Data URI or URL.
        custom_text (str): Raw pasted text kept for the "raw" template.
    """
    full_name: str = ""
    job_title: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    summary: str = ""
    profile_image: str = ""
    custom_text: str = ""
    social_links: List[SocialLink] = Field(default_factory=list)


class EducationItem(ListItem):
    school: str = ""
    degree: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class ExperienceItem(ListItem):
    company: str = ""
    position: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class ProjectItem(ListItem):
    name: str = ""
    description: str = ""
    link: str = ""


class ResumeContent(ResumeModel):
    """
    Stores the structured resume body. Date ranges are free text.
    """
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    creation_mode: CreationMode = CreationMode.UNSET
    education: List[EducationItem] = Field(default_factory=list)
    experience: List[ExperienceItem] = Field(default_factory=list)
    projects: List[ProjectItem] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)


# Section name (wire form) -> item model. Skills hold plain strings.
LIST_SECTION_MODELS = {
    "education": EducationItem,
    "experience": ExperienceItem,
    "projects": ProjectItem,
}
LIST_SECTIONS = ["education", "experience", "projects", "skills"]


class ResumeDocument(ResumeModel):
    """
    The top-level persisted unit, owned by exactly one user.

    Attributes:
        id (str): Opaque identifier assigned by the store.
        user_id (str): Owner of the document.
        thumbnail (Optional[str]): PNG data URI of the rendered preview.
    """
    id: str
    user_id: str
    title: str = "Untitled Resume"
    template_id: TemplateId = TemplateId.MODERN
    content: ResumeContent = Field(default_factory=ResumeContent)
    thumbnail: Optional[str] = None
    created_at: datetime
    updated_at: datetime
