"""text_importer.py
Converts unstructured pasted resume text into a partial ResumeContent
("Magic Import").
"""
import re
import uuid
from typing import Any, Dict, List, Optional

from resume_builder.config import BUILDER_DEFAULTS
from resume_builder.logging import LoggerFactory
from resume_builder.models import CreationMode

logger = LoggerFactory().get_logger(
    name="text_importer",
    logger_type="importer",
    console=False
)


class TextImporter:
    """
    Line-oriented heuristic classifier for pasted resume text.

    A single pass walks the lines while tracking the current section. Lines
    containing a section keyword switch the section and are otherwise
    ignored; every other line is dispatched to the handler for the current
    section. The result over-produces structure on purpose: a human corrects
    it afterwards.

    This is not a parser. There is no grammar and no guaranteed precision.
    """

    COMMON_REGEX: dict = {
        "email_address": r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}",
        # -> `555-123-4567`, `(555) 123-4567`, `+555.123.456789`
        "phone_number": r"[\+]?[(]?[0-9]{3}[)]?[-\s\.]?[0-9]{3}[-\s\.]?[0-9]{4,6}",
    }

    # Checked in order; the first section whose keyword appears in the
    # lowercased line wins.
    SECTION_KEYWORDS = [
        ("experience", ["experience", "work history", "employment"]),
        ("education", ["education", "academic"]),
        ("skills", ["skills", "expertise", "technologies"]),
        ("projects", ["projects"]),
        ("summary", ["summary", "objective", "about me"]),
    ]

    SKILL_SEPARATOR_REGEX = r"[,|•\t]|\s{2,}"
    EXPERIENCE_SEPARATOR_REGEX = r"\s+at\s+|[-|:]"
    EDUCATION_SEPARATOR_REGEX = r"[-|:]"
    BULLET_MARKERS = ("-", "•")

    def __init__(
        self,
        max_skill_length: int = BUILDER_DEFAULTS.MAX_SKILL_LENGTH,
        min_line_length: int = BUILDER_DEFAULTS.MIN_SECTION_LINE_LENGTH,
    ):
        self.max_skill_length = max_skill_length
        self.min_line_length = min_line_length

    def run(self, text: str) -> Dict[str, Any]:
        """
        Build the partial content for ``text``.

        Returns:
            dict: Partial ResumeContent in wire form. All list sections are
            present, ``personalInfo.customText`` holds the raw input and
            ``creationMode`` is ``"magic"``.
        """
        lines = [line.strip() for line in text.split("\n")]
        lines = [line for line in lines if line]

        content = self.empty_partial(text)
        personal_info = content["personalInfo"]
        personal_info["fullName"] = lines[0] if lines else ""
        personal_info["email"] = self._first_match(self.COMMON_REGEX["email_address"], text)
        personal_info["phone"] = self._first_match(self.COMMON_REGEX["phone_number"], text)

        current_section: Optional[str] = None
        for line in lines:
            section = self._detect_section(line)
            if section is not None:
                current_section = section
                continue

            if current_section == "summary":
                self._add_summary_line(content, line)
            elif current_section == "skills":
                self._add_skills_line(content, line)
            elif current_section == "experience":
                self._add_experience_line(content, line)
            elif current_section == "education":
                self._add_education_line(content, line)

        personal_info["summary"] = personal_info["summary"].strip()
        return content

    @staticmethod
    def empty_partial(text: str = "") -> Dict[str, Any]:
        """The degraded result: no structure, only the raw text."""
        return {
            "personalInfo": {
                "fullName": "",
                "email": "",
                "phone": "",
                "address": "",
                "summary": "",
                "profileImage": "",
                "customText": text,
            },
            "creationMode": CreationMode.MAGIC.value,
            "experience": [],
            "education": [],
            "skills": [],
            "projects": [],
        }

    @staticmethod
    def _first_match(pattern: str, text: str) -> str:
        match = re.search(pattern, text)
        return match.group(0) if match else ""

    def _detect_section(self, line: str) -> Optional[str]:
        lower = line.lower()
        for section, keywords in self.SECTION_KEYWORDS:
            if any(keyword in lower for keyword in keywords):
                return section
        return None

    # ----------------------
    # SECTION HANDLERS
    # ----------------------
    def _add_summary_line(self, content: Dict[str, Any], line: str) -> None:
        separator = "\n" if line.startswith(self.BULLET_MARKERS) else " "
        content["personalInfo"]["summary"] += separator + line

    def _add_skills_line(self, content: Dict[str, Any], line: str) -> None:
        tokens = [token.strip() for token in re.split(self.SKILL_SEPARATOR_REGEX, line)]
        skills: List[str] = content["skills"]
        for token in tokens:
            if not token or len(token) > self.max_skill_length:
                continue
            if token not in skills:
                skills.append(token)

    def _add_experience_line(self, content: Dict[str, Any], line: str) -> None:
        if len(line) <= self.min_line_length:
            return
        parts = [part.strip() for part in re.split(self.EXPERIENCE_SEPARATOR_REGEX, line)]
        if len(parts) >= 2:
            content["experience"].append({
                "id": _new_item_id(),
                "position": parts[0],
                "company": parts[1],
                "startDate": BUILDER_DEFAULTS.PLACEHOLDER_START_DATE,
                "endDate": BUILDER_DEFAULTS.PLACEHOLDER_END_DATE,
                "description": " ".join(parts[2:]),
            })
        else:
            content["experience"].append({
                "id": _new_item_id(),
                "position": line,
                "company": "",
                "startDate": "",
                "endDate": "",
                "description": "",
            })

    def _add_education_line(self, content: Dict[str, Any], line: str) -> None:
        if len(line) <= self.min_line_length:
            return
        parts = [part.strip() for part in re.split(self.EDUCATION_SEPARATOR_REGEX, line)]
        content["education"].append({
            "id": _new_item_id(),
            "school": parts[0] or line,
            "degree": parts[1] if len(parts) > 1 else "",
            "startDate": "",
            "endDate": "",
            "description": "",
        })


def _new_item_id() -> str:
    return str(uuid.uuid4())


def import_text(text: Any) -> Dict[str, Any]:
    """
    Run Magic Import on ``text``. Never raises.

    Non-string input is treated as empty text. If the heuristics fail for any
    reason the degraded partial (raw text only) is returned instead.

    Args:
        text (Any): Pasted resume text.

    Returns:
        dict: Partial ResumeContent in wire form.
    """
    if not isinstance(text, str):
        logger.warning(f"Magic import received {type(text).__name__}, treating it as empty text.")
        text = ""

    try:
        return TextImporter().run(text)
    except Exception as e:
        logger.warning(f"Magic import degraded to raw text only: {e}")
        return TextImporter.empty_partial(text)
