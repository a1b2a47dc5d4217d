"""config.py
Holds various defaults for the resume builder sync core and API.
"""
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()  # load .env

# --------------------------------------------------------------
# SETUP DEFAULT VALUES
# --------------------------------------------------------------
@dataclass
class BuilderDefaults:
    """
    Default settings for parameters used across the resume_builder repo.
    """
    # ---- AutosaveEngine settings ----
    AUTOSAVE_DEBOUNCE_SECONDS: float = field(
        default = 2.0,
        metadata = {
            "description": "Quiet period after the last edit before an autosave is attempted"
    })

    # ---- Template settings ----
    DEFAULT_TEMPLATE_ID: str = field(
        default = "modern",
        metadata = {
            "description": "Template used for new documents and for unknown template ids"
    })

    # ---- Importer settings ----
    MAX_SKILL_LENGTH: int = field(
        default = 50,
        metadata = {
            "description": "Imported skill tokens longer than this are discarded"
    })
    MIN_SECTION_LINE_LENGTH: int = field(
        default = 5,
        metadata = {
            "description": "Experience/education lines must be longer than this to become a record"
    })
    PLACEHOLDER_START_DATE: str = field(
        default = "2020",
        metadata = {
            "description": "Start date assigned to imported experience records"
    })
    PLACEHOLDER_END_DATE: str = field(
        default = "Present",
        metadata = {
            "description": "End date assigned to imported experience records"
    })

    # ---- FileParser settings ----
    MAX_FILE_SIZE_MB: float = field(
        default = 5.0,
        metadata = {
            "description": "Maximum allowed upload size in MB"
    })

    # ---- Thumbnail settings ----
    THUMBNAIL_ZOOM: float = field(
        default = 0.25,
        metadata = {
            "description": "Scale applied when rasterizing the preview page into a thumbnail"
    })

    # ---- Storage / API settings ----
    DATABASE_URL: str = field(
        default_factory = lambda: os.getenv("DATABASE_URL", "sqlite:///./resumes.db"),
        metadata = {
            "description": "SQLAlchemy URL of the document store (DATABASE_URL in .env)"
    })
    USER_ID_HEADER: str = field(
        default = "X-User-Id",
        metadata = {
            "description": "Request header carrying the authenticated user id"
    })


# Import this where needed
BUILDER_DEFAULTS = BuilderDefaults()
