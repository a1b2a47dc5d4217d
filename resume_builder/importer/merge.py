"""merge.py
Merges a Magic Import partial into existing resume content.
"""
import copy
import uuid
from typing import Any, Dict

from resume_builder.models import CreationMode, LIST_SECTION_MODELS, LIST_SECTIONS


def merge_imported_content(
    existing: Dict[str, Any],
    partial: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Merge ``partial`` (importer output) into ``existing`` content.

    Rules:
        - Scalar personal-info fields are overwritten only when the incoming
          value is a non-empty string.
        - List sections are concatenated, existing items first. Imported items
          whose id is already used in the section get a fresh id.
        - Skills are deduplicated by exact string match.
        - ``creationMode`` is taken from ``partial`` only while the existing
          mode is unset.

    Both arguments are in wire form (camelCase dicts). Neither is modified.

    Returns:
        dict: The merged content.
    """
    merged = copy.deepcopy(existing) if isinstance(existing, dict) else {}
    partial = partial or {}

    # Malformed sections in the draft are reset to their defaults
    if not isinstance(merged.get("personalInfo"), dict):
        merged["personalInfo"] = {}
    for section in LIST_SECTIONS:
        if not isinstance(merged.get(section), list):
            merged[section] = []

    personal_info = merged["personalInfo"]
    for key, value in (partial.get("personalInfo") or {}).items():
        if isinstance(value, str) and value:
            personal_info[key] = value

    for section in LIST_SECTION_MODELS:
        current = merged[section]
        used_ids = {item.get("id") for item in current if isinstance(item, dict)}
        for item in partial.get(section) or []:
            item = copy.deepcopy(item)
            if not item.get("id") or item["id"] in used_ids:
                item["id"] = str(uuid.uuid4())
            used_ids.add(item["id"])
            current.append(item)

    skills = merged["skills"]
    for skill in partial.get("skills") or []:
        if skill not in skills:
            skills.append(skill)

    existing_mode = merged.get("creationMode") or CreationMode.UNSET.value
    incoming_mode = partial.get("creationMode")
    if existing_mode == CreationMode.UNSET.value and incoming_mode:
        merged["creationMode"] = incoming_mode
    else:
        merged["creationMode"] = existing_mode

    return merged
