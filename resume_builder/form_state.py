"""form_state.py
Holds the live editable resume draft and publishes immutable snapshots of it.
"""
import copy
import json
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from resume_builder.config import BUILDER_DEFAULTS
from resume_builder.exceptions import ContentValidationError, FieldPathError
from resume_builder.importer.merge import merge_imported_content
from resume_builder.models import (
    CreationMode,
    LIST_SECTION_MODELS,
    LIST_SECTIONS,
    ResumeContent,
)
from resume_builder.validation import serialize_content


@dataclass(frozen=True)
class DraftSnapshot:
    """
    One immutable view of the draft. The controller never touches ``content``
    after handing the snapshot out; consumers must treat it as read-only.

    Attributes:
        title (str): Document title.
        template_id (str): Template id as typed by the user (not yet validated).
        content (dict): Resume content in wire form (camelCase keys).
    """
    title: str
    template_id: str
    content: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        """Fields sent to the persistence backend."""
        return {
            "title": self.title,
            "templateId": self.template_id,
            "content": self.content,
        }

    def serialized(self) -> str:
        """Canonical JSON of the payload, used for dirty checks."""
        return json.dumps(self.to_payload(), sort_keys=True, default=str)


SnapshotListener = Callable[[DraftSnapshot], None]


class FormStateController:
    """
    Owns the live editable document.

    Every mutation builds a new ``DraftSnapshot`` and hands it to each
    subscriber (typically the preview projector and the autosave engine).
    Values are not validated on write; the autosave engine validates before
    anything is persisted.

    Field paths are dotted, e.g. ``personalInfo.fullName``,
    ``experience.0.company`` or ``skills.2``.

    Example
    -------
    >>> controller = FormStateController(title="My Resume")
    >>> item_id = controller.append_item("experience", {"company": "Acme"})
    >>> controller.update_field("experience.0.position", "Engineer")
    >>> controller.snapshot().content["experience"][0]["position"]
    'Engineer'
    """

    def __init__(
        self,
        title: str = "Untitled Resume",
        template_id: str = BUILDER_DEFAULTS.DEFAULT_TEMPLATE_ID,
        content: Optional[Union[ResumeContent, Dict[str, Any]]] = None,
    ):
        self._title = title
        self._template_id = template_id
        self._content = self._with_defaults(content)
        self._listeners: List[SnapshotListener] = []
        self._snapshot = self._build_snapshot()

    # ----------------------
    # READ
    # ----------------------
    def snapshot(self) -> DraftSnapshot:
        """Return the latest snapshot."""
        return self._snapshot

    def get_field(self, path: str) -> Any:
        """Return a copy of the value at ``path``."""
        container, key = self._resolve(path)
        return copy.deepcopy(container[key])

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register ``listener`` for every new snapshot.

        Returns:
            Callable[[], None]: Call it to unsubscribe.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ----------------------
    # SCALAR EDITS
    # ----------------------
    def set_title(self, title: str) -> None:
        self._title = title
        self._commit()

    def set_template(self, template_id: str) -> None:
        self._template_id = template_id
        self._commit()

    def update_field(self, path: str, value: Any) -> None:
        """
        Write a scalar field.

        Raises:
            FieldPathError: If ``path`` does not exist, points at a section or
                object, or targets ``creationMode`` or an item id.
        """
        if path == "creationMode":
            raise FieldPathError(path, "creationMode can only be set through set_creation_mode")
        if path.split(".")[-1] == "id" and path.split(".")[0] in LIST_SECTION_MODELS:
            raise FieldPathError(path, "List item ids are read-only")

        container, key = self._resolve(path)
        if isinstance(container[key], (dict, list)):
            raise FieldPathError(path, "Not a scalar field")

        container[key] = copy.deepcopy(value)
        self._commit()

    def set_creation_mode(self, mode: Union[CreationMode, str]) -> bool:
        """
        Choose the editing surface. Only takes effect while the mode is unset.

        Returns:
            bool: True if the mode changed.

        Raises:
            ContentValidationError: If ``mode`` is not a known creation mode.
        """
        try:
            mode = CreationMode(mode)
        except ValueError:
            raise ContentValidationError("creationMode", f"Unknown creation mode '{mode}'")

        if self._content["creationMode"] != CreationMode.UNSET.value or mode == CreationMode.UNSET:
            return False
        self._content["creationMode"] = mode.value
        self._commit()
        return True

    # ----------------------
    # LIST EDITS
    # ----------------------
    def append_item(self, section: str, item: Optional[Any] = None) -> str:
        """
        Append an item to ``section``.

        Object sections get every field defaulted and a fresh id; any id in
        ``item`` is ignored. ``skills`` takes a plain string.

        Returns:
            str: The new item's id, or the skill string for ``skills``.
        """
        items = self._section(section)

        if section == "skills":
            new_item = item if item is not None else ""
            items.append(new_item)
            self._commit()
            return new_item

        item_id = self._new_item_id(items)
        new_item = LIST_SECTION_MODELS[section](id=item_id).model_dump(by_alias=True, mode="json")
        for key, value in (item or {}).items():
            if key != "id":
                new_item[key] = copy.deepcopy(value)
        items.append(new_item)
        self._commit()
        return item_id

    def remove_item(self, section: str, index: int) -> bool:
        """
        Remove the item at ``index``. Out-of-range indexes are a no-op.

        Returns:
            bool: True if an item was removed.
        """
        items = self._section(section)
        if not 0 <= index < len(items):
            return False
        del items[index]
        self._commit()
        return True

    def move_item(self, section: str, from_index: int, to_index: int) -> bool:
        """
        Move one item, keeping the relative order of all others and the
        moved item's id. ``to_index`` is clamped into range; an out-of-range
        ``from_index`` or a move onto itself is a no-op.

        Returns:
            bool: True if the list changed.
        """
        items = self._section(section)
        if not 0 <= from_index < len(items):
            return False

        to_index = max(0, min(to_index, len(items) - 1))
        if to_index == from_index:
            return False

        items.insert(to_index, items.pop(from_index))
        self._commit()
        return True

    # ----------------------
    # BULK EDITS
    # ----------------------
    def replace_content(
        self,
        content: Union[ResumeContent, Dict[str, Any]],
        title: Optional[str] = None,
        template_id: Optional[str] = None,
    ) -> None:
        """Replace the whole draft, e.g. after loading a persisted document."""
        self._content = self._with_defaults(content)
        if title is not None:
            self._title = title
        if template_id is not None:
            self._template_id = template_id
        self._commit()

    def apply_import(self, partial: Dict[str, Any]) -> None:
        """Merge a Magic Import partial into the draft."""
        self._content = self._with_defaults(merge_imported_content(self._content, partial))
        self._commit()

    # ----------------------
    # INTERNALS
    # ----------------------
    def _commit(self) -> None:
        self._snapshot = self._build_snapshot()
        for listener in list(self._listeners):
            listener(self._snapshot)

    def _build_snapshot(self) -> DraftSnapshot:
        return DraftSnapshot(
            title=self._title,
            template_id=self._template_id,
            content=copy.deepcopy(self._content),
        )

    def _section(self, section: str) -> list:
        if section not in LIST_SECTIONS:
            raise FieldPathError(section, f"Unknown list section. Expected one of {LIST_SECTIONS}")
        items = self._content.get(section)
        if not isinstance(items, list):
            items = []
            self._content[section] = items
        return items

    def _resolve(self, path: str):
        """Return ``(container, key)`` for ``path`` without creating anything."""
        parts = path.split(".") if path else []
        if not parts:
            raise FieldPathError(path, "Empty field path")

        container: Any = self._content
        for position, part in enumerate(parts):
            is_last = position == len(parts) - 1
            if isinstance(container, dict):
                if part not in container:
                    raise FieldPathError(path)
                key: Any = part
            elif isinstance(container, list):
                if not part.isdigit() or int(part) >= len(container):
                    raise FieldPathError(path, "List index out of range")
                key = int(part)
            else:
                raise FieldPathError(path)

            if is_last:
                return container, key
            container = container[key]

    @staticmethod
    def _new_item_id(items: list) -> str:
        used = {item.get("id") for item in items if isinstance(item, dict)}
        item_id = str(uuid.uuid4())
        while item_id in used:
            item_id = str(uuid.uuid4())
        return item_id

    @staticmethod
    def _with_defaults(content: Optional[Union[ResumeContent, Dict[str, Any]]]) -> Dict[str, Any]:
        """
        Fill top-level sections and personal-info fields that are missing.
        Existing values are kept as they are, valid or not.
        """
        defaults = serialize_content(ResumeContent())
        if isinstance(content, ResumeContent):
            return serialize_content(content)
        if not isinstance(content, dict):
            return defaults

        merged = copy.deepcopy(content)
        for key, value in defaults.items():
            merged.setdefault(key, value)
        if isinstance(merged["personalInfo"], dict):
            for key, value in defaults["personalInfo"].items():
                merged["personalInfo"].setdefault(key, value)
        return merged
