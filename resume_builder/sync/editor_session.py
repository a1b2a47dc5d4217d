"""editor_session.py
One open editor: the form controller, the live preview and the autosave
engine for a single document, wired together.
"""
from typing import Any, Callable, Dict, Optional

from resume_builder.config import BUILDER_DEFAULTS
from resume_builder.form_state import DraftSnapshot, FormStateController
from resume_builder.importer.text_importer import import_text
from resume_builder.logging import LoggerFactory
from resume_builder.models import ResumeDocument
from resume_builder.preview.projector import PreviewRender, project_preview
from resume_builder.preview.thumbnail import capture_snapshot_thumbnail
from resume_builder.sync.autosave_engine import (
    AutosaveEngine,
    SyncStatus,
    ThumbnailCapturer,
)
from resume_builder.sync.backend import DocumentBackend

logger = LoggerFactory().get_logger(
    name="editor_session",
    logger_type="sync",
    console=False
)


class EditorSession:
    """
    Editing session for one document.

    Every edit goes through the ``FormStateController``. Each new snapshot
    is handed to the ``AutosaveEngine`` and invalidates the cached preview.
    Use ``EditorSession.open`` to create one from a backend.

    Example
    -------
    >>> async with await EditorSession.open(backend, document_id) as editor:
    ...     editor.update_field("personalInfo.fullName", "Jane Doe")
    ...     await editor.save()
    """

    def __init__(
        self,
        document: ResumeDocument,
        backend: DocumentBackend,
        debounce_seconds: float = BUILDER_DEFAULTS.AUTOSAVE_DEBOUNCE_SECONDS,
        thumbnail_capturer: Optional[ThumbnailCapturer] = capture_snapshot_thumbnail,
        on_status_change: Optional[Callable[[SyncStatus], None]] = None,
    ):
        self.document = document
        self.backend = backend
        self.engine = AutosaveEngine(
            document_id=document.id,
            backend=backend,
            debounce_seconds=debounce_seconds,
            thumbnail_capturer=thumbnail_capturer,
            on_status_change=on_status_change,
        )
        self.controller = FormStateController(
            title=document.title,
            template_id=document.template_id.value,
            content=document.content,
        )
        self.engine.load(document)
        self._preview: Optional[PreviewRender] = None
        self._unsubscribe = self.controller.subscribe(self._on_snapshot)

    @classmethod
    async def open(
        cls,
        backend: DocumentBackend,
        document_id: str,
        **kwargs: Any,
    ) -> "EditorSession":
        """
        Fetch ``document_id`` through ``backend`` and start editing it.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            ForbiddenError: If the backend's session does not own it.
        """
        document = await backend.get(document_id)
        logger.debug(f"Opened editor for resume '{document_id}'")
        return cls(document, backend, **kwargs)

    # ----------------------
    # STATE
    # ----------------------
    @property
    def document_id(self) -> str:
        return self.document.id

    def snapshot(self) -> DraftSnapshot:
        return self.controller.snapshot()

    def status(self) -> SyncStatus:
        return self.engine.status()

    def preview(self) -> PreviewRender:
        """Render the current draft. Cached until the next edit."""
        if self._preview is None:
            snapshot = self.controller.snapshot()
            self._preview = project_preview(
                snapshot.content,
                snapshot.template_id,
                title=snapshot.title,
            )
        return self._preview

    # ----------------------
    # EDITS
    # ----------------------
    def set_title(self, title: str) -> None:
        self.controller.set_title(title)

    def set_template(self, template_id: str) -> None:
        self.controller.set_template(template_id)

    def update_field(self, path: str, value: Any) -> None:
        self.controller.update_field(path, value)

    def set_creation_mode(self, mode: Any) -> bool:
        return self.controller.set_creation_mode(mode)

    def append_item(self, section: str, item: Optional[Any] = None) -> str:
        return self.controller.append_item(section, item)

    def remove_item(self, section: str, index: int) -> bool:
        return self.controller.remove_item(section, index)

    def move_item(self, section: str, from_index: int, to_index: int) -> bool:
        return self.controller.move_item(section, from_index, to_index)

    def import_text(self, text: str) -> Dict[str, Any]:
        """
        Run Magic Import on ``text`` and merge the result into the draft.

        Returns:
            dict: The imported partial, before merging.
        """
        partial = import_text(text)
        self.controller.apply_import(partial)
        return partial

    # ----------------------
    # PERSISTENCE
    # ----------------------
    async def save(self, silent: bool = False) -> bool:
        """Save now. See ``AutosaveEngine.save_now``."""
        return await self.engine.save_now(silent=silent)

    async def wait_idle(self) -> None:
        await self.engine.wait_idle()

    async def close(self) -> None:
        """Stop listening to edits and tear the engine down."""
        self._unsubscribe()
        await self.engine.aclose()

    async def __aenter__(self) -> "EditorSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _on_snapshot(self, snapshot: DraftSnapshot) -> None:
        self._preview = None
        self.engine.notify(snapshot)
