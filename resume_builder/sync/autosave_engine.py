"""autosave_engine.py
Debounced, single-flight persistence of a resume draft.
"""
import asyncio
import inspect
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Union

from resume_builder.config import BUILDER_DEFAULTS
from resume_builder.exceptions import (
    ContentValidationError,
    ResumeBuilderError,
    TransientSyncError,
)
from resume_builder.form_state import DraftSnapshot
from resume_builder.logging import LoggerFactory
from resume_builder.models import ResumeDocument
from resume_builder.sync.backend import DocumentBackend
from resume_builder.validation import (
    serialize_content,
    validate_content,
    validate_template_id,
)

logger = LoggerFactory().get_logger(
    name="autosave_engine",
    logger_type="sync",
    console=False
)

ThumbnailCapturer = Callable[[DraftSnapshot], Union[Optional[str], Awaitable[Optional[str]]]]


class SyncState(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"
    SAVING = "saving"
    SAVE_FAILED = "save_failed"


@dataclass(frozen=True)
class SyncStatus:
    """
    What the UI shows next to the editor.

    Attributes:
        state (SyncState): Current state.
        last_error (Exception | None): Error of the last failed save. Cleared
            by the next successful save.
        last_saved_at (datetime | None): Time of the last successful save.
    """
    state: SyncState
    last_error: Optional[Exception] = None
    last_saved_at: Optional[datetime] = None


class AutosaveEngine:
    """
    State machine over CLEAN, DIRTY, SAVING and SAVE_FAILED.

    - ``notify`` is called with every new draft snapshot. A snapshot whose
      serialized payload differs from the last persisted one makes the draft
      DIRTY and (re)starts a trailing-edge debounce timer.
    - When the timer fires, or ``save_now`` is called, a save is requested.
      At most one persistence call is in flight; requests that arrive while
      SAVING are queued and run against the latest snapshot afterwards.
    - Content is validated before sending. Invalid content is never sent.
    - On success the last persisted value is the one that was sent. If the
      draft moved on meanwhile the engine goes back to DIRTY.
    - On failure the engine is SAVE_FAILED. The draft is left untouched and
      the next edit re-arms the cycle.

    Must be used from inside a running asyncio event loop.

    Args:
        document_id (str): Document being edited.
        backend (DocumentBackend): Persistence backend.
        debounce_seconds (float): Quiet period before an autosave.
        thumbnail_capturer (Callable | None): Called with the saved snapshot
            after an explicit save; returns a thumbnail string (or awaitable
            of one). Failures are logged and ignored.
        on_status_change (Callable | None): Called with a ``SyncStatus`` on
            every state change.
    """

    def __init__(
        self,
        document_id: str,
        backend: DocumentBackend,
        debounce_seconds: float = BUILDER_DEFAULTS.AUTOSAVE_DEBOUNCE_SECONDS,
        thumbnail_capturer: Optional[ThumbnailCapturer] = None,
        on_status_change: Optional[Callable[[SyncStatus], None]] = None,
    ):
        self.document_id = document_id
        self.backend = backend
        self.debounce_seconds = debounce_seconds
        self.thumbnail_capturer = thumbnail_capturer
        self.on_status_change = on_status_change

        self._state = SyncState.CLEAN
        self._last_error: Optional[Exception] = None
        self._last_saved_at: Optional[datetime] = None

        self._latest: Optional[DraftSnapshot] = None
        self._persisted: Optional[str] = None

        self._debounce_task: Optional[asyncio.Task] = None
        self._save_task: Optional[asyncio.Task] = None
        self._save_requested = False
        self._explicit_requested = False
        self._waiters: List[asyncio.Future] = []
        self._closed = False

    # ----------------------
    # PUBLIC API
    # ----------------------
    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error

    @property
    def last_persisted(self) -> Optional[str]:
        """Serialized payload of the last successful save (or load)."""
        return self._persisted

    def status(self) -> SyncStatus:
        return SyncStatus(
            state=self._state,
            last_error=self._last_error,
            last_saved_at=self._last_saved_at,
        )

    def load(self, document: ResumeDocument) -> DraftSnapshot:
        """
        Seed the engine with a freshly fetched document. The document is the
        last persisted state and the engine is CLEAN.

        Returns:
            DraftSnapshot: Snapshot matching ``document``.
        """
        snapshot = DraftSnapshot(
            title=document.title,
            template_id=document.template_id.value,
            content=serialize_content(document.content),
        )
        self._latest = snapshot
        self._persisted = snapshot.serialized()
        self._last_saved_at = document.updated_at
        self._set_state(SyncState.CLEAN)
        return snapshot

    def notify(self, snapshot: DraftSnapshot) -> None:
        """Record a new draft snapshot and arm the debounce timer if it is dirty."""
        if self._closed:
            return
        self._latest = snapshot

        if snapshot.serialized() == self._persisted:
            self._cancel_debounce()
            if self._state != SyncState.SAVING:
                self._set_state(SyncState.CLEAN)
            return

        if self._state != SyncState.SAVING:
            self._set_state(SyncState.DIRTY)
        self._restart_debounce()

    async def save_now(self, silent: bool = False) -> bool:
        """
        Save immediately, skipping the debounce window. A pending debounced
        save is folded into this one. If a save is in flight this waits for it
        and then saves the latest snapshot.

        Args:
            silent (bool): Silent saves skip the thumbnail capture.

        Returns:
            bool: True if the save this call waited for succeeded.
        """
        self._cancel_debounce()
        return await self._request_save(explicit=not silent)

    async def wait_idle(self) -> None:
        """Wait until no debounce timer is armed and no save is in flight."""
        while True:
            tasks = [task for task in (self._debounce_task, self._save_task) if task is not None]
            if not tasks:
                return
            await asyncio.wait(tasks)

    async def aclose(self) -> None:
        """Cancel the debounce timer and let an in-flight save finish."""
        self._closed = True
        self._cancel_debounce()
        if self._save_task is not None:
            await asyncio.wait([self._save_task])

    async def __aenter__(self) -> "AutosaveEngine":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ----------------------
    # DEBOUNCE
    # ----------------------
    def _restart_debounce(self) -> None:
        self._cancel_debounce()
        self._debounce_task = asyncio.get_running_loop().create_task(self._debounce())

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None:
            self._debounce_task.cancel()
            self._debounce_task = None

    async def _debounce(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if self._debounce_task is asyncio.current_task():
            self._debounce_task = None
        logger.debug(f"[{self.document_id}] debounce window elapsed")
        self._request_save(explicit=False)

    # ----------------------
    # SAVING
    # ----------------------
    def _request_save(self, explicit: bool) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        waiter = loop.create_future()
        self._waiters.append(waiter)
        self._save_requested = True
        self._explicit_requested = self._explicit_requested or explicit

        if self._save_task is None:
            self._save_task = loop.create_task(self._save_loop())
        else:
            logger.debug(f"[{self.document_id}] save queued behind in-flight request")
        return waiter

    async def _save_loop(self) -> None:
        try:
            while self._save_requested:
                self._save_requested = False
                explicit = self._explicit_requested
                self._explicit_requested = False
                waiters, self._waiters = self._waiters, []

                succeeded = await self._save_once(explicit)

                for waiter in waiters:
                    if not waiter.done():
                        waiter.set_result(succeeded)
        finally:
            self._save_task = None

    async def _save_once(self, explicit: bool) -> bool:
        snapshot = self._latest
        if snapshot is None:
            return True

        serialized = snapshot.serialized()
        if serialized == self._persisted and not explicit:
            self._reconcile()
            return True

        try:
            payload = self._build_payload(snapshot)
        except ContentValidationError as e:
            logger.warning(f"[{self.document_id}] not saving invalid content: {e}")
            self._fail(e)
            return False

        self._set_state(SyncState.SAVING)
        try:
            await self.backend.update(self.document_id, payload)
        except ResumeBuilderError as e:
            logger.warning(f"[{self.document_id}] save failed: {e}")
            self._fail(e)
            return False
        except Exception as e:
            logger.warning(f"[{self.document_id}] save failed unexpectedly: {e}")
            self._fail(TransientSyncError(original_exception=e))
            return False

        self._persisted = serialized
        self._last_error = None
        self._last_saved_at = datetime.now(timezone.utc)
        logger.debug(f"[{self.document_id}] saved")

        if explicit and self.thumbnail_capturer is not None:
            await self._capture_thumbnail(snapshot)

        self._reconcile()
        return True

    def _build_payload(self, snapshot: DraftSnapshot) -> dict:
        if not isinstance(snapshot.title, str):
            raise ContentValidationError("title", "Title must be a string")
        template_id = validate_template_id(snapshot.template_id)
        content = validate_content(snapshot.content)
        return {
            "title": snapshot.title,
            "templateId": template_id.value,
            "content": serialize_content(content),
        }

    async def _capture_thumbnail(self, snapshot: DraftSnapshot) -> None:
        try:
            if inspect.iscoroutinefunction(self.thumbnail_capturer):
                thumbnail: Any = await self.thumbnail_capturer(snapshot)
            else:
                # CPU-bound rendering runs in a worker thread
                thumbnail = await asyncio.to_thread(self.thumbnail_capturer, snapshot)
            if inspect.isawaitable(thumbnail):
                thumbnail = await thumbnail
            if thumbnail:
                await self.backend.update(self.document_id, {"thumbnail": thumbnail})
        except Exception as e:
            logger.warning(f"[{self.document_id}] thumbnail capture failed: {e}")

    def _reconcile(self) -> None:
        """After a save: CLEAN if the draft still matches, otherwise DIRTY again."""
        if self._latest is None or self._latest.serialized() == self._persisted:
            self._set_state(SyncState.CLEAN)
            return

        self._set_state(SyncState.DIRTY)
        if not self._save_requested and self._debounce_task is None and not self._closed:
            self._restart_debounce()

    def _fail(self, error: Exception) -> None:
        self._last_error = error
        self._set_state(SyncState.SAVE_FAILED)

    def _set_state(self, state: SyncState) -> None:
        if state == self._state:
            return
        logger.debug(f"[{self.document_id}] {self._state.value} -> {state.value}")
        self._state = state
        if self.on_status_change is not None:
            self.on_status_change(self.status())
