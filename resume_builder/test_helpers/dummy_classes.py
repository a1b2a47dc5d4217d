"""dummy_classes.py
Holds dummy backends and parsers to test the sync engine and file parsers with.
"""
import asyncio
from typing import Any, Dict, List, Optional

from resume_builder.exceptions import TransientSyncError
from resume_builder.file_parser.file_parser import FileParser
from resume_builder.models import ResumeDocument
from resume_builder.storage.memory_store import InMemoryDocumentStore
from resume_builder.storage.service import ResumeService
from resume_builder.storage.session import Session
from resume_builder.sync.backend import ServiceBackend


class DummyTxtParser(FileParser):
    """Simple subclass of FileParser to test _validate_file logic."""
    SUPPORTED_EXTENSIONS = [".txt"]

    def _read_text(self) -> str:
        with open(self.file_path, "r", encoding="utf-8") as f:
            return f.read()


class RecordingBackend(ServiceBackend):
    """
    In-memory backend that records every ``update`` call and can slow them
    down to simulate network latency.

    Attributes:
        updates (List[dict]): Changes passed to ``update``, in call order.
        in_flight (int): Updates currently awaiting their delay.
        max_in_flight (int): Highest ``in_flight`` seen.
    """

    def __init__(
        self,
        service: Optional[ResumeService] = None,
        session: Optional[Session] = None,
        update_delay: float = 0.0,
    ):
        super().__init__(
            service=service or ResumeService(InMemoryDocumentStore()),
            session=session or Session(user_id="user-1"),
        )
        self.update_delay = update_delay
        self.updates: List[Dict[str, Any]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def content_updates(self) -> List[Dict[str, Any]]:
        """Recorded updates that carried a draft (not thumbnail-only)."""
        return [update for update in self.updates if "content" in update]

    async def update(self, document_id: str, changes: Dict[str, Any]) -> ResumeDocument:
        self.updates.append(changes)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.update_delay:
                await asyncio.sleep(self.update_delay)
            return await super().update(document_id, changes)
        finally:
            self.in_flight -= 1


class FailingBackend(RecordingBackend):
    """
    RecordingBackend whose first ``failures`` content updates raise
    ``TransientSyncError``. Thumbnail-only updates can be made to fail too.
    """

    def __init__(self, failures: int = 1, fail_thumbnails: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.failures = failures
        self.fail_thumbnails = fail_thumbnails

    async def update(self, document_id: str, changes: Dict[str, Any]) -> ResumeDocument:
        if "thumbnail" in changes and self.fail_thumbnails:
            self.updates.append(changes)
            raise TransientSyncError("thumbnail upload failed")
        if "content" in changes and self.failures > 0:
            self.failures -= 1
            self.updates.append(changes)
            raise TransientSyncError("connection reset")
        return await super().update(document_id, changes)
