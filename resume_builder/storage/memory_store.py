"""memory_store.py

Holds InMemoryDocumentStore, a dict-backed DocumentStore.
"""
import threading
import uuid
from typing import Any, Dict, List, Optional

from resume_builder.models import ResumeContent, ResumeDocument, TemplateId
from resume_builder.storage.document_store import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """
    Keeps documents in a dict. Every read and write copies the document so
    callers never share state with the store.
    """

    def __init__(self):
        self._documents: Dict[str, ResumeDocument] = {}
        self._lock = threading.Lock()

    def list_for_user(self, user_id: str) -> List[ResumeDocument]:
        with self._lock:
            return [
                document.model_copy(deep=True)
                for document in self._documents.values()
                if document.user_id == user_id
            ]

    def get(self, document_id: str) -> Optional[ResumeDocument]:
        with self._lock:
            document = self._documents.get(document_id)
            return document.model_copy(deep=True) if document else None

    def create(
        self,
        user_id: str,
        title: str,
        template_id: TemplateId,
        content: ResumeContent,
    ) -> ResumeDocument:
        now = self._now()
        document = ResumeDocument(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=title,
            template_id=template_id,
            content=content.model_copy(deep=True),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._documents[document.id] = document
        return document.model_copy(deep=True)

    def update(self, document_id: str, changes: Dict[str, Any]) -> Optional[ResumeDocument]:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                return None
            update = {key: value for key, value in changes.items() if key in self.UPDATABLE_FIELDS}
            update["updated_at"] = self._now()
            document = document.model_copy(update=update, deep=True)
            self._documents[document_id] = document
            return document.model_copy(deep=True)

    def delete(self, document_id: str) -> None:
        with self._lock:
            self._documents.pop(document_id, None)
