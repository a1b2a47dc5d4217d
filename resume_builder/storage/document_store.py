"""document_store.py

Holds abstract DocumentStore class inherited by concrete stores.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from resume_builder.models import ResumeContent, ResumeDocument, TemplateId


class DocumentStore(ABC):
    """
    Generic key-document CRUD backend for resumes.

    Stores do not check ownership or validate content; ``ResumeService``
    does both before calling into a store.

    ``update`` accepts snake_case attribute names of ``ResumeDocument``
    (``title``, ``template_id``, ``content``, ``thumbnail``) and refreshes
    ``updated_at``.
    """

    UPDATABLE_FIELDS = ["title", "template_id", "content", "thumbnail"]

    @abstractmethod
    def list_for_user(self, user_id: str) -> List[ResumeDocument]:
        """Return every document owned by ``user_id``."""
        pass

    @abstractmethod
    def get(self, document_id: str) -> Optional[ResumeDocument]:
        """Return the document, or None if it does not exist."""
        pass

    @abstractmethod
    def create(
        self,
        user_id: str,
        title: str,
        template_id: TemplateId,
        content: ResumeContent,
    ) -> ResumeDocument:
        """Insert a new document. The store assigns id and timestamps."""
        pass

    @abstractmethod
    def update(self, document_id: str, changes: Dict[str, Any]) -> Optional[ResumeDocument]:
        """Apply ``changes`` and return the updated document, or None if missing."""
        pass

    @abstractmethod
    def delete(self, document_id: str) -> None:
        """Hard delete. Deleting a missing document is a no-op."""
        pass

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)
