"""backend.py
Persistence backend contract consumed by the autosave engine.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from resume_builder.exceptions import ResumeBuilderError, TransientSyncError
from resume_builder.models import ResumeDocument
from resume_builder.storage.service import ResumeService
from resume_builder.storage.session import Session


class DocumentBackend(ABC):
    """
    Async CRUD contract, scoped to one authenticated session.

    Implementations raise ``DocumentNotFoundError``, ``ForbiddenError`` or
    ``ContentValidationError`` for rejected calls and ``TransientSyncError``
    for network/backend failures.
    """

    @abstractmethod
    async def list(self) -> List[ResumeDocument]:
        pass

    @abstractmethod
    async def get(self, document_id: str) -> ResumeDocument:
        pass

    @abstractmethod
    async def create(
        self,
        title: str,
        template_id: str,
        content: Optional[Dict[str, Any]] = None,
    ) -> ResumeDocument:
        pass

    @abstractmethod
    async def update(self, document_id: str, changes: Dict[str, Any]) -> ResumeDocument:
        """Partial update; ``changes`` uses wire keys (``title``, ``templateId``, ``content``, ``thumbnail``)."""
        pass

    @abstractmethod
    async def delete(self, document_id: str) -> None:
        pass


class ServiceBackend(DocumentBackend):
    """
    In-process backend that calls a ``ResumeService`` directly.

    Errors from the service pass through unchanged; anything else raised by
    the store is reported as ``TransientSyncError``.

    Args:
        service (ResumeService): Owner-checking service.
        session (Session): Identity every call is made as.
    """

    def __init__(self, service: ResumeService, session: Session):
        self.service = service
        self.session = session

    async def list(self) -> List[ResumeDocument]:
        return await self._call(self.service.list, self.session)

    async def get(self, document_id: str) -> ResumeDocument:
        return await self._call(self.service.get, self.session, document_id)

    async def create(
        self,
        title: str,
        template_id: str,
        content: Optional[Dict[str, Any]] = None,
    ) -> ResumeDocument:
        return await self._call(self.service.create, self.session, title, template_id, content)

    async def update(self, document_id: str, changes: Dict[str, Any]) -> ResumeDocument:
        return await self._call(self.service.update, self.session, document_id, changes)

    async def delete(self, document_id: str) -> None:
        return await self._call(self.service.delete, self.session, document_id)

    @staticmethod
    async def _call(func, *args):
        # The store is synchronous; it runs in a worker thread
        try:
            return await asyncio.to_thread(func, *args)
        except ResumeBuilderError:
            raise
        except Exception as e:
            raise TransientSyncError(
                message=f"{func.__name__} failed",
                original_exception=e,
            ) from e
