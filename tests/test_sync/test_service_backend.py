"""test_service_backend.py
Comprehensive test suite for:
  - ServiceBackend
"""

import asyncio
import threading

import pytest

from resume_builder.exceptions import DocumentNotFoundError, ForbiddenError, TransientSyncError
from resume_builder.storage.memory_store import InMemoryDocumentStore
from resume_builder.storage.service import ResumeService
from resume_builder.sync.backend import DocumentBackend, ServiceBackend


class ExplodingStore(InMemoryDocumentStore):
    """Store whose writes fail like a dropped database connection."""
    def update(self, document_id, changes):
        raise ConnectionError("database went away")


class ThreadRecordingStore(InMemoryDocumentStore):
    """Store that remembers which thread each list call ran on."""
    def __init__(self):
        super().__init__()
        self.threads = []

    def list_for_user(self, user_id):
        self.threads.append(threading.get_ident())
        return super().list_for_user(user_id)


class TestServiceBackend:
    """Tests for the in-process DocumentBackend."""

    def test_cannot_instantiate_directly(self):
        with pytest.raises(TypeError):
            DocumentBackend()

    def test_crud_round_trip(self, service, owner):
        backend = ServiceBackend(service, owner)

        async def scenario():
            created = await backend.create("CV", "classic", {"skills": ["Go"]})
            fetched = await backend.get(created.id)
            updated = await backend.update(created.id, {"title": "Renamed"})
            listed = await backend.list()
            await backend.delete(created.id)
            return created, fetched, updated, listed

        created, fetched, updated, listed = asyncio.run(scenario())
        assert fetched.content.skills == ["Go"]
        assert updated.title == "Renamed"
        assert [d.id for d in listed] == [created.id]
        assert service.list(owner) == []

    def test_service_errors_pass_through(self, service, owner, intruder):
        document = service.create(owner)

        with pytest.raises(ForbiddenError):
            asyncio.run(ServiceBackend(service, intruder).get(document.id))
        with pytest.raises(DocumentNotFoundError):
            asyncio.run(ServiceBackend(service, owner).get("missing"))

    def test_store_failures_become_transient(self, owner):
        service = ResumeService(ExplodingStore())
        document = service.create(owner)
        backend = ServiceBackend(service, owner)

        with pytest.raises(TransientSyncError) as exc_info:
            asyncio.run(backend.update(document.id, {"title": "x"}))
        assert isinstance(exc_info.value.original_exception, ConnectionError)

    def test_store_calls_run_in_worker_thread(self, owner):
        store = ThreadRecordingStore()
        backend = ServiceBackend(ResumeService(store), owner)

        async def scenario():
            await backend.list()
            return threading.get_ident()

        loop_thread = asyncio.run(scenario())
        assert len(store.threads) == 1
        assert store.threads[0] != loop_thread
