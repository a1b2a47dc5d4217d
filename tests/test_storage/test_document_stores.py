"""test_document_stores.py
Comprehensive test suite for:
  - InMemoryDocumentStore
  - SqlDocumentStore
"""

import pytest

from resume_builder.models import ResumeContent, TemplateId
from resume_builder.storage.document_store import DocumentStore
from resume_builder.storage.memory_store import InMemoryDocumentStore
from resume_builder.storage.sql_store import SqlDocumentStore, create_db_engine


@pytest.fixture(params=["memory", "sqlite_memory", "sqlite_file"])
def any_store(request, tmp_path):
    """Each concrete DocumentStore, fresh per test."""
    if request.param == "memory":
        return InMemoryDocumentStore()
    if request.param == "sqlite_memory":
        return SqlDocumentStore(create_db_engine("sqlite://"))
    return SqlDocumentStore(create_db_engine(f"sqlite:///{tmp_path / 'resumes.db'}"))


def make_content(**kwargs) -> ResumeContent:
    return ResumeContent.model_validate(kwargs)


class TestDocumentStores:
    """Behaviour shared by every DocumentStore."""

    def test_cannot_instantiate_directly(self):
        with pytest.raises(TypeError):
            DocumentStore()

    def test_create_and_get(self, any_store):
        content = make_content(skills=["Go"], experience=[{"id": "x1", "company": "Acme"}])
        created = any_store.create("u1", "CV", TemplateId.CLASSIC, content)

        fetched = any_store.get(created.id)
        assert fetched.id == created.id
        assert fetched.user_id == "u1"
        assert fetched.title == "CV"
        assert fetched.template_id == TemplateId.CLASSIC
        assert fetched.content == content
        assert fetched.thumbnail is None

    def test_get_missing_returns_none(self, any_store):
        assert any_store.get("missing") is None

    def test_ids_are_unique(self, any_store):
        ids = {any_store.create("u1", "CV", TemplateId.MODERN, ResumeContent()).id for _ in range(5)}
        assert len(ids) == 5

    def test_list_for_user(self, any_store):
        any_store.create("u1", "A", TemplateId.MODERN, ResumeContent())
        any_store.create("u1", "B", TemplateId.MODERN, ResumeContent())
        any_store.create("u2", "C", TemplateId.MODERN, ResumeContent())
        assert sorted(d.title for d in any_store.list_for_user("u1")) == ["A", "B"]
        assert any_store.list_for_user("nobody") == []

    def test_update(self, any_store):
        created = any_store.create("u1", "CV", TemplateId.MODERN, ResumeContent())
        updated = any_store.update(created.id, {
            "title": "New",
            "template_id": TemplateId.RAW,
            "content": make_content(skills=["Rust"]),
            "thumbnail": "data:image/png;base64,AA==",
        })
        assert updated.title == "New"
        assert updated.template_id == TemplateId.RAW
        assert updated.content.skills == ["Rust"]
        assert updated.thumbnail == "data:image/png;base64,AA=="
        assert any_store.get(created.id).title == "New"

    def test_update_ignores_owner_changes(self, any_store):
        created = any_store.create("u1", "CV", TemplateId.MODERN, ResumeContent())
        updated = any_store.update(created.id, {"user_id": "u2"})
        assert updated.user_id == "u1"

    def test_update_missing_returns_none(self, any_store):
        assert any_store.update("missing", {"title": "x"}) is None

    def test_delete_is_idempotent(self, any_store):
        created = any_store.create("u1", "CV", TemplateId.MODERN, ResumeContent())
        any_store.delete(created.id)
        any_store.delete(created.id)
        assert any_store.get(created.id) is None

    def test_returned_documents_are_copies(self, any_store):
        created = any_store.create("u1", "CV", TemplateId.MODERN, make_content(skills=["Go"]))
        created.content.skills.append("Mutated")
        assert any_store.get(created.id).content.skills == ["Go"]


class TestSqlDocumentStore:
    """SQL-specific behaviour."""

    def test_data_survives_a_new_store_on_the_same_file(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'resumes.db'}"
        created = SqlDocumentStore(create_db_engine(url)).create(
            "u1", "Persisted", TemplateId.MODERN, make_content(skills=["Go"])
        )

        reopened = SqlDocumentStore(create_db_engine(url))
        fetched = reopened.get(created.id)
        assert fetched.title == "Persisted"
        assert fetched.content.skills == ["Go"]
