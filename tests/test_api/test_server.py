"""test_server.py
Comprehensive test suite for:
  - the FastAPI routes in api/server.py
"""

import pytest

from resume_builder.config import BUILDER_DEFAULTS
from resume_builder.test_helpers.file_fixtures import write_pdf
from resume_builder.test_helpers.dummy_variables.dummy_resume_texts import REGRESSION_RESUME_TEXT


def auth(session):
    return {BUILDER_DEFAULTS.USER_ID_HEADER: session.user_id}


@pytest.fixture
def created(client, owner):
    response = client.post(
        "/api/resumes",
        json={"title": "CV", "templateId": "classic", "content": {"skills": ["Go"]}},
        headers=auth(owner),
    )
    assert response.status_code == 201
    return response.json()


class TestResumeRoutes:
    """CRUD routes and their status codes."""

    def test_missing_identity_is_unauthorized(self, client):
        assert client.get("/api/resumes").status_code == 401
        assert client.post("/api/import/text", json={"text": "x"}).status_code == 401

    def test_create_returns_camel_case_document(self, created, owner):
        assert created["userId"] == owner.user_id
        assert created["templateId"] == "classic"
        assert created["content"]["skills"] == ["Go"]
        assert created["content"]["personalInfo"]["fullName"] == ""
        assert "createdAt" in created and "updatedAt" in created

    def test_create_with_defaults(self, client, owner):
        response = client.post("/api/resumes", json={}, headers=auth(owner))
        assert response.status_code == 201
        assert response.json()["title"] == "Untitled Resume"
        assert response.json()["templateId"] == "modern"

    def test_list_is_scoped_to_caller(self, client, created, owner, intruder):
        assert [d["id"] for d in client.get("/api/resumes", headers=auth(owner)).json()] == [created["id"]]
        assert client.get("/api/resumes", headers=auth(intruder)).json() == []

    def test_get(self, client, created, owner):
        response = client.get(f"/api/resumes/{created['id']}", headers=auth(owner))
        assert response.status_code == 200
        assert response.json()["title"] == "CV"

    def test_get_missing(self, client, owner):
        response = client.get("/api/resumes/missing", headers=auth(owner))
        assert response.status_code == 404
        assert response.json() == {"message": "Resume not found"}

    def test_get_forbidden(self, client, created, intruder):
        response = client.get(f"/api/resumes/{created['id']}", headers=auth(intruder))
        assert response.status_code == 403

    def test_update(self, client, created, owner):
        response = client.put(
            f"/api/resumes/{created['id']}",
            json={"title": "Renamed", "content": {"personalInfo": {"fullName": "Jane"}}},
            headers=auth(owner),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renamed"
        assert body["templateId"] == "classic"
        assert body["content"]["personalInfo"]["fullName"] == "Jane"
        assert body["content"]["skills"] == []

    def test_update_invalid_content_reports_field(self, client, created, owner):
        response = client.put(
            f"/api/resumes/{created['id']}",
            json={"content": {"experience": [{"company": "NoId"}]}},
            headers=auth(owner),
        )
        assert response.status_code == 400
        assert response.json()["field"] == "experience.0.id"
        assert response.json()["message"]

    def test_update_unknown_template(self, client, created, owner):
        response = client.put(
            f"/api/resumes/{created['id']}", json={"templateId": "fancy"}, headers=auth(owner)
        )
        assert response.status_code == 400
        assert response.json()["field"] == "templateId"

    def test_update_forbidden(self, client, created, owner, intruder):
        response = client.put(
            f"/api/resumes/{created['id']}", json={"title": "Hacked"}, headers=auth(intruder)
        )
        assert response.status_code == 403
        assert client.get(f"/api/resumes/{created['id']}", headers=auth(owner)).json()["title"] == "CV"

    def test_delete(self, client, created, owner):
        response = client.delete(f"/api/resumes/{created['id']}", headers=auth(owner))
        assert response.status_code == 204
        assert client.get(f"/api/resumes/{created['id']}", headers=auth(owner)).status_code == 404

    def test_delete_forbidden_keeps_document(self, client, created, owner, intruder):
        assert client.delete(f"/api/resumes/{created['id']}", headers=auth(intruder)).status_code == 403
        assert client.get(f"/api/resumes/{created['id']}", headers=auth(owner)).status_code == 200

    def test_malformed_body_is_bad_request(self, client, owner):
        response = client.put("/api/resumes/any", json=["not", "an", "object"], headers=auth(owner))
        assert response.status_code == 400
        assert "message" in response.json()


class TestPreviewRoutes:
    """HTML preview routes."""

    def test_stored_preview(self, client, created, owner):
        response = client.get(f"/api/resumes/{created['id']}/preview", headers=auth(owner))
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "template-classic" in response.text

    def test_stored_preview_template_override(self, client, created, owner):
        response = client.get(
            f"/api/resumes/{created['id']}/preview", params={"template": "raw"}, headers=auth(owner)
        )
        assert "template-raw" in response.text

    def test_stored_preview_forbidden(self, client, created, intruder):
        response = client.get(f"/api/resumes/{created['id']}/preview", headers=auth(intruder))
        assert response.status_code == 403

    def test_draft_preview(self, client, owner):
        response = client.post(
            "/api/preview",
            json={"templateId": "modern", "content": {"personalInfo": {"fullName": "Jane Doe"}}},
            headers=auth(owner),
        )
        assert response.status_code == 200
        assert "Jane Doe" in response.text


class TestImportRoutes:
    """Magic Import routes."""

    def test_import_text(self, client, owner):
        response = client.post("/api/import/text", json={"text": REGRESSION_RESUME_TEXT}, headers=auth(owner))
        assert response.status_code == 200
        body = response.json()
        assert body["personalInfo"]["fullName"] == "Jane Doe"
        assert body["skills"] == ["Python", "Go", "Rust"]

    def test_import_pdf_file(self, client, owner, tmp_path):
        pdf = write_pdf(tmp_path / "resume.pdf", ["Jane Doe", "jane@x.com", "SKILLS", "Python, Go"])
        with open(pdf, "rb") as f:
            response = client.post(
                "/api/import/file",
                files={"file": ("resume.pdf", f, "application/pdf")},
                headers=auth(owner),
            )
        assert response.status_code == 200
        assert response.json()["skills"] == ["Python", "Go"]

    def test_import_unsupported_file(self, client, owner):
        response = client.post(
            "/api/import/file",
            files={"file": ("resume.rtf", b"{\\rtf1 Jane}", "application/rtf")},
            headers=auth(owner),
        )
        assert response.status_code == 400

    def test_import_empty_file(self, client, owner):
        response = client.post(
            "/api/import/file",
            files={"file": ("resume.txt", b"   ", "text/plain")},
            headers=auth(owner),
        )
        assert response.status_code == 400

    def test_import_oversized_file(self, client, owner, monkeypatch):
        monkeypatch.setattr(BUILDER_DEFAULTS, "MAX_FILE_SIZE_MB", 0.00001)
        response = client.post(
            "/api/import/file",
            files={"file": ("resume.txt", b"x" * 100, "text/plain")},
            headers=auth(owner),
        )
        assert response.status_code == 413

    @pytest.mark.parametrize("file_name", ["..", "."])
    def test_import_file_with_directory_name_is_rejected(self, client, owner, file_name):
        response = client.post(
            "/api/import/file",
            files={"file": (file_name, b"Jane Doe\nSKILLS\nGo", "text/plain")},
            headers=auth(owner),
        )
        assert response.status_code == 400

    def test_import_file_name_is_reduced_to_basename(self, client, owner):
        response = client.post(
            "/api/import/file",
            files={"file": ("../../resume.txt", b"Jane Doe\nSKILLS\nGo", "text/plain")},
            headers=auth(owner),
        )
        assert response.status_code == 200
        assert response.json()["skills"] == ["Go"]
