"""server.py
Server to launch a FastAPI / Swagger UI instance for the resume builder.
"""
import os
import tempfile
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, File, Header, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from resume_builder.config import BUILDER_DEFAULTS
from resume_builder.exceptions import (
    ContentValidationError,
    DocumentNotFoundError,
    FileParserError,
    FileTooLargeError,
    ForbiddenError,
)
from resume_builder.file_parser.extract_text import extract_text_from_file
from resume_builder.importer.text_importer import import_text
from resume_builder.logging import LoggerFactory
from resume_builder.models import ResumeDocument
from resume_builder.preview.projector import project_preview
from resume_builder.storage.service import ResumeService
from resume_builder.storage.session import Session
from resume_builder.storage.sql_store import SqlDocumentStore

logger = LoggerFactory().get_logger(
    name="api_server",
    logger_type="api",
    console=False
)

app = FastAPI(title="Resume Builder API", version="1.0")


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------
class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResumeCreateRequest(ApiModel):
    """Body of ``POST /api/resumes``. Values are validated by the service."""
    title: Any = "Untitled Resume"
    template_id: Any = BUILDER_DEFAULTS.DEFAULT_TEMPLATE_ID
    content: Any = None


class PreviewRequest(ApiModel):
    title: str = ""
    template_id: Any = BUILDER_DEFAULTS.DEFAULT_TEMPLATE_ID
    content: Any = None


class ImportTextRequest(ApiModel):
    text: Any = ""


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def _default_service() -> ResumeService:
    return ResumeService(SqlDocumentStore())


def get_service() -> ResumeService:
    """Service used by every route. Overridden in tests."""
    return _default_service()


def get_session(
    user_id: Optional[str] = Header(default=None, alias=BUILDER_DEFAULTS.USER_ID_HEADER),
) -> Session:
    """
    Identity of the caller, taken from the header set by the upstream
    identity provider.
    """
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return Session(user_id=user_id.strip())


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------
@app.exception_handler(ContentValidationError)
async def content_validation_error_handler(request: Request, exc: ContentValidationError):
    return JSONResponse(status_code=400, content={"message": exc.message, "field": exc.field_path})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    # Drop the leading "body"/"query" location
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    return JSONResponse(
        status_code=400,
        content={"message": first.get("msg", "Invalid request"), "field": field},
    )


@app.exception_handler(DocumentNotFoundError)
async def not_found_error_handler(request: Request, exc: DocumentNotFoundError):
    return JSONResponse(status_code=404, content={"message": "Resume not found"})


@app.exception_handler(ForbiddenError)
async def forbidden_error_handler(request: Request, exc: ForbiddenError):
    return JSONResponse(status_code=403, content={"message": "Forbidden"})


@app.exception_handler(FileParserError)
async def file_parser_error_handler(request: Request, exc: FileParserError):
    status_code = 413 if isinstance(exc, FileTooLargeError) else 400
    return JSONResponse(status_code=status_code, content={"message": str(exc)})


# ---------------------------------------------------------------------------
# Resumes
# ---------------------------------------------------------------------------
@app.get("/api/resumes", response_model=List[ResumeDocument], summary="List the caller's resumes")
def list_resumes(
    session: Session = Depends(get_session),
    service: ResumeService = Depends(get_service),
) -> List[ResumeDocument]:
    return service.list(session)


@app.post(
    "/api/resumes",
    response_model=ResumeDocument,
    status_code=201,
    summary="Create a resume",
)
def create_resume(
    body: ResumeCreateRequest,
    session: Session = Depends(get_session),
    service: ResumeService = Depends(get_service),
) -> ResumeDocument:
    return service.create(session, body.title, body.template_id, body.content)


@app.get("/api/resumes/{resume_id}", response_model=ResumeDocument, summary="Fetch one resume")
def get_resume(
    resume_id: str,
    session: Session = Depends(get_session),
    service: ResumeService = Depends(get_service),
) -> ResumeDocument:
    return service.get(session, resume_id)


@app.put(
    "/api/resumes/{resume_id}",
    response_model=ResumeDocument,
    summary="Partially update a resume",
    description="Accepts any of `title`, `templateId`, `content`, `thumbnail`.",
)
def update_resume(
    resume_id: str,
    changes: Dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
    service: ResumeService = Depends(get_service),
) -> ResumeDocument:
    return service.update(session, resume_id, changes)


@app.delete("/api/resumes/{resume_id}", status_code=204, summary="Delete a resume")
def delete_resume(
    resume_id: str,
    session: Session = Depends(get_session),
    service: ResumeService = Depends(get_service),
) -> Response:
    service.delete(session, resume_id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------
@app.get(
    "/api/resumes/{resume_id}/preview",
    response_class=HTMLResponse,
    summary="Render a stored resume",
)
def preview_resume(
    resume_id: str,
    template: Optional[str] = None,
    session: Session = Depends(get_session),
    service: ResumeService = Depends(get_service),
) -> HTMLResponse:
    """Render with the stored template, or ``template`` when given."""
    document = service.get(session, resume_id)
    render = project_preview(
        document.content,
        template or document.template_id,
        title=document.title,
    )
    return HTMLResponse(render.html)


@app.post("/api/preview", response_class=HTMLResponse, summary="Render an unsaved draft")
def preview_draft(
    body: PreviewRequest,
    session: Session = Depends(get_session),
) -> HTMLResponse:
    render = project_preview(body.content, body.template_id, title=body.title)
    return HTMLResponse(render.html)


# ---------------------------------------------------------------------------
# Magic Import
# ---------------------------------------------------------------------------
@app.post("/api/import/text", summary="Turn pasted resume text into partial content")
def import_resume_text(
    body: ImportTextRequest,
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    return import_text(body.text)


@app.post(
    "/api/import/file",
    summary="Turn an uploaded resume file into partial content",
    description="Uploads a resume (PDF, DOCX or TXT), extracts its text and runs Magic Import on it.",
)
async def import_resume_file(
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    # ---- Validate file size ----
    contents = await file.read()
    max_bytes = BUILDER_DEFAULTS.MAX_FILE_SIZE_MB * 1024 * 1024
    if len(contents) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Max allowed size is {BUILDER_DEFAULTS.MAX_FILE_SIZE_MB} MB.",
        )

    # ---- Save to a temp directory and extract ----
    file_name = os.path.basename(file.filename or "")
    if file_name in ("", ".", ".."):
        file_name = "upload"
    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = os.path.join(temp_dir, file_name)
        with open(temp_path, "wb") as f:
            f.write(contents)

        text = extract_text_from_file(temp_path)

    logger.info(f"Imported '{file_name}' for user '{session.user_id}'")
    return import_text(text)
