"""service.py
Owner-scoped resume operations with server-side validation.
"""
from typing import Any, Dict, List, Optional

from resume_builder.exceptions import (
    ContentValidationError,
    DocumentNotFoundError,
    ForbiddenError,
)
from resume_builder.logging import LoggerFactory
from resume_builder.models import ResumeDocument
from resume_builder.storage.document_store import DocumentStore
from resume_builder.storage.session import Session
from resume_builder.validation import validate_content, validate_template_id

logger = LoggerFactory().get_logger(
    name="resume_service",
    logger_type="api",
    console=False
)


class ResumeService:
    """
    Enforces ownership and re-validates content on top of a DocumentStore.

    Every id-scoped call checks existence first (``DocumentNotFoundError``)
    and ownership second (``ForbiddenError``). Client-side validation is
    never trusted: ``create`` and ``update`` validate content and template
    id again before anything is written.

    Args:
        store (DocumentStore): Backing store.
    """

    # Wire name -> DocumentStore attribute
    UPDATE_FIELDS = {
        "title": "title",
        "templateId": "template_id",
        "content": "content",
        "thumbnail": "thumbnail",
    }

    def __init__(self, store: DocumentStore):
        self.store = store

    def list(self, session: Session) -> List[ResumeDocument]:
        return self.store.list_for_user(session.user_id)

    def get(self, session: Session, document_id: str) -> ResumeDocument:
        """
        Raises:
            DocumentNotFoundError: If no document has ``document_id``.
            ForbiddenError: If the document belongs to another user.
        """
        document = self.store.get(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        if document.user_id != session.user_id:
            logger.warning(
                f"User '{session.user_id}' attempted to access resume '{document_id}'"
            )
            raise ForbiddenError(document_id, session.user_id)
        return document

    def create(
        self,
        session: Session,
        title: str = "Untitled Resume",
        template_id: str = "modern",
        content: Optional[Any] = None,
    ) -> ResumeDocument:
        """
        Create a document owned by ``session``.

        Raises:
            ContentValidationError: If title, template id or content is invalid.
        """
        validated_title = self._validate_title(title)
        validated_template = validate_template_id(template_id)
        validated_content = validate_content(content if content is not None else {})

        document = self.store.create(
            user_id=session.user_id,
            title=validated_title,
            template_id=validated_template,
            content=validated_content,
        )
        logger.info(f"Created resume '{document.id}' for user '{session.user_id}'")
        return document

    def update(
        self,
        session: Session,
        document_id: str,
        changes: Dict[str, Any],
    ) -> ResumeDocument:
        """
        Partially update a document. Accepted keys: ``title``, ``templateId``,
        ``content``, ``thumbnail``. ``updatedAt`` is refreshed by the store.

        Raises:
            DocumentNotFoundError: If no document has ``document_id``.
            ForbiddenError: If the document belongs to another user.
            ContentValidationError: If any change is invalid. Nothing is written.
        """
        self.get(session, document_id)

        validated: Dict[str, Any] = {}
        for key, value in changes.items():
            if key not in self.UPDATE_FIELDS:
                raise ContentValidationError(key, "Unknown field")
            if key == "title":
                value = self._validate_title(value)
            elif key == "templateId":
                value = validate_template_id(value)
            elif key == "content":
                value = validate_content(value)
            elif key == "thumbnail" and value is not None and not isinstance(value, str):
                raise ContentValidationError("thumbnail", "Thumbnail must be a string")
            validated[self.UPDATE_FIELDS[key]] = value

        document = self.store.update(document_id, validated)
        if document is None:
            # Deleted between the ownership check and the write
            raise DocumentNotFoundError(document_id)
        return document

    def delete(self, session: Session, document_id: str) -> None:
        """
        Hard delete.

        Raises:
            DocumentNotFoundError: If no document has ``document_id``.
            ForbiddenError: If the document belongs to another user. The store
                is left unchanged.
        """
        self.get(session, document_id)
        self.store.delete(document_id)
        logger.info(f"Deleted resume '{document_id}' for user '{session.user_id}'")

    @staticmethod
    def _validate_title(title: Any) -> str:
        if not isinstance(title, str):
            raise ContentValidationError("title", "Title must be a string")
        return title
