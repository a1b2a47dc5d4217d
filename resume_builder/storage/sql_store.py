"""sql_store.py

Holds SqlDocumentStore, a SQLAlchemy-backed DocumentStore.
"""
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, JSON, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from resume_builder.config import BUILDER_DEFAULTS
from resume_builder.models import ResumeContent, ResumeDocument, TemplateId
from resume_builder.storage.document_store import DocumentStore
from resume_builder.validation import serialize_content

Base = declarative_base()


class ResumeRecord(Base):
    __tablename__ = "resumes"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    title = Column(String, nullable=False)
    template_id = Column(String, nullable=False, default="modern")
    content = Column(JSON, nullable=False)
    thumbnail = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True))


def create_db_engine(database_url: str = BUILDER_DEFAULTS.DATABASE_URL) -> Engine:
    """
    Build an engine for ``database_url``. SQLite connections may be shared
    across threads (FastAPI runs sync routes in a thread pool); an in-memory
    SQLite URL uses a single shared connection so every session sees the
    same database.
    """
    if database_url.startswith("sqlite"):
        kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url)


class SqlDocumentStore(DocumentStore):
    """
    Stores each resume as one row with its content in a JSON column.

    Args:
        engine (Engine | None): SQLAlchemy engine. Built from
            ``BUILDER_DEFAULTS.DATABASE_URL`` when omitted.
    """

    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine if engine is not None else create_db_engine()
        Base.metadata.create_all(bind=self.engine)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def list_for_user(self, user_id: str) -> List[ResumeDocument]:
        with self._session_factory() as db:
            records = (
                db.query(ResumeRecord)
                .filter(ResumeRecord.user_id == user_id)
                .order_by(ResumeRecord.updated_at.desc())
                .all()
            )
            return [self._to_document(record) for record in records]

    def get(self, document_id: str) -> Optional[ResumeDocument]:
        with self._session_factory() as db:
            record = db.get(ResumeRecord, document_id)
            return self._to_document(record) if record else None

    def create(
        self,
        user_id: str,
        title: str,
        template_id: TemplateId,
        content: ResumeContent,
    ) -> ResumeDocument:
        now = self._now()
        record = ResumeRecord(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=title,
            template_id=TemplateId(template_id).value,
            content=serialize_content(content),
            created_at=now,
            updated_at=now,
        )
        with self._session_factory() as db:
            db.add(record)
            db.commit()
            return self._to_document(record)

    def update(self, document_id: str, changes: Dict[str, Any]) -> Optional[ResumeDocument]:
        with self._session_factory() as db:
            record = db.get(ResumeRecord, document_id)
            if record is None:
                return None

            for key, value in changes.items():
                if key not in self.UPDATABLE_FIELDS:
                    continue
                if key == "content":
                    value = serialize_content(value)
                elif key == "template_id":
                    value = TemplateId(value).value
                setattr(record, key, value)
            record.updated_at = self._now()

            db.commit()
            return self._to_document(record)

    def delete(self, document_id: str) -> None:
        with self._session_factory() as db:
            record = db.get(ResumeRecord, document_id)
            if record is not None:
                db.delete(record)
                db.commit()

    @staticmethod
    def _to_document(record: ResumeRecord) -> ResumeDocument:
        return ResumeDocument(
            id=record.id,
            user_id=record.user_id,
            title=record.title,
            template_id=record.template_id,
            content=ResumeContent.model_validate(record.content),
            thumbnail=record.thumbnail,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
