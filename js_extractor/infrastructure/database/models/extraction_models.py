"""SQLAlchemy ORM models for extraction jobs and downloaded script files."""

import uuid

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)

from js_extractor.infrastructure.database.base import Base


def _generate_uuid() -> str:
    return str(uuid.uuid4())


class ExtractionJobModel(Base):
    """One extraction run for a requested page."""

    __tablename__ = "extraction_jobs"

    id = Column(String(36), primary_key=True, default=_generate_uuid)
    url = Column(Text, nullable=False)
    domain = Column(String(255), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    total_files = Column(Integer, nullable=False, default=0)
    successful_files = Column(Integer, nullable=False, default=0)
    failed_files = Column(Integer, nullable=False, default=0)
    total_size = Column(Integer, nullable=False, default=0)  # bytes
    logs = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)


class ScriptFileModel(Base):
    """Outcome of one script download attempt."""

    __tablename__ = "script_files"

    id = Column(String(36), primary_key=True, default=_generate_uuid)
    job_id = Column(
        String(36),
        ForeignKey("extraction_jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    original_url = Column(Text, nullable=False)
    filename = Column(String(500), nullable=False)
    size = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False)  # "success" | "failed" | "timeout"
    error_message = Column(Text, nullable=True)
    downloaded_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    # Insertion order within a job; timestamps alone can tie.
    sequence = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_script_files_job_sequence", "job_id", "sequence"),
    )
