"""SQLAlchemy ORM models for recorded file results."""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from formatrouter.db.base import Base


class FileNameRecord(Base):
    """
    One converted file of a job.

    Rows are only ever appended; the converter never reads them back.
    """

    __tablename__ = "file_names"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    job_id: Mapped[str] = mapped_column(
        String(64), nullable=False, comment="Job the file belongs to"
    )

    file_name: Mapped[str] = mapped_column(
        String(512), nullable=False, comment="Uploaded source file name"
    )

    output_file_name: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
        comment="Name of the produced file or frame archive",
    )

    status: Mapped[str] = mapped_column(
        String(255), nullable=False, comment="Status text reported for the file"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=func.now(),
        nullable=False,
        comment="Timestamp when the result was recorded",
    )

    __table_args__ = (Index("idx_file_names_job_id", "job_id"),)

    def __repr__(self) -> str:
        return (
            f"<FileNameRecord(job_id={self.job_id!r}, file_name={self.file_name!r}, "
            f"status={self.status!r})>"
        )
