"""Result sinks: append-only destinations for per-file results."""

import asyncio
from dataclasses import dataclass
from typing import Optional, Protocol

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from formatrouter.db.session import get_session
from formatrouter.results.models import FileNameRecord

logger = structlog.get_logger(__name__)


class ResultSink(Protocol):
    async def record(
        self,
        job_id: str,
        source_file_name: str,
        output_file_name: str,
        status: str,
    ) -> None:
        """Append the result for one file of a job."""


class DatabaseResultSink:
    """Appends results to the ``file_names`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        # SQLite allows a single writer
        self._lock = asyncio.Lock()

    async def record(
        self,
        job_id: str,
        source_file_name: str,
        output_file_name: str,
        status: str,
    ) -> None:
        async with self._lock:
            async with get_session(self.session_factory) as session:
                session.add(
                    FileNameRecord(
                        job_id=job_id,
                        file_name=source_file_name,
                        output_file_name=output_file_name,
                        status=status,
                    )
                )
        logger.debug(
            "file_result_recorded",
            job_id=job_id,
            file_name=source_file_name,
            output_file_name=output_file_name,
            status=status,
        )


@dataclass(frozen=True)
class RecordedResult:
    job_id: str
    source_file_name: str
    output_file_name: str
    status: str


class CollectingResultSink:
    """Keeps every recorded result in memory and forwards it to ``inner``.

    Lets callers compare the number of recorded files with the number
    requested after a batch was aborted.
    """

    def __init__(self, inner: Optional[ResultSink] = None):
        self.inner = inner
        self.results: list[RecordedResult] = []

    async def record(
        self,
        job_id: str,
        source_file_name: str,
        output_file_name: str,
        status: str,
    ) -> None:
        if self.inner is not None:
            await self.inner.record(job_id, source_file_name, output_file_name, status)
        self.results.append(
            RecordedResult(job_id, source_file_name, output_file_name, status)
        )
