"""Tests for result sinks and the results table."""

import asyncio
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine

from formatrouter.config import Settings
from formatrouter.db import (
    create_engine,
    create_session_factory,
    dispose_engine,
    get_session,
    init_db,
)
from formatrouter.results import CollectingResultSink, DatabaseResultSink
from formatrouter.results.models import FileNameRecord


@pytest.fixture
def sqlite_settings(tmp_path) -> Settings:
    """Settings pointing at a SQLite file in a temporary directory."""
    return Settings(results_db_url=f"sqlite:///{tmp_path / 'db' / 'results.db'}")


@pytest.fixture
async def engine(sqlite_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_engine(sqlite_settings)
    await init_db(engine)
    yield engine
    await dispose_engine(engine)


async def fetch_records(engine: AsyncEngine) -> list[FileNameRecord]:
    async with get_session(create_session_factory(engine)) as session:
        result = await session.execute(select(FileNameRecord).order_by(FileNameRecord.id))
        return list(result.scalars())


class TestEngine:
    """Tests for engine creation."""

    def test_sqlite_uses_aiosqlite(self, sqlite_settings, tmp_path):
        engine = create_engine(sqlite_settings)

        assert "aiosqlite" in str(engine.url)
        assert (tmp_path / "db").is_dir()

    def test_postgresql_uses_asyncpg(self):
        pytest.importorskip("asyncpg")
        settings = Settings(results_db_url="postgresql://u:p@localhost:5432/results")

        engine = create_engine(settings)

        assert engine.url.drivername == "postgresql+asyncpg"


class TestDatabaseResultSink:
    """Tests for DatabaseResultSink."""

    @pytest.mark.asyncio
    async def test_record_appends_row(self, engine):
        sink = DatabaseResultSink(create_session_factory(engine))

        await sink.record("job-1", "deck.pptx", "deck.zip", "Done")

        records = await fetch_records(engine)
        assert [(r.job_id, r.file_name, r.output_file_name, r.status) for r in records] == [
            ("job-1", "deck.pptx", "deck.zip", "Done")
        ]
        assert records[0].created_at is not None

    @pytest.mark.asyncio
    async def test_concurrent_records(self, engine):
        """Test that concurrent writers all land in the table."""
        sink = DatabaseResultSink(create_session_factory(engine))

        await asyncio.gather(
            *(sink.record("job-1", f"f{i}.docx", f"f{i}.pdf", "Done") for i in range(10))
        )

        records = await fetch_records(engine)
        assert sorted(r.file_name for r in records) == sorted(f"f{i}.docx" for i in range(10))

    @pytest.mark.asyncio
    async def test_duplicates_are_appended(self, engine):
        """Test that the same file may be recorded twice for a job."""
        sink = DatabaseResultSink(create_session_factory(engine))

        await sink.record("job-1", "a.docx", "a.pdf", "Failed, check logs")
        await sink.record("job-1", "a.docx", "a.pdf", "Done")

        assert [r.status for r in await fetch_records(engine)] == [
            "Failed, check logs",
            "Done",
        ]


class TestCollectingResultSink:
    """Tests for CollectingResultSink."""

    @pytest.mark.asyncio
    async def test_collects_and_forwards(self, engine):
        collector = CollectingResultSink(DatabaseResultSink(create_session_factory(engine)))

        await collector.record("job-1", "a.docx", "a.pdf", "Done")

        assert [r.source_file_name for r in collector.results] == ["a.docx"]
        assert len(await fetch_records(engine)) == 1

    @pytest.mark.asyncio
    async def test_without_inner_sink(self):
        collector = CollectingResultSink()

        await collector.record("job-1", "a.docx", "a.pdf", "Done")

        assert collector.results[0].status == "Done"
