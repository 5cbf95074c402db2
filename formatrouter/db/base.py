"""Engine setup for the results database."""

from pathlib import Path

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from formatrouter.config import Settings

logger = structlog.get_logger(__name__)

_ASYNC_DRIVERS = {
    "sqlite": "sqlite+aiosqlite",
    "postgresql": "postgresql+asyncpg",
}


class Base(DeclarativeBase):
    """Declarative base for result tables."""


def async_url(url: str) -> str:
    """Swap a plain ``sqlite://`` or ``postgresql://`` scheme for its async driver."""
    scheme, separator, rest = url.partition("://")
    if not separator:
        raise ValueError(f"Unsupported database URL: {url}")
    if "+" in scheme:
        return url
    driver = _ASYNC_DRIVERS.get(scheme)
    if driver is None:
        raise ValueError(f"Unsupported database URL: {url}")
    return f"{driver}://{rest}"


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine results are written through.

    SQLite databases get their parent directory created and a NullPool,
    since every batch opens and disposes its own engine.

    Args:
        settings: Application settings with ``results_db_url``

    Returns:
        Configured async engine

    Raises:
        ValueError: If the URL is neither SQLite nor PostgreSQL
    """
    url = async_url(settings.results_db_url)
    logger.info(
        "results_engine_created",
        database_type="sqlite" if settings.is_sqlite else "postgresql",
        url=url.split("@")[-1],
    )

    if settings.is_sqlite:
        db_path = url.split("///", 1)[-1] if "///" in url else ""
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        return create_async_engine(
            url,
            poolclass=NullPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(url, pool_pre_ping=True)


async def init_db(engine: AsyncEngine) -> None:
    """Create the results tables if they do not exist."""
    import formatrouter.results.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.debug("results_schema_ready")


async def dispose_engine(engine: AsyncEngine) -> None:
    await engine.dispose()
