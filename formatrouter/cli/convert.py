"""Conversion commands for formatrouter."""

import asyncio
import uuid
from pathlib import Path
from typing import Optional

import typer

from formatrouter.adapters import default_registry
from formatrouter.cli.main import state
from formatrouter.cli.output import (
    print_error,
    print_rows,
    print_success,
    print_warning,
)
from formatrouter.config import get_settings
from formatrouter.conversion.orchestrator import BatchOrchestrator
from formatrouter.conversion.result import FileResult
from formatrouter.db import create_engine, create_session_factory, dispose_engine, init_db
from formatrouter.exceptions import FormatRouterError
from formatrouter.logging_config import get_logger
from formatrouter.results import CollectingResultSink, DatabaseResultSink

logger = get_logger(__name__)


def convert(
    files: list[str] = typer.Argument(..., help="File names inside the uploads directory"),
    to: str = typer.Option(..., "--to", "-t", help="Target extension"),
    backend: Optional[str] = typer.Option(
        None, "--backend", "-b", help="Use this backend instead of automatic selection"
    ),
    uploads_dir: Optional[Path] = typer.Option(
        None, "--uploads-dir", help="Directory holding the files (default from config)"
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", help="Directory to write results to (default from config)"
    ),
    job_id: Optional[str] = typer.Option(
        None, "--job-id", help="Job identifier results are recorded under"
    ),
    no_record: bool = typer.Option(
        False, "--no-record", help="Do not write results to the results database"
    ),
) -> None:
    """Convert files and record one result per file."""
    settings = get_settings()
    job_id = job_id or uuid.uuid4().hex
    collector = CollectingResultSink()

    async def _convert() -> list[FileResult]:
        engine = None
        if not no_record:
            engine = create_engine(settings)
            await init_db(engine)
            collector.inner = DatabaseResultSink(create_session_factory(engine))

        try:
            orchestrator = BatchOrchestrator(
                default_registry(settings),
                collector,
                chunk_size=settings.max_convert_process,
            )
            return await orchestrator.run(
                files,
                uploads_dir or settings.uploads_dir,
                output_dir or settings.output_dir,
                to,
                backend_override=backend,
                job_id=job_id,
            )
        finally:
            if engine is not None:
                await dispose_engine(engine)

    try:
        results = asyncio.run(_convert())
    except FormatRouterError as e:
        logger.warning(
            "batch_aborted",
            job_id=job_id,
            recorded=len(collector.results),
            requested=len(files),
            error=e.message,
        )
        print_error(f"Batch aborted: {e.message}")
        print_warning(
            f"{len(collector.results)} of {len(files)} file(s) recorded for job {job_id}"
        )
        raise typer.Exit(1)

    if state.quiet:
        return

    print_rows(
        [result.as_dict() for result in results],
        state.output_format,
        title=f"Job {job_id}",
    )
    succeeded = sum(1 for result in results if result.outcome.succeeded)
    if state.output_format == "table":
        print_success(f"{succeeded} of {len(files)} file(s) converted")


def targets(
    extension: str = typer.Argument(..., help="Source extension, e.g. docx"),
) -> None:
    """List target extensions reachable from a source extension."""
    registry = default_registry(get_settings())
    possible = registry.possible_targets(extension)

    if not possible:
        print_warning(f"No backend accepts .{extension} files")
        return

    print_rows(
        [
            {"backend": name, "targets": ", ".join(extensions)}
            for name, extensions in possible.items()
        ],
        state.output_format,
        title=f"Targets for .{extension}",
    )


def backends() -> None:
    """List registered backends in priority order."""
    registry = default_registry(get_settings())

    print_rows(
        [
            {
                "priority": priority,
                "backend": entry.name,
                "inputs": len(registry.all_inputs(entry.name)),
                "targets": len(registry.all_targets().get(entry.name, [])),
                "reason": entry.reason,
            }
            for priority, entry in enumerate(registry, start=1)
        ],
        state.output_format,
        title="Backends",
    )
