"""Batch orchestration: run conversions chunk by chunk."""

import asyncio
from pathlib import Path
from typing import Any, Optional, Sequence, TypeVar

import structlog

from formatrouter.conversion.invoker import AdapterInvoker
from formatrouter.conversion.normalize import (
    normalize_filetype,
    normalize_output_filetype,
)
from formatrouter.conversion.reconciler import MAX_ZIP_BYTES, OutputReconciler
from formatrouter.conversion.registry import BackendRegistry
from formatrouter.conversion.result import ConversionTask, FileResult
from formatrouter.conversion.selection import ConverterSelector
from formatrouter.exceptions import ReconciliationError
from formatrouter.logging_config import job_context, log_error
from formatrouter.results.sink import ResultSink

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def chunks(items: Sequence[T], size: int) -> list[list[T]]:
    """Split ``items`` into lists of ``size``; ``size <= 0`` keeps one list."""
    if size <= 0:
        return [list(items)]
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def replace_last(text: str, old: str, new: str) -> str:
    """Replace the last occurrence of ``old`` in ``text``."""
    head, separator, tail = text.rpartition(old)
    if not separator:
        return text
    return f"{head}{new}{tail}"


class BatchOrchestrator:
    """Runs a batch of conversions with bounded concurrency.

    Files are processed in chunks of ``chunk_size``. All files of a chunk
    run concurrently and the next chunk starts only once every file of the
    current one has finished.

    Backend failures are recorded per file and never stop the batch.
    Reconciliation errors are raised once the chunk has settled; later
    chunks are not run and the failing file has no recorded result.
    """

    def __init__(
        self,
        registry: BackendRegistry,
        sink: Optional[ResultSink] = None,
        chunk_size: int = 0,
        max_archive_bytes: int = MAX_ZIP_BYTES,
    ):
        """Initialize the orchestrator.

        Args:
            registry: Backend registry; frozen on construction
            sink: Where file results are recorded
            chunk_size: Files converted concurrently (<= 0 means all at once)
            max_archive_bytes: Ceiling on bundled frame size
        """
        self.registry = registry
        self.index = registry.freeze()
        self.sink = sink
        self.chunk_size = chunk_size
        self.max_archive_bytes = max_archive_bytes
        self.invoker = AdapterInvoker(ConverterSelector(registry))

    def build_task(
        self,
        file_name: str,
        uploads_dir: Path,
        output_dir: Path,
        target_extension: str,
        backend_override: Optional[str] = None,
    ) -> ConversionTask:
        """Derive input/output paths and extensions for one file."""
        original_extension = file_name.split(".")[-1]
        target_file_name = replace_last(
            file_name,
            original_extension,
            normalize_output_filetype(target_extension),
        )
        return ConversionTask(
            source_file_name=file_name,
            input_path=Path(uploads_dir) / file_name,
            original_extension=original_extension,
            resolved_source_extension=normalize_filetype(original_extension),
            target_extension=target_extension,
            target_file_name=target_file_name,
            target_path=Path(output_dir) / target_file_name,
            chosen_backend=backend_override or None,
        )

    async def run(
        self,
        file_names: Sequence[str],
        uploads_dir: Path,
        output_dir: Path,
        target_extension: str,
        backend_override: Optional[str] = None,
        job_id: Optional[str] = None,
        options: Optional[dict[str, Any]] = None,
    ) -> list[FileResult]:
        """Convert ``file_names`` from ``uploads_dir`` into ``output_dir``.

        Args:
            file_names: Names of files inside ``uploads_dir``
            uploads_dir: Directory holding the inputs
            output_dir: Directory to write outputs into (created if missing)
            target_extension: Requested target extension
            backend_override: Backend to use instead of index-based selection
            job_id: Identifier results are recorded under; nothing is
                recorded when empty
            options: Backend options, passed through untouched

        Returns:
            list[FileResult]: One result per file that reached recording

        Raises:
            ReconciliationError: If output reconciliation failed for a file
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        reconciler = OutputReconciler(output_dir, self.max_archive_bytes)
        batch = chunks(list(file_names), self.chunk_size)

        with job_context(job_id):
            logger.info(
                "batch_started",
                files=len(file_names),
                chunks=len(batch),
                target_extension=target_extension,
                backend=backend_override,
            )

            results: list[FileResult] = []
            for number, chunk in enumerate(batch, start=1):
                tasks = [
                    self.build_task(
                        file_name, uploads_dir, output_dir, target_extension, backend_override
                    )
                    for file_name in chunk
                ]
                settled = await asyncio.gather(
                    *(self._process(task, reconciler, job_id, options) for task in tasks),
                    return_exceptions=True,
                )

                error: Optional[BaseException] = None
                for task, outcome in zip(tasks, settled):
                    if isinstance(outcome, BaseException):
                        operation = (
                            "reconcile_output"
                            if isinstance(outcome, ReconciliationError)
                            else "process_file"
                        )
                        log_error(
                            logger,
                            outcome,
                            operation,
                            exc_info=outcome,
                            file_name=task.source_file_name,
                            chunk=number,
                        )
                        error = error or outcome
                    else:
                        results.append(outcome)

                if error is not None:
                    raise error

                logger.debug("chunk_completed", chunk=number, files=len(chunk))

            logger.info("batch_completed", files=len(results))
            return results

    async def _process(
        self,
        task: ConversionTask,
        reconciler: OutputReconciler,
        job_id: Optional[str],
        options: Optional[dict[str, Any]],
    ) -> FileResult:
        outcome = await self.invoker.invoke(task, options)
        task.apply(outcome)

        output_file_name = task.target_file_name
        if outcome.succeeded:
            output_file_name = await reconciler.reconcile(
                task.target_path, task.target_file_name
            )

        result = FileResult(
            job_id=job_id,
            source_file_name=task.source_file_name,
            output_file_name=output_file_name,
            status=outcome.status_text,
            outcome=outcome,
        )
        if job_id and self.sink is not None:
            await self.sink.record(
                job_id, task.source_file_name, output_file_name, outcome.status_text
            )
        return result
