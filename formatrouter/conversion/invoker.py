"""Adapter invocation and error translation for single files."""

from typing import Any, Optional

import structlog

from formatrouter.conversion.result import (
    DEFAULT_SUCCESS_STATUS,
    ConversionOutcome,
    ConversionTask,
)
from formatrouter.conversion.selection import ConverterSelector
from formatrouter.exceptions import UnsupportedConversionError

logger = structlog.get_logger(__name__)


class AdapterInvoker:
    """Selects a backend for a task and runs it.

    Every failure is turned into a :class:`ConversionOutcome`; nothing
    raised by a backend escapes :meth:`invoke`.
    """

    def __init__(self, selector: ConverterSelector):
        self.selector = selector

    async def invoke(
        self,
        task: ConversionTask,
        options: Optional[dict[str, Any]] = None,
    ) -> ConversionOutcome:
        """Run the backend for ``task``.

        Args:
            task: Task describing input, target and optional backend override
            options: Backend options, passed through untouched

        Returns:
            ConversionOutcome: Success with the adapter's status text,
            unsupported, or failure
        """
        try:
            entry = self.selector.select(
                task.resolved_source_extension,
                task.target_extension,
                task.chosen_backend,
            )
        except UnsupportedConversionError as e:
            logger.info(
                "conversion_unsupported",
                file_name=task.source_file_name,
                source_extension=task.resolved_source_extension,
                target_extension=task.target_extension,
                backend=task.chosen_backend,
            )
            return ConversionOutcome.unsupported(str(e), backend=task.chosen_backend)

        try:
            result = await entry.adapter.convert(
                task.input_path,
                task.resolved_source_extension,
                task.target_extension,
                task.target_path,
                options,
            )
        except Exception as e:
            logger.error(
                "conversion_failed",
                input_path=str(task.input_path),
                source_extension=task.resolved_source_extension,
                target_extension=task.target_extension,
                backend=entry.name,
                error_type=type(e).__name__,
                error=str(e),
                exc_info=True,
            )
            return ConversionOutcome.failure(entry.name, str(e))

        logger.info(
            "conversion_succeeded",
            input_path=str(task.input_path),
            source_extension=task.resolved_source_extension,
            target_extension=task.target_extension,
            backend=entry.name,
            result=result,
        )

        if isinstance(result, str):
            return ConversionOutcome.success(entry.name, result)
        return ConversionOutcome.success(entry.name, DEFAULT_SUCCESS_STATUS)
