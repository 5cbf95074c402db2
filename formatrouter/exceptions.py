"""Custom exceptions for formatrouter."""

from typing import Any


class FormatRouterError(Exception):
    """Base exception for all formatrouter errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(FormatRouterError):
    """Configuration-related errors."""

    pass


class RegistryFrozenError(ConfigurationError):
    """Backend registered after the capability index was built."""

    def __init__(self, backend: str) -> None:
        super().__init__(
            f"Cannot register backend {backend}: registry is frozen",
            backend=backend,
        )


class UnsupportedConversionError(FormatRouterError):
    """No registered backend can service the requested conversion."""

    def __init__(self, source_extension: str, target_extension: str) -> None:
        super().__init__(
            f"No available converter supports converting from {source_extension} "
            f"to {target_extension}",
            source_extension=source_extension,
            target_extension=target_extension,
        )


class BackendNotFoundError(UnsupportedConversionError):
    """Explicitly requested backend is not registered."""

    def __init__(self, backend: str, source_extension: str, target_extension: str) -> None:
        FormatRouterError.__init__(
            self,
            f"Backend not registered: {backend}",
            backend=backend,
            source_extension=source_extension,
            target_extension=target_extension,
        )


class AdapterExecutionError(FormatRouterError):
    """External conversion tool reported a failure."""

    def __init__(
        self,
        backend: str,
        details: str,
        returncode: int | None = None,
    ) -> None:
        super().__init__(
            f"Backend {backend} failed: {details}",
            backend=backend,
            details=details,
            returncode=returncode,
        )


class ReconciliationError(FormatRouterError):
    """Base class for output reconciliation errors.

    These are fatal to the enclosing batch chunk.
    """

    pass


class NoOutputGeneratedError(ReconciliationError):
    """Backend finished but produced no recognisable output."""

    def __init__(self, file_name: str) -> None:
        super().__init__(
            f"No output files generated for {file_name}", file_name=file_name
        )


class ZipMemoryLimitExceededError(ReconciliationError):
    """Frames are too large to bundle into a single archive."""

    def __init__(self, total_bytes: int, limit_bytes: int) -> None:
        super().__init__(
            f"Total frame size ({round(total_bytes / 1024 / 1024)} MB) exceeds the "
            f"{round(limit_bytes / 1024 / 1024)} MB zip memory limit",
            total_bytes=total_bytes,
            limit_bytes=limit_bytes,
        )


class PathTraversalError(ReconciliationError):
    """Computed write path escapes the output directory."""

    def __init__(self, path: str, output_dir: str) -> None:
        super().__init__(
            f"Path traversal detected: {path} escapes output directory",
            path=path,
            output_dir=output_dir,
        )


class ArchiveCreationError(ReconciliationError):
    """Writing the frame archive failed."""

    def __init__(self, archive_name: str, details: str) -> None:
        super().__init__(
            f"Failed to create zip for {archive_name}: {details}",
            archive_name=archive_name,
            details=details,
        )
