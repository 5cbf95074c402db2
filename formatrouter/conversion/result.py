"""Result models for conversion tasks."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

UNSUPPORTED_STATUS = "File type not supported"
FAILED_STATUS = "Failed, check logs"
DEFAULT_SUCCESS_STATUS = "Done"


class OutcomeKind(str, Enum):
    """How an adapter invocation ended."""

    SUCCEEDED = "succeeded"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


class TaskStatus(str, Enum):
    """Lifecycle state of a single file in a batch."""

    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ConversionOutcome:
    """Typed result of selecting and running a backend for one file.

    ``status_text`` is what gets recorded for the file; ``kind`` and
    ``error_message`` keep the reason inspectable.
    """

    kind: OutcomeKind
    status_text: str
    backend: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.kind is OutcomeKind.SUCCEEDED

    @classmethod
    def success(cls, backend: str, status_text: str = DEFAULT_SUCCESS_STATUS) -> "ConversionOutcome":
        return cls(OutcomeKind.SUCCEEDED, status_text, backend=backend)

    @classmethod
    def unsupported(cls, error_message: str, backend: Optional[str] = None) -> "ConversionOutcome":
        return cls(
            OutcomeKind.UNSUPPORTED,
            UNSUPPORTED_STATUS,
            backend=backend,
            error_message=error_message,
        )

    @classmethod
    def failure(cls, backend: str, error_message: str) -> "ConversionOutcome":
        return cls(
            OutcomeKind.FAILED,
            FAILED_STATUS,
            backend=backend,
            error_message=error_message,
        )


@dataclass
class ConversionTask:
    """One input file of a batch and where its output should land."""

    source_file_name: str
    input_path: Path
    original_extension: str
    resolved_source_extension: str
    target_extension: str
    target_file_name: str
    target_path: Path
    chosen_backend: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING

    def apply(self, outcome: ConversionOutcome) -> None:
        """Move the task status to match an adapter outcome."""
        if outcome.kind is OutcomeKind.SUCCEEDED:
            self.status = TaskStatus.DONE
        elif outcome.kind is OutcomeKind.UNSUPPORTED:
            self.status = TaskStatus.UNSUPPORTED
        else:
            self.status = TaskStatus.FAILED


@dataclass(frozen=True)
class FileResult:
    """Result recorded for one file of a batch."""

    job_id: Optional[str]
    source_file_name: str
    output_file_name: str
    status: str
    outcome: ConversionOutcome

    def as_dict(self) -> dict[str, object]:
        return {
            "job_id": self.job_id,
            "file_name": self.source_file_name,
            "output_file_name": self.output_file_name,
            "status": self.status,
            "outcome": self.outcome.kind.value,
            "backend": self.outcome.backend,
        }
