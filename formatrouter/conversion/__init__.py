"""Conversion routing core for formatrouter.

This module provides backend capability indexing, converter selection,
batch orchestration with bounded concurrency, and reconciliation of
backend output into a single named artifact.
"""

from formatrouter.conversion.descriptor import CapabilityDescriptor
from formatrouter.conversion.normalize import (
    normalize_filetype,
    normalize_output_filetype,
)
from formatrouter.conversion.registry import (
    BackendEntry,
    BackendRegistry,
    CapabilityIndex,
    build_index,
)
from formatrouter.conversion.result import (
    ConversionOutcome,
    ConversionTask,
    FileResult,
    OutcomeKind,
    TaskStatus,
)
from formatrouter.conversion.selection import ConverterSelector

__all__ = [
    "BackendEntry",
    "BackendRegistry",
    "CapabilityDescriptor",
    "CapabilityIndex",
    "ConversionOutcome",
    "ConversionTask",
    "ConverterSelector",
    "FileResult",
    "OutcomeKind",
    "TaskStatus",
    "build_index",
    "normalize_filetype",
    "normalize_output_filetype",
]
