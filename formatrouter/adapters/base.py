"""Base class for conversion backend adapters."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar, Optional

from formatrouter.conversion.descriptor import CapabilityDescriptor


class ConverterAdapter(ABC):
    """Uniform interface around one external conversion tool."""

    descriptor: ClassVar[CapabilityDescriptor]

    def __init__(self, timeout_seconds: Optional[float] = None):
        """Initialize the adapter.

        Args:
            timeout_seconds: Optional limit for one tool run
        """
        self.timeout_seconds = timeout_seconds

    @property
    def name(self) -> str:
        return self.descriptor.name

    @abstractmethod
    async def convert(
        self,
        input_path: Path,
        source_extension: str,
        target_extension: str,
        target_path: Path,
        options: Optional[dict[str, Any]] = None,
    ) -> str:
        """Convert ``input_path`` and write the result at or near ``target_path``.

        The output directory exists. The adapter may write numbered frames
        (``<stem>-<n>.<ext>``) instead of ``target_path`` itself.

        Args:
            input_path: Source file
            source_extension: Normalized source extension
            target_extension: Requested target extension
            target_path: Expected output path
            options: Backend-specific options

        Returns:
            str: Short human-readable status text

        Raises:
            AdapterExecutionError: If the tool fails
        """
        pass
