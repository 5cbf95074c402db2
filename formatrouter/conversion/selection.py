"""Converter selection: pick the backend for one conversion."""

from typing import Optional

import structlog

from formatrouter.conversion.registry import BackendEntry, BackendRegistry
from formatrouter.exceptions import BackendNotFoundError, UnsupportedConversionError

logger = structlog.get_logger(__name__)


class ConverterSelector:
    """Selects backends from a registry by priority order."""

    def __init__(self, registry: BackendRegistry):
        """Initialize the selector.

        Args:
            registry: Backend registry; frozen on construction
        """
        self.registry = registry
        self.index = registry.freeze()

    def select(
        self,
        source_extension: str,
        target_extension: str,
        explicit_backend: Optional[str] = None,
    ) -> BackendEntry:
        """Return the backend to invoke for a conversion.

        An explicit backend is returned as long as it is registered, without
        consulting its capability tables. Otherwise the first backend in
        priority order with a category listing both extensions wins.

        Args:
            source_extension: Normalized source extension
            target_extension: Requested target extension
            explicit_backend: Optional backend name chosen by the caller

        Returns:
            BackendEntry: Selected backend

        Raises:
            BackendNotFoundError: If the explicit backend is not registered
            UnsupportedConversionError: If no backend supports the pair
        """
        if explicit_backend:
            entry = self.registry.get(explicit_backend)
            if entry is None:
                raise BackendNotFoundError(
                    explicit_backend, source_extension, target_extension
                )
            return entry

        for entry in self.registry:
            if entry.descriptor.supports(source_extension, target_extension):
                logger.debug(
                    "backend_selected",
                    backend=entry.name,
                    source_extension=source_extension,
                    target_extension=target_extension,
                )
                return entry

        raise UnsupportedConversionError(source_extension, target_extension)
