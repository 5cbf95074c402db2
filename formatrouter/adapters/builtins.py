"""Built-in backends and their selection priority."""

from typing import Iterable, Optional

import structlog

from formatrouter.adapters.base import ConverterAdapter
from formatrouter.adapters.imagemagick import ImageMagickAdapter
from formatrouter.adapters.inkscape import InkscapeAdapter
from formatrouter.adapters.libreoffice import LibreOfficeAdapter
from formatrouter.config import Settings
from formatrouter.conversion.registry import BackendRegistry

logger = structlog.get_logger(__name__)

# Highest priority first. When two backends list the same conversion the
# earlier one is selected.
BUILTIN_BACKENDS: list[tuple[type[ConverterAdapter], str]] = [
    (
        InkscapeAdapter,
        "Renders EMF/WMF/SVG as vectors; ahead of ImageMagick, which rasterises them",
    ),
    (
        LibreOfficeAdapter,
        "Only backend for office documents and presentations",
    ),
    (
        ImageMagickAdapter,
        "Raster fallback for every image format the vector backend does not cover",
    ),
]


def default_registry(
    settings: Optional[Settings] = None,
    disabled: Iterable[str] = (),
) -> BackendRegistry:
    """Create a frozen registry with the built-in backends.

    Args:
        settings: Supplies adapter timeout and disabled backends
        disabled: Additional backend names to leave out

    Returns:
        BackendRegistry: Frozen registry in priority order
    """
    skipped = set(disabled)
    timeout = None
    if settings is not None:
        skipped.update(settings.disabled_backends)
        timeout = settings.adapter_timeout_seconds

    registry = BackendRegistry()
    for adapter_class, reason in BUILTIN_BACKENDS:
        if adapter_class.descriptor.name in skipped:
            logger.info("backend_disabled", backend=adapter_class.descriptor.name)
            continue
        registry.register(adapter_class(timeout_seconds=timeout), reason=reason)

    registry.freeze()
    return registry
