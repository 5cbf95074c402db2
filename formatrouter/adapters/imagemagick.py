"""ImageMagick backend for raster images.

Multi-page inputs (PDF, TIFF, animated GIF) written to a single-image
format come out as numbered frames, ``<stem>-0.<ext>``, ``<stem>-1.<ext>``
and so on; the reconciler bundles them afterwards.
"""

from pathlib import Path
from typing import Any, Optional

from formatrouter.adapters.base import ConverterAdapter
from formatrouter.adapters.process import run_tool
from formatrouter.conversion.descriptor import CapabilityDescriptor

RASTER_INPUTS = [
    "avif", "bmp", "emf", "gif", "heic", "ico", "jpeg", "jxl", "pdf", "png",
    "ppm", "psd", "svg", "tga", "tiff", "tif", "webp", "xcf",
]

RASTER_OUTPUTS = [
    "avif", "bmp", "gif", "ico", "jpg", "jpeg", "jxl", "pdf", "png", "ppm",
    "tga", "tiff", "tif", "webp",
]


class ImageMagickAdapter(ConverterAdapter):
    """Converts raster images with ``magick``."""

    descriptor = CapabilityDescriptor.from_tables(
        "imagemagick",
        from_={"images": RASTER_INPUTS},
        to={"images": RASTER_OUTPUTS},
        options={
            "density": {
                "description": "Rasterisation resolution for vector and PDF input (DPI)",
                "type": "number",
                "default": 150,
            },
        },
    )

    executable = "magick"

    def build_command(
        self,
        input_path: Path,
        target_path: Path,
        options: Optional[dict[str, Any]] = None,
    ) -> list[str]:
        command = [self.executable]
        density = (options or {}).get("density")
        if density:
            command.extend(["-density", str(density)])
        command.extend([str(input_path), str(target_path)])
        return command

    async def convert(
        self,
        input_path: Path,
        source_extension: str,
        target_extension: str,
        target_path: Path,
        options: Optional[dict[str, Any]] = None,
    ) -> str:
        await run_tool(
            self.name,
            self.build_command(input_path, target_path, options),
            self.timeout_seconds,
        )
        return "Done"
