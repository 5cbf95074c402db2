"""Inkscape backend for vector graphics."""

from pathlib import Path
from typing import Any, Optional

from formatrouter.adapters.base import ConverterAdapter
from formatrouter.adapters.process import run_tool
from formatrouter.conversion.descriptor import CapabilityDescriptor


class InkscapeAdapter(ConverterAdapter):
    """Exports vector drawings through the Inkscape command line."""

    descriptor = CapabilityDescriptor.from_tables(
        "inkscape",
        from_={"images": ["svg", "pdf", "eps", "ps", "wmf", "emf", "png"]},
        to={
            "images": [
                "dxf", "emf", "eps", "fxg", "gpl", "hpgl", "html", "odg", "pdf",
                "png", "pov", "ps", "sif", "svg", "svgz", "tex", "wmf",
            ]
        },
    )

    executable = "inkscape"

    async def convert(
        self,
        input_path: Path,
        source_extension: str,
        target_extension: str,
        target_path: Path,
        options: Optional[dict[str, Any]] = None,
    ) -> str:
        command = [
            self.executable,
            str(input_path),
            f"--export-filename={target_path}",
        ]
        await run_tool(self.name, command, self.timeout_seconds)
        return "Done"
