"""LibreOffice (soffice) backend for documents and presentations."""

from pathlib import Path
from typing import Any, Optional

from formatrouter.adapters.base import ConverterAdapter
from formatrouter.adapters.process import run_tool
from formatrouter.conversion.descriptor import CapabilityDescriptor

TEXT_INPUTS = [
    "602", "abw", "csv", "cwk", "doc", "docm", "docx", "dot", "dotx", "dotm",
    "epub", "fb2", "fodt", "htm", "html", "hwp", "mcw", "mw", "mwd", "lwp",
    "lrf", "odt", "ott", "pages", "pdf", "psw", "rtf", "sdw", "stw", "sxw",
    "tab", "tsv", "txt", "wn", "wpd", "wps", "wpt", "wri", "xhtml", "xml",
    "zabw",
]

TEXT_OUTPUTS = [
    "csv", "doc", "docm", "docx", "dot", "dotx", "dotm", "epub", "fodt", "htm",
    "html", "odt", "ott", "pdf", "rtf", "tab", "tsv", "txt", "wps", "wpt",
    "xhtml", "xml",
]

IMPRESS_INPUTS = [
    "ppt", "pptx", "pps", "ppsx", "pptm", "pot", "potx", "potm", "odp", "otp",
    "fodp", "sxi",
]

IMPRESS_OUTPUTS = ["pdf", "ppt", "pptx", "odp", "otp", "fodp", "html"]

# Import/export filter names per category. Both extensions of a conversion
# must be found in the same category for filters to be passed.
FILTERS: dict[str, dict[str, str]] = {
    "text": {
        "602": "T602Document",
        "abw": "AbiWord",
        "csv": "Text",
        "doc": "MS Word 97",
        "docm": "MS Word 2007 XML VBA",
        "docx": "MS Word 2007 XML",
        "dot": "MS Word 97 Vorlage",
        "dotx": "MS Word 2007 XML Template",
        "dotm": "MS Word 2007 XML Template",
        "epub": "EPUB",
        "fb2": "Fictionbook 2",
        "fodt": "OpenDocument Text Flat XML",
        "htm": "HTML (StarWriter)",
        "html": "HTML (StarWriter)",
        "hwp": "writer_MIZI_Hwp_97",
        "mcw": "MacWrite",
        "mw": "MacWrite",
        "mwd": "Mariner_Write",
        "lwp": "LotusWordPro",
        "lrf": "BroadBand eBook",
        "odt": "writer8",
        "ott": "writer8_template",
        "pages": "Apple Pages",
        "psw": "PocketWord File",
        "rtf": "Rich Text Format",
        "sdw": "StarOffice_Writer",
        "stw": "writer_StarOffice_XML_Writer_Template",
        "sxw": "StarOffice XML (Writer)",
        "tab": "Text",
        "tsv": "Text",
        "txt": "Text",
        "wn": "WriteNow",
        "wpd": "WordPerfect",
        "wps": "MS Word 97",
        "wpt": "MS Word 97 Vorlage",
        "wri": "MS_Write",
        "xhtml": "HTML (StarWriter)",
        "xml": "OpenDocument Text Flat XML",
        "zabw": "AbiWord",
    },
    "calc": {},
    "impress": {
        "ppt": "MS PowerPoint 97",
        "pptx": "Impress MS PowerPoint 2007 XML",
        "pps": "MS PowerPoint 97",
        "ppsx": "Impress MS PowerPoint 2007 XML",
        "pptm": "Impress MS PowerPoint 2007 XML VBA",
        "pot": "MS PowerPoint 97 Vorlage",
        "potx": "Impress MS PowerPoint 2007 XML Template",
        "potm": "Impress MS PowerPoint 2007 XML Template",
        "odp": "impress8",
        "otp": "impress8_template",
        "fodp": "OpenDocument Presentation Flat XML",
        "sxi": "StarOffice XML (Impress)",
        "pdf": "impress_pdf_Export",
        "html": "impress_html_Export",
    },
}


def get_filters(
    source_extension: str, target_extension: str
) -> tuple[Optional[str], Optional[str]]:
    """Return (import filter, export filter) for a conversion, or (None, None)."""
    for category in ("text", "calc", "impress"):
        filters = FILTERS[category]
        if source_extension in filters and target_extension in filters:
            return filters[source_extension], filters[target_extension]
    return None, None


class LibreOfficeAdapter(ConverterAdapter):
    """Converts office documents with a headless soffice process."""

    descriptor = CapabilityDescriptor.from_tables(
        "libreoffice",
        from_={"text": TEXT_INPUTS, "impress": IMPRESS_INPUTS},
        to={"text": TEXT_OUTPUTS, "impress": IMPRESS_OUTPUTS},
    )

    executable = "soffice"

    def build_command(
        self,
        input_path: Path,
        source_extension: str,
        target_extension: str,
        target_path: Path,
    ) -> list[str]:
        """Build the soffice command line.

        soffice names its output after the input file inside ``--outdir``.
        """
        command = [self.executable, "--headless", "--invisible"]
        in_filter, out_filter = get_filters(source_extension, target_extension)

        if in_filter:
            command.append(f"--infilter={in_filter}")

        convert_to = f"{target_extension}:{out_filter}" if out_filter else target_extension
        command.extend(
            [
                "--convert-to",
                convert_to,
                "--outdir",
                str(Path(target_path).parent),
                str(input_path),
            ]
        )
        return command

    async def convert(
        self,
        input_path: Path,
        source_extension: str,
        target_extension: str,
        target_path: Path,
        options: Optional[dict[str, Any]] = None,
    ) -> str:
        command = self.build_command(
            input_path, source_extension, target_extension, target_path
        )
        await run_tool(self.name, command, self.timeout_seconds)
        return "Done"
