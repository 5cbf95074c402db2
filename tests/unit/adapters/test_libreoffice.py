"""Tests for the LibreOffice backend."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from formatrouter.adapters.libreoffice import LibreOfficeAdapter, get_filters


class TestGetFilters:
    """Tests for filter lookup."""

    def test_text_filters(self):
        assert get_filters("docx", "pdf") == (None, None)
        assert get_filters("docx", "odt") == ("MS Word 2007 XML", "writer8")

    def test_impress_filters(self):
        assert get_filters("pptx", "pdf") == (
            "Impress MS PowerPoint 2007 XML",
            "impress_pdf_Export",
        )

    def test_extensions_from_different_categories(self):
        """Test that filters are only used when both sides share a category."""
        assert get_filters("pptx", "odt") == (None, None)


class TestLibreOfficeAdapter:
    """Tests for LibreOfficeAdapter."""

    def test_descriptor(self):
        descriptor = LibreOfficeAdapter.descriptor

        assert descriptor.name == "libreoffice"
        assert descriptor.supports("docx", "pdf")
        assert descriptor.supports("pptx", "pdf")
        assert not descriptor.supports("pptx", "docx")

    def test_build_command_with_filters(self):
        adapter = LibreOfficeAdapter()

        command = adapter.build_command(
            Path("/in/deck.pptx"), "pptx", "pdf", Path("/out/deck.pdf")
        )

        assert command == [
            "soffice",
            "--headless",
            "--invisible",
            "--infilter=Impress MS PowerPoint 2007 XML",
            "--convert-to",
            "pdf:impress_pdf_Export",
            "--outdir",
            "/out",
            "/in/deck.pptx",
        ]

    def test_build_command_without_filters(self):
        adapter = LibreOfficeAdapter()

        command = adapter.build_command(
            Path("/in/a.docx"), "docx", "pdf", Path("/out/a.pdf")
        )

        assert "--convert-to" in command
        assert command[command.index("--convert-to") + 1] == "pdf"
        assert not any(part.startswith("--infilter") for part in command)

    @pytest.mark.asyncio
    async def test_convert_runs_tool(self):
        adapter = LibreOfficeAdapter(timeout_seconds=30)

        with patch(
            "formatrouter.adapters.libreoffice.run_tool",
            new=AsyncMock(return_value=("", "")),
        ) as mock_run:
            status = await adapter.convert(
                Path("/in/a.docx"), "docx", "pdf", Path("/out/a.pdf")
            )

        assert status == "Done"
        backend, command, timeout = mock_run.call_args.args
        assert backend == "libreoffice"
        assert command[0] == "soffice"
        assert timeout == 30
