"""Tests for external tool execution."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from formatrouter.adapters.process import run_tool
from formatrouter.exceptions import AdapterExecutionError


def make_process(returncode=0, stdout=b"", stderr=b""):
    process = MagicMock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    process.wait = AsyncMock(return_value=returncode)
    return process


class TestRunTool:
    """Tests for run_tool."""

    @pytest.mark.asyncio
    async def test_success(self):
        process = make_process(stdout=b"converted\n")

        with patch(
            "asyncio.create_subprocess_exec", new=AsyncMock(return_value=process)
        ) as mock_exec:
            stdout, stderr = await run_tool("magick", ["magick", "a.png", "a.jpg"])

        assert stdout == "converted\n"
        assert stderr == ""
        assert mock_exec.call_args.args == ("magick", "a.png", "a.jpg")

    @pytest.mark.asyncio
    async def test_non_zero_exit(self):
        process = make_process(returncode=2, stderr=b"bad input\n")

        with patch("asyncio.create_subprocess_exec", new=AsyncMock(return_value=process)):
            with pytest.raises(AdapterExecutionError, match="bad input") as exc_info:
                await run_tool("magick", ["magick", "a.png", "a.jpg"])

        assert exc_info.value.context["returncode"] == 2
        assert exc_info.value.context["backend"] == "magick"

    @pytest.mark.asyncio
    async def test_non_zero_exit_without_stderr(self):
        process = make_process(returncode=1)

        with patch("asyncio.create_subprocess_exec", new=AsyncMock(return_value=process)):
            with pytest.raises(AdapterExecutionError, match="exit status 1"):
                await run_tool("magick", ["magick"])

    @pytest.mark.asyncio
    async def test_missing_executable(self):
        with patch(
            "asyncio.create_subprocess_exec",
            new=AsyncMock(side_effect=FileNotFoundError("soffice")),
        ):
            with pytest.raises(AdapterExecutionError, match="executable not found: soffice"):
                await run_tool("libreoffice", ["soffice", "--headless"])

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self):
        process = make_process()

        async def hang():
            await asyncio.sleep(10)

        process.communicate = hang

        with patch("asyncio.create_subprocess_exec", new=AsyncMock(return_value=process)):
            with pytest.raises(AdapterExecutionError, match="timed out"):
                await run_tool("inkscape", ["inkscape"], timeout_seconds=0.01)

        process.kill.assert_called_once()
        process.wait.assert_awaited_once()
