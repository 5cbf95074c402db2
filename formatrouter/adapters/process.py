"""Async execution of external conversion tools."""

import asyncio
from typing import Optional, Sequence

import structlog

from formatrouter.exceptions import AdapterExecutionError

logger = structlog.get_logger(__name__)


async def run_tool(
    backend: str,
    command: Sequence[str],
    timeout_seconds: Optional[float] = None,
) -> tuple[str, str]:
    """
    Run an external tool and wait for it to exit.

    Output is logged for diagnostics only.

    Args:
        backend: Backend name used in logs and errors
        command: Executable followed by its arguments
        timeout_seconds: Kill the tool after this many seconds (no limit if None)

    Returns:
        Tuple of decoded (stdout, stderr)

    Raises:
        AdapterExecutionError: If the tool is missing, times out or exits non-zero
    """
    logger.debug("running_tool", backend=backend, command=list(command))

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise AdapterExecutionError(backend, f"executable not found: {command[0]}") from e

    try:
        stdout, stderr = await asyncio.wait_for(
            process.communicate(), timeout=timeout_seconds
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise AdapterExecutionError(backend, f"timed out after {timeout_seconds}s")

    stdout_text = stdout.decode(errors="replace") if stdout else ""
    stderr_text = stderr.decode(errors="replace") if stderr else ""

    if stdout_text:
        logger.debug("tool_stdout", backend=backend, stdout=stdout_text)
    if stderr_text:
        logger.warning("tool_stderr", backend=backend, stderr=stderr_text)

    if process.returncode != 0:
        raise AdapterExecutionError(
            backend,
            stderr_text.strip() or f"exit status {process.returncode}",
            returncode=process.returncode,
        )

    return stdout_text, stderr_text
