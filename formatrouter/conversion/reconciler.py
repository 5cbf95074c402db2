"""Output reconciliation for backends that split one input into many files.

Some backends cannot be told the exact output name in advance: a renderer
writing one file per page produces ``deck-1.png``, ``deck-2.png`` and so on
instead of ``deck.png``. After a backend returns, the reconciler checks for
the expected file and otherwise looks for such frames, renaming a single
frame into place or bundling several into ``deck.zip``.
"""

import asyncio
import glob
import re
import zipfile
from pathlib import Path

import aiofiles.os
import structlog

from formatrouter.exceptions import (
    ArchiveCreationError,
    NoOutputGeneratedError,
    PathTraversalError,
    ZipMemoryLimitExceededError,
)

logger = structlog.get_logger(__name__)

MAX_ZIP_BYTES = 200 * 1024 * 1024

_ILLEGAL_CHARS = re.compile(r'[/?<>\\:*|"]')
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x80-\x9f]")
_RESERVED_NAME = re.compile(r"^\.+$")
_WINDOWS_RESERVED_NAME = re.compile(
    r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE
)
_WINDOWS_TRAILING = re.compile(r"[. ]+$")
_MAX_NAME_BYTES = 255


def sanitize_filename(name: str) -> str:
    """Strip path separators and characters unsafe in file names.

    Args:
        name: Raw file name (without directory)

    Returns:
        str: Name safe to join onto a directory; may be empty
    """
    cleaned = name.replace("/", "").replace("\\", "")
    cleaned = _ILLEGAL_CHARS.sub("", cleaned)
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    cleaned = _RESERVED_NAME.sub("", cleaned)
    cleaned = _WINDOWS_RESERVED_NAME.sub("", cleaned)
    cleaned = _WINDOWS_TRAILING.sub("", cleaned)

    encoded = cleaned.encode("utf-8")
    if len(encoded) > _MAX_NAME_BYTES:
        cleaned = encoded[:_MAX_NAME_BYTES].decode("utf-8", errors="ignore")
    return cleaned


def split_file_name(file_name: str) -> tuple[str, str]:
    """Split at the last dot; a leading dot does not start an extension."""
    dot = file_name.rfind(".")
    if dot > 0:
        return file_name[:dot], file_name[dot + 1 :]
    return file_name, ""


class OutputReconciler:
    """Resolves the final output name for a task in one output directory."""

    def __init__(self, output_dir: Path, max_archive_bytes: int = MAX_ZIP_BYTES):
        """Initialize the reconciler.

        Args:
            output_dir: Directory the backends write into
            max_archive_bytes: Ceiling on the total size of bundled frames
        """
        self.output_dir = Path(output_dir).resolve()
        self.max_archive_bytes = max_archive_bytes

    async def reconcile(self, target_path: Path, expected_name: str) -> str:
        """Make sure the output for one task exists and return its name.

        Args:
            target_path: Path the backend was asked to write
            expected_name: File name of ``target_path``

        Returns:
            str: ``expected_name``, or the archive name when frames were bundled

        Raises:
            NoOutputGeneratedError: If neither the file nor any frame exists
            ZipMemoryLimitExceededError: If frames are too large to bundle
            PathTraversalError: If a write path escapes the output directory
            ArchiveCreationError: If writing the archive fails
        """
        if await aiofiles.os.path.exists(target_path):
            return expected_name

        logger.info(
            "multi_frame_detection",
            file_name=expected_name,
            expected_path=str(target_path),
        )

        base_name, extension = split_file_name(expected_name)
        safe_base_name = sanitize_filename(base_name)
        extension = sanitize_filename(extension)
        frames = await self._discover_frames(safe_base_name, extension)

        logger.info(
            "frames_detected",
            file_name=expected_name,
            base_name=safe_base_name,
            extension=extension,
            frames=frames,
        )

        if not frames:
            raise NoOutputGeneratedError(expected_name)

        if len(frames) == 1:
            destination = self._ensure_within_output_dir(Path(target_path))
            logger.info("renaming_single_frame", frame=frames[0], file_name=expected_name)
            await aiofiles.os.rename(self.output_dir / frames[0], destination)
            return expected_name

        return await self._bundle(safe_base_name, frames)

    async def _discover_frames(self, safe_base_name: str, extension: str) -> list[str]:
        # Also matches a sibling source's own output named `<base>-<suffix>.<ext>`
        # (deck-final.png for deck.png) when both land in the same directory.
        pattern = f"{glob.escape(safe_base_name)}-*.{glob.escape(extension)}"

        def _scan() -> list[str]:
            return sorted(
                path.name for path in self.output_dir.glob(pattern) if path.is_file()
            )

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, _scan)

    def _ensure_within_output_dir(self, path: Path) -> Path:
        resolved = path.resolve()
        try:
            resolved.relative_to(self.output_dir)
        except ValueError:
            raise PathTraversalError(str(path), str(self.output_dir))
        if resolved == self.output_dir:
            raise PathTraversalError(str(path), str(self.output_dir))
        return resolved

    async def _bundle(self, safe_base_name: str, frames: list[str]) -> str:
        total_size = 0
        for frame in frames:
            stat = await aiofiles.os.stat(self.output_dir / frame)
            total_size += stat.st_size
        if total_size > self.max_archive_bytes:
            raise ZipMemoryLimitExceededError(total_size, self.max_archive_bytes)

        archive_name = f"{safe_base_name}.zip"
        archive_path = self._ensure_within_output_dir(self.output_dir / archive_name)
        frame_paths = [self.output_dir / frame for frame in frames]

        logger.info("creating_frame_archive", archive=archive_name, frames=len(frames))

        def _write_archive() -> None:
            with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                for frame_path in frame_paths:
                    archive.write(frame_path, arcname=frame_path.name)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, _write_archive)
        except Exception as e:
            if await aiofiles.os.path.exists(archive_path):
                try:
                    await aiofiles.os.remove(archive_path)
                except OSError as cleanup_error:
                    logger.warning(
                        "partial_archive_cleanup_failed",
                        archive=archive_name,
                        error=str(cleanup_error),
                    )
            raise ArchiveCreationError(safe_base_name, str(e)) from e

        logger.info("frame_archive_created", archive=archive_name)

        for frame_path in frame_paths:
            try:
                await aiofiles.os.remove(frame_path)
            except OSError as e:
                logger.warning(
                    "fragment_cleanup_failed",
                    frame=frame_path.name,
                    archive=archive_name,
                    error=str(e),
                )

        return archive_name
