"""
BrettAppsCode Backend - File Storage Service
==============================================

What:  Upload, download, read, write, and list files in one flat directory.
How:   Every client-supplied name goes through two gates before the
       filesystem is touched:
       1. Sanitize:   split on "/" and "\\", reject any ".." segment,
                      keep only the final segment (the basename).
       2. Bound check: join the basename onto the storage root, resolve it
                      (following symlinks), and require the result to be a
                      direct child of the resolved root.
       A failure of either gate is an AccessDeniedError, raised before any
       existence check.
Who:   Called by the /api/upload, /api/download, /api/read, /api/write and
       /api/files route handlers.

Storage layout:
    uploads/
    ├── 1718000000000-notes.txt     ← upload: "<ms stamp>-<basename>"
    ├── 1718000000001-notes.txt     ← same name uploaded again
    └── index.html                  ← write: sanitized basename as given

There are no sub-directories and nothing is ever deleted. Concurrent writes
to the same name are last-write-wins.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import aiofiles
import aiofiles.os

from app.config import settings
from app.exceptions import (
    AccessDeniedError,
    FileStorageError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Used when an uploaded part has no usable filename
DEFAULT_UPLOAD_NAME = "upload"


def split_name(name: str) -> List[str]:
    """Split a client-supplied name into path segments, treating both separators alike."""
    return name.replace("\\", "/").split("/")


def sanitize_filename(name: str) -> str:
    """
    Reduce a client-supplied name to its basename.

    Raises:
        AccessDeniedError if any segment is "..". Parent references are
        refused outright rather than silently dropped.
    """
    segments = split_name(name)
    if ".." in segments:
        raise AccessDeniedError(context={"name": name, "reason": "parent segment"})
    return segments[-1]


@dataclass(frozen=True)
class StoredUpload:
    """Result of a successful upload."""

    filename: str
    path: str
    original_name: str


class FileService:
    """
    Flat-directory file store with path-traversal containment.

    The storage root is resolved once at construction but only created on
    the first write or upload, so List on a fresh deployment returns [].
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                         If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self._last_stamp = 0
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    # ── Path Containment ──────────────────────────────────────────────────

    def _contain(self, basename: str, original: str) -> Path:
        """Join `basename` onto the root and verify the resolved path stays inside."""
        if "\x00" in basename:
            raise AccessDeniedError(context={"name": original, "reason": "NUL byte"})
        try:
            resolved = (self.storage_root / basename).resolve()
        except (OSError, RuntimeError, ValueError) as e:
            # RuntimeError: symlink loop on older interpreters
            raise AccessDeniedError(
                context={"name": original, "reason": type(e).__name__}
            ) from None

        if resolved.parent != self.storage_root:
            raise AccessDeniedError(context={"name": original, "reason": "outside root"})
        return resolved

    def resolve(self, name: str) -> Tuple[str, Path]:
        """
        Apply both gates to a client-supplied name.

        Returns:
            (sanitized basename, absolute path inside the storage root)

        Raises:
            AccessDeniedError if the name escapes or names the root itself.
        """
        basename = sanitize_filename(name)
        return basename, self._contain(basename, name)

    # ── Upload ────────────────────────────────────────────────────────────

    def _next_stamp(self) -> int:
        """Millisecond timestamp, forced strictly increasing within this process."""
        stamp = max(int(time.time() * 1000), self._last_stamp + 1)
        self._last_stamp = stamp
        return stamp

    async def _ensure_root(self) -> None:
        try:
            await aiofiles.os.makedirs(self.storage_root, mode=0o755, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create storage root %s: %s", self.storage_root, e)
            raise FileStorageError(
                message="Storage directory is unavailable",
                context={"os_error": str(e)},
            ) from e

    async def save_upload(self, original_name: Optional[str], content: bytes) -> StoredUpload:
        """
        Store uploaded bytes under a freshly generated name.

        The generated name is "<ms stamp>-<basename of original_name>". Parent
        segments in the original name are simply dropped here: the stamp
        prefix guarantees the stored name is a plain file name. NUL bytes
        are stripped from it too.

        Raises:
            ValidationError if content exceeds settings.max_upload_size.
            FileStorageError on OS-level write failures.
        """
        original = original_name or ""
        if len(content) > settings.max_upload_size:
            max_mb = settings.max_upload_size / (1024 * 1024)
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB",
                field="file",
                context={"actual_size": len(content)},
            )

        basename = split_name(original.replace("\x00", ""))[-1] or DEFAULT_UPLOAD_NAME
        generated = f"{self._next_stamp()}-{basename}"
        target = self._contain(generated, original)

        await self._ensure_root()
        try:
            async with aiofiles.open(target, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload %s: %s", generated, e)
            raise FileStorageError(
                message="Failed to save uploaded file",
                context={"filename": generated, "os_error": str(e)},
            ) from e

        logger.info("Upload stored: %s (%d bytes)", generated, len(content))
        return StoredUpload(filename=generated, path=str(target), original_name=original)

    # ── Download / Read ───────────────────────────────────────────────────

    async def locate(self, name: str) -> Tuple[str, Path]:
        """
        Resolve `name` to an existing regular file inside the storage root.

        Raises:
            AccessDeniedError before any existence check if the name escapes.
            NotFoundError if nothing (or a non-file) is there.
        """
        basename, path = self.resolve(name)
        if not await aiofiles.os.path.isfile(path):
            raise NotFoundError(context={"filename": basename})
        return basename, path

    async def read_text(self, name: str) -> str:
        """Return the whole file decoded as UTF-8 (invalid bytes replaced)."""
        basename, path = await self.locate(name)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
                content = await f.read()
        except OSError as e:
            logger.error("Failed to read %s: %s", basename, e)
            raise FileStorageError(
                message="Failed to read file",
                context={"filename": basename, "os_error": str(e)},
            ) from e

        logger.debug("Read %s (%d chars)", basename, len(content))
        return content

    # ── Write ─────────────────────────────────────────────────────────────

    async def write_text(self, name: str, content: str) -> str:
        """
        Write `content` as UTF-8 text, replacing any existing file of that name.

        Newlines are written untranslated, so a later read returns the exact
        text that was written.

        Returns:
            The sanitized basename actually used.
        """
        basename, path = self.resolve(name)
        await self._ensure_root()
        try:
            async with aiofiles.open(path, "w", encoding="utf-8", newline="") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to write %s: %s", basename, e)
            raise FileStorageError(
                message="Failed to write file",
                context={"filename": basename, "os_error": str(e)},
            ) from e

        logger.info("File written: %s (%d chars)", basename, len(content))
        return basename

    # ── List ──────────────────────────────────────────────────────────────

    async def list_names(self) -> List[str]:
        """Names directly inside the storage root, sorted; [] if the root is absent."""
        if not await aiofiles.os.path.isdir(self.storage_root):
            return []
        try:
            names = await aiofiles.os.listdir(self.storage_root)
        except OSError as e:
            logger.error("Failed to list %s: %s", self.storage_root, e)
            raise FileStorageError(
                message="Failed to list files",
                context={"os_error": str(e)},
            ) from e
        return sorted(names)


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()


def get_file_service() -> FileService:
    """FastAPI dependency; tests swap it through app.dependency_overrides."""
    return file_service
