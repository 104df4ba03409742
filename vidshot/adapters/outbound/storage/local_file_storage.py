"""Local filesystem implementation of FileStoragePort.

Holds files received over HTTP until the pipeline picks them up.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from pathlib import Path
from typing import AsyncIterator, Optional

logger = logging.getLogger(__name__)


def sanitize_filename(filename: str) -> str:
    """Reduce a client-supplied name to a safe basename."""
    name = os.path.basename(filename.replace("\\", "/")).replace("\x00", "")
    name = re.sub(r"[^\w\s\-.]", "_", name)
    name = re.sub(r"\.{2,}", ".", name)
    name = re.sub(r"_{2,}", "_", name)
    if not name or name.startswith("."):
        name = "upload" + name
    return name


class StorageLimitExceeded(OSError):
    """Raised when a streamed file grows past the allowed size."""


class LocalFileStorage:
    """Implements :class:`FileStoragePort` under *base_dir*."""

    def __init__(self, base_dir: str | Path) -> None:
        self._base = Path(base_dir).resolve()
        self._base.mkdir(parents=True, exist_ok=True)
        logger.info("LocalFileStorage initialised at %s", self._base)

    @property
    def base_dir(self) -> Path:
        return self._base

    def get_file_path(self, filename: str, directory: str = "") -> Path:
        folder = self._base / directory if directory else self._base
        return folder / sanitize_filename(filename)

    async def save_stream(
        self,
        chunks: AsyncIterator[bytes],
        filename: str,
        directory: str = "",
        max_bytes: Optional[int] = None,
    ) -> str:
        """Write chunks as they arrive. A partial file never survives a failure."""
        target = self.get_file_path(filename, directory)
        target.parent.mkdir(parents=True, exist_ok=True)
        loop = asyncio.get_running_loop()

        written = 0
        try:
            with open(target, "wb") as f:
                async for chunk in chunks:
                    written += len(chunk)
                    if max_bytes is not None and written > max_bytes:
                        raise StorageLimitExceeded(f"File exceeds {max_bytes} bytes")
                    await loop.run_in_executor(None, f.write, chunk)
        except BaseException:
            target.unlink(missing_ok=True)
            raise
        logger.debug("Stored %s (%d bytes)", target, written)
        return str(target)

    async def remove(self, path: str | Path) -> bool:
        """Delete a stored file. Relative paths are taken from *base_dir*."""
        target = Path(path)
        if not target.is_absolute():
            target = self._base / target
        if not target.is_file():
            logger.warning("Nothing to remove at %s", target)
            return False
        await asyncio.get_running_loop().run_in_executor(None, target.unlink)
        logger.debug("Removed %s", target)
        return True
