"""Local filesystem implementation of UploadPort.

Copies the selected video into the upload directory chunk by chunk, which
stands in for a remote transfer when extraction runs on the same host.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import uuid
from pathlib import Path

from vidshot.adapters.outbound.storage.local_file_storage import sanitize_filename
from vidshot.core.entities.upload_handle import UploadHandle
from vidshot.core.entities.video_source import VideoSource
from vidshot.core.exceptions import UploadError
from vidshot.ports.outbound.progress import ProgressCallback

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8 * 1024 * 1024  # 8MB


class LocalFileUploader:
    """Implements :class:`UploadPort` by copying into *upload_dir*."""

    def __init__(self, upload_dir: str | Path, chunk_size: int = CHUNK_SIZE) -> None:
        self._upload_dir = Path(upload_dir)
        self._chunk_size = chunk_size

    async def upload(self, source: VideoSource, on_progress: ProgressCallback) -> UploadHandle:
        if not source.path:
            raise UploadError(f"No local file for {source.name}")

        upload_id = str(uuid.uuid4())
        target = self._upload_dir / upload_id / sanitize_filename(source.name)
        loop = asyncio.get_running_loop()

        on_progress(0)
        sent = 0
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            total = source.byte_size or Path(source.path).stat().st_size
            with open(source.path, "rb") as fin, open(target, "wb") as fout:
                while True:
                    chunk = await loop.run_in_executor(None, fin.read, self._chunk_size)
                    if not chunk:
                        break
                    await loop.run_in_executor(None, fout.write, chunk)
                    sent += len(chunk)
                    if total:
                        on_progress(sent * 100 // total)
        except asyncio.CancelledError:
            target.unlink(missing_ok=True)
            logger.info("Upload of %s aborted after %d bytes", source.name, sent)
            raise
        except OSError as e:
            target.unlink(missing_ok=True)
            raise UploadError(f"Copy of {source.name} failed: {e}") from e

        logger.debug("Copied %s -> %s (%d bytes)", source.path, target, sent)
        return UploadHandle(
            location=str(target),
            local_path=str(target),
            byte_size=sent,
            upload_id=upload_id,
        )

    async def discard(self, handle: UploadHandle) -> None:
        """Remove the copy made for *handle*."""
        folder = self._upload_dir / handle.upload_id
        if not folder.is_dir():
            return
        await asyncio.get_running_loop().run_in_executor(None, shutil.rmtree, folder)
        logger.debug("Removed upload copy %s", folder)
