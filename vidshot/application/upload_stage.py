"""
Upload stage - transmits the selected video through the configured transport.
"""
from __future__ import annotations

import logging
from typing import Optional

from vidshot.application.stage_runner import run_stage
from vidshot.core.entities.upload_handle import UploadHandle
from vidshot.core.entities.video_source import VideoSource
from vidshot.core.exceptions import UploadError
from vidshot.ports.outbound.progress import ProgressCallback

logger = logging.getLogger(__name__)


class UploadStage:
    """Runs an UploadPort under the stage progress/cancellation contract."""

    def __init__(self, transport, timeout: Optional[float] = None):  # transport: UploadPort
        self._transport = transport
        self._timeout = timeout

    async def run(self, source: VideoSource, on_progress: ProgressCallback) -> UploadHandle:
        logger.info("Uploading %s (%s)", source.name, source.size_formatted)
        handle = await run_stage(
            "upload",
            lambda report: self._transport.upload(source, report),
            on_progress,
            UploadError,
            timeout=self._timeout,
        )
        logger.info("Upload finished: %s -> %s", source.name, handle.location)
        return handle

    async def discard(self, handle: UploadHandle) -> None:
        """Drop the transport's copy. Failures are logged, never raised."""
        try:
            await self._transport.discard(handle)
        except OSError as e:
            logger.warning("Could not discard upload %s: %s", handle.upload_id, e)
