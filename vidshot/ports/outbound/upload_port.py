"""Port for transmitting a selected video to its processing target."""
from __future__ import annotations
from typing import Protocol, runtime_checkable

from vidshot.core.entities.upload_handle import UploadHandle
from vidshot.core.entities.video_source import VideoSource
from vidshot.ports.outbound.progress import ProgressCallback


@runtime_checkable
class UploadPort(Protocol):
    async def upload(self, source: VideoSource, on_progress: ProgressCallback) -> UploadHandle: ...

    async def discard(self, handle: UploadHandle) -> None:
        """Release whatever the transport keeps for *handle*. Never touches the source file."""
        ...
