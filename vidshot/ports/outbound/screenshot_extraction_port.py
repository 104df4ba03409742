"""Port for the screenshot extraction service."""
from __future__ import annotations
from typing import Protocol, runtime_checkable

from vidshot.core.entities.screenshot import ScreenshotRef
from vidshot.core.entities.upload_handle import UploadHandle
from vidshot.core.value_objects.sampling_policy import SamplingPolicy
from vidshot.ports.outbound.progress import ProgressCallback


@runtime_checkable
class ScreenshotExtractionPort(Protocol):
    async def extract_screenshots(
        self, handle: UploadHandle, policy: SamplingPolicy, on_progress: ProgressCallback
    ) -> list[ScreenshotRef]: ...

    async def discard(self, handle: UploadHandle) -> None:
        """Delete the screenshots produced for *handle*."""
        ...
