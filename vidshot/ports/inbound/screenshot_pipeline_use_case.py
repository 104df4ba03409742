"""Inbound port for the screenshot pipeline commands."""
from __future__ import annotations
import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable
if TYPE_CHECKING:
    from vidshot.core.entities.pipeline_state import PipelineState
    from vidshot.core.entities.screenshot import ScreenshotRef
    from vidshot.core.entities.video_source import VideoSource


@runtime_checkable
class ScreenshotPipelineUseCase(Protocol):
    @property
    def state(self) -> PipelineState: ...
    def select_file(self, candidate: VideoSource) -> PipelineState: ...
    def start(self) -> Optional[asyncio.Task]: ...
    def screenshot(self, index: int) -> ScreenshotRef: ...
    def download_screenshot(self, index: int, destination: str | Path) -> Path: ...
