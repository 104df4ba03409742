"""Shared test fixtures for all tests."""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock

import pytest

from vidshot.application.pipeline_controller import PipelineController
from vidshot.application.processing_stage import ProcessingStage
from vidshot.application.upload_stage import UploadStage
from vidshot.core.entities.screenshot import ScreenshotRef
from vidshot.core.entities.upload_handle import UploadHandle
from vidshot.core.entities.video_metadata import VideoMetadata
from vidshot.core.entities.video_source import VideoSource
from vidshot.core.exceptions import UploadError
from vidshot.core.value_objects.sampling_policy import SamplingPolicy


# ── Scripted port doubles ──────────────────────────────────────────────────

class ScriptedUploader:
    """UploadPort double that reports *steps* and optionally fails or waits."""

    def __init__(self, steps=(0, 25, 50, 75, 100), fail_after: Optional[int] = None, gate: Optional[asyncio.Event] = None):
        self.steps = list(steps)
        self.fail_after = fail_after
        self.gate = gate
        self.calls: list[VideoSource] = []
        self.cancelled = False
        self.discarded: list[UploadHandle] = []

    async def upload(self, source, on_progress):
        self.calls.append(source)
        try:
            for step in self.steps:
                on_progress(step)
                await asyncio.sleep(0)
                if self.fail_after is not None and step >= self.fail_after:
                    raise UploadError(f"connection reset at {step}%")
                if self.gate is not None:
                    await self.gate.wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return UploadHandle(location=f"/uploads/{source.name}", local_path=source.path, byte_size=source.byte_size)

    async def discard(self, handle):
        self.discarded.append(handle)


class ScriptedExtractor:
    """ScreenshotExtractionPort double producing ``policy.frame_count`` refs."""

    def __init__(self, error: Optional[Exception] = None, gate: Optional[asyncio.Event] = None):
        self.error = error
        self.gate = gate
        self.calls: list[UploadHandle] = []
        self.discarded: list[UploadHandle] = []

    async def extract_screenshots(self, handle, policy, on_progress):
        self.calls.append(handle)
        count = policy.frame_count
        shots = []
        for i in range(1, count + 1):
            if self.gate is not None:
                await self.gate.wait()
            await asyncio.sleep(0)
            if self.error is not None and i == count:
                raise self.error
            shots.append(ScreenshotRef(index=i, uri=f"/shots/screenshot_{i:02d}.jpg", timestamp_seconds=2.5 * i))
            on_progress(i * 100 // count)
        return shots

    async def discard(self, handle):
        self.discarded.append(handle)


class GatedProbe:
    """MetadataProbePort double resolving per file name once released."""

    def __init__(self, results: dict, ignore_cancel: bool = False):
        self.results = results
        self.ignore_cancel = ignore_cancel
        self.gates: dict[str, asyncio.Event] = {}

    def gate(self, name: str) -> asyncio.Event:
        return self.gates.setdefault(name, asyncio.Event())

    def release(self, name: str) -> None:
        self.gate(name).set()

    async def probe(self, source):
        try:
            await self.gate(source.name).wait()
        except asyncio.CancelledError:
            if not self.ignore_cancel:
                raise
        result = self.results[source.name]
        if isinstance(result, Exception):
            raise result
        return result


# ── Source Fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def sample_source() -> VideoSource:
    return VideoSource(
        name="clip.mp4",
        byte_size=10 * 1024 * 1024,
        mime_type="video/mp4",
        path="/tmp/clip.mp4",
    )


@pytest.fixture
def other_source() -> VideoSource:
    return VideoSource(
        name="second.webm",
        byte_size=2048,
        mime_type="video/webm",
        path="/tmp/second.webm",
    )


@pytest.fixture
def text_source() -> VideoSource:
    return VideoSource(name="notes.txt", byte_size=12, mime_type="text/plain", path="/tmp/notes.txt")


@pytest.fixture
def sample_metadata() -> VideoMetadata:
    return VideoMetadata.from_probe(12.5, 1920, 1080)


@pytest.fixture
def sample_handle() -> UploadHandle:
    return UploadHandle(location="/uploads/clip.mp4", local_path="/uploads/clip.mp4", byte_size=1024)


@pytest.fixture
def sample_video_file(tmp_path) -> Path:
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00" * 5000)
    return path


# ── Port Fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def mock_probe_port(sample_metadata):
    mock = AsyncMock()
    mock.probe.return_value = sample_metadata
    return mock


@pytest.fixture
def make_uploader():
    return ScriptedUploader


@pytest.fixture
def make_extractor():
    return ScriptedExtractor


@pytest.fixture
def make_probe():
    return GatedProbe


@pytest.fixture
def uploader() -> ScriptedUploader:
    return ScriptedUploader()


@pytest.fixture
def extractor() -> ScriptedExtractor:
    return ScriptedExtractor()


@pytest.fixture
def make_controller():
    def _make(probe, uploader, extractor, policy: Optional[SamplingPolicy] = None) -> PipelineController:
        return PipelineController(
            probe=probe,
            upload_stage=UploadStage(uploader),
            processing_stage=ProcessingStage(extractor, policy=policy),
        )
    return _make


@pytest.fixture
def controller(make_controller, mock_probe_port, uploader, extractor) -> PipelineController:
    return make_controller(mock_probe_port, uploader, extractor)
