"""Port for deriving video metadata without full decoding."""
from __future__ import annotations
from typing import Protocol, runtime_checkable

from vidshot.core.entities.video_metadata import VideoMetadata
from vidshot.core.entities.video_source import VideoSource


@runtime_checkable
class MetadataProbePort(Protocol):
    async def probe(self, source: VideoSource) -> VideoMetadata: ...
