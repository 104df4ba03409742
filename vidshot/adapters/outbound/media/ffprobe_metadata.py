"""FFprobe-based metadata probe adapter.

Implements :class:`MetadataProbePort` by reading container-level duration
and the first video stream's native frame size.
"""
from __future__ import annotations

import asyncio
import json
import logging
import subprocess
from functools import partial
from typing import Any, Optional

from vidshot.adapters.outbound.media.ffprobe_base import probe_container
from vidshot.core.entities.video_metadata import VideoMetadata
from vidshot.core.entities.video_source import VideoSource
from vidshot.core.exceptions import ProbeError

logger = logging.getLogger(__name__)


class FFprobeMetadataProbe:
    """Derives :class:`VideoMetadata` with ``ffprobe``.

    Satisfies :class:`~vidshot.ports.outbound.metadata_probe_port.MetadataProbePort`.
    """

    def __init__(self, timeout: int = 30) -> None:
        self._timeout = timeout

    async def probe(self, source: VideoSource) -> VideoMetadata:
        if not source.path:
            raise ProbeError(f"No local file to probe for {source.name}")

        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(
                None, partial(probe_container, source.path, timeout=self._timeout)
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeError(f"ffprobe timed out after {self._timeout}s on {source.name}") from e
        except (RuntimeError, OSError, json.JSONDecodeError) as e:
            raise ProbeError(f"ffprobe could not read {source.name}: {e}") from e

        metadata = self.parse(data)
        logger.info(
            "Probed %s: %s, %s, %s",
            source.name,
            metadata.duration_formatted,
            metadata.resolution_str,
            metadata.aspect_ratio,
        )
        return metadata

    @staticmethod
    def parse(data: dict[str, Any]) -> VideoMetadata:
        """Turn ffprobe JSON into metadata. Raises ProbeError subclasses."""
        streams = [s for s in data.get("streams", []) if s.get("codec_type") == "video"]
        if not streams:
            raise ProbeError("No video stream found")
        stream = streams[0]

        width = _to_int(stream.get("width"))
        height = _to_int(stream.get("height"))
        duration = _to_float(data.get("format", {}).get("duration"))
        if duration is None:
            duration = _to_float(stream.get("duration"))

        return VideoMetadata.from_probe(duration, width, height)


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
