"""VideoMetadata entity - attributes derived by probing a video."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from vidshot.core.value_objects.aspect_ratio import AspectRatio


@dataclass(frozen=True)
class VideoMetadata:
    """Probe result. ``None`` fields are unknown."""

    duration_seconds: Optional[float] = None
    aspect_ratio: Optional[AspectRatio] = None
    width: int = 0
    height: int = 0
    probe_error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.duration_seconds is not None and self.duration_seconds < 0:
            raise ValueError(f"duration_seconds must be >= 0, got {self.duration_seconds}")

    @classmethod
    def from_probe(cls, duration_seconds: Optional[float], width: int, height: int) -> VideoMetadata:
        """Reduce the native frame size to an aspect ratio.

        Raises InvalidDimensionsError when either side is zero.
        """
        return cls(
            duration_seconds=None if duration_seconds is None else max(0.0, float(duration_seconds)),
            aspect_ratio=AspectRatio.from_dimensions(width, height),
            width=int(width),
            height=int(height),
        )

    @classmethod
    def unknown(cls, probe_error: Optional[str] = None) -> VideoMetadata:
        return cls(probe_error=probe_error)

    @property
    def is_known(self) -> bool:
        return self.duration_seconds is not None and self.aspect_ratio is not None

    @property
    def resolution_str(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def duration_formatted(self) -> Optional[str]:
        if self.duration_seconds is None:
            return None
        return f"{self.duration_seconds:.2f} s"
