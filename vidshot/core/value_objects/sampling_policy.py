"""SamplingPolicy value object - how frames are chosen from a video."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_FRAME_COUNT = 4


class SamplingStrategy(str, Enum):
    FIXED_COUNT = "fixed_count"
    FIXED_INTERVAL = "fixed_interval"
    SCENE_CHANGE = "scene_change"


@dataclass(frozen=True)
class SamplingPolicy:
    """Immutable frame sampling configuration.

    ``FIXED_COUNT`` spreads ``frame_count`` frames evenly across the video,
    ``FIXED_INTERVAL`` takes one frame every ``interval_seconds`` (capped at
    ``max_frames``) and ``SCENE_CHANGE`` keeps frames whose colour histogram
    differs from the last kept frame by at least ``scene_threshold``.
    """

    strategy: SamplingStrategy = SamplingStrategy.FIXED_COUNT
    frame_count: int = DEFAULT_FRAME_COUNT
    interval_seconds: float = 2.0
    scene_threshold: float = 0.4
    max_frames: int = 50

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategy", SamplingStrategy(self.strategy))
        if self.frame_count < 1:
            raise ValueError(f"frame_count must be positive, got {self.frame_count}")
        if self.interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {self.interval_seconds}")
        if not 0.0 < self.scene_threshold <= 1.0:
            raise ValueError(f"scene_threshold must be in (0, 1], got {self.scene_threshold}")
        if self.max_frames < 1:
            raise ValueError(f"max_frames must be positive, got {self.max_frames}")

    @classmethod
    def fixed_count(cls, count: int = DEFAULT_FRAME_COUNT) -> SamplingPolicy:
        return cls(strategy=SamplingStrategy.FIXED_COUNT, frame_count=count)

    @classmethod
    def fixed_interval(cls, interval_seconds: float, max_frames: int = 50) -> SamplingPolicy:
        return cls(
            strategy=SamplingStrategy.FIXED_INTERVAL,
            interval_seconds=interval_seconds,
            max_frames=max_frames,
        )

    @classmethod
    def scene_change(cls, threshold: float = 0.4, max_frames: int = 50) -> SamplingPolicy:
        return cls(
            strategy=SamplingStrategy.SCENE_CHANGE,
            scene_threshold=threshold,
            max_frames=max_frames,
        )

    @property
    def is_time_based(self) -> bool:
        return self.strategy != SamplingStrategy.SCENE_CHANGE

    def timestamps(self, duration_seconds: float) -> list[float]:
        """Return the capture times in seconds for a video of the given length.

        Only time-based strategies can be planned up front; scene-change
        sampling depends on the pixels and is decided while decoding.
        """
        if not self.is_time_based:
            raise ValueError("Scene-change sampling has no precomputed timestamps")

        duration = max(0.0, duration_seconds)
        if self.strategy == SamplingStrategy.FIXED_COUNT:
            step = duration / (self.frame_count + 1)
            return [round(step * i, 3) for i in range(1, self.frame_count + 1)]

        times: list[float] = []
        t = 0.0
        while len(times) < self.max_frames and (t < duration or not times):
            times.append(round(t, 3))
            t += self.interval_seconds
        return times
