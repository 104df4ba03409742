"""ScreenshotRef entity - one generated still image."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class ScreenshotRef:
    """Reference to a generated image. ``index`` is 1-based and defines display order."""

    index: int
    uri: str
    timestamp_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        if self.index < 1:
            raise ValueError(f"Screenshot index must be >= 1, got {self.index}")

    @property
    def filename(self) -> str:
        return Path(self.uri).name

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "uri": self.uri,
            "timestamp_seconds": self.timestamp_seconds,
        }
