"""PipelineState - the single source of truth for the intake pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from vidshot.core.entities.screenshot import ScreenshotRef
from vidshot.core.entities.video_metadata import VideoMetadata
from vidshot.core.entities.video_source import VideoSource

LOADING_PLACEHOLDER = "loading..."


class Phase(str, Enum):
    IDLE = "idle"
    SELECTED = "selected"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"


ACTIVE_PHASES = frozenset({Phase.UPLOADING, Phase.PROCESSING})


class ErrorKind(str, Enum):
    INVALID_FILE = "invalid_file"
    PROBE_ERROR = "probe_error"
    UPLOAD_FAILED = "upload_failed"
    PROCESSING_FAILED = "processing_failed"


@dataclass(frozen=True)
class ErrorInfo:
    kind: ErrorKind
    message: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class PipelineState:
    """Immutable snapshot of the pipeline.

    Invariants (checked on construction):
      * ``progress`` is within 0..100
      * ``screenshots`` is non-empty only in ``COMPLETE``
      * ``error`` is set only in ``FAILED``, except ``INVALID_FILE`` which
        leaves the phase untouched
      * without a ``source`` the phase is ``IDLE`` and there is no metadata
    """

    source: Optional[VideoSource] = None
    metadata: Optional[VideoMetadata] = None
    phase: Phase = Phase.IDLE
    progress: int = 0
    screenshots: tuple[ScreenshotRef, ...] = field(default_factory=tuple)
    error: Optional[ErrorInfo] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "screenshots", tuple(self.screenshots))
        if not 0 <= self.progress <= 100:
            raise ValueError(f"progress must be within 0..100, got {self.progress}")
        if self.screenshots and self.phase != Phase.COMPLETE:
            raise ValueError(f"screenshots present in phase {self.phase.value}")
        if (
            self.error is not None
            and self.phase != Phase.FAILED
            and self.error.kind != ErrorKind.INVALID_FILE
        ):
            raise ValueError(f"{self.error.kind.value} error present in phase {self.phase.value}")
        if self.source is None and (self.phase != Phase.IDLE or self.metadata is not None):
            raise ValueError(f"phase {self.phase.value} requires a selected source")

    @property
    def can_start(self) -> bool:
        return self.phase == Phase.SELECTED

    def file_info(self) -> Optional[dict]:
        """Display attributes of the selected file; unresolved metadata shows a placeholder."""
        if self.source is None:
            return None
        duration = LOADING_PLACEHOLDER
        aspect_ratio = LOADING_PLACEHOLDER
        if self.metadata is not None:
            duration = self.metadata.duration_formatted or "unknown"
            aspect_ratio = str(self.metadata.aspect_ratio) if self.metadata.aspect_ratio else "unknown"
        return {
            "name": self.source.name,
            "extension": self.source.extension,
            "size": self.source.size_formatted,
            "duration": duration,
            "aspect_ratio": aspect_ratio,
        }

    def to_dict(self) -> dict:
        metadata = None
        if self.metadata is not None:
            metadata = {
                "duration_seconds": self.metadata.duration_seconds,
                "aspect_ratio": (
                    list(self.metadata.aspect_ratio.as_tuple()) if self.metadata.aspect_ratio else None
                ),
                "width": self.metadata.width,
                "height": self.metadata.height,
                "probe_error": self.metadata.probe_error,
            }
        return {
            "phase": self.phase.value,
            "progress": self.progress,
            "file_info": self.file_info(),
            "metadata": metadata,
            "screenshots": [s.to_dict() for s in self.screenshots],
            "error": self.error.to_dict() if self.error else None,
        }
