"""VideoSource entity representing a user-selected video file."""

from __future__ import annotations

import mimetypes
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

VIDEO_MIME_PREFIX = "video/"


@dataclass(frozen=True)
class VideoSource:
    """Opaque handle to a selected file. Replaced wholesale on re-selection."""

    name: str
    byte_size: int
    mime_type: str
    path: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()), compare=False)

    @classmethod
    def from_path(cls, path: str | Path, mime_type: Optional[str] = None, name: str = "") -> VideoSource:
        """Build a source from a file on disk, guessing the MIME type from its name."""
        file_path = Path(path)
        display_name = name or file_path.name
        if mime_type is None:
            mime_type, _ = mimetypes.guess_type(display_name)
        return cls(
            name=display_name,
            byte_size=file_path.stat().st_size,
            mime_type=mime_type or "application/octet-stream",
            path=str(file_path),
        )

    @property
    def is_video(self) -> bool:
        return self.mime_type.lower().startswith(VIDEO_MIME_PREFIX)

    @property
    def extension(self) -> str:
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[1]

    @property
    def size_megabytes(self) -> float:
        return self.byte_size / (1024 * 1024)

    @property
    def size_formatted(self) -> str:
        return f"{self.size_megabytes:.2f} MB"
