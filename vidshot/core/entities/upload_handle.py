"""UploadHandle entity - reference to a transmitted video."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True)
class UploadHandle:
    """Opaque reference returned by the upload transport.

    ``location`` is where the transport put the bytes (a path or URL);
    ``local_path`` is a readable copy for extractors running on this host.
    """

    location: str
    local_path: str = ""
    byte_size: int = 0
    upload_id: str = field(default_factory=lambda: str(uuid.uuid4()))
