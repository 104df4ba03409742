"""Port for staging received files on this host."""
from __future__ import annotations
from pathlib import Path
from typing import AsyncIterator, Optional, Protocol, runtime_checkable


@runtime_checkable
class FileStoragePort(Protocol):
    async def save_stream(
        self,
        chunks: AsyncIterator[bytes],
        filename: str,
        directory: str = "",
        max_bytes: Optional[int] = None,
    ) -> str: ...
    def get_file_path(self, filename: str, directory: str = "") -> Path: ...
    async def remove(self, path: str | Path) -> bool: ...
