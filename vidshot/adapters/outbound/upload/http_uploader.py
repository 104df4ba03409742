"""HTTP implementation of UploadPort using httpx.

Streams the raw file body to a remote endpoint and reports progress as
bytes leave the client.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import AsyncIterator, BinaryIO, Optional
from urllib.parse import quote

import httpx

from vidshot.core.entities.upload_handle import UploadHandle
from vidshot.core.entities.video_source import VideoSource
from vidshot.core.exceptions import UploadError
from vidshot.ports.outbound.progress import ProgressCallback

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB


class HttpUploader:
    """Implements :class:`UploadPort` with a streamed ``POST``.

    The endpoint may answer with JSON ``{"location": ...}`` or a
    ``Location`` header; otherwise the endpoint URL itself is the location.
    """

    def __init__(
        self,
        endpoint_url: str,
        chunk_size: int = CHUNK_SIZE,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._endpoint_url = endpoint_url
        self._chunk_size = chunk_size
        self._timeout = timeout
        self._transport = transport
        logger.info("HttpUploader initialised (url=%s)", endpoint_url)

    async def upload(self, source: VideoSource, on_progress: ProgressCallback) -> UploadHandle:
        if not source.path:
            raise UploadError(f"No local file for {source.name}")

        upload_id = str(uuid.uuid4())
        headers = {
            "Content-Type": source.mime_type,
            "Content-Length": str(source.byte_size),
            "X-Upload-Id": upload_id,
            "X-Upload-Filename": quote(source.name),
        }

        on_progress(0)
        try:
            with open(source.path, "rb") as f:
                async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                    response = await client.post(
                        self._endpoint_url,
                        content=self._body(f, source.byte_size, on_progress),
                        headers=headers,
                    )
                    response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UploadError(
                f"Server rejected upload of {source.name}: HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise UploadError(f"Upload of {source.name} timed out") from e
        except httpx.HTTPError as e:
            raise UploadError(f"Upload of {source.name} failed: {e}") from e
        except OSError as e:
            raise UploadError(f"Cannot read {source.name}: {e}") from e

        location = self._location(response)
        logger.debug("Uploaded %s -> %s", source.name, location)
        return UploadHandle(
            location=location,
            local_path=source.path,
            byte_size=source.byte_size,
            upload_id=upload_id,
        )

    async def _body(self, f: BinaryIO, total: int, on_progress: ProgressCallback) -> AsyncIterator[bytes]:
        # upload() owns *f* and closes it.
        loop = asyncio.get_running_loop()
        sent = 0
        while True:
            chunk = await loop.run_in_executor(None, f.read, self._chunk_size)
            if not chunk:
                break
            sent += len(chunk)
            yield chunk
            if total:
                on_progress(sent * 100 // total)

    async def discard(self, handle: UploadHandle) -> None:
        # The remote copy belongs to the endpoint and local_path is the source itself.
        logger.debug("Nothing to discard for upload %s", handle.upload_id)

    def _location(self, response: httpx.Response) -> str:
        if "application/json" in response.headers.get("content-type", ""):
            try:
                location = response.json().get("location")
            except ValueError:
                location = None
            if location:
                return str(location)
        return response.headers.get("location") or self._endpoint_url
