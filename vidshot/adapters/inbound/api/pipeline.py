"""
Screenshot pipeline API routes.
"""
from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import AsyncIterator

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse, JSONResponse

from vidshot.adapters.outbound.storage.local_file_storage import StorageLimitExceeded
from vidshot.core.entities.video_source import VideoSource

logger = logging.getLogger(__name__)

router = APIRouter()

CHUNK_SIZE = 8 * 1024 * 1024  # 8MB


def _controller(request: Request):
    return request.app.state.container.pipeline_controller()


async def _chunks(file: UploadFile) -> AsyncIterator[bytes]:
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        yield chunk


@router.get("/state")
async def get_state(request: Request):
    """Return the current pipeline snapshot."""
    return _controller(request).state.to_dict()


@router.post("/select")
async def select_file(request: Request, file: UploadFile = File(...)):
    """Stage an uploaded file locally and select it as the pipeline source."""
    container = request.app.state.container
    settings = container.settings
    controller = _controller(request)

    original_name = file.filename or "upload"
    mime_type = file.content_type or "application/octet-stream"

    if not mime_type.startswith("video/"):
        candidate = VideoSource(name=original_name, byte_size=file.size or 0, mime_type=mime_type)
        state = controller.select_file(candidate)
        raise HTTPException(status_code=400, detail=state.error.message if state.error else "Invalid file")

    storage = container.file_storage()
    max_size_bytes = settings.web.max_upload_size_mb * 1024 * 1024
    directory = f"{settings.storage.staging_dir}/{uuid.uuid4()}"
    try:
        staged_path = await storage.save_stream(
            _chunks(file), original_name, directory=directory, max_bytes=max_size_bytes
        )
    except StorageLimitExceeded:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.web.max_upload_size_mb}MB",
        )

    previous = controller.state.source
    source = VideoSource.from_path(staged_path, mime_type=mime_type, name=original_name)
    state = controller.select_file(source)
    logger.info("Staged %s at %s", original_name, staged_path)

    # The replaced selection was staged by this route; its run is already cancelled.
    if previous is not None and previous.path and Path(previous.path).is_relative_to(storage.base_dir):
        await storage.remove(previous.path)
    return state.to_dict()


@router.post("/start")
async def start(request: Request):
    """Kick off upload and processing for the selected file."""
    controller = _controller(request)
    task = controller.start()
    if task is None:
        raise HTTPException(
            status_code=409,
            detail=f"Cannot start while pipeline is {controller.state.phase.value}",
        )
    return JSONResponse(status_code=202, content=controller.state.to_dict())


@router.get("/screenshots/{index}")
async def download_screenshot(request: Request, index: int):
    """Download one generated screenshot by its 1-based ordinal."""
    shot = _controller(request).screenshot(index)
    return FileResponse(
        shot.uri,
        media_type="image/jpeg",
        filename=f"screenshot_{index}.jpg",
    )
