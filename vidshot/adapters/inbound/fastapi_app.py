"""
FastAPI application - primary inbound adapter for the presentation layer.
"""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vidshot import __version__
from vidshot.core.exceptions import (
    InvalidFileError,
    InvalidTransitionError,
    ScreenshotNotFoundError,
    VidshotError,
)
from vidshot.infrastructure.config import Settings
from vidshot.infrastructure.logging_config import setup_logging

logger = logging.getLogger(__name__)

settings = Settings()


def attach_notifier(container) -> None:
    """Forward every committed state to the WebSocket notifier, in order."""
    notifier = container.notification()
    notifier.start()
    container.pipeline_controller().add_listener(notifier.publish)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    setup_logging(settings.logging.level)
    settings.validate_startup()
    logger.info("vidshot backend starting up...")
    from vidshot.infrastructure.container import ApplicationContainer
    container = ApplicationContainer(settings)
    attach_notifier(container)
    app.state.container = container
    yield
    await container.pipeline_controller().aclose()
    await container.notification().aclose()
    logger.info("vidshot backend shutting down...")


app = FastAPI(
    title="vidshot API",
    description="Video screenshot generator",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Log each request with method, path, status, and duration."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    if request.url.path.startswith("/api"):
        response.headers["cache-control"] = "no-store, no-cache, must-revalidate"
    logger.info(
        "%s %s -> %d (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


@app.exception_handler(ScreenshotNotFoundError)
async def screenshot_not_found_handler(request: Request, exc: ScreenshotNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidFileError)
async def invalid_file_handler(request: Request, exc: InvalidFileError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(VidshotError)
async def vidshot_error_handler(request: Request, exc: VidshotError):
    logger.error("Unhandled pipeline error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# ── API routes ─────────────────────────────────────────────────

from vidshot.adapters.inbound.api.pipeline import router as pipeline_router

app.include_router(pipeline_router, prefix="/api/pipeline", tags=["pipeline"])


@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "version": __version__,
        "upload_backend": settings.upload.backend,
        "sampling": settings.sampling.strategy.value,
    }


@app.websocket("/ws/pipeline")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint pushing every pipeline state change."""
    container = websocket.app.state.container
    notifier = container.notification()
    await notifier.connect(websocket)
    notifier.publish(container.pipeline_controller().state)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await notifier.disconnect(websocket)
