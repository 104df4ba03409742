"""Integration test fixtures for API testing."""
from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
import pytest
from httpx import ASGITransport, AsyncClient

from vidshot.adapters.inbound.fastapi_app import app
from vidshot.infrastructure.config import Settings, StorageSettings, WebSettings
from vidshot.infrastructure.container import ApplicationContainer


@pytest.fixture
def test_settings(tmp_path):
    """Settings with every storage directory under tmp_path."""
    media = tmp_path / "media"
    return Settings(
        app_env="test",
        storage=StorageSettings(
            media_root=str(media),
            upload_dir=str(media / "uploads"),
            screenshots_dir=str(media / "screenshots"),
        ),
        web=WebSettings(max_upload_size_mb=1),
    )


@pytest.fixture
def test_container(test_settings):
    return ApplicationContainer(test_settings)


@pytest.fixture
async def async_client(test_container):
    """Create an async test client for the FastAPI app."""
    app.state.container = test_container

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await test_container.pipeline_controller().aclose()


@pytest.fixture
def avi_bytes(tmp_path) -> bytes:
    """A small MJPG clip, 3 seconds at 10 fps."""
    path: Path = tmp_path / "fixture.avi"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), 10, (64, 48))
    for i in range(30):
        frame = np.full((48, 64, 3), i * 8, dtype=np.uint8)
        writer.write(frame)
    writer.release()
    return path.read_bytes()
