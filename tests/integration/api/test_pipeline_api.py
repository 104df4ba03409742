"""Integration tests for the pipeline endpoints."""
from __future__ import annotations

from pathlib import Path

import pytest


class TestStateEndpoint:
    @pytest.mark.asyncio
    async def test_initial_state_is_idle(self, async_client):
        response = await async_client.get("/api/pipeline/state")

        assert response.status_code == 200
        data = response.json()
        assert data["phase"] == "idle"
        assert data["progress"] == 0
        assert data["file_info"] is None
        assert data["screenshots"] == []


class TestSelectEndpoint:
    """Tests for POST /api/pipeline/select."""

    @pytest.mark.asyncio
    async def test_non_video_is_rejected(self, async_client):
        response = await async_client.post(
            "/api/pipeline/select",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Please select a valid video file."
        state = (await async_client.get("/api/pipeline/state")).json()
        assert state["phase"] == "idle"
        assert state["error"]["kind"] == "invalid_file"

    @pytest.mark.asyncio
    async def test_video_is_selected(self, async_client, avi_bytes):
        response = await async_client.post(
            "/api/pipeline/select",
            files={"file": ("holiday.avi", avi_bytes, "video/x-msvideo")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["phase"] == "selected"
        assert data["file_info"]["name"] == "holiday.avi"
        assert data["file_info"]["extension"] == "avi"

    @pytest.mark.asyncio
    async def test_reselect_removes_previous_staged_file(self, async_client, test_container, avi_bytes):
        files = {"file": ("holiday.avi", avi_bytes, "video/x-msvideo")}
        await async_client.post("/api/pipeline/select", files=files)
        first = Path(test_container.pipeline_controller().state.source.path)
        assert first.exists()

        await async_client.post("/api/pipeline/select", files=files)

        assert not first.exists()
        assert Path(test_container.pipeline_controller().state.source.path).exists()

    @pytest.mark.asyncio
    async def test_too_large_file(self, async_client):
        response = await async_client.post(
            "/api/pipeline/select",
            files={"file": ("big.mp4", b"\x00" * (1024 * 1024 + 1), "video/mp4")},
        )
        assert response.status_code == 413


class TestStartEndpoint:
    """Tests for POST /api/pipeline/start."""

    @pytest.mark.asyncio
    async def test_start_without_selection(self, async_client):
        response = await async_client.post("/api/pipeline/start")

        assert response.status_code == 409
        assert response.json()["detail"] == "Cannot start while pipeline is idle"

    @pytest.mark.asyncio
    async def test_full_pipeline(self, async_client, test_container, avi_bytes):
        await async_client.post(
            "/api/pipeline/select",
            files={"file": ("holiday.avi", avi_bytes, "video/x-msvideo")},
        )

        response = await async_client.post("/api/pipeline/start")
        assert response.status_code == 202
        assert response.json()["phase"] == "uploading"

        await test_container.pipeline_controller().join()

        data = (await async_client.get("/api/pipeline/state")).json()
        assert data["phase"] == "complete"
        assert data["progress"] == 100
        assert [s["index"] for s in data["screenshots"]] == [1, 2, 3, 4]

        image = await async_client.get("/api/pipeline/screenshots/2")
        assert image.status_code == 200
        assert image.headers["content-type"] == "image/jpeg"
        assert image.content[:2] == b"\xff\xd8"

    @pytest.mark.asyncio
    async def test_reselect_leaves_no_upload_or_screenshot_folders(self, async_client, test_container, test_settings, avi_bytes):
        files = {"file": ("holiday.avi", avi_bytes, "video/x-msvideo")}
        controller = test_container.pipeline_controller()
        uploads = Path(test_settings.storage.upload_dir)
        screenshots = Path(test_settings.storage.screenshots_dir)

        await async_client.post("/api/pipeline/select", files=files)
        await async_client.post("/api/pipeline/start")
        await controller.join()
        assert controller.state.phase.value == "complete"
        assert list(uploads.iterdir()) == []
        assert len(list(screenshots.iterdir())) == 1

        await async_client.post("/api/pipeline/select", files=files)
        await controller.aclose()

        assert list(uploads.iterdir()) == []
        assert list(screenshots.iterdir()) == []


class TestScreenshotEndpoint:
    @pytest.mark.asyncio
    async def test_unknown_screenshot(self, async_client):
        response = await async_client.get("/api/pipeline/screenshots/1")
        assert response.status_code == 404
        assert response.json()["detail"] == "Screenshot not found: 1"
