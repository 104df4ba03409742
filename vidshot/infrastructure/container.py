"""
Dependency container.
Wires together ports and adapters based on configuration.
"""
from __future__ import annotations

import logging
from typing import Optional

from vidshot.infrastructure.config import Settings

logger = logging.getLogger(__name__)


class ApplicationContainer:
    """Simplified container that builds concrete instances from settings.

    Usage::

        container = ApplicationContainer(settings)
        controller = container.pipeline_controller()
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self._cache: dict[str, object] = {}

    def _get_or_create(self, key: str, factory):
        if key not in self._cache:
            self._cache[key] = factory(self.settings)
        return self._cache[key]

    # ── Lazy factory helpers ──────────────────────────────────────

    @staticmethod
    def _build_metadata_probe(settings: Settings):
        from vidshot.adapters.outbound.media.ffprobe_metadata import FFprobeMetadataProbe
        return FFprobeMetadataProbe(timeout=settings.probe.timeout)

    @staticmethod
    def _build_uploader(settings: Settings):
        if settings.upload.backend == "http":
            from vidshot.adapters.outbound.upload.http_uploader import HttpUploader
            return HttpUploader(
                endpoint_url=settings.upload.endpoint_url,
                chunk_size=settings.upload.chunk_size,
            )
        if settings.upload.backend != "local":
            raise ValueError(f"Unknown upload backend: {settings.upload.backend}")
        from vidshot.adapters.outbound.upload.local_uploader import LocalFileUploader
        return LocalFileUploader(
            upload_dir=settings.storage.upload_dir,
            chunk_size=settings.upload.chunk_size,
        )

    @staticmethod
    def _build_screenshot_extractor(settings: Settings):
        from vidshot.adapters.outbound.media.opencv_screenshots import OpenCVScreenshotExtractor
        return OpenCVScreenshotExtractor(
            output_dir=settings.storage.screenshots_dir,
            quality=settings.sampling.jpeg_quality,
        )

    @staticmethod
    def _build_file_storage(settings: Settings):
        from vidshot.adapters.outbound.storage.local_file_storage import LocalFileStorage
        return LocalFileStorage(base_dir=settings.storage.media_root)

    @staticmethod
    def _build_notification(settings: Settings):
        from vidshot.adapters.outbound.external.websocket_notifier import WebSocketNotifier
        return WebSocketNotifier()

    # ── Port accessors ─────────────────────────────────────────────

    def metadata_probe(self):
        return self._get_or_create("metadata_probe", self._build_metadata_probe)

    def uploader(self):
        return self._get_or_create("uploader", self._build_uploader)

    def screenshot_extractor(self):
        return self._get_or_create("screenshot_extractor", self._build_screenshot_extractor)

    def file_storage(self):
        return self._get_or_create("file_storage", self._build_file_storage)

    def notification(self):
        return self._get_or_create("notification", self._build_notification)

    # ── Application services ───────────────────────────────────────

    def upload_stage(self):
        from vidshot.application.upload_stage import UploadStage
        return UploadStage(self.uploader(), timeout=self.settings.upload.timeout)

    def processing_stage(self):
        from vidshot.application.processing_stage import ProcessingStage
        return ProcessingStage(
            self.screenshot_extractor(),
            policy=self.settings.sampling_policy(),
            timeout=self.settings.processing.timeout,
        )

    def pipeline_controller(self):
        if "pipeline_controller" not in self._cache:
            from vidshot.application.pipeline_controller import PipelineController
            self._cache["pipeline_controller"] = PipelineController(
                probe=self.metadata_probe(),
                upload_stage=self.upload_stage(),
                processing_stage=self.processing_stage(),
            )
            logger.info("Pipeline controller created (upload=%s, sampling=%s)",
                        self.settings.upload.backend, self.settings.sampling.strategy.value)
        return self._cache["pipeline_controller"]
