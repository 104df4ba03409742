"""
Processing stage - turns an uploaded video into an ordered screenshot set.
"""
from __future__ import annotations

import logging
from typing import Optional

from vidshot.application.stage_runner import run_stage
from vidshot.core.entities.screenshot import ScreenshotRef
from vidshot.core.entities.upload_handle import UploadHandle
from vidshot.core.exceptions import ProcessingError
from vidshot.core.value_objects.sampling_policy import SamplingPolicy
from vidshot.ports.outbound.progress import ProgressCallback

logger = logging.getLogger(__name__)


class ProcessingStage:
    """Runs a ScreenshotExtractionPort under the stage contract."""

    def __init__(
        self,
        extractor,  # ScreenshotExtractionPort
        policy: Optional[SamplingPolicy] = None,
        timeout: Optional[float] = None,
    ):
        self._extractor = extractor
        self._policy = policy or SamplingPolicy.fixed_count()
        self._timeout = timeout

    @property
    def policy(self) -> SamplingPolicy:
        return self._policy

    async def run(self, handle: UploadHandle, on_progress: ProgressCallback) -> list[ScreenshotRef]:
        logger.info("Extracting screenshots from %s (%s)", handle.location, self._policy.strategy.value)

        async def _extract(report: ProgressCallback) -> list[ScreenshotRef]:
            shots = await self._extractor.extract_screenshots(handle, self._policy, report)
            return self._validated(shots)

        shots = await run_stage("processing", _extract, on_progress, ProcessingError, timeout=self._timeout)
        logger.info("Extracted %d screenshots", len(shots))
        return shots

    async def discard(self, handle: UploadHandle) -> None:
        """Delete screenshots made for *handle*. Failures are logged, never raised."""
        try:
            await self._extractor.discard(handle)
        except OSError as e:
            logger.warning("Could not discard screenshots for %s: %s", handle.upload_id, e)

    @staticmethod
    def _validated(shots: list[ScreenshotRef]) -> list[ScreenshotRef]:
        if not shots:
            raise ProcessingError("Extraction service returned no screenshots")
        ordered = sorted(shots, key=lambda s: s.index)
        expected = list(range(1, len(ordered) + 1))
        if [s.index for s in ordered] != expected:
            raise ProcessingError(
                f"Screenshot ordinals must be 1..{len(ordered)}, got {[s.index for s in ordered]}"
            )
        return ordered
