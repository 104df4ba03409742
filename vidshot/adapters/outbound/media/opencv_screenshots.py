"""OpenCV-based screenshot extraction adapter.

Implements :class:`ScreenshotExtractionPort` on this host. Decoding runs in
a worker thread; progress is marshalled back onto the event loop.
"""
from __future__ import annotations

import asyncio
import logging
import shutil
import threading
from pathlib import Path
from typing import Callable

import cv2

from vidshot.core.entities.screenshot import ScreenshotRef
from vidshot.core.entities.upload_handle import UploadHandle
from vidshot.core.exceptions import ProcessingError
from vidshot.core.value_objects.sampling_policy import SamplingPolicy
from vidshot.ports.outbound.progress import ProgressCallback

logger = logging.getLogger(__name__)

_DEFAULT_QUALITY: int = 90
# Scene-change sampling compares roughly two frames per second.
_SCENE_SAMPLES_PER_SECOND: float = 2.0


class OpenCVScreenshotExtractor:
    """Writes JPEG screenshots chosen by a :class:`SamplingPolicy`.

    Satisfies :class:`~vidshot.ports.outbound.screenshot_extraction_port.ScreenshotExtractionPort`.
    """

    def __init__(self, output_dir: str | Path, quality: int = _DEFAULT_QUALITY) -> None:
        self._output_dir = Path(output_dir)
        self._quality = quality

    # -- Port interface --------------------------------------------------------

    async def extract_screenshots(
        self,
        handle: UploadHandle,
        policy: SamplingPolicy,
        on_progress: ProgressCallback,
    ) -> list[ScreenshotRef]:
        video_path = handle.local_path or handle.location
        out = self._output_dir / handle.upload_id
        loop = asyncio.get_running_loop()
        cancelled = threading.Event()

        def report(value: float) -> None:
            if not cancelled.is_set():
                loop.call_soon_threadsafe(on_progress, int(value))

        try:
            return await loop.run_in_executor(
                None, self._extract_sync, video_path, out, policy, report, cancelled
            )
        except asyncio.CancelledError:
            cancelled.set()
            logger.info("Screenshot extraction for %s cancelled", video_path)
            raise

    async def discard(self, handle: UploadHandle) -> None:
        folder = self._output_dir / handle.upload_id
        if not folder.is_dir():
            return
        await asyncio.get_running_loop().run_in_executor(None, shutil.rmtree, folder)
        logger.debug("Removed screenshots in %s", folder)

    # -- Private sync helpers --------------------------------------------------

    def _extract_sync(
        self,
        video_path: str,
        output_dir: Path,
        policy: SamplingPolicy,
        report: Callable[[float], None],
        cancelled: threading.Event,
    ) -> list[ScreenshotRef]:
        cap = cv2.VideoCapture(video_path)
        if not cap.isOpened():
            raise ProcessingError(f"Cannot open video file: {video_path}")

        try:
            fps: float = cap.get(cv2.CAP_PROP_FPS)
            total_frames = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
            duration = total_frames / fps if fps > 0 else 0.0
            logger.info(
                "Video info - FPS: %.2f, Total frames: %d, Duration: %.2fs",
                fps, total_frames, duration,
            )
            output_dir.mkdir(parents=True, exist_ok=True)

            if policy.is_time_based:
                shots = self._sample_at_times(
                    cap, policy.timestamps(duration), fps, total_frames, output_dir, report, cancelled
                )
            else:
                shots = self._sample_scene_changes(
                    cap, policy, fps, total_frames, output_dir, report, cancelled
                )
        finally:
            cap.release()

        logger.info("Screenshot extraction completed: %d images in %s", len(shots), output_dir)
        return shots

    def _sample_at_times(
        self,
        cap: cv2.VideoCapture,
        timestamps: list[float],
        fps: float,
        total_frames: int,
        output_dir: Path,
        report: Callable[[float], None],
        cancelled: threading.Event,
    ) -> list[ScreenshotRef]:
        shots: list[ScreenshotRef] = []
        for index, timestamp in enumerate(timestamps, start=1):
            if cancelled.is_set():
                raise ProcessingError("Screenshot extraction cancelled")

            target_frame = int(timestamp * fps) if fps > 0 else 0
            if total_frames > 0:
                target_frame = min(target_frame, total_frames - 1)
            cap.set(cv2.CAP_PROP_POS_FRAMES, target_frame)

            ret, frame = cap.read()
            if not ret:
                raise ProcessingError(
                    f"Failed to read frame at timestamp {timestamp:.2f}s (frame {target_frame})"
                )

            shots.append(self._save(frame, index, timestamp, output_dir))
            report(index * 100 / len(timestamps))
        return shots

    def _sample_scene_changes(
        self,
        cap: cv2.VideoCapture,
        policy: SamplingPolicy,
        fps: float,
        total_frames: int,
        output_dir: Path,
        report: Callable[[float], None],
        cancelled: threading.Event,
    ) -> list[ScreenshotRef]:
        step = max(1, int(round(fps / _SCENE_SAMPLES_PER_SECOND))) if fps > 0 else 1
        shots: list[ScreenshotRef] = []
        previous_hist = None
        frame_index = 0

        while len(shots) < policy.max_frames:
            if cancelled.is_set():
                raise ProcessingError("Screenshot extraction cancelled")

            ret, frame = cap.read()
            if not ret:
                break

            if frame_index % step == 0:
                hist = _histogram(frame)
                if previous_hist is None or _distance(previous_hist, hist) >= policy.scene_threshold:
                    timestamp = frame_index / fps if fps > 0 else 0.0
                    shots.append(self._save(frame, len(shots) + 1, timestamp, output_dir))
                    previous_hist = hist
                    logger.debug("Scene change kept at %.2fs", timestamp)
                if total_frames > 0:
                    report(frame_index * 100 / total_frames)

            frame_index += 1

        if not shots:
            raise ProcessingError("No frames could be decoded")
        return shots

    def _save(self, frame, index: int, timestamp: float, output_dir: Path) -> ScreenshotRef:
        frame_path = output_dir / f"screenshot_{index:02d}_t{timestamp:.2f}s.jpg"
        ok = cv2.imwrite(str(frame_path), frame, [cv2.IMWRITE_JPEG_QUALITY, self._quality])
        if not ok:
            raise ProcessingError(f"Failed to write screenshot {frame_path}")
        logger.debug("Saved screenshot %d at %.2fs", index, timestamp)
        return ScreenshotRef(index=index, uri=str(frame_path), timestamp_seconds=timestamp)


def _histogram(frame):
    hsv = cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)
    hist = cv2.calcHist([hsv], [0, 1], None, [50, 60], [0, 180, 0, 256])
    cv2.normalize(hist, hist, 0, 1, cv2.NORM_MINMAX)
    return hist


def _distance(a, b) -> float:
    """0 for identical colour distributions, up to 1 for unrelated ones."""
    correlation = cv2.compareHist(a, b, cv2.HISTCMP_CORREL)
    return max(0.0, min(1.0, 1.0 - correlation))
