"""
Screenshot pipeline use case.
Owns the PipelineState and sequences probe -> upload -> processing on the
running event loop.
"""
from __future__ import annotations

import asyncio
import logging
import shutil
from functools import partial
from pathlib import Path
from typing import Callable, Optional

from vidshot.application.processing_stage import ProcessingStage
from vidshot.application.upload_stage import UploadStage
from vidshot.core.entities.pipeline_state import ErrorKind, Phase, PipelineState
from vidshot.core.entities.screenshot import ScreenshotRef
from vidshot.core.entities.upload_handle import UploadHandle
from vidshot.core.entities.video_metadata import VideoMetadata
from vidshot.core.entities.video_source import VideoSource
from vidshot.core.exceptions import (
    ProbeError,
    ProcessingError,
    ScreenshotNotFoundError,
    UploadError,
)
from vidshot.core.services import pipeline_transitions as transitions

logger = logging.getLogger(__name__)

StateListener = Callable[[PipelineState], None]


class PipelineController:
    """Single writer of the pipeline state.

    Every selection bumps a generation counter. Probe results, progress
    callbacks and stage resolutions carry the generation they were started
    under and are dropped once it is stale. Commands must be issued from
    the event loop thread.
    """

    def __init__(
        self,
        probe,  # MetadataProbePort
        upload_stage: UploadStage,
        processing_stage: ProcessingStage,
    ):
        self._probe = probe
        self._upload_stage = upload_stage
        self._processing_stage = processing_stage
        self._state = PipelineState()
        self._generation = 0
        self._probe_task: Optional[asyncio.Task] = None
        self._run_task: Optional[asyncio.Task] = None
        self._result_handle: Optional[UploadHandle] = None
        self._abandoned: set[asyncio.Task] = set()
        self._listeners: list[StateListener] = []

    # -- read side ---------------------------------------------------------

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -- commands ----------------------------------------------------------

    def select_file(self, candidate: VideoSource) -> PipelineState:
        """Select a new video, cancelling whatever the previous one was doing."""
        if not candidate.is_video:
            logger.warning("Rejected %s: mime type %r is not video", candidate.name, candidate.mime_type)
            self._commit(transitions.select_file(self._state, candidate))
            return self._state

        loop = asyncio.get_running_loop()
        self._invalidate()
        self._commit(transitions.select_file(self._state, candidate))
        logger.info("Selected %s (%s, %s)", candidate.name, candidate.mime_type, candidate.size_formatted)

        self._probe_task = loop.create_task(
            self._probe_source(self._generation, candidate),
            name=f"probe-{self._generation}",
        )
        return self._state

    def start(self) -> Optional[asyncio.Task]:
        """Begin upload then processing. Returns None when not in SELECTED."""
        if not self._state.can_start:
            logger.warning("start() ignored while pipeline is %s", self._state.phase.value)
            return None

        loop = asyncio.get_running_loop()
        source = self._state.source
        self._commit(transitions.begin_upload(self._state))
        self._run_task = loop.create_task(
            self._run(self._generation, source),
            name=f"pipeline-{self._generation}",
        )
        return self._run_task

    def screenshot(self, index: int) -> ScreenshotRef:
        if self._state.phase == Phase.COMPLETE:
            for shot in self._state.screenshots:
                if shot.index == index:
                    return shot
        raise ScreenshotNotFoundError(index)

    def download_screenshot(self, index: int, destination: str | Path) -> Path:
        """Copy screenshot *index* into the *destination* directory."""
        shot = self.screenshot(index)
        target_dir = Path(destination)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / shot.filename
        shutil.copy2(shot.uri, target)
        logger.info("Saved screenshot %d -> %s", index, target)
        return target

    def close(self) -> None:
        """Tear down: cancel in-flight work and ignore anything it still reports."""
        self._invalidate()
        logger.info("Pipeline controller closed")

    async def aclose(self) -> None:
        self.close()
        pending = list(self._abandoned)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def join(self) -> None:
        """Wait for the current probe and stage sequence to settle."""
        tasks = [t for t in (self._probe_task, self._run_task) if t is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # -- internals ---------------------------------------------------------

    def _invalidate(self) -> None:
        self._generation += 1
        for task in (self._probe_task, self._run_task):
            if task is not None and not task.done():
                task.cancel()
                self._track(task)
        self._probe_task = None
        self._run_task = None
        if self._result_handle is not None:
            self._track(asyncio.get_running_loop().create_task(
                self._processing_stage.discard(self._result_handle)
            ))
            self._result_handle = None

    def _track(self, task: asyncio.Task) -> None:
        self._abandoned.add(task)
        task.add_done_callback(self._abandoned.discard)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _commit(self, state: PipelineState) -> None:
        previous = self._state.phase
        self._state = state
        if state.phase != previous:
            logger.info("Pipeline phase: %s -> %s", previous.value, state.phase.value)
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener %r failed", listener)

    def _on_progress(self, generation: int, value: int) -> None:
        if not self._is_current(generation):
            logger.debug("Dropped stale progress %d (generation %d)", value, generation)
            return
        self._commit(transitions.update_progress(self._state, value))

    async def _probe_source(self, generation: int, source: VideoSource) -> None:
        try:
            metadata = await self._probe.probe(source)
        except ProbeError as e:
            logger.warning("Metadata probe failed for %s: %s", source.name, e)
            metadata = VideoMetadata.unknown(str(e))
        except Exception as e:
            logger.exception("Unexpected metadata probe failure for %s", source.name)
            metadata = VideoMetadata.unknown(str(e) or type(e).__name__)

        if not self._is_current(generation) or self._state.source is not source:
            logger.debug("Discarding stale probe result for %s", source.name)
            return
        self._commit(transitions.merge_metadata(self._state, metadata))

    async def _run(self, generation: int, source: VideoSource) -> None:
        report = partial(self._on_progress, generation)
        handle: Optional[UploadHandle] = None
        completed = False

        try:
            try:
                handle = await self._upload_stage.run(source, report)
            except UploadError as e:
                self._fail(generation, ErrorKind.UPLOAD_FAILED, str(e))
                return
            if not self._is_current(generation):
                return
            self._commit(transitions.begin_processing(self._state))

            try:
                screenshots = await self._processing_stage.run(handle, report)
            except ProcessingError as e:
                self._fail(generation, ErrorKind.PROCESSING_FAILED, str(e))
                return
            if not self._is_current(generation):
                return
            self._commit(transitions.complete(self._state, screenshots))
            self._result_handle = handle
            completed = True
        finally:
            if handle is not None:
                await self._upload_stage.discard(handle)
                if not completed:
                    await self._processing_stage.discard(handle)

    def _fail(self, generation: int, kind: ErrorKind, message: str) -> None:
        if not self._is_current(generation):
            logger.debug("Dropped stale %s failure: %s", kind.value, message)
            return
        logger.error("Pipeline failed (%s): %s", kind.value, message)
        self._commit(transitions.fail(self._state, kind, message))
