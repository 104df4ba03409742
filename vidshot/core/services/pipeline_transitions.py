"""
Pipeline state transitions - pure domain logic.
Every function takes a PipelineState and returns a new one; nothing is mutated.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from vidshot.core.entities.pipeline_state import (
    ACTIVE_PHASES,
    ErrorInfo,
    ErrorKind,
    Phase,
    PipelineState,
)
from vidshot.core.entities.screenshot import ScreenshotRef
from vidshot.core.entities.video_metadata import VideoMetadata
from vidshot.core.entities.video_source import VideoSource
from vidshot.core.exceptions import InvalidFileError, InvalidTransitionError

_FAILABLE_PHASES = frozenset({Phase.SELECTED, Phase.UPLOADING, Phase.PROCESSING})


def select_file(state: PipelineState, candidate: VideoSource) -> PipelineState:
    """Select *candidate*, or surface InvalidFile and keep everything else."""
    if not candidate.is_video:
        return reject_file(state, InvalidFileError(candidate.mime_type))
    return PipelineState(source=candidate, phase=Phase.SELECTED)


def reject_file(state: PipelineState, error: InvalidFileError) -> PipelineState:
    return replace(state, error=ErrorInfo(ErrorKind.INVALID_FILE, str(error)))


def merge_metadata(state: PipelineState, metadata: VideoMetadata) -> PipelineState:
    if state.source is None:
        raise InvalidTransitionError("merge metadata", state.phase.value)
    return replace(state, metadata=metadata)


def begin_upload(state: PipelineState) -> PipelineState:
    if state.phase != Phase.SELECTED:
        raise InvalidTransitionError("start", state.phase.value)
    return replace(state, phase=Phase.UPLOADING, progress=0, error=None)


def update_progress(state: PipelineState, progress: int) -> PipelineState:
    if state.phase not in ACTIVE_PHASES:
        raise InvalidTransitionError("report progress", state.phase.value)
    return replace(state, progress=max(0, min(100, int(progress))))


def begin_processing(state: PipelineState) -> PipelineState:
    if state.phase != Phase.UPLOADING:
        raise InvalidTransitionError("begin processing", state.phase.value)
    return replace(state, phase=Phase.PROCESSING, progress=0, error=None)


def complete(state: PipelineState, screenshots: Iterable[ScreenshotRef]) -> PipelineState:
    if state.phase != Phase.PROCESSING:
        raise InvalidTransitionError("complete", state.phase.value)
    ordered = tuple(sorted(screenshots, key=lambda s: s.index))
    return replace(
        state,
        phase=Phase.COMPLETE,
        progress=100,
        screenshots=ordered,
        error=None,
    )


def fail(state: PipelineState, kind: ErrorKind, message: str) -> PipelineState:
    if state.phase not in _FAILABLE_PHASES:
        raise InvalidTransitionError("fail", state.phase.value)
    return replace(
        state,
        phase=Phase.FAILED,
        progress=0,
        screenshots=(),
        error=ErrorInfo(kind, message),
    )
