"""Unit tests for core entities."""
from __future__ import annotations

import pytest

from vidshot.core.entities.pipeline_state import ErrorInfo, ErrorKind, Phase, PipelineState
from vidshot.core.entities.screenshot import ScreenshotRef
from vidshot.core.entities.video_metadata import VideoMetadata
from vidshot.core.entities.video_source import VideoSource
from vidshot.core.exceptions import InvalidDimensionsError


class TestVideoSource:
    """Tests for VideoSource entity."""

    def test_is_video(self, sample_source, text_source):
        assert sample_source.is_video is True
        assert text_source.is_video is False

    def test_extension(self):
        assert VideoSource("holiday.final.MOV", 1, "video/quicktime").extension == "MOV"
        assert VideoSource("noext", 1, "video/mp4").extension == ""

    def test_size_formatted(self, sample_source):
        assert sample_source.size_formatted == "10.00 MB"

    def test_from_path_guesses_mime_type(self, sample_video_file):
        source = VideoSource.from_path(sample_video_file)
        assert source.mime_type == "video/mp4"
        assert source.byte_size == 5000
        assert source.name == "clip.mp4"
        assert source.path == str(sample_video_file)

    def test_from_path_explicit_mime_and_name(self, sample_video_file):
        source = VideoSource.from_path(sample_video_file, mime_type="video/webm", name="original.webm")
        assert source.mime_type == "video/webm"
        assert source.name == "original.webm"

    def test_from_path_unknown_type(self, tmp_path):
        path = tmp_path / "blob"
        path.write_bytes(b"abc")
        assert VideoSource.from_path(path).mime_type == "application/octet-stream"

    def test_identity_not_part_of_equality(self):
        a = VideoSource("a.mp4", 1, "video/mp4")
        b = VideoSource("a.mp4", 1, "video/mp4")
        assert a == b
        assert a.id != b.id


class TestVideoMetadata:
    """Tests for VideoMetadata entity."""

    def test_from_probe(self, sample_metadata):
        assert sample_metadata.duration_seconds == 12.5
        assert sample_metadata.aspect_ratio.as_tuple() == (16, 9)
        assert sample_metadata.is_known is True
        assert sample_metadata.duration_formatted == "12.50 s"
        assert sample_metadata.resolution_str == "1920x1080"

    def test_from_probe_zero_width(self):
        with pytest.raises(InvalidDimensionsError):
            VideoMetadata.from_probe(3.0, 0, 720)

    def test_from_probe_unknown_duration(self):
        metadata = VideoMetadata.from_probe(None, 640, 480)
        assert metadata.duration_seconds is None
        assert metadata.aspect_ratio.as_tuple() == (4, 3)
        assert metadata.is_known is False

    def test_unknown(self):
        metadata = VideoMetadata.unknown("boom")
        assert metadata.is_known is False
        assert metadata.probe_error == "boom"
        assert metadata.duration_formatted is None

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            VideoMetadata(duration_seconds=-1.0)


class TestScreenshotRef:
    def test_index_must_be_one_based(self):
        with pytest.raises(ValueError):
            ScreenshotRef(index=0, uri="/x.jpg")

    def test_filename(self):
        assert ScreenshotRef(index=1, uri="/shots/a/screenshot_01.jpg").filename == "screenshot_01.jpg"


class TestPipelineState:
    """Tests for PipelineState invariants and serialisation."""

    def test_default_is_idle(self):
        state = PipelineState()
        assert state.phase == Phase.IDLE
        assert state.source is None
        assert state.screenshots == ()
        assert state.can_start is False

    def test_progress_bounds(self, sample_source):
        with pytest.raises(ValueError):
            PipelineState(source=sample_source, phase=Phase.UPLOADING, progress=101)

    def test_screenshots_only_when_complete(self, sample_source):
        shot = ScreenshotRef(index=1, uri="/a.jpg")
        with pytest.raises(ValueError):
            PipelineState(source=sample_source, phase=Phase.PROCESSING, screenshots=(shot,))

    def test_stage_error_only_when_failed(self, sample_source):
        with pytest.raises(ValueError):
            PipelineState(
                source=sample_source,
                phase=Phase.SELECTED,
                error=ErrorInfo(ErrorKind.UPLOAD_FAILED, "x"),
            )

    def test_invalid_file_error_allowed_in_any_phase(self):
        state = PipelineState(error=ErrorInfo(ErrorKind.INVALID_FILE, "bad"))
        assert state.phase == Phase.IDLE

    def test_phase_requires_source(self):
        with pytest.raises(ValueError):
            PipelineState(phase=Phase.SELECTED)

    def test_file_info_placeholders_while_probing(self, sample_source):
        info = PipelineState(source=sample_source, phase=Phase.SELECTED).file_info()
        assert info == {
            "name": "clip.mp4",
            "extension": "mp4",
            "size": "10.00 MB",
            "duration": "loading...",
            "aspect_ratio": "loading...",
        }

    def test_file_info_after_probe(self, sample_source, sample_metadata):
        state = PipelineState(source=sample_source, metadata=sample_metadata, phase=Phase.SELECTED)
        info = state.file_info()
        assert info["duration"] == "12.50 s"
        assert info["aspect_ratio"] == "16:9"

    def test_to_dict(self, sample_source, sample_metadata):
        shot = ScreenshotRef(index=1, uri="/a.jpg", timestamp_seconds=2.5)
        state = PipelineState(
            source=sample_source,
            metadata=sample_metadata,
            phase=Phase.COMPLETE,
            progress=100,
            screenshots=[shot],
        )
        data = state.to_dict()
        assert data["phase"] == "complete"
        assert data["progress"] == 100
        assert data["metadata"]["aspect_ratio"] == [16, 9]
        assert data["screenshots"] == [{"index": 1, "uri": "/a.jpg", "timestamp_seconds": 2.5}]
        assert data["error"] is None
