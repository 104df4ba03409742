from vidshot.core.entities.pipeline_state import ErrorInfo, ErrorKind, Phase, PipelineState
from vidshot.core.entities.screenshot import ScreenshotRef
from vidshot.core.entities.upload_handle import UploadHandle
from vidshot.core.entities.video_metadata import VideoMetadata
from vidshot.core.entities.video_source import VideoSource

__all__ = [
    "ErrorInfo", "ErrorKind", "Phase", "PipelineState",
    "ScreenshotRef", "UploadHandle", "VideoMetadata", "VideoSource",
]
