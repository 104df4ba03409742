from vidshot.ports.outbound.file_storage_port import FileStoragePort
from vidshot.ports.outbound.metadata_probe_port import MetadataProbePort
from vidshot.ports.outbound.notification_port import NotificationPort
from vidshot.ports.outbound.progress import ProgressCallback
from vidshot.ports.outbound.screenshot_extraction_port import ScreenshotExtractionPort
from vidshot.ports.outbound.upload_port import UploadPort

__all__ = [
    "MetadataProbePort",
    "UploadPort",
    "ScreenshotExtractionPort",
    "FileStoragePort",
    "NotificationPort",
    "ProgressCallback",
]
