"""Custom exception hierarchy for vidshot."""
from __future__ import annotations


class VidshotError(Exception):
    """Base exception for all vidshot errors."""


class InvalidFileError(VidshotError):
    """Raised when a selected file is not a video."""

    def __init__(self, mime_type: str, message: str = "Please select a valid video file.") -> None:
        self.mime_type = mime_type
        super().__init__(message)


class ProbeError(VidshotError):
    """Raised when video metadata cannot be derived."""


class InvalidDimensionsError(ProbeError):
    """Raised when a video reports a zero or negative frame size."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        super().__init__(f"Invalid video dimensions: {width}x{height}")


class UploadError(VidshotError):
    """Raised when transmitting the video fails."""


class ProcessingError(VidshotError):
    """Raised when screenshot extraction fails."""


class ScreenshotNotFoundError(VidshotError):
    """Raised when a screenshot ordinal does not exist in the current result."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Screenshot not found: {index}")


class InvalidTransitionError(VidshotError):
    """Raised when a pipeline command is not allowed in the current phase."""

    def __init__(self, action: str, phase: str) -> None:
        self.action = action
        self.phase = phase
        super().__init__(f"Cannot {action} while pipeline is {phase}")
