from vidshot.ports.inbound.screenshot_pipeline_use_case import ScreenshotPipelineUseCase

__all__ = ["ScreenshotPipelineUseCase"]
