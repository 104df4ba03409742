from vidshot.application.pipeline_controller import PipelineController
from vidshot.application.processing_stage import ProcessingStage
from vidshot.application.stage_runner import ProgressReporter
from vidshot.application.upload_stage import UploadStage

__all__ = [
    "PipelineController",
    "UploadStage",
    "ProcessingStage",
    "ProgressReporter",
]
