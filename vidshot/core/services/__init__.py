from vidshot.core.services import pipeline_transitions

__all__ = ["pipeline_transitions"]
