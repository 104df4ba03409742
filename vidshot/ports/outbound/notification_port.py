"""Port for real-time pipeline state delivery."""
from __future__ import annotations
from typing import Protocol, runtime_checkable

from vidshot.core.entities.pipeline_state import PipelineState


@runtime_checkable
class NotificationPort(Protocol):
    async def send_state(self, state: PipelineState) -> None: ...
