"""WebSocket notification adapter implementing NotificationPort.

Keeps a pool of connected presentation clients and pushes every pipeline
state snapshot to all of them as JSON. Snapshots published from synchronous
code are queued and sent by a single task, so clients see them in commit
order.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

from fastapi import WebSocket

from vidshot.core.entities.pipeline_state import PipelineState

logger = logging.getLogger(__name__)

_CLOSE_TIMEOUT: float = 5.0


class WebSocketNotifier:
    """Implements :class:`NotificationPort` over WebSocket connections."""

    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()
        self._queue: asyncio.Queue[PipelineState] = asyncio.Queue()
        self._sender: Optional[asyncio.Task] = None

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    # -- connection management -------------------------------------------------

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.add(websocket)
        logger.info("WebSocket connected (total=%d)", len(self._connections))

    async def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        logger.info("WebSocket disconnected (total=%d)", len(self._connections))

    # -- ordered delivery ------------------------------------------------------

    def start(self) -> None:
        """Start the sender task on the running loop."""
        if self._sender is None or self._sender.done():
            self._sender = asyncio.get_running_loop().create_task(self._send_loop())

    def publish(self, state: PipelineState) -> None:
        """Queue *state* for broadcast. Safe to call as a controller listener."""
        self._queue.put_nowait(state)

    async def flush(self) -> None:
        """Wait until every published state has been sent."""
        await self._queue.join()

    async def aclose(self) -> None:
        """Send what is queued, then stop the sender task."""
        if self._sender is None:
            return
        try:
            await asyncio.wait_for(self.flush(), timeout=_CLOSE_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning("Dropping %d unsent state updates", self._queue.qsize())
        self._sender.cancel()
        try:
            await self._sender
        except asyncio.CancelledError:
            pass
        self._sender = None

    async def _send_loop(self) -> None:
        while True:
            state = await self._queue.get()
            try:
                await self.send_state(state)
            finally:
                self._queue.task_done()

    # -- NotificationPort implementation ---------------------------------------

    async def send_state(self, state: PipelineState) -> None:
        """Broadcast *state* to every connection, dropping the ones that fail."""
        if not self._connections:
            logger.debug("No listeners; skipping broadcast")
            return

        message = json.dumps({"type": "state", "state": state.to_dict()})
        stale: list[WebSocket] = []

        for ws in list(self._connections):
            try:
                await ws.send_text(message)
            except Exception:
                logger.warning("Failed to send to WebSocket; marking stale")
                stale.append(ws)

        for ws in stale:
            self._connections.discard(ws)
