"""
Shared progress and failure contract for pipeline stages.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from vidshot.core.exceptions import VidshotError
from vidshot.ports.outbound.progress import ProgressCallback

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Adapters never report 100 themselves; it is emitted once the stage resolves.
IN_FLIGHT_CEILING = 99


class ProgressReporter:
    """Wraps a raw progress callback so that it is non-decreasing, bounded,
    ends at exactly 100 on success and goes silent once closed."""

    def __init__(self, callback: ProgressCallback, stage: str = "", ceiling: int = IN_FLIGHT_CEILING) -> None:
        self._callback = callback
        self._stage = stage
        self._ceiling = ceiling
        self._last = -1
        self._closed = False

    @property
    def last(self) -> int:
        return max(self._last, 0)

    @property
    def closed(self) -> bool:
        return self._closed

    def report(self, value: float) -> None:
        if self._closed:
            return
        clamped = max(0, min(self._ceiling, int(value)))
        if clamped <= self._last:
            return
        self._last = clamped
        logger.debug("%s progress: %d%%", self._stage or "stage", clamped)
        self._callback(clamped)

    def complete(self) -> None:
        if self._closed:
            return
        self._last = 100
        self._closed = True
        self._callback(100)

    def close(self) -> None:
        self._closed = True


async def run_stage(
    stage: str,
    work: Callable[[ProgressCallback], Awaitable[T]],
    on_progress: ProgressCallback,
    error_class: type[VidshotError],
    timeout: Optional[float] = None,
) -> T:
    """Run *work* with a guarded reporter and map every failure to *error_class*.

    Cancellation is re-raised untouched after silencing the reporter.
    """
    reporter = ProgressReporter(on_progress, stage=stage)
    try:
        if timeout:
            result = await asyncio.wait_for(work(reporter.report), timeout)
        else:
            result = await work(reporter.report)
    except asyncio.CancelledError:
        reporter.close()
        logger.info("%s stage cancelled at %d%%", stage, reporter.last)
        raise
    except asyncio.TimeoutError:
        reporter.close()
        logger.error("%s stage timed out", stage)
        limit = f" after {timeout:g}s" if timeout else ""
        raise error_class(f"{stage.capitalize()} timed out{limit}") from None
    except error_class:
        reporter.close()
        raise
    except Exception as e:
        reporter.close()
        logger.error("%s stage failed: %s", stage, e)
        raise error_class(str(e) or type(e).__name__) from e
    reporter.complete()
    return result
