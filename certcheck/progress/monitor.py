"""Processing monitor.

The monitor turns percentage updates from a ProgressSource into phase
progress for the processing view. Completion needs two things: the bar must
reach 100% and settle, and the analysis result must have been handed over
with ``arm``. Whichever happens last triggers the single completion callback.
"""

import asyncio
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from certcheck.logging.logger import Log
from certcheck.progress.base import ProgressSource, Sleep
from certcheck.progress.phases import PHASES, Phase, PhaseStatus, phase_index_for, phase_statuses

T = TypeVar("T")


@dataclass(frozen=True)
class ProgressSnapshot:
    """Read-only view of the monitor state handed to listeners."""

    percent: float
    phase_index: int
    statuses: tuple[PhaseStatus, ...]
    seconds_remaining: int

    @property
    def phases(self) -> tuple[tuple[Phase, PhaseStatus], ...]:
        return tuple(zip(PHASES, self.statuses))


class ProcessingMonitor(Generic[T]):
    """Drives the four processing phases and signals completion exactly once."""

    def __init__(
        self,
        *,
        settle_seconds: float = 1.0,
        sleep: Sleep = asyncio.sleep,
        on_update: Callable[[ProgressSnapshot], None] | None = None,
        on_complete: Callable[[T], None] | None = None,
    ) -> None:
        self._settle = settle_seconds
        self._sleep = sleep
        self._on_update = on_update
        self._on_complete = on_complete
        self._percent = 0.0
        self._phase_index = 0
        self._payload: T | None = None
        self._armed = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._completed = False
        self._cancelled = False

    @property
    def percent(self) -> float:
        return self._percent

    @property
    def phase_index(self) -> int:
        return self._phase_index

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            percent=self._percent,
            phase_index=self._phase_index,
            statuses=phase_statuses(self._phase_index, self._percent),
            seconds_remaining=max(0, math.ceil((100 - self._percent) / 10)),
        )

    def observe(self, percent: float) -> None:
        """Record one percentage update.

        Updates after the bar reached 100% are ignored. The phase index only
        moves forward, even when updates arrive out of order.
        """
        if self._completed or self._cancelled or self._percent >= 100:
            return
        self._percent = min(100.0, max(0.0, float(percent)))
        self._phase_index = max(self._phase_index, phase_index_for(self._percent))
        if self._on_update is not None:
            self._on_update(self.snapshot())

    def arm(self, payload: T) -> None:
        """Hand over the analysis result that completion will carry."""
        if self._armed.is_set():
            return
        self._payload = payload
        self._armed.set()

    def start(self, source: ProgressSource) -> asyncio.Task[None]:
        """Run ``source`` in a background task on the current event loop."""
        if self._task is not None:
            raise RuntimeError("ProcessingMonitor can only be started once")
        self._task = asyncio.create_task(self.run(source))
        return self._task

    async def run(self, source: ProgressSource) -> None:
        async for value in source.percentages():
            self.observe(value)
            if self._percent >= 100 or self._cancelled:
                break
        if self._percent < 100 or self._cancelled:
            return
        await self._sleep(self._settle)
        await self._armed.wait()
        self._fire()

    def cancel(self) -> None:
        """Stop the timer; no completion is delivered after this call."""
        if self._completed:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
            Log.debug(f"Processing monitor cancelled at {self._percent:.0f}%")

    def _fire(self) -> None:
        if self._completed or self._cancelled:
            return
        self._completed = True
        Log.debug("Processing monitor completed")
        if self._on_complete is not None:
            self._on_complete(self._payload)  # type: ignore[arg-type]
