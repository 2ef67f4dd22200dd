"""Progress sources for the processing bar.

``SimulatedProgressSource`` is a fixed local timer. ``ServerProgressSource``
follows feedback about the real request and, once that feedback ends, runs
the remaining phases at the simulated pace so the bar always finishes.
"""

import asyncio
from collections.abc import AsyncIterable, AsyncIterator

from certcheck.progress.base import ProgressSource, Sleep


class SimulatedProgressSource(ProgressSource):
    """Advance by a fixed increment on every timer tick until 100."""

    def __init__(
        self,
        *,
        increment: float = 2,
        interval_seconds: float = 0.1,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if increment <= 0:
            raise ValueError("increment must be positive")
        self._increment = increment
        self._interval = interval_seconds
        self._sleep = sleep

    async def percentages(self) -> AsyncIterator[float]:
        async for value in _run_to_completion(0, self._increment, self._interval, self._sleep):
            yield value


class ServerProgressSource(ProgressSource):
    """Report server-driven percentages, then finish the bar locally."""

    def __init__(
        self,
        updates: AsyncIterable[float],
        *,
        increment: float = 2,
        interval_seconds: float = 0.1,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if increment <= 0:
            raise ValueError("increment must be positive")
        self._updates = updates
        self._increment = increment
        self._interval = interval_seconds
        self._sleep = sleep

    async def percentages(self) -> AsyncIterator[float]:
        highest = 0.0
        async for value in self._updates:
            value = min(100.0, max(0.0, float(value)))
            highest = max(highest, value)
            yield value
            if highest >= 100:
                return
        async for value in _run_to_completion(
            highest, self._increment, self._interval, self._sleep
        ):
            yield value


async def track_request(
    request: asyncio.Future[object],
    *,
    increment: float = 2,
    interval_seconds: float = 0.1,
    ceiling: float = 90,
    sleep: Sleep = asyncio.sleep,
) -> AsyncIterator[float]:
    """Yield progress for an in-flight request, holding below ``ceiling``.

    The iterator ends as soon as the request is done, whatever its outcome.
    """
    value = 0.0
    while not request.done():
        await sleep(interval_seconds)
        if request.done():
            return
        if value < ceiling:
            value = min(ceiling, value + increment)
            yield value


async def _run_to_completion(
    start: float,
    increment: float,
    interval_seconds: float,
    sleep: Sleep,
) -> AsyncIterator[float]:
    value = start
    while value < 100:
        await sleep(interval_seconds)
        value = min(100.0, value + increment)
        yield value
