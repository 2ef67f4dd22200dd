from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable

Sleep = Callable[[float], Awaitable[None]]


class ProgressSource(ABC):
    """Contract for anything that can move the processing bar."""

    @abstractmethod
    def percentages(self) -> AsyncIterator[float]:
        """Yield percentage values in [0, 100]; the last value yielded is 100.

        Values are reported as they become available, so the iterator paces
        itself (timer ticks or server feedback).
        """
