import asyncio

from certcheck.config.settings import Settings
from certcheck.progress.base import ProgressSource, Sleep
from certcheck.progress.sources import ServerProgressSource, SimulatedProgressSource, track_request


class ProgressSourceFactory:
    """Creates the configured progress source for one submission."""

    SUPPORTED = ("simulated", "server")

    @classmethod
    def create(
        cls,
        settings: Settings,
        request: asyncio.Future[object] | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> ProgressSource:
        name = settings.progress_source.lower()
        interval_seconds = settings.progress_interval_ms / 1000
        if name == "simulated":
            return SimulatedProgressSource(
                increment=settings.progress_increment,
                interval_seconds=interval_seconds,
                sleep=sleep,
            )
        if name == "server":
            if request is None:
                raise ValueError("progress_source=server needs the in-flight request")
            return ServerProgressSource(
                track_request(
                    request,
                    increment=settings.progress_increment,
                    interval_seconds=interval_seconds,
                    sleep=sleep,
                ),
                increment=settings.progress_increment,
                interval_seconds=interval_seconds,
                sleep=sleep,
            )
        raise ValueError(
            f"Unknown progress source '{name}'. Choose from: {list(cls.SUPPORTED)}"
        )
