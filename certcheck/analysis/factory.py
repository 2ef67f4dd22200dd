from certcheck.analysis.base import BaseAnalysisClient
from certcheck.analysis.example_client_adapter import ExampleAnalysisClient
from certcheck.analysis.http_client_adapter import HttpAnalysisClient
from certcheck.config.settings import Settings


class AnalysisClientFactory:
    """Creates the configured analysis client adapter."""

    SUPPORTED = ("example", "http")

    @classmethod
    def create(cls, settings: Settings) -> BaseAnalysisClient:
        name = settings.analysis_client.lower()
        if name == "example":
            return ExampleAnalysisClient()
        if name == "http":
            base_url = settings.analysis_base_url.strip()
            if not base_url:
                raise ValueError("analysis_base_url is required for analysis_client=http")
            return HttpAnalysisClient(
                base_url=base_url,
                timeout_seconds=settings.analysis_timeout_seconds,
            )
        raise ValueError(
            f"Unknown analysis client '{name}'. Choose from: {list(cls.SUPPORTED)}"
        )
