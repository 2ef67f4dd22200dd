import pytest
from pydantic import ValidationError

from certcheck.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_analysis_client(self) -> None:
        s = Settings()
        assert s.analysis_client == "http"

    def test_default_base_url(self) -> None:
        s = Settings()
        assert s.analysis_base_url == "http://127.0.0.1:8002"

    def test_no_timeout_by_default(self) -> None:
        s = Settings()
        assert s.analysis_timeout_seconds is None

    def test_default_progress_timing(self) -> None:
        s = Settings()
        assert s.progress_source == "simulated"
        assert s.progress_increment == 2
        assert s.progress_interval_ms == 100
        assert s.progress_settle_ms == 1000


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_base_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANALYSIS_BASE_URL", "https://review.example.org")
        s = Settings()
        assert s.analysis_base_url == "https://review.example.org"

    def test_loads_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANALYSIS_TIMEOUT_SECONDS", "12.5")
        s = Settings()
        assert s.analysis_timeout_seconds == 12.5

    def test_loads_progress_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROGRESS_SOURCE", "server")
        s = Settings()
        assert s.progress_source == "server"


class TestSettingsValidation:
    def test_invalid_interval_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROGRESS_INTERVAL_MS", "fast")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_increment_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROGRESS_INCREMENT", "abc")
        with pytest.raises(ValidationError):
            Settings()
