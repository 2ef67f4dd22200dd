from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    analysis_client: str = "http"
    analysis_base_url: str = "http://127.0.0.1:8002"
    analysis_timeout_seconds: float | None = None
    analysis_mode: str = "document"
    claimed_subcast: str = ""

    progress_source: str = "simulated"
    progress_increment: int = 2
    progress_interval_ms: int = 100
    progress_settle_ms: int = 1000
