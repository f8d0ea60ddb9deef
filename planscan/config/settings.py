from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    api_base_url: str = "http://localhost:8000"
    api_prefix: str = "/api/v1"
    request_timeout_seconds: int = 60
    stream_idle_timeout_seconds: float = 300.0

    page_engine: str = "pymupdf"
    page_render_scale: float = 1.5

    include_raw_detections: bool = False

    @property
    def api_root(self) -> str:
        """Base URL with the endpoint prefix, without a trailing slash."""
        return f"{self.api_base_url.rstrip('/')}{self.api_prefix.rstrip('/')}"
