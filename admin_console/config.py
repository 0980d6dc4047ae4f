"""Admin console configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Console settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    APP_TITLE: str = "Dining Admin"

    # Backend REST API (all paths below /api)
    API_BASE_URL: str = "http://localhost:8081/api"
    API_TIMEOUT_S: float = 30.0

    # Session token lives in a browser cookie under this key
    TOKEN_COOKIE: str = "admin_token"
    COOKIE_SECURE: bool = False
    PRIVILEGED_ROLE: str = "ADMIN"

    # Queue listing and cache policy
    PAGE_SIZE: int = 10
    QUERY_STALE_S: float = 30.0
    QUERY_RETRY: int = 0

    LOG_LEVEL: str = "INFO"
    LOGS_DIR: str = "logs"

    HOST: str = "127.0.0.1"
    PORT: int = 8090


settings = Settings()
