"""Application settings and configuration."""

from typing import Literal

from pydantic import Field, model_validator  # type: ignore
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ENV: Literal["dev", "staging", "prod", "test"] = Field(default="dev")
    PROJECT_NAME: str = Field(default="Fulltext Log Search Gateway")
    VERSION: str = Field(default="1.0.0")

    # API
    API_PREFIX: str = Field(default="/api/fulltext")

    # CORS - Accept string or list, will be normalized to list
    CORS_ORIGINS: str | list[str] = Field(default="http://localhost:3000")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Elasticsearch
    ELASTICSEARCH_URL: str = Field(default="http://localhost:9000")
    ELASTICSEARCH_USERNAME: str | None = Field(default=None)
    ELASTICSEARCH_PASSWORD: str | None = Field(default=None)
    ELASTICSEARCH_VERIFY_CERTS: bool = Field(default=False)
    ELASTICSEARCH_REQUEST_TIMEOUT_MS: int = Field(default=10000, ge=1)
    ELASTICSEARCH_RETRY_MAX: int = Field(default=0, ge=0)  # callers re-issue failed searches
    LOG_INDEX_PATTERN: str = Field(default="logs-*")

    # Search defaults
    SEARCH_DEFAULT_QUERY: str = Field(default='"error" | timeout')
    SEARCH_DEFAULT_SIZE: int = Field(default=50, ge=1)
    SEARCH_MAX_SIZE: int = Field(default=1000, ge=1)
    SEARCH_DEFAULT_TIME_GTE: str = Field(default="now-24h")
    SEARCH_DEFAULT_TIME_LTE: str = Field(default="now")
    PIT_DEFAULT_KEEP_ALIVE: str = Field(default="1m")

    # Scoring
    DECAY_SCALE: str = Field(default="2h")
    DECAY_FACTOR: float = Field(default=0.6, gt=0, lt=1)
    # Stock clusters reject rescore alongside an explicit sort; set false there
    SEARCH_RESCORE_ENABLED: bool = Field(default=True)
    SEARCH_RESCORE_PHRASE: str | None = Field(default=None)  # None: rescore on the user query
    TIMELINE_INTERVAL: str = Field(default="5m")

    @model_validator(mode="before")
    @classmethod
    def parse_cors_origins(cls, data):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(data, dict) and "CORS_ORIGINS" in data:
            cors_origins = data["CORS_ORIGINS"]
            if isinstance(cors_origins, str):
                data["CORS_ORIGINS"] = [
                    origin.strip() for origin in cors_origins.split(",") if origin.strip()
                ]
        return data

    @model_validator(mode="after")
    def check_search_limits(self):
        """Keep the default page size inside the clamp range."""
        if self.SEARCH_DEFAULT_SIZE > self.SEARCH_MAX_SIZE:
            raise ValueError("SEARCH_DEFAULT_SIZE must be <= SEARCH_MAX_SIZE")
        return self

    def __init__(self, **kwargs):
        """Validate settings on initialization."""
        super().__init__(**kwargs)
        # Ensure CORS_ORIGINS is a list after initialization
        if isinstance(self.CORS_ORIGINS, str):
            object.__setattr__(
                self,
                "CORS_ORIGINS",
                [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()],
            )
        # Fail fast in production if critical vars are missing
        if self.ENV == "prod":
            if self.ELASTICSEARCH_URL.startswith("http://localhost"):
                raise ValueError("ELASTICSEARCH_URL must be set in production")
        if bool(self.ELASTICSEARCH_USERNAME) != bool(self.ELASTICSEARCH_PASSWORD):
            raise ValueError(
                "ELASTICSEARCH_USERNAME and ELASTICSEARCH_PASSWORD must be set together"
            )

    @property
    def request_timeout_seconds(self) -> float:
        """Engine request timeout in seconds."""
        return self.ELASTICSEARCH_REQUEST_TIMEOUT_MS / 1000.0


# Global settings instance
settings = Settings()
