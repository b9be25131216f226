"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Formation templates directory (empty = <repo>/knowledge)
    knowledge_dir: str = ""

    # Positioning constants, all in percent of field width
    snap_radius: float = 8.0
    collision_radius: float = 5.0
    out_of_bounds_tolerance: float = 5.0
    link_radius: float = 30.0

    # Touch pick-up
    long_press_ms: int = 500

    # Chemistry familiarity curve: 60 * (1 - e^(-k * t))
    familiarity_rate: float = 0.1

    # Board registry
    board_ttl_seconds: int = 60 * 60
    board_cleanup_interval_seconds: int = 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
