"""Configuration data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    """Application configuration settings."""
    api_base_url: str
    api_key: str | None = None
    games_path: str = "/games"
    timeout: float = 10.0  # seconds
    log_level: str = "INFO"
