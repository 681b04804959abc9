"""Configuration service for managing application settings."""

import json
import os
from dataclasses import replace
from pathlib import Path
from urllib.parse import urlparse

import structlog

from ..models import AppConfig

log = structlog.stdlib.get_logger()

DEFAULT_API_BASE_URL = "https://api.rawg.io/api"
API_KEY_ENV_VAR = "RAWG_API_KEY"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Service for loading, validating and saving the catalog settings."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or Path.home() / ".config" / "game-hub" / "config.json"
        log.info("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> AppConfig:
        """Load configuration from file or return the default configuration.

        The API key from the environment is used when the file has none.
        """
        config = self._read_file()
        if config.api_key is None and os.getenv(API_KEY_ENV_VAR):
            config = replace(config, api_key=os.getenv(API_KEY_ENV_VAR))
        return config

    def _read_file(self) -> AppConfig:
        if not self.config_path.exists():
            log.info("Configuration file not found, using defaults")
            return self._get_default_config()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data: dict[str, str | float | None] = json.load(f)

            config = self._dict_to_config(data)
            validation_result = self.validate_config(config)

            if not validation_result.is_valid:
                log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
                return self._get_default_config()

            log.info("Configuration loaded successfully")
            return config

        except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return self._get_default_config()

    def save_config(self, config: AppConfig) -> None:
        """Save configuration to file.

        Raises:
            ValueError: If the configuration is invalid
            OSError: If the file cannot be written
        """
        validation_result = self.validate_config(config)
        if not validation_result.is_valid:
            raise ValueError(f"Invalid configuration: {', '.join(validation_result.errors)}")

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(self._config_to_dict(config), f, indent=2, ensure_ascii=False)

            log.info("Configuration saved successfully")

        except OSError as e:
            log.error("Failed to save configuration", error=str(e))
            raise

    def validate_config(self, config: AppConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        parsed = urlparse(config.api_base_url) if isinstance(config.api_base_url, str) else None
        if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append("api_base_url must be an absolute http(s) URL")

        if config.api_key is not None and (not isinstance(config.api_key, str) or not config.api_key.strip()):
            errors.append("api_key must be a non-empty string or None")

        if not isinstance(config.games_path, str) or not config.games_path.startswith("/"):
            errors.append("games_path must start with '/'")

        if not isinstance(config.timeout, (int, float)) or config.timeout <= 0:
            errors.append("timeout must be a positive number")
        elif config.timeout > 120:
            errors.append("timeout should not exceed 120 seconds")

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        return ValidationResult(len(errors) == 0, errors)

    def _get_default_config(self) -> AppConfig:
        """Get default configuration."""
        return AppConfig(api_base_url=DEFAULT_API_BASE_URL)

    def _config_to_dict(self, config: AppConfig) -> dict[str, str | float | None]:
        """Convert AppConfig to dictionary for JSON serialization."""
        return {
            "api_base_url": config.api_base_url,
            "api_key": config.api_key,
            "games_path": config.games_path,
            "timeout": config.timeout,
            "log_level": config.log_level,
        }

    def _dict_to_config(self, data: dict[str, str | float | None]) -> AppConfig:
        """Convert dictionary to AppConfig, falling back to defaults per field."""
        api_key_raw = data.get("api_key")
        timeout_raw = data.get("timeout", 10.0)
        log_level_raw = data.get("log_level", "INFO")

        return AppConfig(
            api_base_url=str(data.get("api_base_url") or DEFAULT_API_BASE_URL).rstrip("/"),
            api_key=api_key_raw if isinstance(api_key_raw, str) else None,
            games_path=str(data.get("games_path") or "/games"),
            timeout=float(timeout_raw) if isinstance(timeout_raw, (int, float)) else 10.0,
            log_level=log_level_raw.upper() if isinstance(log_level_raw, str) else "INFO",
        )
