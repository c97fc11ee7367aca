"""Configuration service for managing application settings."""

import json
import math
import os
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any

import structlog

from ..models.config import GameConfig

log = structlog.stdlib.get_logger()

DEV_MODE_ENV = "STEAMCODLE_DEV_MODE"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


def dev_mode_from_env(environ: dict[str, str] | None = None) -> bool | None:
    """Read the dev-mode toggle; None when unset or unrecognised."""
    env = os.environ if environ is None else environ
    value = env.get(DEV_MODE_ENV, "").strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


class ConfigurationService:
    """Service for managing application configuration."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or Path.home() / ".config" / "steamcodle" / "config.json"
        log.info("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self, environ: dict[str, str] | None = None) -> GameConfig:
        """Load configuration from file (or defaults), then apply the environment."""
        config = self._load_file()
        dev_mode = dev_mode_from_env(environ)
        if dev_mode is not None:
            config = replace(config, dev_mode=dev_mode)
            log.info("Dev mode set from environment", dev_mode=dev_mode)
        return config

    def _load_file(self) -> GameConfig:
        if not self.config_path.exists():
            log.info("Configuration file not found, using defaults")
            return GameConfig()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise TypeError(f"Expected a JSON object, got {type(data).__name__}")

            config = self._dict_to_config(data)
            validation_result = self.validate_config(config)
            if not validation_result.is_valid:
                log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
                return GameConfig()

            log.info("Configuration loaded successfully")
            return config

        except (OSError, json.JSONDecodeError, TypeError, ValueError, OverflowError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return GameConfig()

    def save_config(self, config: GameConfig) -> None:
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

    def validate_config(self, config: GameConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        if not 1 <= config.max_guesses <= 20:
            errors.append("max_guesses must be between 1 and 20")
        if not 0 <= config.win_tolerance <= 50:
            errors.append("win_tolerance must be between 0 and 50")
        if config.daily_cap < 1:
            errors.append("daily_cap must be a positive integer")
        if not 8 <= config.max_attempts <= 50:
            errors.append("max_attempts must be between 8 and 50")
        if config.history_capacity < 1:
            errors.append("history_capacity must be a positive integer")
        if not 1 <= config.exclude_cap <= max(config.history_capacity, 1):
            errors.append("exclude_cap must be between 1 and history_capacity")
        if config.featured_ttl_seconds <= 0 or config.full_ttl_seconds <= 0:
            errors.append("cache TTLs must be positive")
        if config.min_total_reviews < 0:
            errors.append("min_total_reviews must be non-negative")
        if config.request_delay < 0 or config.request_delay > 60:
            errors.append("request_delay must be between 0 and 60 seconds")
        if config.http_timeout <= 0:
            errors.append("http_timeout must be positive")

        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if config.log_level not in valid_log_levels:
            errors.append(f"log_level must be one of: {', '.join(sorted(valid_log_levels))}")

        return ValidationResult(len(errors) == 0, errors)

    def _config_to_dict(self, config: GameConfig) -> dict[str, Any]:
        """Convert GameConfig to a JSON-serializable dictionary."""
        data = asdict(config)
        data["data_directory"] = str(config.data_directory)
        return data

    def _dict_to_config(self, data: dict[str, Any]) -> GameConfig:
        """Convert a dictionary to GameConfig; unknown keys are ignored."""
        defaults = GameConfig()
        values: dict[str, Any] = {}

        for name in ("max_guesses", "win_tolerance", "daily_cap", "max_attempts",
                     "history_capacity", "exclude_cap", "featured_ttl_seconds",
                     "full_ttl_seconds", "min_total_reviews"):
            raw = data.get(name)
            if isinstance(raw, (int, float)) and not isinstance(raw, bool) and math.isfinite(raw):
                values[name] = int(raw)

        for name in ("request_delay", "http_timeout"):
            raw = data.get(name)
            if isinstance(raw, (int, float)) and not isinstance(raw, bool) and math.isfinite(raw):
                values[name] = float(raw)

        for name in ("daily_cap_counts_losses_only", "dev_mode"):
            raw = data.get(name)
            if isinstance(raw, bool):
                values[name] = raw

        log_level = data.get("log_level")
        if isinstance(log_level, str):
            values["log_level"] = log_level.upper()

        data_directory = data.get("data_directory")
        if isinstance(data_directory, str) and data_directory:
            values["data_directory"] = Path(data_directory).expanduser()

        api_url = data.get("api_url")
        if isinstance(api_url, str) and api_url:
            values["api_url"] = api_url

        return replace(defaults, **values)
