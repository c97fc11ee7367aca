"""Configuration data models."""

from dataclasses import dataclass, field
from pathlib import Path


def _default_data_directory() -> Path:
    return Path.home() / ".local" / "share" / "steamcodle"


@dataclass(frozen=True)
class GameConfig:
    """Application configuration settings."""
    max_guesses: int = 6
    win_tolerance: int = 4  # percentage points
    daily_cap: int = 3
    daily_cap_counts_losses_only: bool = False
    dev_mode: bool = False  # bypasses the daily cap
    max_attempts: int = 8  # selector attempt budget
    history_capacity: int = 25
    exclude_cap: int = 15
    featured_ttl_seconds: int = 60 * 60
    full_ttl_seconds: int = 12 * 60 * 60
    min_total_reviews: int = 100
    request_delay: float = 0.0
    http_timeout: float = 15.0
    log_level: str = "INFO"
    data_directory: Path = field(default_factory=_default_data_directory)
    api_url: str | None = None  # None = resolve titles in-process
