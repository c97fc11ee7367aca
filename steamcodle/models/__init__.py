"""Data models for the Steamcodle application."""

from .config import GameConfig
from .round import RoundState, RoundStatus
from .stats import StatsSnapshot
from .title import Title

__all__ = [
    "GameConfig",
    "RoundState",
    "RoundStatus",
    "StatsSnapshot",
    "Title",
]
