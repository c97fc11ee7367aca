"""Lifetime statistics data model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StatsSnapshot:
    """Durable player statistics.

    ``daily_count`` is the day-scoped counter; whether it counts rounds or
    losses depends on ``GameConfig.daily_cap_counts_losses_only``.
    """
    last_played_date: str  # UTC calendar date, YYYY-MM-DD
    total_guesses: int = 0
    correct_games: int = 0
    incorrect_games: int = 0
    current_streak: int = 0
    best_streak: int = 0
    daily_count: int = 0
