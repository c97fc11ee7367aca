"""Persisted player state: a JSON key-value store and the stats repository."""

import json
import re
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog

from ..models.stats import StatsSnapshot

log = structlog.stdlib.get_logger()

STATS_KEY = "steamcodleStats"
HISTORY_KEY = "steamcodleHistory"
STATS_SCHEMA_VERSION = 2

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def utc_today() -> str:
    """Current UTC calendar date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


class KeyValueStore:
    """JSON values stored one file per key.

    Absent or corrupt values read as None; they are never fatal.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        log.info("Key-value store initialized", directory=str(directory))

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    async def get(self, key: str) -> Any:
        path = self._path(key)
        if not path.exists():
            log.debug("Stored value not found", key=key)
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            log.warning("Stored value unreadable, using defaults", key=key, path=str(path), error=str(e))
            return None

    async def set(self, key: str, value: Any) -> None:
        """Write a value atomically via a temporary file.

        Raises:
            OSError: If the file cannot be written
            ValueError: If the value cannot be serialized
        """
        path = self._path(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2, ensure_ascii=False, sort_keys=True)
            temp_path.replace(path)
            log.debug("Stored value saved", key=key)
        except (OSError, TypeError, ValueError) as e:
            log.error("Failed to save stored value", key=key, path=str(path), error=str(e))
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            if isinstance(e, OSError):
                raise
            raise ValueError(f"Cannot serialize value for {key}: {e}") from e


def _migrate_v1_to_v2(data: dict[str, Any]) -> dict[str, Any]:
    # v1 named the day-scoped counter after games played (or, later, losses).
    migrated = {k: v for k, v in data.items() if k not in ("gamesPlayedToday", "lossesToday")}
    migrated["dailyCount"] = data.get("gamesPlayedToday", data.get("lossesToday", 0))
    migrated["schemaVersion"] = 2
    return migrated


_MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _migrate_v1_to_v2,
}


def migrate_stats(data: dict[str, Any]) -> dict[str, Any]:
    """Upgrade a stored stats object to the current schema version."""
    version = data.get("schemaVersion", 1)
    if not isinstance(version, int) or version < 1:
        version = 1
    while version < STATS_SCHEMA_VERSION:
        data = _MIGRATIONS[version](data)
        log.info("Stats schema migrated", from_version=version, to_version=version + 1)
        version += 1
    return data


def _counter(data: dict[str, Any], key: str) -> int:
    value = data.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


def stats_from_dict(data: dict[str, Any], today: str) -> StatsSnapshot:
    data = migrate_stats(dict(data))
    last_played = data.get("lastPlayedDate")
    current = _counter(data, "currentStreak")
    return StatsSnapshot(
        last_played_date=last_played if isinstance(last_played, str) and last_played else today,
        total_guesses=_counter(data, "totalGuesses"),
        correct_games=_counter(data, "correctGames"),
        incorrect_games=_counter(data, "incorrectGames"),
        current_streak=current,
        best_streak=max(_counter(data, "bestStreak"), current),
        daily_count=_counter(data, "dailyCount"),
    )


def stats_to_dict(stats: StatsSnapshot) -> dict[str, Any]:
    return {
        "schemaVersion": STATS_SCHEMA_VERSION,
        "totalGuesses": stats.total_guesses,
        "correctGames": stats.correct_games,
        "incorrectGames": stats.incorrect_games,
        "currentStreak": stats.current_streak,
        "bestStreak": stats.best_streak,
        "lastPlayedDate": stats.last_played_date,
        "dailyCount": stats.daily_count,
    }


def normalize_stats(stats: StatsSnapshot, today: str) -> StatsSnapshot:
    """Reset the day-scoped counter when the stored date is not today."""
    if stats.last_played_date == today:
        return stats
    return StatsSnapshot(
        last_played_date=today,
        total_guesses=stats.total_guesses,
        correct_games=stats.correct_games,
        incorrect_games=stats.incorrect_games,
        current_streak=stats.current_streak,
        best_streak=stats.best_streak,
        daily_count=0,
    )


class StatsRepository:
    """Loads and saves the stats snapshot and the served-id history."""

    def __init__(self, store: KeyValueStore, today: Callable[[], str] = utc_today) -> None:
        self.store = store
        self._today = today

    def default_stats(self) -> StatsSnapshot:
        return StatsSnapshot(last_played_date=self._today())

    async def load_stats(self) -> StatsSnapshot:
        raw = await self.store.get(STATS_KEY)
        today = self._today()
        if not isinstance(raw, dict):
            return self.default_stats()
        return normalize_stats(stats_from_dict(raw, today), today)

    async def save_stats(self, stats: StatsSnapshot) -> None:
        await self.store.set(STATS_KEY, stats_to_dict(stats))

    async def load_history(self) -> list[int]:
        raw = await self.store.get(HISTORY_KEY)
        if not isinstance(raw, list):
            return []
        return [i for i in raw if isinstance(i, int) and not isinstance(i, bool) and i > 0]

    async def save_history(self, ids: list[int]) -> None:
        await self.store.set(HISTORY_KEY, ids)
