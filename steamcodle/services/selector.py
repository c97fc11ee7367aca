"""Candidate selection: draw a random eligible title from the catalogs."""

import asyncio
import random
from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import httpx
import structlog

from ..models.config import GameConfig
from ..models.title import Title
from .catalog import CatalogSource
from .errors import AppError, NetworkError, NoEligibleTitlesError
from .review import is_eligible
from .steam_api import SteamStoreClient

log = structlog.stdlib.get_logger()


class RecentHistory:
    """Bounded FIFO of recently served app ids."""

    def __init__(self, capacity: int = 25, initial: Iterable[int] = ()) -> None:
        self._ids: deque[int] = deque(initial, maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._ids.maxlen or 0

    def push(self, app_id: int) -> None:
        self._ids.append(app_id)

    def snapshot(self) -> list[int]:
        """Oldest first."""
        return list(self._ids)

    def __contains__(self, app_id: object) -> bool:
        return app_id in self._ids

    def __iter__(self) -> Iterator[int]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)


@dataclass(frozen=True)
class CandidatePool:
    ids: tuple[int, ...]
    filtered: bool


def build_pools(catalogs: Iterable[list[int]], excluded: set[int]) -> list[CandidatePool]:
    """Exclusion-filtered pools, or the raw pools once exclusion empties them all."""
    raw = [ids for ids in catalogs if ids]
    filtered = [
        CandidatePool(ids=tuple(i for i in ids if i not in excluded), filtered=True)
        for ids in raw
    ]
    pools = [pool for pool in filtered if pool.ids]
    if pools:
        return pools
    return [CandidatePool(ids=tuple(ids), filtered=False) for ids in raw]


class CandidateSelector:
    """Picks eligible titles from the featured and full catalogs.

    The selector owns the process-wide recent-history ring; create one per
    process (or per test).
    """

    def __init__(
        self,
        featured: CatalogSource,
        full: CatalogSource,
        steam: SteamStoreClient,
        config: GameConfig,
        rng: random.Random | None = None,
    ) -> None:
        self.featured = featured
        self.full = full
        self.steam = steam
        self.max_attempts = config.max_attempts
        self.min_total_reviews = config.min_total_reviews
        self.history = RecentHistory(capacity=config.history_capacity)
        self._rng = rng or random.Random()

        log.info(
            "Candidate selector initialized",
            max_attempts=self.max_attempts,
            history_capacity=self.history.capacity,
        )

    async def select_title(self, exclude_ids: Iterable[int] = ()) -> Title:
        """Resolve a random eligible title not recently served.

        Args:
            exclude_ids: App ids the caller has already seen

        Returns:
            An eligible Title

        Raises:
            AppError: The most recent fetch error when the attempt budget runs
                out after at least one fetch failed; transport errors arrive
                as NetworkError
            NoEligibleTitlesError: When the budget runs out without fetch errors
        """
        featured_ids, full_ids = await asyncio.gather(
            self.featured.get_ids(),
            self.full.get_ids(),
        )

        excluded = set(exclude_ids) | set(self.history)
        tried: set[int] = set()
        last_error: AppError | None = None

        for attempt in range(1, self.max_attempts + 1):
            pools = build_pools((featured_ids, full_ids), excluded | tried)
            if not pools:
                log.warning("Candidate pools exhausted", attempt=attempt)
                break

            # Uniform over pools, not over ids: the small featured pool is
            # drawn from as often as the full catalog.
            pool = self._rng.choice(pools)
            app_id = self._rng.choice(pool.ids)
            tried.add(app_id)

            try:
                title = await self.steam.fetch_title(app_id)
            except httpx.HTTPError as e:
                last_error = NetworkError(f"Steam request failed: {str(e) or type(e).__name__}", original_error=e)
                self._log_failure(app_id, attempt, e)
                continue
            except AppError as e:
                last_error = e
                self._log_failure(app_id, attempt, e)
                continue

            if is_eligible(title, self.min_total_reviews):
                self.history.push(app_id)
                excluded.add(app_id)
                log.info(
                    "Title selected",
                    app_id=app_id,
                    name=title.name,
                    attempt=attempt,
                    filtered=pool.filtered,
                )
                return title

            log.debug(
                "Candidate ineligible",
                app_id=app_id,
                kind=title.kind,
                total_reviews=title.total_review_count,
            )

        if last_error is not None:
            raise last_error
        raise NoEligibleTitlesError()

    @staticmethod
    def _log_failure(app_id: int, attempt: int, error: Exception) -> None:
        log.info(
            "Candidate resolution failed",
            app_id=app_id,
            attempt=attempt,
            error=str(error),
            error_type=type(error).__name__,
        )
