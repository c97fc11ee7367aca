"""Catalog sources supplying candidate app ids with read-through caching."""

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import ClassVar

import structlog

from ..models.config import GameConfig
from .errors import ConfigurationError
from .fallback import FEATURED_FALLBACK_IDS, FULL_FALLBACK_IDS
from .steam_api import SteamStoreClient

log = structlog.stdlib.get_logger()


@dataclass(frozen=True)
class CatalogCache:
    """One cached listing; replaced wholesale on refresh."""
    ids: tuple[int, ...]
    expires_at: float
    from_fallback: bool = False


class CatalogSource:
    """Read-through cache over one upstream listing.

    ``get_ids()`` never fails once constructed: any upstream failure or empty
    result is answered with the bundled fallback ids, which are then cached
    like a fresh entry so a failing upstream is not hit on every call.
    """

    SOURCE_NAME: ClassVar[str] = "catalog"

    def __init__(
        self,
        fetch: Callable[[], Awaitable[list[int]]],
        fallback_ids: Sequence[int],
        ttl_seconds: float,
        fallback_ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not fallback_ids:
            raise ConfigurationError(
                f"Fallback catalog for {self.SOURCE_NAME} is empty",
                setting=f"{self.SOURCE_NAME}_fallback_ids",
                expected="at least one app id",
            )
        self._fetch = fetch
        self._fallback_ids = tuple(fallback_ids)
        self.ttl_seconds = ttl_seconds
        self.fallback_ttl_seconds = fallback_ttl_seconds
        self._clock = clock
        self._cache: CatalogCache | None = None
        self._lock = asyncio.Lock()
        self._warned = False

    @property
    def cache(self) -> CatalogCache | None:
        return self._cache

    def _fresh_cache(self) -> CatalogCache | None:
        cache = self._cache
        if cache is not None and cache.expires_at > self._clock():
            return cache
        return None

    async def get_ids(self) -> list[int]:
        """Return the cached ids, refreshing from upstream when expired."""
        cache = self._fresh_cache()
        if cache is not None:
            return list(cache.ids)

        async with self._lock:
            # Another caller may have refreshed while we waited.
            cache = self._fresh_cache()
            if cache is not None:
                return list(cache.ids)

            try:
                ids = await self._fetch()
            except Exception as e:
                cache = self._use_fallback(reason=str(e), error_type=type(e).__name__)
            else:
                if ids:
                    cache = CatalogCache(
                        ids=tuple(ids),
                        expires_at=self._clock() + self.ttl_seconds,
                    )
                    self._cache = cache
                    log.info("Catalog refreshed", source=self.SOURCE_NAME, count=len(ids))
                else:
                    cache = self._use_fallback(reason="upstream returned no ids", error_type=None)

            return list(cache.ids)

    def _use_fallback(self, reason: str, error_type: str | None) -> CatalogCache:
        if not self._warned:
            log.warning(
                "Catalog unavailable, using bundled fallback",
                source=self.SOURCE_NAME,
                reason=reason,
                error_type=error_type,
                fallback_count=len(self._fallback_ids),
            )
            self._warned = True
        else:
            log.debug("Catalog still unavailable", source=self.SOURCE_NAME, reason=reason)

        self._cache = CatalogCache(
            ids=self._fallback_ids,
            expires_at=self._clock() + self.fallback_ttl_seconds,
            from_fallback=True,
        )
        return self._cache


class FeaturedCatalogSource(CatalogSource):
    """Curated featured-categories listing (small, refreshed hourly)."""

    SOURCE_NAME: ClassVar[str] = "featured"

    def __init__(
        self,
        steam: SteamStoreClient,
        config: GameConfig,
        fallback_ids: Sequence[int] = FEATURED_FALLBACK_IDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(
            fetch=steam.fetch_featured_ids,
            fallback_ids=fallback_ids,
            ttl_seconds=config.featured_ttl_seconds,
            fallback_ttl_seconds=config.full_ttl_seconds,
            clock=clock,
        )


class FullCatalogSource(CatalogSource):
    """Complete Steam app list (large, refreshed twice a day)."""

    SOURCE_NAME: ClassVar[str] = "full"

    def __init__(
        self,
        steam: SteamStoreClient,
        config: GameConfig,
        fallback_ids: Sequence[int] = FULL_FALLBACK_IDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(
            fetch=steam.fetch_app_list,
            fallback_ids=fallback_ids,
            ttl_seconds=config.full_ttl_seconds,
            fallback_ttl_seconds=config.full_ttl_seconds,
            clock=clock,
        )
