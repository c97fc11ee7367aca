"""Tests for the read-through catalog caches and their fallbacks."""

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from steamcodle.models import GameConfig
from steamcodle.services.catalog import CatalogSource, FeaturedCatalogSource, FullCatalogSource
from steamcodle.services.errors import ConfigurationError, UpstreamError
from steamcodle.services.fallback import FEATURED_FALLBACK_IDS, FULL_FALLBACK_IDS
from steamcodle.services.steam_api import SteamStoreClient


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_source(fetch: AsyncMock, clock: FakeClock, fallback: tuple[int, ...] = (1, 2, 3)) -> CatalogSource:
    return CatalogSource(
        fetch=fetch,
        fallback_ids=fallback,
        ttl_seconds=60,
        fallback_ttl_seconds=600,
        clock=clock,
    )


class TestReadThroughCache:
    @pytest.mark.asyncio
    async def test_cache_hit_performs_no_io(self) -> None:
        fetch = AsyncMock(return_value=[10, 20])
        source = make_source(fetch, FakeClock())

        assert await source.get_ids() == [10, 20]
        assert await source.get_ids() == [10, 20]
        fetch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_expired_entry_is_refreshed(self) -> None:
        clock = FakeClock()
        fetch = AsyncMock(side_effect=[[10], [30]])
        source = make_source(fetch, clock)

        assert await source.get_ids() == [10]
        clock.now += 61
        assert await source.get_ids() == [30]
        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_refresh(self) -> None:
        fetch = AsyncMock(return_value=[10, 20])
        source = make_source(fetch, FakeClock())

        results = await asyncio.gather(*(source.get_ids() for _ in range(5)))

        assert all(r == [10, 20] for r in results)
        fetch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_returned_list_is_a_copy(self) -> None:
        source = make_source(AsyncMock(return_value=[10, 20]), FakeClock())

        ids = await source.get_ids()
        ids.clear()

        assert await source.get_ids() == [10, 20]


class TestFallback:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "failure",
        [
            UpstreamError("Steam app list is empty"),
            httpx.ConnectError("connection refused"),
            ValueError("bad payload"),
        ],
    )
    async def test_failure_uses_fallback(self, failure: Exception) -> None:
        source = make_source(AsyncMock(side_effect=failure), FakeClock())

        assert await source.get_ids() == [1, 2, 3]
        assert source.cache is not None and source.cache.from_fallback

    @pytest.mark.asyncio
    async def test_empty_result_uses_fallback(self) -> None:
        source = make_source(AsyncMock(return_value=[]), FakeClock())

        assert await source.get_ids() == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_fallback_is_cached_with_fallback_ttl(self) -> None:
        clock = FakeClock()
        fetch = AsyncMock(side_effect=UpstreamError("down"))
        source = make_source(fetch, clock)

        await source.get_ids()
        clock.now += 599
        await source.get_ids()
        assert fetch.await_count == 1

        clock.now += 2
        await source.get_ids()
        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_warning_is_logged_once(self) -> None:
        clock = FakeClock()
        source = make_source(AsyncMock(side_effect=UpstreamError("down")), clock)

        with patch("steamcodle.services.catalog.log") as mock_logger:
            await source.get_ids()
            clock.now += 601
            await source.get_ids()
            clock.now += 601
            await source.get_ids()

        assert mock_logger.warning.call_count == 1
        assert mock_logger.debug.call_count == 2

    @pytest.mark.asyncio
    async def test_recovery_replaces_fallback(self) -> None:
        clock = FakeClock()
        fetch = AsyncMock(side_effect=[UpstreamError("down"), [42]])
        source = make_source(fetch, clock)

        assert await source.get_ids() == [1, 2, 3]
        clock.now += 601
        assert await source.get_ids() == [42]
        assert source.cache is not None and not source.cache.from_fallback

    def test_empty_fallback_is_a_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            make_source(AsyncMock(), FakeClock(), fallback=())


class TestConcreteSources:
    @pytest.mark.asyncio
    async def test_featured_uses_featured_endpoint_and_ttl(self) -> None:
        steam = AsyncMock(spec=SteamStoreClient)
        steam.fetch_featured_ids.return_value = [620]
        config = GameConfig()
        source = FeaturedCatalogSource(steam, config, clock=FakeClock())

        assert await source.get_ids() == [620]
        assert source.ttl_seconds == config.featured_ttl_seconds
        assert source.fallback_ttl_seconds == config.full_ttl_seconds

    @pytest.mark.asyncio
    async def test_full_falls_back_to_bundled_ids(self) -> None:
        steam = AsyncMock(spec=SteamStoreClient)
        steam.fetch_app_list.side_effect = UpstreamError("Steam app list is empty")
        source = FullCatalogSource(steam, GameConfig(), clock=FakeClock())

        assert await source.get_ids() == list(FULL_FALLBACK_IDS)

    def test_bundled_fallbacks_are_usable(self) -> None:
        assert FEATURED_FALLBACK_IDS
        assert FULL_FALLBACK_IDS
        assert all(i > 0 for i in FULL_FALLBACK_IDS)
        assert set(FEATURED_FALLBACK_IDS) <= set(FULL_FALLBACK_IDS)
