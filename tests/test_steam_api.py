"""Tests for the Steam store client envelope handling."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from steamcodle.services.errors import NetworkError, UpstreamError
from steamcodle.services.http_client import HttpClientService
from steamcodle.services.steam_api import (
    APP_DETAILS_URL,
    SteamStoreClient,
    build_title,
    is_game_item,
)


def make_client(*responses: Any) -> tuple[SteamStoreClient, AsyncMock]:
    http = AsyncMock(spec=HttpClientService)
    http.get_json.side_effect = list(responses)
    return SteamStoreClient(http), http


DETAILS = {
    "type": "game",
    "name": "Hades",
    "header_image": "https://cdn.example/hades.jpg",
    "short_description": "  Defy the god of the dead.  ",
    "genres": [{"id": "1", "description": "Action"}, {"id": "25", "description": "Adventure"}],
    "price_overview": {"final_formatted": "$24.99"},
    "release_date": {"coming_soon": False, "date": "17 Sep, 2020"},
    "metacritic": {"score": 93},
}

REVIEWS = {
    "num_reviews": 0,
    "review_score": 9,
    "review_score_desc": "Overwhelmingly Positive",
    "total_positive": 980,
    "total_negative": 20,
    "total_reviews": 1000,
}


class TestFeaturedIds:
    @pytest.mark.asyncio
    async def test_flattens_categories_and_dedupes(self) -> None:
        client, _ = make_client({
            "status": 1,
            "top_sellers": {"items": [{"id": 10}, {"id": 20, "type": "Game"}]},
            "specials": {"items": [{"id": 20}, {"id": 30, "type": "dlc"}, {"id": 0}]},
            "new_releases": {"items": [{"id": 40, "type": 0}]},
            "genres": {"items": [{"id": 99}]},
        })

        assert await client.fetch_featured_ids() == [10, 20, 40]

    @pytest.mark.asyncio
    async def test_failed_status_raises(self) -> None:
        client, _ = make_client({"status": 0, "top_sellers": {"items": [{"id": 10}]}})

        with pytest.raises(UpstreamError):
            await client.fetch_featured_ids()

    @pytest.mark.asyncio
    async def test_zero_games_raises(self) -> None:
        client, _ = make_client({"status": 1, "top_sellers": {"items": [{"id": 5, "type": "dlc"}]}})

        with pytest.raises(UpstreamError, match="No featured games"):
            await client.fetch_featured_ids()


class TestAppList:
    @pytest.mark.asyncio
    async def test_extracts_app_ids(self) -> None:
        client, _ = make_client({"applist": {"apps": [{"appid": 570}, {"appid": 730}, {"name": "x"}, {"appid": 570}]}})

        assert await client.fetch_app_list() == [570, 730]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"applist": {}}, {"applist": {"apps": []}}, []])
    async def test_malformed_or_empty_raises(self, payload: Any) -> None:
        client, _ = make_client(payload)

        with pytest.raises(UpstreamError):
            await client.fetch_app_list()


class TestAppDetails:
    @pytest.mark.asyncio
    async def test_unwraps_success_envelope(self) -> None:
        client, http = make_client({"1145360": {"success": True, "data": DETAILS}})

        assert await client.fetch_app_details(1145360) == DETAILS
        http.get_json.assert_awaited_once_with(APP_DETAILS_URL, params={"appids": 1145360, "l": "en"})

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"1145360": {"success": False}},
            {"1145360": {"success": True, "data": {}}},
            {"999": {"success": True, "data": DETAILS}},
            None,
        ],
    )
    async def test_unsuccessful_envelope_raises(self, payload: Any) -> None:
        client, _ = make_client(payload)

        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch_app_details(1145360)
        assert exc_info.value.app_id == 1145360


class TestReviewSummary:
    @pytest.mark.asyncio
    async def test_returns_query_summary(self) -> None:
        client, _ = make_client({"success": 1, "query_summary": REVIEWS})

        assert await client.fetch_review_summary(1145360) == REVIEWS

    @pytest.mark.asyncio
    async def test_unsuccessful_is_none(self) -> None:
        client, _ = make_client({"success": 2})

        assert await client.fetch_review_summary(1145360) is None


class TestFetchTitle:
    @pytest.mark.asyncio
    async def test_combines_details_and_reviews(self) -> None:
        http = AsyncMock(spec=HttpClientService)

        async def get_json(url: str, params: dict[str, Any] | None = None) -> Any:
            if url == APP_DETAILS_URL:
                return {"1145360": {"success": True, "data": DETAILS}}
            return {"success": 1, "query_summary": REVIEWS}

        http.get_json.side_effect = get_json
        title = await SteamStoreClient(http).fetch_title(1145360)

        assert title.app_id == 1145360
        assert title.review_score == 98
        assert title.total_review_count == 1000
        assert http.get_json.await_count == 2

    @pytest.mark.asyncio
    async def test_network_error_propagates(self) -> None:
        http = AsyncMock(spec=HttpClientService)
        http.get_json.side_effect = NetworkError("Unable to reach the Steam store")

        with pytest.raises(NetworkError):
            await SteamStoreClient(http).fetch_title(1145360)


class TestBuildTitle:
    def test_maps_fields(self) -> None:
        title = build_title(1145360, DETAILS, REVIEWS)

        assert title.name == "Hades"
        assert title.kind == "game"
        assert title.description == "Defy the god of the dead."
        assert title.genres == ("Action", "Adventure")
        assert title.price == "$24.99"
        assert title.release_date == "17 Sep, 2020"
        assert title.review_summary == "Overwhelmingly Positive"
        assert title.positive_count == 980
        assert title.negative_count == 20
        assert title.metacritic_score == 93

    def test_metacritic_is_the_fallback_score(self) -> None:
        title = build_title(1145360, DETAILS, None)

        assert title.review_score == 93
        assert title.total_review_count is None

    def test_free_games_get_a_price_label(self) -> None:
        details = {"type": "game", "name": "Dota 2", "is_free": True}

        assert build_title(570, details, REVIEWS).price == "Free to play"

    def test_out_of_range_fallback_is_upstream_error(self) -> None:
        details = {"type": "game", "name": "Broken", "metacritic": {"score": 250}}

        with pytest.raises(UpstreamError):
            build_title(1, details, None)


@pytest.mark.parametrize(
    ("item", "expected"),
    [
        ({"id": 1}, True),
        ({"id": 1, "type": "GAME"}, True),
        ({"id": 1, "type": "dlc"}, False),
        ("not a dict", False),
    ],
)
def test_is_game_item(item: Any, expected: bool) -> None:
    assert is_game_item(item) is expected
