"""Steam store API client.

Wraps the four read-only endpoints the game relies on and validates their
response envelopes before anything downstream sees the data:

- featured categories (curated listing)
- the full application list
- per-app store details
- per-app review summary
"""

import asyncio
from typing import Any

import structlog

from ..models.title import Title
from .errors import UpstreamError
from .http_client import HttpClientService
from .review import normalize_score

log = structlog.stdlib.get_logger()

FEATURED_URL = "https://store.steampowered.com/api/featuredcategories"
APP_LIST_URL = "https://api.steampowered.com/ISteamApps/GetAppList/v2/"
APP_DETAILS_URL = "https://store.steampowered.com/api/appdetails"
APP_REVIEWS_URL = "https://store.steampowered.com/appreviews/{app_id}"

FEATURED_CATEGORIES: tuple[str, ...] = (
    "top_sellers",
    "great_deals",
    "new_releases",
    "coming_soon",
    "specials",
    "top_wishlisted",
)


def is_game_item(item: Any) -> bool:
    """Featured items omit ``type`` for ordinary games, so absence counts as a game."""
    if not isinstance(item, dict):
        return False
    item_type = item.get("type")
    if not isinstance(item_type, str):
        return True
    return item_type.lower() == "game"


def _dedupe_positive(ids: list[Any]) -> list[int]:
    seen: set[int] = set()
    out: list[int] = []
    for raw in ids:
        if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
            continue
        if raw not in seen:
            seen.add(raw)
            out.append(raw)
    return out


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


class SteamStoreClient:
    """Client for the Steam store endpoints."""

    def __init__(self, http_client: HttpClientService) -> None:
        self.http_client = http_client

    async def fetch_featured_ids(self) -> list[int]:
        """Flatten the featured categories into unique game app ids.

        Raises:
            NetworkError: If the request fails
            UpstreamError: If the envelope is invalid or holds no games
        """
        payload = await self.http_client.get_json(FEATURED_URL, params={"l": "en"})
        if not isinstance(payload, dict) or payload.get("status") != 1:
            raise UpstreamError("Steam featured categories returned an error", url=FEATURED_URL)

        raw_ids: list[Any] = []
        for key in FEATURED_CATEGORIES:
            category = payload.get(key)
            if not isinstance(category, dict):
                continue
            items = category.get("items") or []
            if not isinstance(items, list):
                continue
            raw_ids.extend(item.get("id") for item in items if is_game_item(item))

        ids = _dedupe_positive(raw_ids)
        if not ids:
            raise UpstreamError("No featured games available from Steam", url=FEATURED_URL)

        log.debug("Featured ids fetched", count=len(ids))
        return ids

    async def fetch_app_list(self) -> list[int]:
        """Fetch every app id in the Steam catalog.

        Raises:
            NetworkError: If the request fails
            UpstreamError: If the envelope is invalid or empty
        """
        payload = await self.http_client.get_json(APP_LIST_URL)
        apps = None
        if isinstance(payload, dict):
            applist = payload.get("applist")
            if isinstance(applist, dict):
                apps = applist.get("apps")
        if not isinstance(apps, list):
            raise UpstreamError("Steam app list payload is malformed", url=APP_LIST_URL)

        ids = _dedupe_positive([app.get("appid") for app in apps if isinstance(app, dict)])
        if not ids:
            raise UpstreamError("Steam app list is empty", url=APP_LIST_URL)

        log.debug("App list fetched", count=len(ids))
        return ids

    async def fetch_app_details(self, app_id: int) -> dict[str, Any]:
        """Fetch the store details payload for one app.

        Raises:
            NetworkError: If the request fails
            UpstreamError: If the app has no store data
        """
        payload = await self.http_client.get_json(
            APP_DETAILS_URL, params={"appids": app_id, "l": "en"}
        )
        entry = payload.get(str(app_id)) if isinstance(payload, dict) else None
        if not isinstance(entry, dict) or not entry.get("success"):
            raise UpstreamError(f"No store data for app {app_id}", url=APP_DETAILS_URL, app_id=app_id)
        data = entry.get("data")
        if not isinstance(data, dict) or not data:
            raise UpstreamError(f"No store data for app {app_id}", url=APP_DETAILS_URL, app_id=app_id)
        return data

    async def fetch_review_summary(self, app_id: int) -> dict[str, Any] | None:
        """Fetch the review summary for one app; None when Steam has none."""
        url = APP_REVIEWS_URL.format(app_id=app_id)
        payload = await self.http_client.get_json(
            url,
            params={
                "json": 1,
                "language": "english",
                "purchase_type": "all",
                "num_per_page": 0,
            },
        )
        if not isinstance(payload, dict) or payload.get("success") != 1:
            return None
        summary = payload.get("query_summary")
        return summary if isinstance(summary, dict) else None

    async def fetch_title(self, app_id: int) -> Title:
        """Resolve a full Title, fetching details and reviews concurrently.

        Raises:
            NetworkError: If either request fails
            UpstreamError: If the details are missing or inconsistent
        """
        details, reviews = await asyncio.gather(
            self.fetch_app_details(app_id),
            self.fetch_review_summary(app_id),
        )
        return build_title(app_id, details, reviews)


def build_title(
    app_id: int,
    details: dict[str, Any],
    reviews: dict[str, Any] | None,
) -> Title:
    """Assemble a Title from the two upstream payloads."""
    reviews = reviews or {}
    positive = _optional_int(reviews.get("total_positive"))
    total = _optional_int(reviews.get("total_reviews"))

    metacritic = details.get("metacritic")
    metacritic_score = _optional_int(metacritic.get("score")) if isinstance(metacritic, dict) else None

    genres = tuple(
        str(genre["description"])
        for genre in (details.get("genres") or [])
        if isinstance(genre, dict) and genre.get("description")
    )
    price_overview = details.get("price_overview")
    price = price_overview.get("final_formatted") if isinstance(price_overview, dict) else None
    if price is None and details.get("is_free"):
        price = "Free to play"
    release = details.get("release_date")
    release_date = release.get("date") if isinstance(release, dict) else None

    try:
        return Title(
            app_id=app_id,
            kind=str(details.get("type") or "unknown"),
            name=str(details.get("name") or f"App {app_id}"),
            image_url=str(details.get("header_image") or ""),
            description=str(details.get("short_description") or "").strip(),
            genres=genres,
            review_score=normalize_score(positive, total, metacritic_score),
            review_summary=reviews.get("review_score_desc"),
            positive_count=positive,
            negative_count=_optional_int(reviews.get("total_negative")),
            total_review_count=total,
            price=price,
            release_date=release_date or None,
            metacritic_score=metacritic_score,
        )
    except ValueError as e:
        raise UpstreamError(f"Inconsistent data for app {app_id}: {e}", app_id=app_id) from e
