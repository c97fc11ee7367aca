"""Client for a remote round-fetch endpoint."""

import httpx
import structlog

from ..models.title import Title
from .errors import NetworkError, UpstreamError
from .http_client import HttpClientService

log = structlog.stdlib.get_logger()


class ApiTitleClient:
    """Fetches titles from ``GET /api/game`` on a running Steamcodle server."""

    def __init__(self, http_client: HttpClientService, base_url: str) -> None:
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/api/game"

    async def fetch_title(self, exclude_ids: list[int]) -> Title:
        """Request a new title, excluding the given app ids.

        Raises:
            UpstreamError: If the server reports a failure or sends a bad body
            NetworkError: If the server cannot be reached
        """
        params: dict[str, str | int] = {}
        if exclude_ids:
            params["exclude"] = ",".join(str(i) for i in exclude_ids)

        try:
            data = await self.http_client.get_json(self.endpoint, params=params or None)
        except NetworkError as e:
            original = e.original_error
            if isinstance(original, httpx.HTTPStatusError):
                message = _error_message(original.response)
                if message:
                    raise UpstreamError(message, url=self.endpoint) from e
            raise

        if not isinstance(data, dict):
            raise UpstreamError("Game server returned a malformed response", url=self.endpoint)
        if "error" in data:
            raise UpstreamError(str(data["error"]), url=self.endpoint)
        try:
            title = Title.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Game server returned an invalid title: {e}", url=self.endpoint) from e

        log.debug("Title fetched from server", app_id=title.app_id)
        return title


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return None
