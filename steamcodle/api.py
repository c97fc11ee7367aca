"""HTTP API serving new rounds to remote clients."""

import structlog
from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from steamcodle import __version__
from steamcodle.services.errors import AppError
from steamcodle.services.selector import CandidateSelector

log = structlog.stdlib.get_logger()

DEFAULT_EXCLUDE_CAP = 15


class TitleResponse(BaseModel):
    """A resolved title in the camelCase wire format."""

    appId: int
    type: str
    name: str
    headerImage: str
    shortDescription: str
    genres: list[str] = []
    reviewScore: int | None = None
    reviewSummary: str | None = None
    positive: int | None = None
    negative: int | None = None
    totalReviews: int | None = None
    price: str | None = None
    releaseDate: str | None = None
    metacriticScore: int | None = None


class ErrorResponse(BaseModel):
    error: str


def parse_exclude(raw: str | None, cap: int = DEFAULT_EXCLUDE_CAP) -> list[int]:
    """Parse a comma-separated id list, keeping the ``cap`` most recent entries.

    Blank and non-numeric tokens are ignored, including non-ASCII digits.
    """
    if not raw:
        return []
    ids = []
    for token in raw.split(","):
        token = token.strip()
        if token.isascii() and token.isdigit() and int(token) > 0:
            ids.append(int(token))
    return ids[-cap:] if cap > 0 else []


def create_app(selector: CandidateSelector, exclude_cap: int = DEFAULT_EXCLUDE_CAP) -> FastAPI:
    """Build the API around an explicitly owned selector."""
    app = FastAPI(title="Steamcodle API", version=__version__)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(
        "/api/game",
        response_model=TitleResponse,
        responses={502: {"model": ErrorResponse}},
    )
    async def get_game(exclude: str | None = Query(default=None)) -> TitleResponse | JSONResponse:
        exclude_ids = parse_exclude(exclude, exclude_cap)
        try:
            title = await selector.select_title(exclude_ids)
        except AppError as e:
            log.warning("Round fetch failed", error=e.message, category=e.category.value)
            return JSONResponse(ErrorResponse(error=e.message).model_dump(), status_code=502)
        except Exception as e:
            log.error("Round fetch crashed", error=str(e), error_type=type(e).__name__, exc_info=True)
            return JSONResponse(ErrorResponse(error="Unknown Steam API error").model_dump(), status_code=502)
        return TitleResponse(**title.to_dict())

    return app
