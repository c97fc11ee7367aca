"""Title data model."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Title:
    """A resolved catalog title carrying its normalized review score."""
    app_id: int
    kind: str
    name: str
    image_url: str
    description: str
    genres: tuple[str, ...] = field(default_factory=tuple)
    review_score: int | None = None  # 0-100 scale, None if not available
    review_summary: str | None = None
    positive_count: int | None = None
    negative_count: int | None = None
    total_review_count: int | None = None
    price: str | None = None
    release_date: str | None = None
    metacritic_score: int | None = None

    def __post_init__(self) -> None:
        if self.app_id <= 0:
            raise ValueError(f"app_id must be positive, got {self.app_id}")
        if self.review_score is not None and not 0 <= self.review_score <= 100:
            raise ValueError(f"review_score must be within 0-100, got {self.review_score}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire format of the round-fetch endpoint."""
        return {
            "appId": self.app_id,
            "type": self.kind,
            "name": self.name,
            "headerImage": self.image_url,
            "shortDescription": self.description,
            "genres": list(self.genres),
            "reviewScore": self.review_score,
            "reviewSummary": self.review_summary,
            "positive": self.positive_count,
            "negative": self.negative_count,
            "totalReviews": self.total_review_count,
            "price": self.price,
            "releaseDate": self.release_date,
            "metacriticScore": self.metacritic_score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Title":
        """Build a Title from the camelCase wire format.

        Raises:
            KeyError: If appId is missing
            ValueError: If a field is out of range
        """
        genres_raw = data.get("genres") or []
        return cls(
            app_id=int(data["appId"]),
            kind=str(data.get("type") or "unknown"),
            name=str(data.get("name") or ""),
            image_url=str(data.get("headerImage") or ""),
            description=str(data.get("shortDescription") or ""),
            genres=tuple(str(g) for g in genres_raw if g),
            review_score=_optional_int(data.get("reviewScore")),
            review_summary=data.get("reviewSummary"),
            positive_count=_optional_int(data.get("positive")),
            negative_count=_optional_int(data.get("negative")),
            total_review_count=_optional_int(data.get("totalReviews")),
            price=data.get("price"),
            release_date=data.get("releaseDate"),
            metacritic_score=_optional_int(data.get("metacriticScore")),
        )


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    return int(value)
