"""Review score normalization and title eligibility."""

import math

from ..models.title import Title

MIN_TOTAL_REVIEWS = 100


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def normalize_score(
    positive: int | None,
    total: int | None,
    fallback_score: float | None,
) -> int | None:
    """Collapse the upstream review representations into one 0-100 score.

    The positive/total ratio wins whenever it is usable. Otherwise the
    fallback critic score is read as a 0-10 scale when it is at most 10,
    and as a 0-100 scale above that. Halves round up.
    """
    if positive is not None and total is not None and total > 0:
        return _round_half_up(positive / total * 100)

    if fallback_score is not None:
        if fallback_score <= 10:
            return _round_half_up(fallback_score * 10)
        return _round_half_up(fallback_score)

    return None


def is_eligible(title: Title, min_total_reviews: int = MIN_TOTAL_REVIEWS) -> bool:
    """Only base games with enough reviews are worth guessing."""
    if title.kind.lower() != "game":
        return False
    return (title.total_review_count or 0) >= min_total_reviews
