"""Round state data models."""

from dataclasses import dataclass
from enum import Enum

from .title import Title


class RoundStatus(Enum):
    """Lifecycle states of a guessing round."""
    NO_ROUND = "no-round"
    LOADING = "loading"
    ACTIVE = "active"
    RESOLVED = "resolved"
    ERROR = "error"


@dataclass(frozen=True)
class RoundState:
    """Snapshot of the current round.

    ``title`` is kept in LOADING and ERROR so the last card stays visible.
    """
    status: RoundStatus = RoundStatus.NO_ROUND
    title: Title | None = None
    guesses: tuple[int, ...] = ()
    won: bool = False
    message: str | None = None
    daily_limited: bool = False

    @property
    def resolved(self) -> bool:
        return self.status == RoundStatus.RESOLVED
