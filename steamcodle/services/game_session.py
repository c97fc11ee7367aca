"""Round state machine: guesses, win/loss resolution and stats bookkeeping."""

import math
from collections.abc import Awaitable, Callable
from dataclasses import replace
from enum import Enum

import structlog

from ..models.config import GameConfig
from ..models.round import RoundState, RoundStatus
from ..models.stats import StatsSnapshot
from ..models.title import Title
from .errors import DAILY_LIMIT_MESSAGE, DailyLimitError, get_error_service
from .selector import RecentHistory
from .storage import StatsRepository, normalize_stats, utc_today

log = structlog.stdlib.get_logger()

TitleFetcher = Callable[[list[int]], Awaitable[Title]]


class GuessOutcome(Enum):
    """Result of a guess submission."""
    REJECTED = "rejected"
    CONTINUE = "continue"
    WON = "won"
    LOST = "lost"


def parse_guess(raw: str) -> int | None:
    """Validate raw guess input; None means the submission is rejected.

    Accepts any finite number in [0, 100]; fractions round half up.
    """
    text = raw.strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value) or not 0 <= value <= 100:
        return None
    return math.floor(value + 0.5)


class GameSession:
    """Owns the current round and the player's persisted statistics.

    Call ``load()`` once before use. Resolution bookkeeping is latched so a
    round is counted exactly once, whichever path resolves it.
    """

    def __init__(
        self,
        fetch_title: TitleFetcher,
        repository: StatsRepository,
        config: GameConfig,
        today: Callable[[], str] = utc_today,
    ) -> None:
        self._fetch_title = fetch_title
        self.repository = repository
        self.config = config
        self._today = today
        self._state = RoundState()
        self._stats = StatsSnapshot(last_played_date=today())
        self._history = RecentHistory(capacity=config.history_capacity)
        self._round_resolved = False

    async def load(self) -> None:
        """Read persisted stats and history; absent or corrupt data means defaults."""
        self._stats = await self.repository.load_stats()
        self._history = RecentHistory(
            capacity=self.config.history_capacity,
            initial=await self.repository.load_history(),
        )
        log.info(
            "Game session loaded",
            daily_count=self._stats.daily_count,
            history_size=len(self._history),
            dev_mode=self.config.dev_mode,
        )

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def stats(self) -> StatsSnapshot:
        return normalize_stats(self._stats, self._today())

    @property
    def recent_ids(self) -> list[int]:
        return self._history.snapshot()

    @property
    def daily_limit_reached(self) -> bool:
        if self.config.dev_mode:
            return False
        return self.stats.daily_count >= self.config.daily_cap

    async def new_round(self) -> RoundState:
        """Abandon any unresolved round, then fetch and start a new one."""
        await self.abandon_round()
        previous = self._state.title

        if self.daily_limit_reached:
            error = DailyLimitError(self.config.daily_cap)
            log.info("Daily limit reached", daily_count=self.stats.daily_count, cap=self.config.daily_cap)
            self._state = RoundState(
                status=RoundStatus.ERROR,
                title=previous,
                message=error.message,
                daily_limited=True,
            )
            return self._state

        self._state = RoundState(status=RoundStatus.LOADING, title=previous)
        exclude = self._history.snapshot()[-self.config.exclude_cap:]

        try:
            title = await self._fetch_title(exclude)
        except Exception as e:
            user_error = get_error_service().handle_error(
                e,
                operation="new_round",
                component="game_session",
                context={"excluded": len(exclude)},
            )
            self._state = RoundState(status=RoundStatus.ERROR, title=previous, message=user_error.message)
            return self._state

        self._history.push(title.app_id)
        await self.repository.save_history(self._history.snapshot())

        self._round_resolved = False
        self._state = RoundState(status=RoundStatus.ACTIVE, title=title)
        log.info("Round started", app_id=title.app_id, name=title.name)
        return self._state

    async def submit_guess(self, raw: str) -> GuessOutcome:
        """Submit a guess for the active round."""
        value = parse_guess(raw)
        state = self._state
        if value is None or state.status != RoundStatus.ACTIVE or state.title is None:
            log.debug("Guess rejected", raw=raw[:20], status=state.status.value)
            return GuessOutcome.REJECTED
        if len(state.guesses) >= self.config.max_guesses:
            return GuessOutcome.REJECTED

        await self._save_stats(replace(self.stats, total_guesses=self.stats.total_guesses + 1))

        guesses = state.guesses + (value,)
        score = state.title.review_score
        if score is not None and abs(value - score) <= self.config.win_tolerance:
            self._state = replace(state, status=RoundStatus.RESOLVED, guesses=guesses, won=True)
            await self._finalize(won=True)
            return GuessOutcome.WON

        if len(guesses) >= self.config.max_guesses:
            self._state = replace(state, status=RoundStatus.RESOLVED, guesses=guesses, won=False)
            await self._finalize(won=False)
            return GuessOutcome.LOST

        self._state = replace(state, guesses=guesses)
        return GuessOutcome.CONTINUE

    async def abandon_round(self) -> bool:
        """Count an unresolved active round as a loss.

        Returns:
            True if a loss was recorded
        """
        state = self._state
        if state.status != RoundStatus.ACTIVE or self._round_resolved:
            return False
        self._state = replace(state, status=RoundStatus.RESOLVED, won=False)
        return await self._finalize(won=False)

    async def _finalize(self, won: bool) -> bool:
        if self._round_resolved:
            return False
        self._round_resolved = True

        stats = self.stats
        counts_round = not won or not self.config.daily_cap_counts_losses_only
        daily_count = stats.daily_count + 1 if counts_round else stats.daily_count
        if won:
            current = stats.current_streak + 1
            updated = replace(
                stats,
                correct_games=stats.correct_games + 1,
                current_streak=current,
                best_streak=max(stats.best_streak, current),
                daily_count=daily_count,
            )
        else:
            updated = replace(
                stats,
                incorrect_games=stats.incorrect_games + 1,
                current_streak=0,
                daily_count=daily_count,
            )

        await self._save_stats(updated)
        title = self._state.title
        log.info(
            "Round resolved",
            won=won,
            app_id=title.app_id if title else None,
            guesses=len(self._state.guesses),
            streak=updated.current_streak,
            daily_count=updated.daily_count,
        )
        return True

    async def _save_stats(self, stats: StatsSnapshot) -> None:
        self._stats = stats
        await self.repository.save_stats(stats)

    def guess_counter_label(self) -> str:
        state = self._state
        count = len(state.guesses) if state.won else len(state.guesses) + 1
        return f"{min(count, self.config.max_guesses)}/{self.config.max_guesses}"

    def status_label(self) -> str:
        state = self._state
        if state.status == RoundStatus.LOADING:
            return "Booting Steam servers…"
        if state.status == RoundStatus.ERROR:
            return state.message or "Unable to fetch game"
        if state.status == RoundStatus.NO_ROUND:
            return DAILY_LIMIT_MESSAGE if self.daily_limit_reached else "Press New Game to start."
        if state.won:
            return "Nice! You nailed the English review percentage."
        if state.resolved:
            if self.daily_limit_reached:
                return DAILY_LIMIT_MESSAGE
            return "Out of guesses. Hit New Game to try another title."
        return "Guess the English Steam review % (0-100)."

    def trend(self, guess: int) -> str:
        """Hint for one guess: within tolerance, too high, or too low."""
        title = self._state.title
        if title is None or title.review_score is None:
            return "?"
        if abs(guess - title.review_score) <= self.config.win_tolerance:
            return "✓"
        return "▼" if guess > title.review_score else "▲"
