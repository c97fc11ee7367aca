"""Widgets showing the round's title and the guesses made so far."""

from collections.abc import Callable, Sequence
from typing import ClassVar

from textual.app import ComposeResult
from textual.content import Content
from textual.widget import Widget
from textual.widgets import Static
from typing_extensions import override

from steamcodle.models.title import Title

MAX_GENRES_SHOWN = 4


def format_genres(genres: Sequence[str], limit: int = MAX_GENRES_SHOWN) -> str:
    """Join the first few genres, noting how many were left out."""
    if not genres:
        return "Genres unknown"
    shown = ", ".join(genres[:limit])
    hidden = len(genres) - limit
    return f"{shown} +{hidden}" if hidden > 0 else shown


def format_reveal(title: Title) -> str:
    if title.review_score is None:
        return "Actual: unknown"
    summary = f" ({title.review_summary})" if title.review_summary else ""
    if title.total_review_count is None:
        return f"Actual: {title.review_score}%{summary}"
    return f"Actual: {title.review_score}%{summary} from {title.total_review_count:,} reviews"


class TitleCard(Widget):
    """Card with the title's name, blurb and facts. The score stays hidden until reveal."""

    DEFAULT_CSS: ClassVar[str] = """
    TitleCard {
        height: auto;
        padding: 1;
        border: solid $primary-darken-2;
        background: $surface;
    }

    TitleCard .card-name {
        text-style: bold;
        color: $primary;
    }

    TitleCard .card-description {
        margin-top: 1;
        color: $text;
    }

    TitleCard .card-facts {
        margin-top: 1;
        color: $text-muted;
    }

    TitleCard .card-reveal {
        margin-top: 1;
        text-style: bold;
        color: $success;
    }
    """

    @override
    def compose(self) -> ComposeResult:
        yield Static("", id="card-name", classes="card-name")
        yield Static("", id="card-description", classes="card-description")
        yield Static("", id="card-facts", classes="card-facts")
        yield Static("", id="card-reveal", classes="card-reveal")

    def show(self, title: Title | None, reveal: bool = False) -> None:
        """Display ``title``, or a placeholder when there is none yet."""
        if title is None:
            self.query_one("#card-name", Static).update("No game loaded")
            self.query_one("#card-description", Static).update("")
            self.query_one("#card-facts", Static).update("")
            self.query_one("#card-reveal", Static).update("")
            return

        facts = [format_genres(title.genres)]
        if title.release_date:
            facts.append(f"Released {title.release_date}")
        if title.price:
            facts.append(title.price)

        # Store text may contain square brackets; never parse it as markup.
        self.query_one("#card-name", Static).update(Content(title.name))
        self.query_one("#card-description", Static).update(Content(title.description or ""))
        self.query_one("#card-facts", Static).update(Content(" · ".join(facts)))
        self.query_one("#card-reveal", Static).update(Content(format_reveal(title) if reveal else ""))


class GuessBoard(Widget):
    """One row per guess slot, each filled guess annotated with its trend."""

    DEFAULT_CSS: ClassVar[str] = """
    GuessBoard {
        height: auto;
        padding: 0 1;
    }

    GuessBoard .guess-slot {
        height: 1;
        color: $text-muted;
    }

    GuessBoard .guess-filled {
        color: $text;
        text-style: bold;
    }
    """

    def __init__(self, slots: int = 6, id: str | None = None) -> None:
        super().__init__(id=id)
        self._slots = slots

    @override
    def compose(self) -> ComposeResult:
        for index in range(self._slots):
            yield Static(f"{index + 1}. ___", id=f"guess-slot-{index}", classes="guess-slot")

    def show(self, guesses: Sequence[int], trend: Callable[[int], str]) -> None:
        for index in range(self._slots):
            slot = self.query_one(f"#guess-slot-{index}", Static)
            if index < len(guesses):
                guess = guesses[index]
                slot.update(f"{index + 1}. {guess}%  {trend(guess)}")
                slot.add_class("guess-filled")
            else:
                slot.update(f"{index + 1}. ___")
                slot.remove_class("guess-filled")
