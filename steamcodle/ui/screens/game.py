"""Game screen: one round of guessing a title's review percentage."""

import asyncio
from typing import ClassVar

from textual.app import ComposeResult
from textual.binding import Binding, BindingType
from textual.content import Content
from textual.containers import Container, Horizontal
from textual.message import Message
from textual.widgets import Button, Input, Static
from typing_extensions import override

import structlog

from steamcodle.models.round import RoundStatus
from steamcodle.services.game_session import GuessOutcome

from ..widgets import GuessBoard, TitleCard
from .base import BaseScreen

log = structlog.stdlib.get_logger()


class GameScreen(BaseScreen):
    """Plays rounds against the app's game session.

    Round fetches run in workers. Starting another round while one is
    loading is allowed, and whichever fetch finishes last is what shows.
    """

    class RoundUpdated(Message):
        """Posted by the round worker once the session settles."""

    SCREEN_TITLE: ClassVar[str] = "Steamcodle"
    SCREEN_NAME: ClassVar[str] = "game"

    CSS: ClassVar[str] = """
    GameScreen {
        align: center middle;
    }

    #game-container {
        width: 90;
        height: auto;
        max-height: 95%;
        padding: 1 2;
        border: solid $primary;
        background: $surface;
    }

    #guess-counter {
        text-align: right;
        color: $text-muted;
    }

    #guess-row {
        height: auto;
        margin-top: 1;
    }

    #guess-input {
        width: 1fr;
    }

    #round-status {
        margin-top: 1;
        text-style: italic;
    }

    #button-row {
        margin-top: 1;
        height: auto;
        align: center middle;
    }

    #button-row Button {
        margin: 0 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("escape", "go_back", "Back", show=True),
        Binding("ctrl+n", "new_game", "New Game", show=True),
        Binding("ctrl+s", "show_stats", "Stats", show=True),
    ]

    @override
    def compose(self) -> ComposeResult:
        with Container(id="game-container"):
            yield self.create_title_widget("🎮 Steamcodle")
            yield Static("", id="guess-counter")
            yield TitleCard(id="title-card")
            yield GuessBoard(slots=self.session.config.max_guesses, id="guess-board")
            with Horizontal(id="guess-row"):
                yield Input(placeholder="Review % (0-100)", id="guess-input", type="number")
                yield Button("Guess", id="btn-guess", variant="primary")
            yield Static("", id="round-status")
            with Horizontal(id="button-row"):
                yield Button("New Game", id="btn-new", variant="success")
                yield Button("Stats", id="btn-stats", variant="default")

    @override
    async def on_mount(self) -> None:
        await super().on_mount()
        self._refresh_view()
        self._start_round()

    async def on_screen_resume(self) -> None:
        # Returning from stats may cross midnight, which lifts the daily limit.
        if self.is_mounted:
            self._refresh_view()

    def _start_round(self) -> None:
        self.query_one("#round-status", Static).update("Booting Steam servers…")
        self.query_one("#guess-input", Input).disabled = True
        _ = self.run_worker(self._run_new_round(), name="round_worker", group="rounds")

    async def _run_new_round(self) -> None:
        try:
            state = await self.session.new_round()
        except asyncio.CancelledError:
            log.info("Round worker cancelled")
            raise
        except Exception as e:
            self.handle_exception(e, operation="new_round")
        else:
            if state.status == RoundStatus.ERROR and not state.daily_limited:
                self.notify_error(state.message or "Unable to fetch game")
        self.post_message(self.RoundUpdated())

    def on_game_screen_round_updated(self, _event: RoundUpdated) -> None:
        self._refresh_view()
        if self.session.state.status == RoundStatus.ACTIVE:
            _ = self.query_one("#guess-input", Input).focus()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "guess-input":
            await self._submit_guess()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "btn-guess":
            await self._submit_guess()
        elif button_id == "btn-new":
            await self.action_new_game()
        elif button_id == "btn-stats":
            await self.action_show_stats()

    async def action_new_game(self) -> None:
        self._start_round()

    async def action_show_stats(self) -> None:
        await self.game_app.push_screen_with_tracking("stats")

    async def _submit_guess(self) -> None:
        guess_input = self.query_one("#guess-input", Input)
        raw = guess_input.value
        try:
            outcome = await self.session.submit_guess(raw)
        except Exception as e:
            self.handle_exception(e, operation="submit_guess")
            return

        if outcome == GuessOutcome.REJECTED:
            if raw.strip() and self.session.state.status == RoundStatus.ACTIVE:
                self.notify_warning("Enter a number between 0 and 100")
            return

        guess_input.value = ""
        if outcome == GuessOutcome.WON:
            self.notify("Correct!", severity="information")
        elif outcome == GuessOutcome.LOST:
            self.notify_warning("Out of guesses")
        self._refresh_view()

    def _refresh_view(self) -> None:
        session = self.session
        state = session.state
        active = state.status == RoundStatus.ACTIVE

        self.query_one("#guess-counter", Static).update(f"Guess {session.guess_counter_label()}")
        self.query_one("#title-card", TitleCard).show(state.title, reveal=state.resolved)
        self.query_one("#guess-board", GuessBoard).show(state.guesses, session.trend)
        self.query_one("#round-status", Static).update(Content(session.status_label()))

        self.query_one("#guess-input", Input).disabled = not active
        self.query_one("#btn-guess", Button).disabled = not active
        self.query_one("#btn-new", Button).disabled = session.daily_limit_reached
