"""Main Textual application with screen management."""

from typing import ClassVar

from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.widgets import Footer, Header
from typing_extensions import override

import structlog

from steamcodle.services.game_session import GameSession

log = structlog.stdlib.get_logger()


class SteamcodleApp(App[None]):
    """Root Textual application.

    Holds the game session shared by every screen and tracks screen
    navigation by registered name.
    """

    CSS: ClassVar[str] = """
    Screen {
        background: $surface;
    }

    .title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("q", "quit", "Quit", show=True, priority=True),
        Binding("escape", "go_back", "Back", show=True),
        Binding("?", "show_help", "Help", show=True),
    ]

    _session: GameSession | None
    _navigation_stack: list[str]

    def __init__(self, session: GameSession | None = None) -> None:
        """Initialize the application.

        Args:
            session: Loaded game session; screens need one to play
        """
        super().__init__()
        self.title = "Steamcodle"  # type: ignore[assignment]
        self.sub_title = "Guess the Steam review %"  # type: ignore[assignment]
        self._session = session
        self._navigation_stack = []
        log.info("SteamcodleApp initialized")

    @property
    def session(self) -> GameSession:
        if self._session is None:
            raise RuntimeError("No game session attached to the application")
        return self._session

    @property
    def navigation_stack(self) -> list[str]:
        return self._navigation_stack.copy()

    @override
    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    async def on_mount(self) -> None:
        await self.push_screen_with_tracking("game")

    async def push_screen_with_tracking(self, screen_name: str) -> None:
        """Push a registered screen and track it in the navigation stack."""
        # Lazy import to avoid circular dependency
        from steamcodle.ui.screens import get_screen_by_name

        screen = get_screen_by_name(screen_name)
        if screen:
            self._navigation_stack.append(screen_name)
            await self.push_screen(screen)
            log.info("Screen pushed", screen=screen_name, stack_depth=len(self._navigation_stack))
        else:
            log.warning("Unknown screen requested", screen=screen_name)

    async def action_go_back(self) -> None:
        """Navigate back to the previous screen."""
        if len(self._navigation_stack) > 1:
            current = self._navigation_stack.pop()
            log.info("Navigating back", from_screen=current, stack_depth=len(self._navigation_stack))
            _ = self.pop_screen()
        else:
            log.debug("Already at root screen, cannot go back")

    async def action_show_help(self) -> None:
        self.notify(
            "Type a review % and press Enter. "
            "ctrl+n: new game, ctrl+s: stats, escape: back, q: quit"
        )
