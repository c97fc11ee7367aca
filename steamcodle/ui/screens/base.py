"""Base screen class with common functionality for all screens."""

from typing import TYPE_CHECKING, ClassVar

from textual.binding import Binding, BindingType
from textual.screen import Screen
from textual.widgets import Static

import structlog

from steamcodle.services.errors import (
    ErrorSeverity,
    UserFriendlyError,
    get_error_service,
    handle_error,
)
from steamcodle.services.game_session import GameSession

if TYPE_CHECKING:
    from steamcodle.ui.app import SteamcodleApp

log = structlog.stdlib.get_logger()


class BaseScreen(Screen[None]):
    """Base screen giving access to the parent app, its session and notifications."""

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("escape", "go_back", "Back", show=True),
    ]

    SCREEN_TITLE: ClassVar[str] = "Screen"
    SCREEN_NAME: ClassVar[str] = "base"

    def __init__(self, name: str | None = None) -> None:
        super().__init__(name=name or self.SCREEN_NAME)

    @property
    def game_app(self) -> "SteamcodleApp":
        """The parent SteamcodleApp.

        Raises:
            RuntimeError: If the screen is not attached to a SteamcodleApp
        """
        from steamcodle.ui.app import SteamcodleApp

        if isinstance(self.app, SteamcodleApp):
            return self.app
        raise RuntimeError("Screen is not attached to a SteamcodleApp")

    @property
    def session(self) -> GameSession:
        return self.game_app.session

    async def on_mount(self) -> None:
        log.info("Screen mounted", screen=self.SCREEN_NAME)

    async def action_go_back(self) -> None:
        await self.game_app.action_go_back()

    def create_title_widget(self, title: str | None = None) -> Static:
        return Static(title or self.SCREEN_TITLE, classes="title")

    def notify_error(self, message: str) -> None:
        self.notify(message, severity="error")
        log.error("User notification", message=message, screen=self.SCREEN_NAME)

    def notify_warning(self, message: str) -> None:
        self.notify(message, severity="warning")
        log.warning("User notification", message=message, screen=self.SCREEN_NAME)

    def handle_exception(
        self,
        error: Exception,
        operation: str,
        context: dict[str, str | int | float | bool] | None = None,
    ) -> UserFriendlyError:
        """Log an exception and show its user-friendly message."""
        user_error = handle_error(
            error=error,
            operation=operation,
            component=self.SCREEN_NAME,
            context=context,
        )
        message = get_error_service().create_user_message(user_error, include_suggestions=False)
        if user_error.severity == ErrorSeverity.WARNING:
            self.notify_warning(message)
        else:
            self.notify_error(message)
        return user_error
