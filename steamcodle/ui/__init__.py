"""Terminal user interface built on Textual."""

from .app import SteamcodleApp
from .screens import (
    BaseScreen,
    GameScreen,
    StatsScreen,
    get_registered_screens,
    get_screen_by_name,
    register_screen,
)

__all__ = [
    "BaseScreen",
    "GameScreen",
    "SteamcodleApp",
    "StatsScreen",
    "get_registered_screens",
    "get_screen_by_name",
    "register_screen",
]
