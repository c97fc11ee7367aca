"""Custom widgets for the TUI application."""

from .title_card import GuessBoard, TitleCard, format_genres

__all__ = [
    "GuessBoard",
    "TitleCard",
    "format_genres",
]
