"""Stats screen showing the player's totals, streaks and daily usage."""

from typing import ClassVar

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Button, DataTable
from typing_extensions import override

from steamcodle.models.config import GameConfig
from steamcodle.models.stats import StatsSnapshot

from .base import BaseScreen


def format_daily_usage(stats: StatsSnapshot, config: GameConfig) -> str:
    """Rounds counted today against the cap; dev mode has no cap."""
    if config.dev_mode:
        return f"{stats.daily_count} (dev)"
    return f"{min(stats.daily_count, config.daily_cap)}/{config.daily_cap}"


def stats_rows(stats: StatsSnapshot, config: GameConfig) -> list[tuple[str, str]]:
    """Label/value rows for the stats table.

    Args:
        stats: Normalized statistics for today
        config: Game policy, for the daily cap

    Returns:
        Rows in display order
    """
    label = "Losses today" if config.daily_cap_counts_losses_only else "Played today"
    played = stats.correct_games + stats.incorrect_games
    win_rate = f"{stats.correct_games * 100 // played}%" if played else "-"
    return [
        (label, format_daily_usage(stats, config)),
        ("Games won", str(stats.correct_games)),
        ("Games lost", str(stats.incorrect_games)),
        ("Win rate", win_rate),
        ("Total guesses", str(stats.total_guesses)),
        ("Current streak", str(stats.current_streak)),
        ("Best streak", str(stats.best_streak)),
    ]


class StatsScreen(BaseScreen):
    SCREEN_TITLE: ClassVar[str] = "Stats"
    SCREEN_NAME: ClassVar[str] = "stats"

    CSS: ClassVar[str] = """
    StatsScreen {
        align: center middle;
    }

    #stats-container {
        width: 60;
        height: auto;
        padding: 1 2;
        border: solid $secondary;
        background: $surface;
    }

    #stats-table {
        height: auto;
    }

    #button-row {
        margin-top: 1;
        height: auto;
        align: center middle;
    }
    """

    @override
    def compose(self) -> ComposeResult:
        with Container(id="stats-container"):
            yield self.create_title_widget("📈 Stats")
            yield DataTable(id="stats-table", show_cursor=False)
            with Horizontal(id="button-row"):
                yield Button("Back", id="btn-back", variant="default")

    @override
    async def on_mount(self) -> None:
        await super().on_mount()
        table = self.query_one("#stats-table", DataTable)
        _ = table.add_columns("Stat", "Value")
        for label, value in stats_rows(self.session.stats, self.session.config):
            _ = table.add_row(label, value)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-back":
            await self.action_go_back()
