"""Tests for UI navigation and the screens' display helpers."""

from unittest.mock import Mock

import pytest
from hypothesis import given, settings, strategies as st
from textual.app import App, ComposeResult
from textual.content import Content
from textual.widgets import Static

from steamcodle.models import GameConfig, StatsSnapshot, Title
from steamcodle.services.game_session import GameSession
from steamcodle.ui.app import SteamcodleApp
from steamcodle.ui.screens import (
    BaseScreen,
    GameScreen,
    StatsScreen,
    get_registered_screens,
    get_screen_by_name,
    register_screen,
)
from steamcodle.ui.screens.stats import format_daily_usage, stats_rows
from steamcodle.ui.widgets.title_card import TitleCard, format_genres, format_reveal


class TestScreenRegistry:
    def test_game_screen_is_registered(self) -> None:
        screen = get_screen_by_name("game")
        assert isinstance(screen, GameScreen)

    def test_stats_screen_is_registered(self) -> None:
        screen = get_screen_by_name("stats")
        assert isinstance(screen, StatsScreen)

    def test_unknown_screen_returns_none(self) -> None:
        assert get_screen_by_name("nonexistent_screen") is None

    def test_registered_names_match_screen_names(self) -> None:
        for name in ("game", "stats"):
            screen = get_screen_by_name(name)
            assert screen is not None
            assert screen.SCREEN_NAME == name

    def test_register_screen(self) -> None:
        class HelpScreen(BaseScreen):
            SCREEN_NAME = "help"

        register_screen("help", HelpScreen)

        assert "help" in get_registered_screens()
        assert isinstance(get_screen_by_name("help"), HelpScreen)


class TestApp:
    def test_starts_with_empty_navigation_stack(self) -> None:
        assert SteamcodleApp().navigation_stack == []

    def test_navigation_stack_is_copy(self) -> None:
        app = SteamcodleApp()

        stack = app.navigation_stack
        stack.append("stats")

        assert app.navigation_stack == []

    def test_session_is_required(self) -> None:
        with pytest.raises(RuntimeError):
            _ = SteamcodleApp().session

    def test_session_is_exposed(self) -> None:
        session = Mock(spec=GameSession)

        assert SteamcodleApp(session=session).session is session

    @pytest.mark.asyncio
    async def test_back_at_root_keeps_stack(self) -> None:
        app = SteamcodleApp()
        app._navigation_stack.append("game")

        await app.action_go_back()

        assert app.navigation_stack == ["game"]

    @given(st.lists(st.sampled_from(["game", "stats"]), min_size=2, max_size=10))
    @settings(max_examples=50)
    def test_stack_pops_in_reverse_order(self, screens: list[str]) -> None:
        app = SteamcodleApp()
        app._navigation_stack.extend(screens)

        remaining = screens.copy()
        while len(app._navigation_stack) > 1:
            assert app._navigation_stack.pop() == remaining.pop()
            assert app._navigation_stack == remaining


class TestStatsDisplay:
    def test_daily_usage_against_cap(self) -> None:
        stats = StatsSnapshot(last_played_date="2026-03-14", daily_count=2)

        assert format_daily_usage(stats, GameConfig(daily_cap=3)) == "2/3"

    def test_daily_usage_in_dev_mode(self) -> None:
        stats = StatsSnapshot(last_played_date="2026-03-14", daily_count=7)

        assert format_daily_usage(stats, GameConfig(daily_cap=3, dev_mode=True)) == "7 (dev)"

    def test_daily_usage_is_clamped_to_cap(self) -> None:
        stats = StatsSnapshot(last_played_date="2026-03-14", daily_count=5)

        assert format_daily_usage(stats, GameConfig(daily_cap=3)) == "3/3"

    def test_rows_follow_policy(self) -> None:
        stats = StatsSnapshot(
            last_played_date="2026-03-14",
            total_guesses=12,
            correct_games=3,
            incorrect_games=1,
            current_streak=2,
            best_streak=3,
            daily_count=1,
        )

        rows = dict(stats_rows(stats, GameConfig(daily_cap_counts_losses_only=True)))

        assert rows["Losses today"] == "1/3"
        assert rows["Win rate"] == "75%"
        assert rows["Best streak"] == "3"

    def test_win_rate_without_games(self) -> None:
        rows = dict(stats_rows(StatsSnapshot(last_played_date="2026-03-14"), GameConfig()))

        assert rows["Played today"] == "0/3"
        assert rows["Win rate"] == "-"


class TestTitleCardText:
    def test_genres_are_truncated(self) -> None:
        assert format_genres(("Action", "RPG", "Indie", "Strategy", "Casual", "Sports")) == (
            "Action, RPG, Indie, Strategy +2"
        )
        assert format_genres(("Action",)) == "Action"
        assert format_genres(()) == "Genres unknown"

    def test_reveal_text(self) -> None:
        title = Title(
            app_id=620,
            kind="game",
            name="Portal 2",
            image_url="",
            description="",
            review_score=99,
            review_summary="Overwhelmingly Positive",
            total_review_count=250000,
        )

        assert format_reveal(title) == "Actual: 99% (Overwhelmingly Positive) from 250,000 reviews"


class CardHost(App[None]):
    def compose(self) -> ComposeResult:
        yield TitleCard(id="card")


class TestTitleCardWidget:
    @pytest.mark.asyncio
    async def test_bracketed_store_text_is_shown_verbatim(self) -> None:
        title = Title(
            app_id=10150,
            kind="game",
            name="[PROTOTYPE]",
            image_url="",
            description="Smash [/] and [b]consume[/b]",
            genres=("Action", "[Early Access]"),
            review_score=80,
        )
        app = CardHost()

        async with app.run_test() as pilot:
            card = app.query_one(TitleCard)
            card.show(title, reveal=True)
            await pilot.pause()
            name = card.query_one("#card-name", Static).render()
            description = card.query_one("#card-description", Static).render()
            facts = card.query_one("#card-facts", Static).render()

        assert isinstance(name, Content)
        assert name.plain == "[PROTOTYPE]"
        assert isinstance(description, Content)
        assert description.plain == "Smash [/] and [b]consume[/b]"
        assert isinstance(facts, Content)
        assert facts.plain == "Action, [Early Access]"
