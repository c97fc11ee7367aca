"""Main entry point for the Steamcodle application.

This module provides the application entry point with:
- Command-line argument parsing
- Application initialization and dependency injection
- Three run modes: the terminal game, the round-fetch API server, and a
  one-shot JSON dump of a single round
"""

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path

import structlog

from steamcodle import __version__
from steamcodle.models import GameConfig
from steamcodle.services.catalog import FeaturedCatalogSource, FullCatalogSource
from steamcodle.services.config import ConfigurationService
from steamcodle.services.game_session import GameSession, TitleFetcher
from steamcodle.services.http_client import HttpClientService
from steamcodle.services.logging import setup_logging
from steamcodle.services.round_client import ApiTitleClient
from steamcodle.services.selector import CandidateSelector
from steamcodle.services.steam_api import SteamStoreClient
from steamcodle.services.storage import KeyValueStore, StatsRepository

log = structlog.stdlib.get_logger()


class ApplicationContext:
    """Container for application services.

    Every service is built lazily and exactly once, so one context owns the
    catalog caches and the selector's history for the whole process.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        dev_mode: bool | None = None,
        api_url: str | None = None,
    ) -> None:
        self._config_path = config_path
        self._dev_mode_override = dev_mode
        self._api_url_override = api_url

        self._config_service: ConfigurationService | None = None
        self._config: GameConfig | None = None
        self._http_client: HttpClientService | None = None
        self._api_http_client: HttpClientService | None = None
        self._steam: SteamStoreClient | None = None
        self._selector: CandidateSelector | None = None
        self._repository: StatsRepository | None = None
        self._session: GameSession | None = None

    @property
    def config_service(self) -> ConfigurationService:
        if self._config_service is None:
            self._config_service = ConfigurationService(config_path=self._config_path)
        return self._config_service

    @property
    def config(self) -> GameConfig:
        """Configuration with command-line overrides applied."""
        if self._config is None:
            config = self.config_service.load_config()
            if self._dev_mode_override:
                config = replace(config, dev_mode=True)
            if self._api_url_override:
                config = replace(config, api_url=self._api_url_override)
            self._config = config
        return self._config

    @property
    def http_client(self) -> HttpClientService:
        if self._http_client is None:
            self._http_client = HttpClientService(
                timeout=self.config.http_timeout,
                rate_limit_delay=self.config.request_delay,
            )
        return self._http_client

    @property
    def steam(self) -> SteamStoreClient:
        if self._steam is None:
            self._steam = SteamStoreClient(self.http_client)
        return self._steam

    @property
    def selector(self) -> CandidateSelector:
        if self._selector is None:
            self._selector = CandidateSelector(
                featured=FeaturedCatalogSource(self.steam, self.config),
                full=FullCatalogSource(self.steam, self.config),
                steam=self.steam,
                config=self.config,
            )
        return self._selector

    @property
    def repository(self) -> StatsRepository:
        if self._repository is None:
            self._repository = StatsRepository(KeyValueStore(self.config.data_directory))
        return self._repository

    def title_fetcher(self) -> TitleFetcher:
        """Remote endpoint when an API URL is configured, else the local selector."""
        if self.config.api_url:
            if self._api_http_client is None:
                # The server already retries upstream; a 502 is final.
                self._api_http_client = HttpClientService(timeout=self.config.http_timeout, max_retries=0)
            return ApiTitleClient(self._api_http_client, self.config.api_url).fetch_title
        return self.selector.select_title

    @property
    def session(self) -> GameSession:
        if self._session is None:
            self._session = GameSession(
                fetch_title=self.title_fetcher(),
                repository=self.repository,
                config=self.config,
            )
        return self._session

    async def cleanup(self) -> None:
        """Close network clients."""
        log.info("Cleaning up application resources")
        for client in (self._http_client, self._api_http_client):
            if client is not None:
                await client.close()


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(self, ns: argparse.Namespace) -> None:
        self.config: Path | None = ns.config
        self.log_level: str | None = ns.log_level
        self.log_dir: Path | None = ns.log_dir
        self.dev: bool = bool(ns.dev)
        self.serve: bool = bool(ns.serve)
        self.host: str = ns.host
        self.port: int = ns.port
        self.api_url: str | None = ns.api_url
        self.no_tui: bool = bool(ns.no_tui)
        self.write_config: bool = bool(ns.write_config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="steamcodle",
        description="Guess the Steam review percentage of a featured game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  steamcodle                          Play in the terminal
  steamcodle --serve --port 8000      Serve rounds over HTTP
  steamcodle --api-url http://localhost:8000   Play against a running server
  steamcodle --no-tui                 Print one round as JSON
  steamcodle --dev --write-config     Persist dev mode to the config file
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/steamcodle/config.json)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (default: log_level from the config file, INFO if unset)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for log files (default: ./logs when running the TUI)",
    )
    parser.add_argument("--dev", action="store_true", help="Disable the daily round limit")
    parser.add_argument("--serve", action="store_true", help="Run the round-fetch API server")
    parser.add_argument("--host", default="127.0.0.1", help="API server host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="API server port (default: 8000)")
    parser.add_argument("--api-url", default=None, help="Fetch rounds from a running API server")
    parser.add_argument("--no-tui", action="store_true", help="Print one round as JSON and exit")
    parser.add_argument(
        "--write-config",
        action="store_true",
        help="Save the effective configuration to the config file and exit",
    )
    return parser


def parse_arguments(argv: list[str] | None = None) -> ParsedArgs:
    return ParsedArgs(build_parser().parse_args(argv))


def resolve_log_level(cli_level: str | None, config: GameConfig) -> str:
    """The command line wins over the config file."""
    return (cli_level or config.log_level).upper()


async def run_tui(context: ApplicationContext) -> int:
    """Run the terminal game."""
    from steamcodle.ui.app import SteamcodleApp

    log.info("Starting TUI application")
    try:
        await context.session.load()
        app = SteamcodleApp(session=context.session)
        await app.run_async()
        log.info("TUI application exited normally")
        return 0
    except Exception as e:
        log.error("TUI application error", error=str(e), exc_info=True)
        return 1
    finally:
        await context.cleanup()


async def run_server(context: ApplicationContext, host: str, port: int) -> int:
    """Serve the round-fetch API until interrupted."""
    import uvicorn

    from steamcodle.api import create_app

    app = create_app(context.selector, exclude_cap=context.config.exclude_cap)
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_config=None))
    log.info("Starting API server", host=host, port=port)
    try:
        await server.serve()
        return 0
    finally:
        await context.cleanup()


async def run_once(context: ApplicationContext) -> int:
    """Resolve a single title and print it as JSON."""
    try:
        title = await context.title_fetcher()([])
    except Exception as e:
        log.error("Round fetch failed", error=str(e), error_type=type(e).__name__)
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        return 1
    finally:
        await context.cleanup()
    print(json.dumps(title.to_dict(), indent=2, ensure_ascii=False))
    return 0


def write_config(context: ApplicationContext) -> int:
    """Persist the effective configuration, command-line overrides included."""
    try:
        context.config_service.save_config(context.config)
    except (OSError, ValueError) as e:
        log.error("Failed to write configuration", error=str(e))
        print(f"Could not write configuration: {e}", file=sys.stderr)
        return 1
    print(f"Configuration written to {context.config_service.config_path}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    args = parse_arguments(argv)
    tui_mode = not (args.serve or args.no_tui or args.write_config)

    log_dir = args.log_dir
    if log_dir is None and tui_mode:
        log_dir = Path("logs")

    logging_service = setup_logging(log_level=args.log_level or "INFO", log_dir=log_dir, tui_mode=tui_mode)

    context = ApplicationContext(
        config_path=args.config,
        dev_mode=args.dev or None,
        api_url=args.api_url,
    )
    log_level = resolve_log_level(args.log_level, context.config)
    if log_level != logging_service.log_level:
        logging_service.set_level(log_level)

    log.info(
        "Starting Steamcodle",
        version=__version__,
        log_level=log_level,
        config_path=str(args.config) if args.config else "default",
    )

    try:
        if args.write_config:
            exit_code = write_config(context)
        elif args.serve:
            exit_code = asyncio.run(run_server(context, args.host, args.port))
        elif args.no_tui:
            exit_code = asyncio.run(run_once(context))
        else:
            exit_code = asyncio.run(run_tui(context))

    except KeyboardInterrupt:
        log.info("Application interrupted by user")
        exit_code = 130

    except Exception as e:
        log.error("Unhandled exception", error=str(e), exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        exit_code = 1

    log.info("Application exiting", exit_code=exit_code)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
