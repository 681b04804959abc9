"""Main entry point for the Game Hub application.

This module provides the application entry point with:
- Command-line argument parsing
- Application initialization and dependency injection
- A plain-text mode that prints the game list without the TUI
"""

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path

import structlog

from game_hub import __version__
from game_hub.models import AppConfig, GameQuery
from game_hub.services.catalog import GameCatalogClient
from game_hub.services.config import VALID_LOG_LEVELS, ConfigurationService
from game_hub.services.errors import ConfigurationError
from game_hub.services.games_hook import GamesHook
from game_hub.services.http_client import HttpClientService
from game_hub.services.logging import setup_logging


log = structlog.stdlib.get_logger()


class ApplicationContext:
    """Container for application services.

    Services are created lazily; ``cleanup()`` closes the ones that were.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
    ) -> None:
        """Initialize the application context.

        Args:
            config_path: Path to configuration file
            base_url: API base URL overriding the configuration
            api_key: API key overriding the configuration
        """
        self._config_path = config_path
        self._base_url = base_url
        self._api_key = api_key

        self._config_service: ConfigurationService | None = None
        self._config: AppConfig | None = None
        self._http_client: HttpClientService | None = None
        self._catalog: GameCatalogClient | None = None

    @property
    def config_service(self) -> ConfigurationService:
        if self._config_service is None:
            self._config_service = ConfigurationService(config_path=self._config_path)
        return self._config_service

    @property
    def config(self) -> AppConfig:
        """Effective configuration: file, then environment, then CLI overrides.

        Raises:
            ConfigurationError: If the overridden configuration is invalid
        """
        if self._config is None:
            config = self.config_service.load_config()
            if self._base_url:
                config = replace(config, api_base_url=self._base_url.rstrip("/"))
            if self._api_key:
                config = replace(config, api_key=self._api_key)

            result = self.config_service.validate_config(config)
            if not result.is_valid:
                # Validation messages lead with the setting they are about.
                setting = result.errors[0].split(" ", 1)[0]
                raise ConfigurationError(
                    f"Invalid configuration: {'; '.join(result.errors)}",
                    setting=setting,
                    current_value=None if setting == "api_key" else getattr(config, setting, None),
                )
            self._config = config
        return self._config

    @property
    def http_client(self) -> HttpClientService:
        if self._http_client is None:
            config = self.config
            self._http_client = HttpClientService(
                base_url=config.api_base_url,
                timeout=config.timeout,
                default_params={"key": config.api_key} if config.api_key else None,
            )
        return self._http_client

    @property
    def catalog(self) -> GameCatalogClient:
        if self._catalog is None:
            self._catalog = GameCatalogClient(self.http_client, games_path=self.config.games_path)
        return self._catalog

    async def cleanup(self) -> None:
        """Close connections."""
        log.info("Cleaning up application resources")
        if self._http_client is not None:
            await self._http_client.close()
            self._http_client = None
        log.info("Application cleanup complete")


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(
        self,
        config: Path | None,
        base_url: str | None,
        api_key: str | None,
        search: str,
        log_level: str,
        log_dir: Path | None,
        no_tui: bool,
    ) -> None:
        self.config: Path | None = config
        self.base_url: str | None = base_url
        self.api_key: str | None = api_key
        self.search: str = search
        self.log_level: str = log_level
        self.log_dir: Path | None = log_dir
        self.no_tui: bool = no_tui


def parse_arguments(argv: list[str] | None = None) -> ParsedArgs:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="game-hub",
        description="Browse a RAWG-compatible game catalog from the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  game-hub                                Start the TUI
  game-hub --no-tui --search portal       Print matching games and exit
  game-hub --base-url http://localhost:8000/api
        """,
    )

    _ = parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/game-hub/config.json)",
    )
    _ = parser.add_argument("--base-url", default=None, help="Catalog API base URL")
    _ = parser.add_argument("--api-key", default=None, help="Catalog API key (or set RAWG_API_KEY)")
    _ = parser.add_argument("--search", default="", help="Initial search term")
    _ = parser.add_argument(
        "--log-level",
        choices=list(VALID_LOG_LEVELS),
        default="INFO",
        help="Set the logging level (default: INFO)",
    )
    _ = parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for log files (default: ./logs when the TUI runs)",
    )
    _ = parser.add_argument("--no-tui", action="store_true", help="Print the game list and exit")

    ns = parser.parse_args(argv)

    return ParsedArgs(
        config=ns.config,
        base_url=ns.base_url,
        api_key=ns.api_key,
        search=str(ns.search or ""),
        log_level=ns.log_level or "INFO",
        log_dir=ns.log_dir,
        no_tui=bool(ns.no_tui),
    )


async def run_plain(context: ApplicationContext, search: str = "") -> int:
    """Fetch the game list once and print it.

    Returns:
        Exit code: 0 when the list was loaded, 1 when the fetch failed
    """
    try:
        async with GamesHook(context.catalog, name="cli") as hook:
            _ = hook.activate(GameQuery(search=search))
            await hook.wait()

            if hook.error:
                print(hook.error, file=sys.stderr)
            for game in hook.games:
                platforms = ", ".join(p.name for p in game.platforms)
                print(f"{game.id}\t{game.name}" + (f"\t[{platforms}]" if platforms else ""))

            return 1 if hook.error else 0
    finally:
        await context.cleanup()


async def run_tui(context: ApplicationContext, search: str = "") -> int:
    """Run the TUI application.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    from game_hub.ui.app import GameHubApp

    catalog = context.catalog
    log.info("Starting TUI application")

    try:
        app = GameHubApp(catalog=catalog, initial_search=search)
        await app.run_async()
        log.info("TUI application exited normally")
        return 0

    except Exception as e:
        log.error("TUI application error", error=str(e), exc_info=True)
        return 1
    finally:
        await context.cleanup()


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    args = parse_arguments(argv)

    log_dir = args.log_dir
    if log_dir is None and not args.no_tui:
        log_dir = Path("logs")

    _ = setup_logging(
        log_level=args.log_level,
        log_dir=log_dir,
        tui_mode=not args.no_tui,
    )

    log.info("Starting Game Hub", version=__version__, log_level=args.log_level)

    context = ApplicationContext(
        config_path=args.config,
        base_url=args.base_url,
        api_key=args.api_key,
    )

    try:
        if args.no_tui:
            exit_code = asyncio.run(run_plain(context, search=args.search))
        else:
            exit_code = asyncio.run(run_tui(context, search=args.search))

    except ConfigurationError as e:
        log.error("Configuration error", error=e.message, technical_details=e.technical_details)
        print(f"Configuration error: {e.message}", file=sys.stderr)
        exit_code = 2

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
