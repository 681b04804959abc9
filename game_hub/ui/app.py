"""Main Textual application."""

from typing import ClassVar

from textual.app import App
from textual.binding import Binding, BindingType

import structlog

from game_hub.models.game import GameQuery
from game_hub.services.catalog import GameCatalog

from .screens.game_grid import GameGridScreen

log = structlog.stdlib.get_logger()


class GameHubApp(App[None]):
    """Root application hosting the game grid screen.

    The catalog capability is injected so tests and alternative backends can
    replace the HTTP client.
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
        Binding("q", "quit", "Quit", show=True),
    ]

    _catalog: GameCatalog
    _initial_search: str

    def __init__(self, catalog: GameCatalog, initial_search: str = "") -> None:
        """Initialize the application.

        Args:
            catalog: Catalog capability handed to the game grid screen
            initial_search: Search term of the first fetch
        """
        super().__init__()
        self.title = "Game Hub"  # type: ignore[assignment]
        self.sub_title = "Game catalog browser"  # type: ignore[assignment]
        self._catalog = catalog
        self._initial_search = initial_search

        log.info("GameHubApp initialized")

    @property
    def catalog(self) -> GameCatalog:
        return self._catalog

    async def on_mount(self) -> None:
        log.info("Application mounted")
        screen = GameGridScreen(self._catalog, initial_query=GameQuery(search=self._initial_search))
        await self.push_screen(screen)
