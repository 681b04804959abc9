"""Game grid screen: the game list bound to the games hook."""

from collections.abc import Callable
from typing import ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding, BindingType
from textual.containers import Container
from textual.message import Message
from textual.screen import Screen
from textual.widgets import Footer, Header, Input, Static

import structlog

from game_hub.models.game import GameQuery
from game_hub.models.state import GamesState
from game_hub.services.catalog import GameCatalog
from game_hub.services.errors import ErrorSeverity, handle_error
from game_hub.services.games_hook import GamesHook
from game_hub.ui.widgets.game_list import GameList

log = structlog.stdlib.get_logger()


class GameGridScreen(Screen[None]):
    """Shows the game list.

    The hook is activated when the screen mounts. On unmount it is closed,
    which also waits for the cancelled read to unwind. Submitting a new
    search term re-activates it, which cancels the read of the previous
    term first.
    """

    class StateChanged(Message):
        """Posted when the hook publishes a new state."""

        state: GamesState

        def __init__(self, state: GamesState) -> None:
            super().__init__()
            self.state = state

    SCREEN_TITLE: ClassVar[str] = "Games"
    SCREEN_NAME: ClassVar[str] = "game_grid"

    CSS: ClassVar[str] = """
    #grid-container {
        height: 1fr;
        padding: 1 2;
    }

    #search-input {
        margin-bottom: 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("escape", "app.quit", "Quit", show=True),
        Binding("f", "focus_search", "Search", show=True),
        Binding("r", "reload", "Reload", show=True),
    ]

    _hook: GamesHook
    _initial_query: GameQuery
    _unsubscribe: Callable[[], None] | None

    def __init__(self, catalog: GameCatalog, initial_query: GameQuery | None = None) -> None:
        super().__init__(name=self.SCREEN_NAME)
        self._initial_query = initial_query or GameQuery()
        self._hook = GamesHook(catalog, name=self.SCREEN_NAME)
        self._unsubscribe = None

    @property
    def hook(self) -> GamesHook:
        return self._hook

    @override
    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="grid-container"):
            yield Static(self.SCREEN_TITLE, classes="title")
            yield Input(placeholder="Search games...", id="search-input")
            yield GameList(id="game-list")
        yield Footer()

    async def on_mount(self) -> None:
        log.info("Screen mounted", screen=self.SCREEN_NAME)
        self._unsubscribe = self._hook.subscribe(self._on_hook_state)
        self.query_one("#search-input", Input).value = self._initial_query.search
        _ = self._hook.activate(self._initial_query)

    async def on_unmount(self) -> None:
        log.info("Screen unmounted", screen=self.SCREEN_NAME)
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self._hook.aclose()

    def _on_hook_state(self, state: GamesState) -> None:
        # Listeners run inside the hook's task; hop onto the message queue.
        self.post_message(self.StateChanged(state))

    async def on_game_grid_screen_state_changed(self, event: StateChanged) -> None:
        """Render the latest hook state."""
        try:
            await self.query_one("#game-list", GameList).update_state(event.state)
        except Exception as e:
            self.handle_exception(e, operation="render game list")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """A submitted search term is a new dependency for the hook."""
        if event.input.id != "search-input":
            return
        query = GameQuery(search=event.value.strip())
        if self._hook.activate(query):
            log.info("Search submitted", search=query.search)

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_reload(self) -> None:
        """Start a fresh cycle for the current query."""
        query = self._hook.query or GameQuery()
        self._hook.deactivate()
        _ = self._hook.activate(query)

    def handle_exception(self, error: Exception, operation: str) -> None:
        """Log an exception and show its user-friendly message as a notification."""
        user_error = handle_error(error=error, operation=operation, component=self.SCREEN_NAME)
        severity = "warning" if user_error.severity is ErrorSeverity.WARNING else "error"
        self.notify(user_error.format(include_suggestions=False), severity=severity)
