"""Presentation of the games hook state: error text above the game list."""

from dataclasses import dataclass
from typing import ClassVar, override

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Label, ListItem, ListView, Static

import structlog

from game_hub.models.state import GamesState

log = structlog.stdlib.get_logger()


@dataclass(frozen=True)
class GameListItem:
    """One rendered row, keyed by the game id."""
    key: str
    label: str


@dataclass(frozen=True)
class GameListView:
    """Everything the widget shows for a given state."""
    error_text: str
    items: tuple[GameListItem, ...]


def game_item_key(game_id: int) -> str:
    """Widget id for a game row."""
    return f"game-{game_id}"


def render_game_list(state: GamesState) -> GameListView:
    """Project hook state to what is displayed.

    No sorting or filtering: one item per game, in the order received.
    """
    return GameListView(
        error_text=state.error,
        items=tuple(
            GameListItem(key=game_item_key(game.id), label=game.name)
            for game in state.games
        ),
    )


class GameList(Vertical):
    """Error line plus one list item per game."""

    DEFAULT_CSS: ClassVar[str] = """
    GameList {
        height: 1fr;
    }

    GameList #game-list-error {
        color: $error;
        text-style: bold;
        margin-bottom: 1;
        display: none;
    }

    GameList #game-list-error.has-error {
        display: block;
    }

    GameList #game-list-items {
        height: 1fr;
    }
    """

    _view: GameListView

    def __init__(self, name: str | None = None, id: str | None = None) -> None:
        super().__init__(name=name, id=id)
        self._view = render_game_list(GamesState())

    @property
    def view(self) -> GameListView:
        """The last rendered view."""
        return self._view

    @override
    def compose(self) -> ComposeResult:
        yield Static("", id="game-list-error")
        yield ListView(id="game-list-items")

    async def update_state(self, state: GamesState) -> None:
        """Re-render from a new hook state."""
        view = render_game_list(state)

        error = self.query_one("#game-list-error", Static)
        error.update(view.error_text)
        error.set_class(bool(view.error_text), "has-error")

        list_view = self.query_one("#game-list-items", ListView)
        if view.items != self._view.items:
            _ = await list_view.clear()
            _ = await list_view.extend(
                ListItem(Label(item.label), id=item.key) for item in view.items
            )

        self._view = view
        log.debug("Game list rendered", items=len(view.items), has_error=bool(view.error_text))
