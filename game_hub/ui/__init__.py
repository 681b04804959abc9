"""User interface components using the Textual framework."""

from .app import GameHubApp
from .screens import GameGridScreen
from .widgets import GameList, render_game_list

__all__ = [
    "GameGridScreen",
    "GameHubApp",
    "GameList",
    "render_game_list",
]
