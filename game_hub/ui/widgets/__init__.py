"""Custom widgets for the TUI application."""

from .game_list import GameList, GameListItem, GameListView, game_item_key, render_game_list

__all__ = [
    "GameList",
    "GameListItem",
    "GameListView",
    "game_item_key",
    "render_game_list",
]
