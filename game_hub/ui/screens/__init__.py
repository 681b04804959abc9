"""Screen components for the TUI application."""

from .game_grid import GameGridScreen

__all__ = [
    "GameGridScreen",
]
