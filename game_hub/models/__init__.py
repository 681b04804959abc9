"""Data models for the Game Hub application."""

from .config import AppConfig
from .fetch import FailureKind, FetchCancelled, FetchFailed, FetchOk, FetchOutcome
from .game import FetchGamesResponse, Game, GameQuery, ParentPlatform, Platform
from .state import FetchStatus, GamesState

__all__ = [
    "AppConfig",
    "FailureKind",
    "FetchCancelled",
    "FetchFailed",
    "FetchGamesResponse",
    "FetchOk",
    "FetchOutcome",
    "FetchStatus",
    "Game",
    "GameQuery",
    "GamesState",
    "ParentPlatform",
    "Platform",
]
