"""State exposed by the games hook to the presentation layer."""

from dataclasses import dataclass
from enum import Enum

from .game import Game


class FetchStatus(Enum):
    """Lifecycle of one activation cycle."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class GamesState:
    """Snapshot of the hook state.

    ``games`` and ``error`` are what the UI renders; ``status`` tracks the
    activation cycle and is never rendered on its own.
    """
    games: tuple[Game, ...] = ()
    error: str = ""
    status: FetchStatus = FetchStatus.IDLE
