"""Data-fetch hook for the game list.

The hook owns the ``(games, error)`` state of one UI component. It issues a
single read per activation cycle and ties that read to a cancellation token:

- ``activate(query)`` starts a cycle, unless one is already running for an
  equal query, so repeated renders never produce repeated requests.
- ``deactivate()`` triggers the token of the running cycle. The transport is
  aborted and any outcome that still arrives is discarded.
- A new query deactivates the previous cycle before starting the next one.
"""

import asyncio
from collections.abc import Callable
from dataclasses import replace
from typing import Any

import structlog

from ..models.fetch import FailureKind, FetchCancelled, FetchFailed, FetchOk, FetchOutcome
from ..models.game import FetchGamesResponse, Game, GameQuery
from ..models.state import FetchStatus, GamesState
from .cancellation import CancellationToken
from .catalog import GameCatalog
from .errors import handle_error

log = structlog.stdlib.get_logger()

StateListener = Callable[[GamesState], None]


class GamesHook:
    """Fetches the game list once per activation and cancels on deactivation."""

    def __init__(self, catalog: GameCatalog, name: str = "games") -> None:
        """Initialize the hook.

        Args:
            catalog: Catalog capability used for the read
            name: Label used in logs and token names
        """
        self.name = name
        self._catalog = catalog
        self._state = GamesState()
        self._listeners: list[StateListener] = []
        self._query: GameQuery | None = None
        self._token: CancellationToken | None = None
        self._task: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[None]] = set()
        self._cycle = 0

    @property
    def state(self) -> GamesState:
        """Current state snapshot."""
        return self._state

    @property
    def games(self) -> tuple[Game, ...]:
        return self._state.games

    @property
    def error(self) -> str:
        return self._state.error

    @property
    def query(self) -> GameQuery | None:
        """Query of the running cycle, None when inactive."""
        return self._query

    @property
    def is_active(self) -> bool:
        return self._token is not None

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a callback for visible state changes.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def activate(self, query: GameQuery | None = None) -> bool:
        """Start an activation cycle for ``query``.

        Must be called from a running event loop.

        Returns:
            True if a new read was issued, False if the running cycle already
            serves an equal query
        """
        query = query or GameQuery()
        if self.is_active and query == self._query:
            log.debug("Hook already active for query, not refetching", hook=self.name, query=query)
            return False

        self.deactivate()

        self._cycle += 1
        token = CancellationToken(name=f"{self.name}-{self._cycle}")
        self._token = token
        self._query = query
        self._state = replace(self._state, status=FetchStatus.LOADING)

        task = asyncio.get_running_loop().create_task(
            self._run(query, token),
            name=f"{self.name}-fetch-{self._cycle}",
        )
        self._task = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

        log.info("Hook activated", hook=self.name, cycle=self._cycle, query=query)
        return True

    def deactivate(self) -> None:
        """End the running cycle, triggering its cancellation token.

        Safe to call when inactive. State is left as it is; a read that was
        still loading is marked cancelled without notifying listeners.
        """
        token = self._token
        if token is None:
            return

        self._token = None
        self._query = None
        self._task = None
        token.cancel()

        if self._state.status is FetchStatus.LOADING:
            self._state = replace(self._state, status=FetchStatus.CANCELLED)

        log.info("Hook deactivated", hook=self.name, cycle=self._cycle)

    async def wait(self) -> None:
        """Wait for the running cycle's read to finish."""
        if self._task is not None:
            _ = await asyncio.wait({self._task})

    async def aclose(self) -> None:
        """Deactivate and wait for every outstanding read to unwind."""
        self.deactivate()
        if self._pending:
            _ = await asyncio.gather(*self._pending, return_exceptions=True)

    async def __aenter__(self) -> "GamesHook":
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        await self.aclose()

    async def _run(self, query: GameQuery, token: CancellationToken) -> None:
        """Issue the read and hand its outcome to ``_deliver``."""
        try:
            outcome: FetchOutcome[FetchGamesResponse] = await self._catalog.fetch_games(query, token)
        except asyncio.CancelledError:
            log.debug("Fetch task cancelled", hook=self.name)
            raise
        except Exception as e:
            user_error = handle_error(e, operation="fetch_games", component=self.name)
            outcome = FetchFailed(message=str(e) or user_error.message, kind=FailureKind.NETWORK)

        self._deliver(outcome, token)

    def _deliver(self, outcome: FetchOutcome[FetchGamesResponse], token: CancellationToken) -> None:
        """Apply an outcome, unless its cycle has been cancelled meanwhile."""
        if token.cancelled or token is not self._token:
            log.debug("Discarding outcome of cancelled cycle", hook=self.name, token=token.name)
            return

        if isinstance(outcome, FetchOk):
            new_state = GamesState(games=outcome.body.results, error="", status=FetchStatus.LOADED)
            log.info("Games loaded", hook=self.name, count=len(new_state.games))
        elif isinstance(outcome, FetchCancelled):
            log.debug("Read reported cancelled", hook=self.name)
            return
        else:
            new_state = GamesState(games=self._state.games, error=outcome.message, status=FetchStatus.FAILED)
            log.warning("Games fetch failed", hook=self.name, error=outcome.message, kind=outcome.kind.value)

        self._set_state(new_state)

    def _set_state(self, state: GamesState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                log.error("State listener failed", hook=self.name, error=str(e), exc_info=True)
