"""Shared fixtures and fakes for the test suite."""

import asyncio
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from game_hub.models.fetch import FetchCancelled, FetchOutcome
from game_hub.models.game import FetchGamesResponse, GameQuery
from game_hub.services.cancellation import CancellationToken
from game_hub.services.http_client import HttpClientService

BASE_URL = "https://api.example.com/api"


class FakeCatalog:
    """Catalog whose reads stay pending until the test resolves them.

    With ``honor_token`` a read also ends as ``FetchCancelled`` once its token
    is triggered, the way the HTTP transport does.
    """

    def __init__(self, honor_token: bool = False) -> None:
        self.honor_token = honor_token
        self.queries: list[GameQuery] = []
        self.tokens: list[CancellationToken] = []
        self.finished: list[FetchOutcome[FetchGamesResponse]] = []
        self._futures: list[asyncio.Future[FetchOutcome[FetchGamesResponse]]] = []

    @property
    def call_count(self) -> int:
        return len(self.queries)

    async def fetch_games(
        self,
        query: GameQuery,
        token: CancellationToken,
    ) -> FetchOutcome[FetchGamesResponse]:
        future: asyncio.Future[FetchOutcome[FetchGamesResponse]] = asyncio.get_running_loop().create_future()
        self.queries.append(query)
        self.tokens.append(token)
        self._futures.append(future)

        if not self.honor_token:
            outcome = await future
        else:
            cancelled = asyncio.ensure_future(token.wait())
            try:
                _ = await asyncio.wait({future, cancelled}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                _ = cancelled.cancel()
            outcome = future.result() if future.done() else FetchCancelled()

        self.finished.append(outcome)
        return outcome

    def resolve(self, index: int, outcome: FetchOutcome[FetchGamesResponse]) -> None:
        self._futures[index].set_result(outcome)

    def fail(self, index: int, error: Exception) -> None:
        self._futures[index].set_exception(error)


def game_payload(game_id: int, name: str, **extra: Any) -> dict[str, Any]:
    """A ``results`` entry as the catalog API returns it."""
    payload: dict[str, Any] = {"id": game_id, "name": name}
    payload.update(extra)
    return payload


def games_body(*games: dict[str, Any]) -> dict[str, Any]:
    return {"count": len(games), "results": list(games)}


def make_http_client(
    handler: Callable[[httpx.Request], Any],
    **kwargs: Any,
) -> HttpClientService:
    """HttpClientService backed by an in-memory transport."""
    return HttpClientService(base_url=BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def sample_body() -> dict[str, Any]:
    return games_body(
        game_payload(
            1,
            "Portal",
            background_image="https://media.example.com/portal.jpg",
            parent_platforms=[
                {"platform": {"id": 1, "name": "PC", "slug": "pc"}},
                {"platform": {"id": 2, "name": "PlayStation", "slug": "playstation"}},
            ],
        ),
        game_payload(2, "Halo", background_image=None),
    )
