"""Game catalog client: typed reads of the ``/games`` collection."""

from typing import Any, Protocol

import structlog

from ..models.fetch import FailureKind, FetchFailed, FetchOk, FetchOutcome
from ..models.game import FetchGamesResponse, Game, GameQuery, ParentPlatform, Platform
from .cancellation import CancellationToken
from .errors import ResponseParseError, handle_error
from .http_client import HttpClientService

log = structlog.stdlib.get_logger()

GAMES_PATH = "/games"


class GameCatalog(Protocol):
    """Capability the games hook depends on."""

    async def fetch_games(
        self,
        query: GameQuery,
        token: CancellationToken,
    ) -> FetchOutcome[FetchGamesResponse]:
        ...


def _require(data: dict[str, Any], field: str, kind: type, where: str) -> Any:
    value = data.get(field)
    # bool is an int subclass; an id of True is still malformed.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ResponseParseError(
            f"Malformed response: '{where}{field}' must be {kind.__name__}",
            field=f"{where}{field}",
            value=value,
        )
    return value


def parse_platform_group(data: Any, where: str) -> ParentPlatform:
    """Parse one ``parent_platforms`` entry."""
    if not isinstance(data, dict):
        raise ResponseParseError(f"Malformed response: '{where}' must be an object", field=where, value=data)
    platform = data.get("platform")
    if not isinstance(platform, dict):
        raise ResponseParseError(
            f"Malformed response: '{where}.platform' must be an object",
            field=f"{where}.platform",
            value=platform,
        )
    prefix = f"{where}.platform."
    return ParentPlatform(
        platform=Platform(
            id=_require(platform, "id", int, prefix),
            name=_require(platform, "name", str, prefix),
            slug=_require(platform, "slug", str, prefix),
        )
    )


def parse_game(data: Any, where: str = "") -> Game:
    """Parse one entry of ``results``.

    ``background_image`` may be missing or null; ``parent_platforms`` may be
    missing or null and is then treated as empty.
    """
    if not isinstance(data, dict):
        raise ResponseParseError(f"Malformed response: '{where}' must be an object", field=where, value=data)
    prefix = f"{where}." if where else ""

    image = data.get("background_image")
    if image is not None and not isinstance(image, str):
        raise ResponseParseError(
            f"Malformed response: '{prefix}background_image' must be a string or null",
            field=f"{prefix}background_image",
            value=image,
        )

    groups = data.get("parent_platforms")
    if groups is None:
        groups = []
    if not isinstance(groups, list):
        raise ResponseParseError(
            f"Malformed response: '{prefix}parent_platforms' must be a list",
            field=f"{prefix}parent_platforms",
            value=groups,
        )

    return Game(
        id=_require(data, "id", int, prefix),
        name=_require(data, "name", str, prefix),
        background_image=image,
        parent_platforms=tuple(
            parse_platform_group(group, f"{prefix}parent_platforms[{index}]")
            for index, group in enumerate(groups)
        ),
    )


def parse_games_response(payload: Any) -> FetchGamesResponse:
    """Validate a ``{count, results}`` body and build the response model.

    Raises:
        ResponseParseError: If the body does not have the expected shape
    """
    if not isinstance(payload, dict):
        raise ResponseParseError("Malformed response: expected a JSON object", field="body", value=payload)

    count = _require(payload, "count", int, "")
    results = _require(payload, "results", list, "")

    return FetchGamesResponse(
        count=count,
        results=tuple(parse_game(item, f"results[{index}]") for index, item in enumerate(results)),
    )


class GameCatalogClient:
    """Reads the game list from a RAWG-compatible catalog API."""

    def __init__(self, http_client: HttpClientService, games_path: str = GAMES_PATH) -> None:
        """Initialize the catalog client.

        Args:
            http_client: HTTP client service bound to the API base URL
            games_path: Resource path of the games collection
        """
        self.http_client = http_client
        self.games_path = games_path
        log.info("Game catalog client initialized", games_path=games_path)

    async def fetch_games(
        self,
        query: GameQuery,
        token: CancellationToken,
    ) -> FetchOutcome[FetchGamesResponse]:
        """Fetch one page of games matching ``query``.

        Shape mismatches in the body are reported as ``FetchFailed`` with
        ``FailureKind.PARSE``; other outcomes pass through unchanged.
        """
        outcome = await self.http_client.get_json(self.games_path, params=query.to_params(), token=token)
        if not isinstance(outcome, FetchOk):
            return outcome

        try:
            response = parse_games_response(outcome.body)
        except ResponseParseError as e:
            _ = handle_error(e, operation="fetch_games", component="catalog")
            return FetchFailed(message=e.message, kind=FailureKind.PARSE)

        log.info("Games fetched", count=response.count, received=len(response.results))
        return FetchOk(response)
