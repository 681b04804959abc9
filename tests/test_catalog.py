"""Tests for response parsing and the game catalog client."""

from typing import Any

import httpx
import pytest
from hypothesis import given, settings, strategies as st

from conftest import games_body, game_payload, make_http_client
from game_hub.models.fetch import FailureKind, FetchFailed, FetchOk
from game_hub.models.game import GameQuery, Platform
from game_hub.services.cancellation import CancellationToken
from game_hub.services.catalog import GameCatalogClient, parse_games_response
from game_hub.services.errors import ResponseParseError


platform_strategy = st.fixed_dictionaries({
    "id": st.integers(min_value=1, max_value=10_000),
    "name": st.text(min_size=1, max_size=20),
    "slug": st.text(min_size=1, max_size=20, alphabet="abcdefghijklmnopqrstuvwxyz-"),
})

game_strategy = st.fixed_dictionaries(
    {
        "id": st.integers(min_value=1, max_value=10_000_000),
        "name": st.text(min_size=1, max_size=60),
    },
    optional={
        "background_image": st.none() | st.text(min_size=1, max_size=80).map(lambda s: f"https://img/{s}"),
        "parent_platforms": st.lists(st.fixed_dictionaries({"platform": platform_strategy}), max_size=4),
    },
)


@given(results=st.lists(game_strategy, max_size=15))
@settings(deadline=2000)
def test_parsed_results_preserve_order_and_fields(results: list[dict[str, Any]]) -> None:
    """For any valid body, the parsed games match ``results`` one to one, in order."""
    response = parse_games_response({"count": len(results), "results": results})

    assert response.count == len(results)
    assert [g.id for g in response.results] == [r["id"] for r in results]
    assert [g.name for g in response.results] == [r["name"] for r in results]
    for game, raw in zip(response.results, results):
        assert game.background_image == raw.get("background_image")
        assert len(game.parent_platforms) == len(raw.get("parent_platforms", []))


def test_parse_platform_groupings(sample_body: dict[str, Any]) -> None:
    response = parse_games_response(sample_body)

    portal, halo = response.results
    assert portal.platforms == [Platform(1, "PC", "pc"), Platform(2, "PlayStation", "playstation")]
    assert halo.background_image is None
    assert halo.parent_platforms == ()


def test_null_parent_platforms_is_empty() -> None:
    response = parse_games_response(games_body(game_payload(7, "Doom", parent_platforms=None)))
    assert response.results[0].parent_platforms == ()


@pytest.mark.parametrize(
    "payload, field",
    [
        ([], "body"),
        ({"results": []}, "count"),
        ({"count": 1}, "results"),
        ({"count": 1, "results": {}}, "results"),
        ({"count": 1, "results": ["Portal"]}, "results[0]"),
        ({"count": 1, "results": [{"name": "Portal"}]}, "results[0].id"),
        ({"count": 1, "results": [{"id": "1", "name": "Portal"}]}, "results[0].id"),
        ({"count": 1, "results": [{"id": True, "name": "Portal"}]}, "results[0].id"),
        ({"count": 1, "results": [{"id": 1}]}, "results[0].name"),
        ({"count": 1, "results": [{"id": 1, "name": "P", "background_image": 3}]}, "results[0].background_image"),
        ({"count": 1, "results": [{"id": 1, "name": "P", "parent_platforms": [{}]}]},
         "results[0].parent_platforms[0].platform"),
        ({"count": 1, "results": [{"id": 1, "name": "P", "parent_platforms": [{"platform": {"id": 1, "name": "PC"}}]}]},
         "results[0].parent_platforms[0].platform.slug"),
        ({"count": 1, "results": [{"id": 1, "name": "P", "parent_platforms": {}}]}, "results[0].parent_platforms"),
        ({"count": 1, "results": [{"id": 1, "name": "P", "parent_platforms": ""}]}, "results[0].parent_platforms"),
        ({"count": 1, "results": [{"id": 1, "name": "P", "parent_platforms": 0}]}, "results[0].parent_platforms"),
        ({"count": 1, "results": [{"id": 1, "name": "P", "parent_platforms": False}]}, "results[0].parent_platforms"),
    ],
)
def test_malformed_bodies_raise_parse_error(payload: Any, field: str) -> None:
    with pytest.raises(ResponseParseError) as exc_info:
        _ = parse_games_response(payload)

    assert exc_info.value.field == field
    assert exc_info.value.message.startswith("Malformed response")


@pytest.mark.asyncio
async def test_fetch_games_requests_games_path_with_query(sample_body: dict[str, Any]) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=sample_body)

    async with make_http_client(handler) as http_client:
        catalog = GameCatalogClient(http_client)
        outcome = await catalog.fetch_games(GameQuery(search=" portal "), CancellationToken())

    assert isinstance(outcome, FetchOk)
    assert [g.name for g in outcome.body.results] == ["Portal", "Halo"]
    assert seen[0].url.path.endswith("/games")
    assert dict(seen[0].url.params) == {"search": "portal"}


@pytest.mark.asyncio
async def test_fetch_games_reports_shape_mismatch_as_parse_failure() -> None:
    async with make_http_client(lambda request: httpx.Response(200, json={"count": 1})) as http_client:
        outcome = await GameCatalogClient(http_client).fetch_games(GameQuery(), CancellationToken())

    assert isinstance(outcome, FetchFailed)
    assert outcome.kind is FailureKind.PARSE
    assert "results" in outcome.message


@pytest.mark.asyncio
async def test_fetch_games_rejects_non_list_platform_groups() -> None:
    body = games_body(game_payload(1, "Portal", parent_platforms={}))

    async with make_http_client(lambda request: httpx.Response(200, json=body)) as http_client:
        outcome = await GameCatalogClient(http_client).fetch_games(GameQuery(), CancellationToken())

    assert isinstance(outcome, FetchFailed)
    assert outcome.kind is FailureKind.PARSE
    assert "results[0].parent_platforms" in outcome.message


@pytest.mark.asyncio
async def test_fetch_games_passes_http_failures_through() -> None:
    async with make_http_client(
        lambda request: httpx.Response(404, json={"detail": "Not found."})
    ) as http_client:
        outcome = await GameCatalogClient(http_client).fetch_games(GameQuery(), CancellationToken())

    assert outcome == FetchFailed(message="Not found.", kind=FailureKind.HTTP, status_code=404)


def test_query_params_skip_empty_values() -> None:
    assert GameQuery().to_params() == {}
    assert GameQuery(search="  ", ordering="-rating").to_params() == {"ordering": "-rating"}
