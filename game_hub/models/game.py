"""Game catalog data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Platform:
    """A platform a game is released on."""
    id: int
    name: str
    slug: str


@dataclass(frozen=True)
class ParentPlatform:
    """A platform grouping as returned by the catalog API."""
    platform: Platform


@dataclass(frozen=True)
class Game:
    """A single game entry from the catalog."""
    id: int
    name: str
    background_image: str | None = None
    parent_platforms: tuple[ParentPlatform, ...] = ()

    @property
    def platforms(self) -> list[Platform]:
        """Platforms of this game, in API order."""
        return [group.platform for group in self.parent_platforms]


@dataclass(frozen=True)
class FetchGamesResponse:
    """Body of a successful ``GET /games`` call."""
    count: int
    results: tuple[Game, ...]


@dataclass(frozen=True)
class GameQuery:
    """Filter applied to the game list. A change starts a new fetch."""
    search: str = ""
    ordering: str = ""

    def to_params(self) -> dict[str, str]:
        """Build query parameters, skipping empty values."""
        params: dict[str, str] = {}
        if self.search.strip():
            params["search"] = self.search.strip()
        if self.ordering:
            params["ordering"] = self.ordering
        return params
