from __future__ import annotations

import httpx
import pytest

from gameshelf.adapters.igdb import IgdbClient, IgdbMetadataProvider
from gameshelf.adapters.igdb.provider import metadata_query, search_query
from gameshelf.adapters.igdb.schema import IgdbGame
from gameshelf.adapters.igdb.translator import extract_player_info, release_date
from gameshelf.config import IgdbConfig, ResilienceConfig
from gameshelf.config.metadata import IGDB_BASE_URL
from gameshelf.domain.ports import MetadataApiError, MetadataRateLimitError
from tests.support.http import mock_client_factory

PORTAL: dict[str, object] = {
    "id": 72,
    "name": "Portal 2",
    "summary": "Sequel to the acclaimed Portal.",
    "first_release_date": 1303171200,
    "cover": {"id": 1, "image_id": "co1rs4"},
    "genres": [{"id": 9, "name": "Puzzle"}],
    "game_modes": [
        {"id": 1, "name": "Single player", "slug": "single-player"},
        {"id": 3, "name": "Co-operative", "slug": "co-operative"},
    ],
    "multiplayer_modes": [
        {
            "id": 10,
            "onlinecoop": True,
            "onlinecoopmax": 2,
            "offlinecoopmax": 2,
            "splitscreen": True,
        }
    ],
}


class FakeTwitch:
    """Answers the token endpoint and IGDB queries, counting token requests."""

    def __init__(self, games: list[dict[str, object]], status: int = 200) -> None:
        self.games = games
        self.status = status
        self.token_requests = 0
        self.queries: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "id.twitch.tv":
            self.token_requests += 1
            return httpx.Response(
                200,
                json={"access_token": f"token-{self.token_requests}", "expires_in": 3600},
            )
        self.queries.append(request)
        if self.status != 200:
            return httpx.Response(self.status)
        return httpx.Response(200, json=self.games)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now


def _client(twitch: FakeTwitch, clock: FakeClock | None = None) -> IgdbClient:
    config = IgdbConfig(
        client_id="client",
        client_secret="secret",  # noqa: S106
        resilience=ResilienceConfig(name="igdb", base_url=IGDB_BASE_URL, cache=None),
    )
    return IgdbClient(
        config=config,
        client_factory=mock_client_factory(twitch),
        clock=clock or FakeClock(),
    )


def test_search_posts_apicalypse_query_with_token() -> None:
    twitch = FakeTwitch([PORTAL])
    provider = IgdbMetadataProvider(client=_client(twitch))

    results = provider.search_games('Portal "2"', limit=5)

    assert [(r.external_id, r.name, r.release_date) for r in results] == [
        ("72", "Portal 2", "2011-04-19")
    ]
    assert results[0].cover_image_url == (
        "https://images.igdb.com/igdb/image/upload/t_cover_big/co1rs4.jpg"
    )
    [query] = twitch.queries
    assert query.method == "POST"
    assert query.url.path == "/v4/games"
    assert query.headers["Client-ID"] == "client"
    assert query.headers["Authorization"] == "Bearer token-1"
    assert query.content.decode() == search_query('Portal "2"', 5)


def test_token_is_cached_until_expiry_buffer() -> None:
    twitch = FakeTwitch([PORTAL])
    clock = FakeClock()
    client = _client(twitch, clock)

    client.query_games(metadata_query(72))
    clock.now += 2_000
    client.query_games(metadata_query(72))
    assert twitch.token_requests == 1

    clock.now += 1_000
    client.query_games(metadata_query(72))

    assert twitch.token_requests == 2
    assert twitch.queries[-1].headers["Authorization"] == "Bearer token-2"


def test_fetch_metadata_has_accurate_counts() -> None:
    provider = IgdbMetadataProvider(client=_client(FakeTwitch([PORTAL])))

    metadata = provider.get_game_metadata("72")

    assert metadata is not None
    assert metadata.description == "Sequel to the acclaimed Portal."
    assert metadata.genres == ["Puzzle"]
    assert metadata.player_info is not None
    info = metadata.player_info
    assert (info.online_max_players, info.local_max_players, info.overall_max_players) == (2, 4, 4)
    assert provider.capabilities.has_accurate_player_counts is True


def test_unknown_game_returns_none() -> None:
    provider = IgdbMetadataProvider(client=_client(FakeTwitch([])))

    assert provider.get_game_metadata("72") is None
    assert provider.get_game_metadata("portal") is None


def test_rate_limit() -> None:
    provider = IgdbMetadataProvider(client=_client(FakeTwitch([], status=429)))

    with pytest.raises(MetadataRateLimitError):
        provider.search_games("Portal")


def test_unexpected_payload_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "id.twitch.tv":
            return httpx.Response(200, json={"access_token": "t", "expires_in": 3600})
        return httpx.Response(200, json={"message": "oops"})

    config = IgdbConfig(
        client_id="c",
        client_secret="s",  # noqa: S106
        resilience=ResilienceConfig(name="igdb", base_url=IGDB_BASE_URL),
    )
    client = IgdbClient(config=config, client_factory=mock_client_factory(handler))

    with pytest.raises(MetadataApiError, match="Unexpected IGDB response payload"):
        client.query_games(metadata_query(1))


def test_search_query_escapes_quotes_and_caps_limit() -> None:
    assert search_query('say "hi"', 80) == (
        'search "say \\"hi\\""; fields id, name, cover.image_id, first_release_date; limit 50;'
    )


def test_release_date() -> None:
    assert release_date(None) is None
    assert release_date(0) == "1970-01-01"


def _game(**values: object) -> IgdbGame:
    return IgdbGame.model_validate({"id": 1, "name": "Game", **values})


def test_single_player_only_is_capped_at_one() -> None:
    info = extract_player_info(_game(game_modes=[{"slug": "single-player"}]))

    assert (info.overall_min_players, info.overall_max_players) == (1, 1)
    assert info.supports_online is False


def test_mmo_without_counts_supports_online() -> None:
    info = extract_player_info(_game(game_modes=[{"slug": "massively-multiplayer-online-mmo"}]))

    assert info.supports_online is True
    assert info.overall_max_players is None
    assert info.online_max_players is None


def test_largest_counts_across_modes() -> None:
    info = extract_player_info(
        _game(
            game_modes=[{"slug": "multiplayer"}],
            multiplayer_modes=[{"onlinemax": 8}, {"onlinecoopmax": 16, "offlinemax": 2}],
        )
    )

    assert (info.online_max_players, info.local_max_players) == (16, 2)
    assert info.overall_max_players == 16
    assert info.overall_min_players == 1


def test_lan_coop_marks_local_support() -> None:
    info = extract_player_info(_game(multiplayer_modes=[{"lancoop": True}]))

    assert info.supports_local is True
    assert info.local_max_players is None
