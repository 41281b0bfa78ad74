from __future__ import annotations

import httpx
import pytest

from gameshelf.adapters.boardgamegeek import BoardGameGeekClient, BoardGameGeekMetadataProvider
from gameshelf.adapters.boardgamegeek.schema import BggThing, parse_search, parse_thing
from gameshelf.adapters.boardgamegeek.translator import extract_player_info
from gameshelf.config import BoardGameGeekConfig, ResilienceConfig
from gameshelf.config.metadata import BOARDGAMEGEEK_BASE_URL
from gameshelf.domain.ports import MetadataApiError, MetadataRateLimitError
from tests.support.http import Handler, mock_client_factory

SEARCH_XML = """<?xml version="1.0" encoding="utf-8"?>
<items total="3" termsofuse="https://boardgamegeek.com/xmlapi/termsofuse">
  <item type="boardgame" id="13">
    <name type="primary" value="CATAN"/>
    <yearpublished value="1995"/>
  </item>
  <item type="boardgameexpansion" id="926">
    <name type="alternate" value="Catan: Seafarers"/>
  </item>
  <item type="boardgame" id="">
    <name type="primary" value="Broken"/>
  </item>
</items>
"""

THING_XML = """<?xml version="1.0" encoding="utf-8"?>
<items termsofuse="https://boardgamegeek.com/xmlapi/termsofuse">
  <item type="boardgame" id="13">
    <thumbnail>https://cf.geekdo.example/catan_t.jpg</thumbnail>
    <image>https://cf.geekdo.example/catan.jpg</image>
    <name type="primary" sortindex="1" value="CATAN"/>
    <name type="alternate" sortindex="1" value="Die Siedler von Catan"/>
    <description>Trade, build &amp;amp; settle the island.&amp;#10;&amp;#10;Classic.</description>
    <yearpublished value="1995"/>
    <minplayers value="3"/>
    <maxplayers value="4"/>
    <link type="boardgamecategory" id="1026" value="Negotiation"/>
    <link type="boardgamemechanic" id="2072" value="Dice Rolling"/>
  </item>
</items>
"""


def _provider(
    handler: Handler,
    requests: list[httpx.Request] | None = None,
    api_token: str | None = None,
) -> BoardGameGeekMetadataProvider:
    config = BoardGameGeekConfig(
        resilience=ResilienceConfig(name="boardgamegeek", base_url=BOARDGAMEGEEK_BASE_URL),
        api_token=api_token,
    )
    client = BoardGameGeekClient(
        config=config, client_factory=mock_client_factory(handler, requests)
    )
    return BoardGameGeekMetadataProvider(client=client)


def test_parse_search_skips_items_without_id_and_uses_alternate_names() -> None:
    items = parse_search(SEARCH_XML)

    assert [(item.id, item.name, item.year_published) for item in items] == [
        ("13", "CATAN", "1995"),
        ("926", "Catan: Seafarers", None),
    ]


def test_parse_thing_ignores_other_ids() -> None:
    assert parse_thing(THING_XML, "999") is None


def test_search_sends_types_and_token() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=SEARCH_XML)

    results = _provider(handler, requests, api_token="tok").search_games("Catan", limit=1)

    assert [(r.external_id, r.name, r.release_date) for r in results] == [("13", "CATAN", "1995")]
    [request] = requests
    assert request.url.path == "/xmlapi2/search"
    assert request.url.params["type"] == "boardgame,boardgameexpansion"
    assert request.headers["Authorization"] == "Bearer tok"


def test_search_without_token_sends_no_authorization() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=SEARCH_XML)

    _provider(handler, requests).search_games("Catan")

    assert "Authorization" not in requests[0].headers


def test_fetch_metadata() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["id"] == "13"
        assert request.url.params["stats"] == "1"
        return httpx.Response(200, text=THING_XML)

    metadata = _provider(handler).get_game_metadata("13")

    assert metadata is not None
    assert metadata.name == "CATAN"
    assert metadata.description == "Trade, build & settle the island. Classic."
    assert metadata.cover_image_url == "https://cf.geekdo.example/catan.jpg"
    assert metadata.release_date == "1995"
    assert metadata.genres == ["Negotiation"]
    assert metadata.player_info is not None
    assert metadata.player_info.overall_min_players == 3
    assert metadata.player_info.physical_max_players == 4
    assert metadata.player_info.supports_physical is True


def test_non_numeric_id_is_ignored() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(request.url)

    assert _provider(handler).get_game_metadata("catan") is None


def test_malformed_xml_raises_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<items><item")

    with pytest.raises(MetadataApiError, match="Malformed BoardGameGeek search XML"):
        _provider(handler).search_games("Catan")


def test_rate_limit() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429)

    with pytest.raises(MetadataRateLimitError):
        _provider(handler).get_game_metadata("13")


@pytest.mark.parametrize(
    ("min_players", "max_players", "expected"),
    [
        (2, 6, (2, 6, True)),
        (None, None, (1, 1, False)),
        (1, 1, (1, 1, False)),
    ],
)
def test_player_info_defaults_to_single_player(
    min_players: int | None,
    max_players: int | None,
    expected: tuple[int, int, bool],
) -> None:
    thing = BggThing(id="1", name="Game", min_players=min_players, max_players=max_players)

    info = extract_player_info(thing)

    assert (info.overall_min_players, info.overall_max_players, info.supports_local) == expected
    assert info.supports_online is False
    assert info.physical_max_players == expected[1]
