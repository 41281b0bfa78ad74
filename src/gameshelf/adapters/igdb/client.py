"""IGDB API client with Twitch client-credentials authentication."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from gameshelf.adapters.http_resilience import ResilientClient
from gameshelf.adapters.provider_http import json_payload, send
from gameshelf.domain.ports import MetadataApiError

from .schema import IgdbGame, IgdbGameList, TwitchToken

if TYPE_CHECKING:
    from collections.abc import Callable

    from gameshelf.config import IgdbConfig, ResilienceConfig

log = getLogger(__name__)

PROVIDER_ID = "igdb"
# refresh tokens this long before Twitch would expire them
TOKEN_EXPIRY_BUFFER_SECONDS = 600


@dataclass(slots=True, frozen=True)
class _CachedToken:
    value: str
    expires_at: float


class IgdbClient:
    """Low-level HTTP client for IGDB Apicalypse queries."""

    def __init__(
        self,
        *,
        config: IgdbConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._clock = clock
        self._token: _CachedToken | None = None

    def query_games(self, body: str) -> list[IgdbGame]:
        return asyncio.run(self._query_async("games", body))

    async def _query_async(self, endpoint: str, body: str) -> list[IgdbGame]:
        async with self._client_factory(self._resilience) as client:
            token = await self._access_token(client)
            headers = {
                "Client-ID": self._config.client_id,
                "Authorization": f"Bearer {token}",
                "Content-Type": "text/plain",
            }
            response = await send(
                client.post(f"/{endpoint}", content=body.strip(), headers=headers),
                provider_id=PROVIDER_ID,
            )
            payload = json_payload(response, provider_id=PROVIDER_ID)
        if not isinstance(payload, list):
            raise MetadataApiError("Unexpected IGDB response payload", provider_id=PROVIDER_ID)
        return IgdbGameList.validate_python(payload)

    async def _access_token(self, client: ResilientClient) -> str:
        now = self._clock()
        if self._token is not None and now < self._token.expires_at:
            return self._token.value

        log.debug("Requesting a new Twitch access token")
        response = await send(
            client.post(
                self._config.token_url,
                data={
                    "client_id": self._config.client_id,
                    "client_secret": self._config.client_secret,
                    "grant_type": "client_credentials",
                },
            ),
            provider_id=PROVIDER_ID,
        )
        payload = json_payload(response, provider_id=PROVIDER_ID)
        if not isinstance(payload, dict):
            raise MetadataApiError("Unexpected Twitch token payload", provider_id=PROVIDER_ID)
        token = TwitchToken.model_validate(payload)
        self._token = _CachedToken(
            value=token.access_token,
            expires_at=now + token.expires_in - TOKEN_EXPIRY_BUFFER_SECONDS,
        )
        return token.access_token
