"""Mock transports for provider HTTP clients."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING

import httpx

from gameshelf.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from gameshelf.config import ResilienceConfig

type Handler = Callable[[httpx.Request], httpx.Response]


def mock_client_factory(
    handler: Handler,
    requests: list[httpx.Request] | None = None,
) -> Callable[[ResilienceConfig], ResilientClient]:
    """Build a client factory that answers every request with ``handler``.

    Caching and rate limiting are switched off; retries stay configured so the
    retry transport is exercised on the way through.
    """

    def record(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        config = replace(resilience.without_cache(), ratelimit=None)
        return ResilientClient(config, transport=httpx.MockTransport(record))

    return factory
