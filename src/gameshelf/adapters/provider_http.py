"""Shared plumbing for metadata provider clients."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

import httpx
from pydantic import BaseModel, ConfigDict

from gameshelf.domain.ports import MetadataApiError, MetadataRateLimitError

if TYPE_CHECKING:
    from collections.abc import Awaitable

log = logging.getLogger(__name__)


class ProviderBaseModel(BaseModel):
    """Payload model that keeps unknown keys and reports each new one once.

    Subclasses set ``_provider_label`` and their own ``_logged_extra_keys`` set.
    """

    model_config = ConfigDict(extra="allow")
    _provider_label: ClassVar[str] = "Provider"
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "%s %s: unmodeled keys: %s",
            self._provider_label,
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


async def send(request: Awaitable[httpx.Response], *, provider_id: str) -> httpx.Response:
    """Await ``request`` and turn transport failures and error statuses into API errors."""

    try:
        response = await request
    except httpx.HTTPError as exc:
        msg = f"{provider_id} request failed: {exc}"
        raise MetadataApiError(msg, provider_id=provider_id) from exc
    check_response(response, provider_id=provider_id)
    return response


def check_response(response: httpx.Response, *, provider_id: str) -> None:
    status = response.status_code
    if status == httpx.codes.TOO_MANY_REQUESTS:
        msg = f"{provider_id} API error 429 Too Many Requests"
        raise MetadataRateLimitError(msg, provider_id=provider_id, status_code=status)
    if response.is_error:
        msg = f"{provider_id} API error {status}"
        raise MetadataApiError(msg, provider_id=provider_id, status_code=status)


def json_payload(response: httpx.Response, *, provider_id: str) -> object:
    try:
        return response.json()
    except ValueError as exc:
        msg = f"Unexpected {provider_id} response payload"
        raise MetadataApiError(msg, provider_id=provider_id) from exc
