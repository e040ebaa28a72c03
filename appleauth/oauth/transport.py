"""HTTP form POST capability used by the token exchange client."""

import logging
from collections.abc import Mapping
from typing import Protocol

import httpx

from appleauth.oauth.errors import TransportError
from appleauth.oauth.types import FormResponse

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_DEFAULT = 10.0


class FormTransport(Protocol):
    """Anything that can POST an url-encoded form and return the reply."""

    def post_form(self, url: str, fields: Mapping[str, str]) -> FormResponse: ...

    def close(self) -> None: ...


class HttpxFormTransport:
    """Form transport backed by an ``httpx.Client`` it owns."""

    def __init__(
        self,
        timeout: float | None = HTTP_TIMEOUT_DEFAULT,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(timeout=timeout)

    def post_form(self, url: str, fields: Mapping[str, str]) -> FormResponse:
        """POST ``fields`` as ``application/x-www-form-urlencoded``."""
        try:
            response = self._client.post(
                url,
                data=dict(fields),
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.debug("Form POST failed", extra={"url": url, "error": str(exc)})
            raise TransportError(f"POST {url} failed: {exc}") from exc
        # post() reads the whole body and releases the connection.
        return FormResponse(status_code=response.status_code, body=response.content)

    def close(self) -> None:
        self._client.close()
