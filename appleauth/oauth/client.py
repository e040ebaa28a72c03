"""Authorization code and refresh token exchange against Apple."""

import logging
from pathlib import Path
from types import TracebackType
from typing import NoReturn, Protocol, Self

from pydantic import ValidationError

from appleauth.core.settings import AppleAuthSettings
from appleauth.crypto.client_secret import ClientSecretSigner
from appleauth.crypto.types import ServiceIdentity
from appleauth.oauth.errors import ResponseDecodeError, error_for_code
from appleauth.oauth.transport import FormTransport, HttpxFormTransport
from appleauth.oauth.types import (
    TOKEN_ENDPOINT,
    ErrorResponseBody,
    GrantType,
    TokenResponse,
)

logger = logging.getLogger(__name__)

HTTP_OK = 200


class AppleAuth(Protocol):
    """Validation of Apple authorization codes and refresh tokens."""

    def exchange_authorization_code(self, code: str) -> TokenResponse: ...

    def exchange_authorization_code_with_redirect(
        self, code: str, redirect_uri: str
    ) -> TokenResponse: ...

    def exchange_refresh_token(self, refresh_token: str) -> TokenResponse: ...


class TokenExchangeClient:
    """Exchanges grants for tokens at Apple's token endpoint.

    Every call signs a fresh client secret and issues exactly one POST.
    Nothing is retried; errors from ``appleauth.oauth.errors`` are raised
    to the caller.
    """

    def __init__(
        self,
        identity: ServiceIdentity,
        transport: FormTransport | None = None,
        token_endpoint: str = TOKEN_ENDPOINT,
    ) -> None:
        self._identity = identity
        self._signer = ClientSecretSigner(identity)
        self._transport = transport or HttpxFormTransport()
        self._token_endpoint = token_endpoint

    @classmethod
    def from_key_file(
        cls,
        application_id: str,
        team_id: str,
        key_id: str,
        key_path: str | Path,
        transport: FormTransport | None = None,
    ) -> Self:
        """Build a client from a ``.p8`` key file downloaded from Apple."""
        return cls(
            ServiceIdentity(
                application_id=application_id,
                team_id=team_id,
                key_id=key_id,
                signing_key_bytes=Path(key_path).read_bytes(),
            ),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: AppleAuthSettings,
        transport: FormTransport | None = None,
    ) -> Self:
        """Build a client from environment settings."""
        identity = ServiceIdentity(
            application_id=settings.client_id,
            team_id=settings.team_id,
            key_id=settings.key_id,
            signing_key_bytes=settings.load_private_key(),
        )
        if transport is None:
            transport = HttpxFormTransport(timeout=settings.http_timeout)
        return cls(identity, transport=transport, token_endpoint=settings.token_endpoint)

    @property
    def identity(self) -> ServiceIdentity:
        return self._identity

    def exchange_authorization_code(self, code: str) -> TokenResponse:
        """Validate an authorization code."""
        return self._exchange(
            GrantType.AUTHORIZATION_CODE,
            {"code": code},
        )

    def exchange_authorization_code_with_redirect(
        self, code: str, redirect_uri: str
    ) -> TokenResponse:
        """Validate an authorization code issued for ``redirect_uri``."""
        return self._exchange(
            GrantType.AUTHORIZATION_CODE,
            {"code": code, "redirect_uri": redirect_uri},
        )

    def exchange_refresh_token(self, refresh_token: str) -> TokenResponse:
        """Validate a refresh token."""
        return self._exchange(
            GrantType.REFRESH_TOKEN,
            {"refresh_token": refresh_token},
        )

    def _exchange(self, grant_type: GrantType, grant_fields: dict[str, str]) -> TokenResponse:
        form = {
            "client_id": self._identity.application_id,
            "client_secret": self._signer.sign(),
            **grant_fields,
            "grant_type": grant_type.value,
        }
        logger.debug(
            "Requesting tokens",
            extra={"grant_type": grant_type.value, "client_id": self._identity.application_id},
        )
        response = self._transport.post_form(self._token_endpoint, form)
        if response.status_code != HTTP_OK:
            self._raise_for_error(response.status_code, response.body)
        try:
            return TokenResponse.model_validate_json(response.body)
        except ValidationError as exc:
            raise ResponseDecodeError(f"invalid token response: {exc}") from exc

    def _raise_for_error(self, status_code: int, body: bytes) -> NoReturn:
        try:
            parsed = ErrorResponseBody.model_validate_json(body)
        except ValidationError as exc:
            raise ResponseDecodeError(
                f"invalid error response (HTTP {status_code}): {exc}"
            ) from exc
        logger.warning(
            "Token endpoint rejected request",
            extra={"status_code": status_code, "error": parsed.error},
        )
        raise error_for_code(parsed.error)

    def close(self) -> None:
        """Release the transport."""
        self._transport.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
