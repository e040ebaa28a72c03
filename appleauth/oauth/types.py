"""Type definitions for Apple token endpoint exchanges."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

TOKEN_ENDPOINT = "https://appleid.apple.com/auth/token"


class GrantType(StrEnum):
    """Grant types accepted by the token endpoint."""

    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


class TokenResponse(BaseModel):
    """Successful token endpoint response.

    Apple omits ``refresh_token`` when answering a refresh grant, so every
    field falls back to its zero value when absent.
    """

    model_config = ConfigDict(strict=True)

    access_token: str = ""
    expires_in: int = 0
    id_token: str = ""
    refresh_token: str = ""
    token_type: str = ""


class ErrorResponseBody(BaseModel):
    """Error body returned with a non-200 status."""

    model_config = ConfigDict(strict=True)

    error: str = ""


class FormResponse(BaseModel):
    """Status and raw body of a form POST."""

    status_code: int
    body: bytes
