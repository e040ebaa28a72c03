"""Type definitions for the service identity and client secret claims."""

from pydantic import BaseModel, ConfigDict

APPLE_AUDIENCE = "https://appleid.apple.com"


class ServiceIdentity(BaseModel):
    """The Apple developer identity a client secret is signed for."""

    model_config = ConfigDict(frozen=True)

    application_id: str
    team_id: str
    key_id: str
    signing_key_bytes: bytes


class ClientSecretClaims(BaseModel):
    """Claim set of a client secret assertion."""

    iss: str
    sub: str
    aud: str = APPLE_AUDIENCE
    iat: int
    exp: int
