"""Application settings loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from appleauth.oauth.transport import HTTP_TIMEOUT_DEFAULT
from appleauth.oauth.types import TOKEN_ENDPOINT


class AppleAuthSettings(BaseSettings):
    """Sign in with Apple service credentials."""

    model_config = SettingsConfigDict(env_prefix="APPLE_AUTH_")

    client_id: str = ""
    team_id: str = ""
    key_id: str = ""
    private_key: str = ""
    private_key_path: str = ""
    token_endpoint: str = TOKEN_ENDPOINT
    http_timeout: float | None = HTTP_TIMEOUT_DEFAULT

    def load_private_key(self) -> bytes:
        """Return the PEM key, preferring the inline value over the file."""
        if self.private_key:
            return self.private_key.encode()
        if self.private_key_path:
            return Path(self.private_key_path).read_bytes()
        raise ValueError(
            "APPLE_AUTH_PRIVATE_KEY or APPLE_AUTH_PRIVATE_KEY_PATH must be set"
        )
