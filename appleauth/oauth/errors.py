"""Error kinds and the token endpoint OAuth error taxonomy."""

from enum import StrEnum


class AppleAuthError(Exception):
    """Base class for every error raised by appleauth."""


class ClientSecretError(AppleAuthError):
    """The client secret could not be produced from the key material."""


class KeyDecodeError(ClientSecretError):
    """No PEM block could be decoded from the signing key bytes."""


class KeyParseError(ClientSecretError):
    """The PEM block does not hold a parseable PKCS8 private key."""


class SigningError(ClientSecretError):
    """The parsed key could not sign an ES256 assertion."""


class TransportError(AppleAuthError):
    """The token endpoint could not be reached."""


class ResponseDecodeError(AppleAuthError):
    """The token endpoint returned a body of unexpected shape."""


class TokenEndpointError(AppleAuthError):
    """The token endpoint rejected the request."""


class OAuthErrorCode(StrEnum):
    """OAuth2 error codes documented for Apple's token endpoint."""

    INVALID_REQUEST = "invalid_request"
    INVALID_CLIENT = "invalid_client"
    INVALID_GRANT = "invalid_grant"
    UNAUTHORIZED_CLIENT = "unauthorized_client"
    UNSUPPORTED_GRANT_TYPE = "unsupported_grant_type"
    INVALID_SCOPE = "invalid_scope"


OAUTH_ERROR_MESSAGES: dict[OAuthErrorCode, str] = {
    OAuthErrorCode.INVALID_REQUEST: (
        "The request is malformed, typically because it is missing a "
        "parameter, contains an unsupported parameter, includes multiple "
        "credentials, or uses more than one mechanism for authenticating "
        "the client."
    ),
    OAuthErrorCode.INVALID_CLIENT: (
        "The client authentication failed, typically due to a mismatched or "
        "invalid client identifier, invalid client secret (expired token, "
        "malformed claims, or invalid signature), or mismatched or invalid "
        "redirect URI."
    ),
    OAuthErrorCode.INVALID_GRANT: (
        "The authorization grant or refresh token is invalid, typically due "
        "to a mismatched or invalid client identifier, invalid code (expired "
        "or previously used authorization code), or invalid refresh token."
    ),
    OAuthErrorCode.UNAUTHORIZED_CLIENT: (
        "The client is not authorized to use this authorization grant type."
    ),
    OAuthErrorCode.UNSUPPORTED_GRANT_TYPE: (
        "the authenticated client is not authorized to use this grant type."
    ),
    OAuthErrorCode.INVALID_SCOPE: "The requested scope is invalid.",
}


class OAuthError(TokenEndpointError):
    """A documented OAuth error returned by the token endpoint."""

    def __init__(self, code: OAuthErrorCode) -> None:
        self.code = code
        self.message = OAUTH_ERROR_MESSAGES[code]
        super().__init__(f"{code.value}: {self.message}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OAuthError):
            return NotImplemented
        return self.code == other.code

    def __hash__(self) -> int:
        return hash(self.code)


class UnrecognizedOAuthError(TokenEndpointError):
    """The token endpoint returned an error code outside the known set."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"unrecognized response error: {raw}")


class TokenDecodeError(AppleAuthError):
    """An identity token is not a well-formed compact JWT."""


def error_for_code(raw: str) -> OAuthError | UnrecognizedOAuthError:
    """Map a raw ``error`` string from the token endpoint to its error."""
    try:
        code = OAuthErrorCode(raw)
    except ValueError:
        return UnrecognizedOAuthError(raw)
    return OAuthError(code)
