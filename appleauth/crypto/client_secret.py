"""ES256 client secret generation for Apple's token endpoint."""

import base64
import binascii
import logging
import re
from datetime import UTC, datetime
from functools import cached_property

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from appleauth.crypto.types import ClientSecretClaims, ServiceIdentity
from appleauth.oauth.errors import KeyDecodeError, KeyParseError, SigningError

logger = logging.getLogger(__name__)

# One second under Apple's six month limit.
CLIENT_SECRET_TTL_SECONDS = 15_776_999
CLIENT_SECRET_ALGORITHM = "ES256"

_PEM_BLOCK = re.compile(
    rb"-----BEGIN ([A-Z0-9 ]+)-----\s*(.*?)\s*-----END \1-----",
    re.DOTALL,
)

_DER_SEQUENCE = 0x30
_DER_INTEGER = 0x02


def decode_pem_block(data: bytes) -> bytes:
    """Return the DER content of the first PEM block in ``data``."""
    match = _PEM_BLOCK.search(data)
    if match is None:
        raise KeyDecodeError("empty block after decoding")
    body = b"".join(match.group(2).split())
    try:
        return base64.b64decode(body, validate=True)
    except binascii.Error as exc:
        raise KeyDecodeError("invalid base64 in PEM block") from exc


def _skip_header(der: bytes, offset: int) -> int:
    """Return the offset of the content following the DER header at ``offset``."""
    length = der[offset + 1]
    if length < 0x80:
        return offset + 2
    return offset + 2 + (length & 0x7F)


def _element_end(der: bytes, offset: int) -> int:
    length = der[offset + 1]
    if length < 0x80:
        return offset + 2 + length
    size = length & 0x7F
    content = int.from_bytes(der[offset + 2 : offset + 2 + size], "big")
    return offset + 2 + size + content


def is_pkcs8(der: bytes) -> bool:
    """Whether ``der`` is shaped like a PKCS8 PrivateKeyInfo.

    PrivateKeyInfo is SEQUENCE { INTEGER version, SEQUENCE algorithm, ... }.
    SEC1 and PKCS1 keys follow the version with an OCTET STRING or INTEGER.
    """
    try:
        if der[0] != _DER_SEQUENCE:
            return False
        version = _skip_header(der, 0)
        if der[version] != _DER_INTEGER:
            return False
        return der[_element_end(der, version)] == _DER_SEQUENCE
    except IndexError:
        return False


def load_signing_key(data: bytes) -> ec.EllipticCurvePrivateKey:
    """Parse PEM wrapped PKCS8 bytes into a P-256 private key."""
    der = decode_pem_block(data)
    if not is_pkcs8(der):
        raise KeyParseError("key is not PKCS8 PrivateKeyInfo")
    try:
        key: PrivateKeyTypes = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyParseError(str(exc)) from exc
    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise SigningError(
            f"{CLIENT_SECRET_ALGORITHM} requires an EC key, got {type(key).__name__}"
        )
    if not isinstance(key.curve, ec.SECP256R1):
        raise SigningError(
            f"{CLIENT_SECRET_ALGORITHM} requires curve P-256, got {key.curve.name}"
        )
    return key


def build_claims(identity: ServiceIdentity, now: datetime) -> ClientSecretClaims:
    """Build the client secret claim set issued at ``now``."""
    issued_at = int(now.timestamp())
    return ClientSecretClaims(
        iss=identity.team_id,
        sub=identity.application_id,
        iat=issued_at,
        exp=issued_at + CLIENT_SECRET_TTL_SECONDS,
    )


def encode_client_secret(
    key: ec.EllipticCurvePrivateKey, key_id: str, claims: ClientSecretClaims
) -> str:
    """Sign ``claims`` as a compact ES256 JWS carrying ``key_id``."""
    try:
        return jwt.encode(
            claims.model_dump(),
            key,
            algorithm=CLIENT_SECRET_ALGORITHM,
            headers={"kid": key_id},
        )
    except (jwt.PyJWTError, ValueError, TypeError) as exc:
        raise SigningError(str(exc)) from exc


def sign(identity: ServiceIdentity, now: datetime | None = None) -> str:
    """Produce a fresh client secret for ``identity``."""
    key = load_signing_key(identity.signing_key_bytes)
    claims = build_claims(identity, now or datetime.now(UTC))
    return encode_client_secret(key, identity.key_id, claims)


class ClientSecretSigner:
    """Signs client secrets for one identity, parsing its key once."""

    def __init__(self, identity: ServiceIdentity) -> None:
        self._identity = identity

    @property
    def identity(self) -> ServiceIdentity:
        return self._identity

    @cached_property
    def _key(self) -> ec.EllipticCurvePrivateKey:
        # Failures are not cached, so a bad key raises on every call.
        return load_signing_key(self._identity.signing_key_bytes)

    def sign(self, now: datetime | None = None) -> str:
        """Return a client secret issued at ``now`` (default: current time)."""
        claims = build_claims(self._identity, now or datetime.now(UTC))
        secret = encode_client_secret(self._key, self._identity.key_id, claims)
        logger.debug(
            "Signed client secret",
            extra={
                "key_id": self._identity.key_id,
                "team_id": self._identity.team_id,
                "expires_at": claims.exp,
            },
        )
        return secret
