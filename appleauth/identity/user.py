"""User identity claims read from an Apple identity token.

The token signature is NOT verified here. Claims are trusted because the
token is expected to come straight from Apple's token endpoint over the
same server-to-server TLS exchange. Callers that receive identity tokens
from anywhere else (for example from a mobile client) must verify them
against Apple's published keys before calling ``parse_identity_token``.
"""

from enum import IntEnum
from typing import Any

import jwt
from pydantic import BaseModel

from appleauth.oauth.errors import TokenDecodeError


class RealUserStatus(IntEnum):
    """Whether the user appears to be a real person."""

    # Only reported on iOS 14 and later.
    UNSUPPORTED = 0
    UNKNOWN = 1
    LIKELY_REAL = 2


class AppleUser(BaseModel):
    """Identity of the user who signed in."""

    uid: str = ""
    email: str = ""
    email_verified: bool = False
    is_private_email: bool = False
    real_user_status: RealUserStatus = RealUserStatus.UNSUPPORTED


def decode_claims(identity_token: str) -> dict[str, Any]:
    """Decode the payload of a compact JWT without checking its signature."""
    try:
        return jwt.decode(identity_token, options={"verify_signature": False})
    except jwt.PyJWTError as exc:
        raise TokenDecodeError(str(exc)) from exc


def _str_claim(claims: dict[str, Any], name: str) -> str:
    value = claims.get(name)
    return value if isinstance(value, str) else ""


def _bool_claim(claims: dict[str, Any], name: str) -> bool:
    value = claims.get(name)
    return value if isinstance(value, bool) else False


def _real_user_status(value: object) -> RealUserStatus:
    # bool is an int subclass but not a valid status.
    if not isinstance(value, int) or isinstance(value, bool):
        return RealUserStatus.UNSUPPORTED
    try:
        return RealUserStatus(value)
    except ValueError:
        return RealUserStatus.UNSUPPORTED


def parse_identity_token(identity_token: str) -> AppleUser:
    """Read the user's identity from an identity token.

    Claims missing from the token or carrying an unexpected JSON type are
    left at their zero value rather than rejected.
    """
    claims = decode_claims(identity_token)
    return AppleUser(
        uid=_str_claim(claims, "sub"),
        email=_str_claim(claims, "email"),
        email_verified=_bool_claim(claims, "email_verified"),
        is_private_email=_bool_claim(claims, "is_private_email"),
        real_user_status=_real_user_status(claims.get("real_user_status")),
    )
