"""Tests for the token endpoint error taxonomy."""

import pytest

from appleauth.oauth.errors import (
    OAUTH_ERROR_MESSAGES,
    OAuthError,
    OAuthErrorCode,
    TokenEndpointError,
    UnrecognizedOAuthError,
    error_for_code,
)


class TestOAuthErrorMessages:
    """Tests for the code to message table."""

    def test_every_code_has_a_message(self) -> None:
        assert set(OAUTH_ERROR_MESSAGES) == set(OAuthErrorCode)
        assert len(OAUTH_ERROR_MESSAGES) == 6

    def test_unsupported_grant_type_message(self) -> None:
        assert OAUTH_ERROR_MESSAGES[OAuthErrorCode.UNSUPPORTED_GRANT_TYPE] == (
            "the authenticated client is not authorized to use this grant type."
        )

    def test_invalid_scope_message(self) -> None:
        assert (
            OAUTH_ERROR_MESSAGES[OAuthErrorCode.INVALID_SCOPE]
            == "The requested scope is invalid."
        )


class TestErrorForCode:
    """Tests for mapping raw upstream codes to errors."""

    @pytest.mark.parametrize("code", list(OAuthErrorCode))
    def test_known_codes(self, code: OAuthErrorCode) -> None:
        err = error_for_code(code.value)
        assert isinstance(err, OAuthError)
        assert err.code is code
        assert err.message == OAUTH_ERROR_MESSAGES[code]

    def test_unknown_code_keeps_raw_string(self) -> None:
        err = error_for_code("temporarily_unavailable")
        assert isinstance(err, UnrecognizedOAuthError)
        assert err.raw == "temporarily_unavailable"
        assert "temporarily_unavailable" in str(err)

    def test_empty_code_is_unrecognized(self) -> None:
        assert isinstance(error_for_code(""), UnrecognizedOAuthError)

    def test_codes_are_case_sensitive(self) -> None:
        assert isinstance(error_for_code("INVALID_GRANT"), UnrecognizedOAuthError)


class TestOAuthError:
    """Tests for the structured error value."""

    def test_str_includes_code_and_message(self) -> None:
        err = OAuthError(OAuthErrorCode.INVALID_GRANT)
        assert str(err).startswith("invalid_grant: ")
        assert err.message in str(err)

    def test_equal_by_code(self) -> None:
        assert OAuthError(OAuthErrorCode.INVALID_CLIENT) == OAuthError(
            OAuthErrorCode.INVALID_CLIENT
        )
        assert OAuthError(OAuthErrorCode.INVALID_CLIENT) != OAuthError(
            OAuthErrorCode.INVALID_REQUEST
        )

    def test_both_kinds_are_endpoint_errors(self) -> None:
        assert isinstance(OAuthError(OAuthErrorCode.INVALID_SCOPE), TokenEndpointError)
        assert isinstance(UnrecognizedOAuthError("x"), TokenEndpointError)
