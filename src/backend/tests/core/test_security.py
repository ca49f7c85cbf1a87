"""
Tests for token creation and validation.
"""

from datetime import timedelta

import pytest
from jose import jwt

from core.config import settings
from core.security import TOKEN_AUDIENCE, create_access_token, decode_token


@pytest.mark.unit
class TestTokens:
    """Tests for access token round-trips and rejection."""

    def test_decode_valid_token(self) -> None:
        token = create_access_token({"sub": "user-1"})
        payload = decode_token(token)
        assert payload is not None
        assert payload["sub"] == "user-1"
        assert payload["type"] == "access"
        assert payload["aud"] == TOKEN_AUDIENCE

    def test_expired_token_is_rejected(self) -> None:
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_wrong_type_is_rejected(self) -> None:
        token = create_access_token({"sub": "user-1"})
        assert decode_token(token, expected_type="refresh") is None

    def test_wrong_signature_is_rejected(self) -> None:
        token = jwt.encode({"sub": "user-1", "type": "access"}, "another-key", algorithm=settings.JWT_ALGORITHM)
        assert decode_token(token) is None

    def test_wrong_audience_is_rejected(self) -> None:
        token = jwt.encode(
            {"sub": "user-1", "type": "access", "aud": "someone-else", "iss": "resourcehub-api"},
            settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        assert decode_token(token) is None

    def test_garbage_is_rejected(self) -> None:
        assert decode_token("not-a-token") is None
