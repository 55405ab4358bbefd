"""Unit tests for JWT decoding and the auth dependency."""

import json

import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from fastapi import HTTPException
from jwt.algorithms import ECAlgorithm

from collabmatch.api.deps import get_current_user
from collabmatch.api.middleware.auth import AuthError, AuthErrorCode, decode_jwt, get_signing_key
from collabmatch.core.config import get_settings
from conftest import create_test_token


class TestDecodeJWT:
    """Tests for decode_jwt function."""

    def test_valid_token(self) -> None:
        token = create_test_token(sub="user-42", email="u42@example.com")

        payload = decode_jwt(token)

        assert payload.sub == "user-42"
        assert payload.email == "u42@example.com"
        assert payload.role == "authenticated"

    def test_to_user_context_keeps_string_id(self) -> None:
        payload = decode_jwt(create_test_token(sub="not-a-uuid"))

        context = payload.to_user_context()

        assert context.user_id == "not-a-uuid"

    def test_expired_token(self) -> None:
        token = create_test_token(exp_offset=-60)

        with pytest.raises(AuthError) as exc_info:
            decode_jwt(token)

        assert exc_info.value.code == AuthErrorCode.TOKEN_EXPIRED

    def test_token_signed_by_other_key(self) -> None:
        other_key = ec.generate_private_key(ec.SECP256R1())
        token = create_test_token(private_key=other_key)

        with pytest.raises(AuthError) as exc_info:
            decode_jwt(token)

        assert exc_info.value.code == AuthErrorCode.INVALID_SIGNATURE

    def test_garbage_token(self) -> None:
        with pytest.raises(AuthError) as exc_info:
            decode_jwt("not.a.token")

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN


class TestGetSigningKey:
    """Tests for signing key loading."""

    def test_missing_jwk(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SUPABASE_SIGNING_KEY_JWK", "")
        get_settings.cache_clear()

        with pytest.raises(AuthError, match="not configured"):
            get_signing_key()

    def test_malformed_jwk(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SUPABASE_SIGNING_KEY_JWK", "{not json")
        get_settings.cache_clear()

        with pytest.raises(AuthError, match="Invalid signing key JWK format"):
            get_signing_key()

    def test_rotated_key_is_picked_up_after_cache_clear(self, monkeypatch: pytest.MonkeyPatch) -> None:
        new_key = ec.generate_private_key(ec.SECP256R1())
        jwk = json.loads(ECAlgorithm.to_jwk(new_key.public_key()))
        monkeypatch.setenv("SUPABASE_SIGNING_KEY_JWK", json.dumps(jwk))
        get_settings.cache_clear()
        get_signing_key.cache_clear()

        payload = decode_jwt(create_test_token(sub="user-9", private_key=new_key))

        assert payload.sub == "user-9"


class TestGetCurrentUser:
    """Tests for the get_current_user dependency."""

    @pytest.mark.asyncio
    async def test_missing_header(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user("")

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    @pytest.mark.asyncio
    async def test_wrong_scheme(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(f"Token {create_test_token()}")

        assert exc_info.value.status_code == 401
        assert "Bearer" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_expired(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(f"Bearer {create_test_token(exp_offset=-5)}")

        assert exc_info.value.detail == "Token has expired"

    @pytest.mark.asyncio
    async def test_valid(self) -> None:
        user = await get_current_user(f"Bearer {create_test_token(sub='user-7')}")

        assert user.user_id == "user-7"
        assert user.email == "test@example.com"
