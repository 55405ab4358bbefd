"""Pytest configuration and fixtures."""

import os
import time
from collections.abc import Callable, Generator
from typing import Any

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from fastapi.testclient import TestClient
from jwt.algorithms import ECAlgorithm

# Signing key pair standing in for the Supabase project key
TEST_PRIVATE_KEY = ec.generate_private_key(ec.SECP256R1())
TEST_SIGNING_KEY_JWK = ECAlgorithm.to_jwk(TEST_PRIVATE_KEY.public_key())

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ["SUPABASE_SIGNING_KEY_JWK"] = TEST_SIGNING_KEY_JWK


def create_test_token(
    sub: str = "user-1",
    email: str | None = "test@example.com",
    exp_offset: int = 3600,
    private_key: Any = None,
) -> str:
    """Create an ES256 access token like the ones Supabase issues.

    Args:
        sub: Subject (user ID).
        email: User email.
        exp_offset: Seconds from now for expiration (negative for expired).
        private_key: Signing key; defaults to the test project key.

    Returns:
        str: Encoded JWT token.
    """
    now = int(time.time())
    payload = {
        "sub": sub,
        "email": email,
        "role": "authenticated",
        "exp": now + exp_offset,
        "iat": now,
        "aud": "authenticated",
        "iss": "https://test-project.supabase.co/auth/v1",
    }
    return jwt.encode(payload, private_key or TEST_PRIVATE_KEY, algorithm="ES256")


@pytest.fixture(autouse=True)
def fresh_state() -> Generator[None, None, None]:
    """Give every test fresh settings and an empty in-memory store."""
    from collabmatch.api.middleware.auth import get_signing_key
    from collabmatch.core.config import get_settings
    from collabmatch.store.factory import reset_memory_backend

    get_settings.cache_clear()
    get_signing_key.cache_clear()
    reset_memory_backend()
    yield
    reset_memory_backend()
    get_signing_key.cache_clear()
    get_settings.cache_clear()


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """Build Authorization headers for a user id."""

    def _headers(user_id: str = "user-1", email: str | None = None) -> dict[str, str]:
        token = create_test_token(sub=user_id, email=email or f"{user_id}@example.com")
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Yields:
        TestClient: FastAPI test client.
    """
    from collabmatch.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
