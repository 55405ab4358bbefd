"""Access token verification against the Supabase signing key."""

import json
from enum import Enum
from functools import lru_cache
from typing import Any

import jwt
from jwt import PyJWK

from collabmatch.core.config import get_settings
from collabmatch.schemas.auth import TokenPayload

ALGORITHMS = ["ES256"]
REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class AuthErrorCode(str, Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"


class AuthError(Exception):
    """Raised when an access token cannot be trusted."""

    def __init__(self, message: str, code: AuthErrorCode) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


@lru_cache
def get_signing_key() -> Any:
    """Public key parsed from ``SUPABASE_SIGNING_KEY_JWK``.

    Cached for the life of the process; tests clear the cache after
    swapping settings.

    Raises:
        AuthError: If the setting is empty or not a usable JWK.
    """
    jwk_json = get_settings().supabase_signing_key_jwk
    if not jwk_json:
        raise AuthError("Signing key not configured", AuthErrorCode.INVALID_TOKEN)

    try:
        return PyJWK.from_dict(json.loads(jwk_json)).key
    except (json.JSONDecodeError, jwt.PyJWKError) as e:
        raise AuthError(f"Invalid signing key JWK format: {e}", AuthErrorCode.INVALID_TOKEN) from e


def decode_jwt(token: str) -> TokenPayload:
    """Verify an access token and return its claims.

    The signature, expiry and issue time are checked. Audience is not,
    since every Supabase project issues the same ``authenticated`` audience.

    Raises:
        AuthError: If the token is expired, forged or malformed.
    """
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            get_signing_key(),
            algorithms=ALGORITHMS,
            options={"verify_aud": False, "require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token has expired", AuthErrorCode.TOKEN_EXPIRED) from e
    except jwt.InvalidSignatureError as e:
        raise AuthError("Invalid token signature", AuthErrorCode.INVALID_SIGNATURE) from e
    except jwt.MissingRequiredClaimError as e:
        raise AuthError(f"Token missing required claim: {e}", AuthErrorCode.INVALID_TOKEN) from e
    except jwt.PyJWTError as e:
        raise AuthError(f"Invalid token: {e}", AuthErrorCode.INVALID_TOKEN) from e

    return TokenPayload.model_validate(claims)
