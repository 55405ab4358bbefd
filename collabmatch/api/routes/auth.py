"""Authentication API routes."""

from typing import Annotated

from fastapi import APIRouter, Header, status

from collabmatch.api.deps import CurrentUser
from collabmatch.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RefreshRequest,
    RefreshResponse,
    SignupRequest,
    SignupResponse,
)
from collabmatch.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up new user",
    description="Create an account and its profile. A verification email is sent.",
)
async def signup(data: SignupRequest) -> SignupResponse:
    """Sign up a new user with email and password.

    Raises:
        ValidationError: 422 if signup fails (e.g., email already exists).
    """
    result = await AuthService().signup(
        email=data.email,
        password=data.password,
        display_name=data.display_name,
        role=data.role,
        bio=data.bio,
        tags=data.tags,
    )
    return SignupResponse(**result)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login user",
    description="Login with email and password to get access and refresh tokens.",
)
async def login(data: LoginRequest) -> LoginResponse:
    """Exchange credentials for tokens.

    Raises:
        AuthenticationError: 401 if the credentials are rejected.
    """
    result = await AuthService().login(email=data.email, password=data.password)
    return LoginResponse(**result)


@router.post(
    "/logout",
    response_model=LogoutResponse,
    summary="Logout user",
    description="Invalidate the session behind the bearer token.",
)
async def logout(
    user: CurrentUser,
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> LogoutResponse:
    """Logout the authenticated user."""
    token = authorization.split()[-1]
    result = await AuthService().logout(token)
    return LogoutResponse(**result)


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    summary="Refresh access token",
    description="Get a new access token using a refresh token.",
)
async def refresh(data: RefreshRequest) -> RefreshResponse:
    result = await AuthService().refresh_token(data.refresh_token)
    return RefreshResponse(**result)
