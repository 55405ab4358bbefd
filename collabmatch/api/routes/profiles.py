"""Profile API routes."""

from fastapi import APIRouter, Query

from collabmatch.api.deps import CurrentUser, StoreDep
from collabmatch.api.middleware.error_handler import NotFoundError
from collabmatch.schemas.auth import UserContext
from collabmatch.schemas.profile import ProfileListResponse, ProfileResponse, ProfileUpdate
from collabmatch.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])

ME = "me"


def resolve_user_id(user_id: str, user: UserContext) -> str:
    """Map the ``me`` path alias to the caller's id."""
    return user.user_id if user_id == ME else user_id


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current user's profile",
    description="Returns the authenticated user's profile, creating a placeholder if missing.",
)
async def get_my_profile(user: CurrentUser, store: StoreDep) -> ProfileResponse:
    profile = await ProfileService(store).ensure_profile(
        user.user_id,
        username=user.email,
    )
    return ProfileResponse.model_validate(profile)


@router.patch(
    "/me",
    response_model=ProfileResponse,
    summary="Update current user's profile",
    description="Updates the provided fields only. New tags also replace the searchable set.",
)
async def update_my_profile(
    data: ProfileUpdate,
    user: CurrentUser,
    store: StoreDep,
) -> ProfileResponse:
    """Update the authenticated user's profile.

    Args:
        data: Fields to update.
        user: The authenticated user context.
        store: Store bound to the caller.

    Returns:
        ProfileResponse: The updated profile data.
    """
    service = ProfileService(store)
    await service.ensure_profile(user.user_id, username=user.email)

    profile = await service.update_profile(
        user.user_id,
        display_name=data.display_name,
        bio=data.bio,
        tags=data.tags,
        role=data.role,
    )
    if data.photo_url is not None:
        profile = await service.set_photo_url(user.user_id, data.photo_url)
    if data.cv_url is not None:
        profile = await service.set_cv_url(user.user_id, data.cv_url)

    return ProfileResponse.model_validate(profile)


@router.get(
    "/search",
    response_model=ProfileListResponse,
    summary="Search profiles",
    description="Case-insensitive match on name, username or tags. The caller is left out.",
)
async def search_profiles(
    user: CurrentUser,
    store: StoreDep,
    q: str = Query(default="", max_length=100, description="Search text"),
    limit: int = Query(default=ProfileService.DEFAULT_SEARCH_LIMIT, ge=1, le=200),
) -> ProfileListResponse:
    users = await ProfileService(store).search_users(q, exclude_id=user.user_id, limit=limit)
    return ProfileListResponse(profiles=[ProfileResponse.model_validate(u) for u in users])


@router.get(
    "/suggestions",
    response_model=ProfileListResponse,
    summary="Suggest people to like",
    description="Users the caller has not liked yet, most shared tags first.",
)
async def suggest_profiles(
    user: CurrentUser,
    store: StoreDep,
    limit: int = Query(default=ProfileService.DEFAULT_SUGGESTION_LIMIT, ge=1, le=100),
) -> ProfileListResponse:
    users = await ProfileService(store).suggest_candidates(user.user_id, limit=limit)
    return ProfileListResponse(profiles=[ProfileResponse.model_validate(u) for u in users])


@router.get(
    "/{user_id}",
    response_model=ProfileResponse,
    summary="Get a profile",
)
async def get_profile(user_id: str, user: CurrentUser, store: StoreDep) -> ProfileResponse:
    """Get any user's profile.

    Raises:
        NotFoundError: 404 if the user has no profile.
    """
    profile = await ProfileService(store).get_profile(resolve_user_id(user_id, user))
    if profile is None:
        raise NotFoundError("Profile not found")
    return ProfileResponse.model_validate(profile)
