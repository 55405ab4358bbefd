"""Like and match API routes."""

from fastapi import APIRouter, status

from collabmatch.api.deps import CurrentUser, StoreDep
from collabmatch.api.streaming import snapshot_response
from collabmatch.schemas.like import (
    LikedSetResponse,
    LikedStatusResponse,
    LikeResponse,
    MatchListResponse,
    MatchResponse,
    ReconcileResponse,
)
from collabmatch.services.like_service import LikeService
from collabmatch.services.match_service import MatchService

router = APIRouter(tags=["likes"])


@router.put(
    "/likes/{target_id}",
    response_model=MatchResponse,
    status_code=status.HTTP_200_OK,
    summary="Like a user",
    description=(
        "Record that the caller likes another user. Liking again is a no-op. "
        "When the like is mutual the shared direct thread is returned."
    ),
)
async def like_user(target_id: str, user: CurrentUser, store: StoreDep) -> MatchResponse:
    """Like ``target_id`` and report whether it made a match."""
    result = await MatchService(store).like(user.user_id, target_id)
    return MatchResponse(
        like=LikeResponse.model_validate(result.like),
        mutual=result.mutual,
        thread_id=result.thread_id,
        promotion_pending=result.promotion_pending,
    )


@router.get(
    "/likes",
    response_model=LikedSetResponse,
    summary="List liked users",
)
async def list_liked(user: CurrentUser, store: StoreDep) -> LikedSetResponse:
    liked = await LikeService(store).liked_ids(user.user_id)
    return LikedSetResponse(liked_ids=sorted(liked))


@router.get(
    "/likes/stream",
    summary="Stream liked users",
    description="Server-sent events carrying the full liked set after every change.",
)
async def stream_liked(user: CurrentUser, store: StoreDep):
    stream = LikeService(store).liked_set_stream()
    return snapshot_response(stream, "liked", lambda liked: {"liked_ids": sorted(liked)})


@router.get(
    "/likes/{target_id}",
    response_model=LikedStatusResponse,
    summary="Check a like",
)
async def get_like_status(target_id: str, user: CurrentUser, store: StoreDep) -> LikedStatusResponse:
    liked = await LikeService(store).has_liked(user.user_id, target_id)
    return LikedStatusResponse(target_id=target_id, liked=liked)


@router.get(
    "/matches",
    response_model=MatchListResponse,
    summary="List matches",
    description="Users the caller likes who like the caller back.",
)
async def list_matches(user: CurrentUser, store: StoreDep) -> MatchListResponse:
    return MatchListResponse(user_ids=await MatchService(store).matches(user.user_id))


@router.post(
    "/matches/reconcile",
    response_model=ReconcileResponse,
    summary="Reconcile matches",
    description="Make sure every mutual like has its direct thread. Safe to call repeatedly.",
)
async def reconcile_matches(user: CurrentUser, store: StoreDep) -> ReconcileResponse:
    return ReconcileResponse(threads=await MatchService(store).reconcile(user.user_id))
