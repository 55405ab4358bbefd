"""Ideas feed API routes."""

from fastapi import APIRouter, Query

from collabmatch.api.deps import CurrentUser
from collabmatch.schemas.idea import IdeaListResponse
from collabmatch.services.idea_service import IdeaService

router = APIRouter(prefix="/ideas", tags=["ideas"])


@router.get(
    "",
    response_model=IdeaListResponse,
    summary="Trending ideas",
    description="Stories currently on the Hacker News front page.",
)
async def front_page(user: CurrentUser) -> IdeaListResponse:
    return IdeaListResponse(articles=await IdeaService().front_page())


@router.get(
    "/search",
    response_model=IdeaListResponse,
    summary="Search ideas",
)
async def search_ideas(
    user: CurrentUser,
    q: str = Query(..., min_length=1, max_length=200, description="Keyword"),
) -> IdeaListResponse:
    return IdeaListResponse(articles=await IdeaService().search(q))
