"""Portfolio and showcase API routes."""

from fastapi import APIRouter, Response, status

from collabmatch.api.deps import CurrentUser, StoreDep
from collabmatch.api.routes.profiles import resolve_user_id
from collabmatch.schemas.profile import (
    PortfolioItemCreate,
    PortfolioItemResponse,
    PortfolioListResponse,
    ShowcaseCreate,
    ShowcaseListResponse,
    ShowcaseResponse,
)
from collabmatch.services.portfolio_service import PortfolioService
from collabmatch.services.showcase_service import ShowcaseService

router = APIRouter(prefix="/profiles", tags=["portfolio"])


@router.get(
    "/{user_id}/portfolio",
    response_model=PortfolioListResponse,
    summary="List project cards",
    description="A user's portfolio, newest first. Use `me` for the caller.",
)
async def list_portfolio(user_id: str, user: CurrentUser, store: StoreDep) -> PortfolioListResponse:
    items = await PortfolioService(store).list_items(resolve_user_id(user_id, user))
    return PortfolioListResponse(items=[PortfolioItemResponse.model_validate(i) for i in items])


@router.post(
    "/me/portfolio",
    response_model=PortfolioItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a project card",
    description="Create a card, or replace the caller's card with the given id.",
)
async def save_portfolio_item(
    data: PortfolioItemCreate,
    user: CurrentUser,
    store: StoreDep,
) -> PortfolioItemResponse:
    item = await PortfolioService(store).save_item(
        user.user_id,
        title=data.title,
        role=data.role,
        description=data.description,
        skills=data.skills,
        media_urls=data.media_urls,
        start_date=data.start_date,
        end_date=data.end_date,
        item_id=data.id,
    )
    return PortfolioItemResponse.model_validate(item)


@router.delete(
    "/me/portfolio/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a project card",
)
async def delete_portfolio_item(item_id: str, user: CurrentUser, store: StoreDep) -> Response:
    await PortfolioService(store).delete_item(user.user_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{user_id}/showcases",
    response_model=ShowcaseListResponse,
    summary="List showcase cards",
    description="A user's showcase cards, latest date first. Use `me` for the caller.",
)
async def list_showcases(user_id: str, user: CurrentUser, store: StoreDep) -> ShowcaseListResponse:
    cards = await ShowcaseService(store).list_showcases(resolve_user_id(user_id, user))
    return ShowcaseListResponse(showcases=[ShowcaseResponse.model_validate(c) for c in cards])


@router.post(
    "/me/showcases",
    response_model=ShowcaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a showcase card",
)
async def add_showcase(data: ShowcaseCreate, user: CurrentUser, store: StoreDep) -> ShowcaseResponse:
    card = await ShowcaseService(store).add_showcase(
        user.user_id,
        title=data.title,
        org_name=data.org_name,
        date=data.date,
        link=data.link,
        summary=data.summary,
    )
    return ShowcaseResponse.model_validate(card)


@router.delete(
    "/me/showcases/{showcase_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a showcase card",
)
async def delete_showcase(showcase_id: str, user: CurrentUser, store: StoreDep) -> Response:
    await ShowcaseService(store).delete_showcase(user.user_id, showcase_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
