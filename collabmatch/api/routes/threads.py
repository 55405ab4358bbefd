"""Thread and message API routes."""

from fastapi import APIRouter, Query, Response, status

from collabmatch.api.deps import CurrentUser, StoreDep
from collabmatch.api.streaming import snapshot_response
from collabmatch.models import Message, Thread
from collabmatch.schemas.thread import (
    MessageCreate,
    MessageListResponse,
    MessageResponse,
    ThreadCreate,
    ThreadCreateResponse,
    ThreadListResponse,
    ThreadResponse,
)
from collabmatch.services.message_service import MessageService
from collabmatch.services.thread_service import ThreadService

router = APIRouter(prefix="/threads", tags=["threads"])


def _thread_list(threads: list[Thread]) -> dict:
    return ThreadListResponse(
        threads=[ThreadResponse.model_validate(thread) for thread in threads]
    ).model_dump(mode="json")


def _message_list(messages: list[Message]) -> dict:
    return MessageListResponse(
        messages=[MessageResponse.model_validate(message) for message in messages]
    ).model_dump(mode="json")


@router.post(
    "",
    response_model=ThreadCreateResponse,
    summary="Open a direct thread",
    description=(
        "Return the caller's direct thread with another user, creating it if "
        "needed. Calling this again, from either side, returns the same id."
    ),
)
async def open_thread(data: ThreadCreate, user: CurrentUser, store: StoreDep) -> ThreadCreateResponse:
    thread_id = await ThreadService(store).ensure_direct_thread(user.user_id, data.other_user_id)
    return ThreadCreateResponse(thread_id=thread_id)


@router.get(
    "",
    response_model=ThreadListResponse,
    summary="List threads",
    description="The caller's threads, most recent activity first.",
)
async def list_threads(
    user: CurrentUser,
    store: StoreDep,
    started_only: bool = Query(default=False, description="Only threads with at least one message"),
) -> ThreadListResponse:
    threads = await ThreadService(store).list_threads(user.user_id, started_only=started_only)
    return ThreadListResponse(threads=[ThreadResponse.model_validate(t) for t in threads])


@router.get(
    "/stream",
    summary="Stream threads",
    description="Server-sent events carrying the full thread list after every change.",
)
async def stream_threads(
    user: CurrentUser,
    store: StoreDep,
    started_only: bool = Query(default=False),
):
    stream = ThreadService(store).observe_threads(user.user_id, started_only=started_only)
    return snapshot_response(stream, "threads", _thread_list)


@router.get(
    "/{thread_id}",
    response_model=ThreadResponse,
    summary="Get a thread",
)
async def get_thread(thread_id: str, user: CurrentUser, store: StoreDep) -> ThreadResponse:
    """Get a thread the caller participates in.

    Raises:
        NotFoundError: 404 if the thread does not exist.
        AuthorizationError: 403 if the caller is not a participant.
    """
    return ThreadResponse.model_validate(await ThreadService(store).get_thread(thread_id))


@router.get(
    "/{thread_id}/messages",
    response_model=MessageListResponse,
    summary="List messages",
    description="The latest messages of a thread, oldest first.",
)
async def list_messages(
    thread_id: str,
    user: CurrentUser,
    store: StoreDep,
    limit: int = Query(default=MessageService.DEFAULT_PAGE_SIZE, ge=1, le=500),
) -> MessageListResponse:
    messages = await MessageService(store).list_messages(thread_id, limit=limit)
    return MessageListResponse(messages=[MessageResponse.model_validate(m) for m in messages])


@router.get(
    "/{thread_id}/messages/stream",
    summary="Stream messages",
    description="Server-sent events carrying the latest messages after every change.",
)
async def stream_messages(
    thread_id: str,
    user: CurrentUser,
    store: StoreDep,
    limit: int = Query(default=MessageService.DEFAULT_PAGE_SIZE, ge=1, le=500),
):
    stream = MessageService(store).observe_messages(thread_id, limit=limit)
    return snapshot_response(stream, "messages", _message_list)


@router.post(
    "/{thread_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={204: {"description": "Blank text, nothing was sent"}},
    summary="Send a message",
)
async def send_message(
    thread_id: str,
    data: MessageCreate,
    user: CurrentUser,
    store: StoreDep,
):
    """Append a message and update the thread summary.

    Blank text is accepted and ignored with 204.
    """
    message = await MessageService(store).send(thread_id, user.user_id, data.text)
    if message is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return MessageResponse.model_validate(message)
