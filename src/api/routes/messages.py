"""
Admin inbox endpoints.

Lists, searches and manages email received on the site's domain. The
live view is a Server-Sent Events stream that pushes the filtered list
whenever it changes.
"""

import json
import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse
from pydantic import Field

from ...core.inbox.models import InboundMessage, MessageStatus, StatusFilter
from ...infrastructure.snowflake.repositories import MessageNotFoundError, MessageRepository
from ..dependencies import (
    EmailClientDep,
    InboxServiceDep,
    SettingsDep,
    build_inbox_service,
    open_snowflake_connection,
)
from ..schemas import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class MessageItem(CamelModel):
    id: str
    sender: str = Field(alias="from")
    recipient: str = Field(alias="to")
    subject: str
    text: str
    html: str
    received_at: datetime
    status: MessageStatus


class MessageListResponse(CamelModel):
    messages: list[MessageItem]
    unread_count: int


class UnreadCountResponse(CamelModel):
    unread_count: int


class StatusUpdateRequest(CamelModel):
    status: MessageStatus


class StatusResponse(CamelModel):
    id: str
    status: MessageStatus


def _message_item(message: InboundMessage) -> MessageItem:
    return MessageItem(
        id=message.id,
        sender=message.sender,
        recipient=message.recipient,
        subject=message.subject,
        text=message.text,
        html=message.html,
        received_at=message.received_at,
        status=message.status,
    )


def _not_found(e: MessageNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=MessageListResponse, summary="List messages")
async def list_messages(
    inbox: InboxServiceDep,
    q: str = Query("", description="Case-insensitive search in sender, subject and text"),
    status_filter: StatusFilter = Query(StatusFilter.ALL, alias="status"),
) -> MessageListResponse:
    return MessageListResponse(
        messages=[_message_item(m) for m in inbox.list_messages(q, status_filter)],
        unread_count=inbox.unread_count(),
    )


@router.get("/stream", summary="Live message list (Server-Sent Events)")
async def stream_messages(
    request: Request,
    settings: SettingsDep,
    email: EmailClientDep,
    q: str = Query(""),
    status_filter: StatusFilter = Query(StatusFilter.ALL, alias="status"),
):
    """
    Push the filtered message list on connect and after every change.

    The stream outlives the request's dependencies, so it opens its own
    database connection.
    """

    async def event_stream():
        with open_snowflake_connection(settings) as conn:
            inbox = build_inbox_service(settings, MessageRepository(conn), email)

            async for snapshot in inbox.watch(settings.inbox_poll_interval_seconds, q, status_filter):
                if await request.is_disconnected():
                    break

                payload = json.dumps([
                    _message_item(m).model_dump(mode="json", by_alias=True)
                    for m in snapshot
                ])
                yield f"data: {payload}\n\n"

        logger.debug("Inbox stream closed")

    headers = {"Cache-Control": "no-cache", "Connection": "keep-alive"}
    return StreamingResponse(event_stream(), media_type="text/event-stream", headers=headers)


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Unread message count")
async def unread_count(inbox: InboxServiceDep) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=inbox.unread_count())


@router.post("/{message_id}/toggle", response_model=StatusResponse, summary="Toggle read status")
async def toggle_status(message_id: str, inbox: InboxServiceDep) -> StatusResponse:
    try:
        message = inbox.toggle_status(message_id)
    except MessageNotFoundError as e:
        raise _not_found(e)

    return StatusResponse(id=message.id, status=message.status)


@router.put("/{message_id}/status", response_model=StatusResponse, summary="Set read status")
async def set_status(
    message_id: str,
    request: StatusUpdateRequest,
    inbox: InboxServiceDep,
) -> StatusResponse:
    try:
        inbox.set_status(message_id, request.status)
    except MessageNotFoundError as e:
        raise _not_found(e)

    return StatusResponse(id=message_id, status=request.status)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a message")
async def delete_message(message_id: str, inbox: InboxServiceDep) -> None:
    try:
        inbox.delete(message_id)
    except MessageNotFoundError as e:
        raise _not_found(e)

    logger.info("Deleted message", extra={"message_id": message_id})
