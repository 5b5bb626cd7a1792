"""
Inbound email webhook.

The email provider posts every message received on the site's domain
here. The endpoint is public: the provider can't log in.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse

from ...core.inbox.service import EmailNotConfiguredError
from ..dependencies import InboxServiceDep

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/inbound", summary="Receive an inbound email")
async def receive_inbound_email(
    inbox: InboxServiceDep,
    payload: dict[str, Any] = Body(...),
):
    try:
        await inbox.receive_inbound(payload)

    except EmailNotConfiguredError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Email service misconfigured"},
        )
    except Exception as e:
        # A forwarding failure lands here too; the message is already stored
        logger.error("Inbound webhook error", extra={"error": str(e)})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Internal server error"},
        )

    return {"success": True}
