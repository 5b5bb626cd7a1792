"""
Booking request endpoint.

The public booking form posts here. A valid request becomes an email to
the studio; nothing is stored.
"""

import logging
from datetime import date, datetime

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import EmailStr, Field, ValidationError, field_validator

from ...core.booking import BookingRequest
from ...infrastructure.email.client import EmailError
from ..dependencies import BookingServiceDep
from ..schemas import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class BookingForm(CamelModel):
    """Booking form as posted by the public site."""
    name: str = Field(min_length=2)
    email: EmailStr
    service_type: str = Field(min_length=1, description="photography, videography or both")
    preferred_date: date = Field(alias="date", description="ISO date or datetime")
    message: str = Field(min_length=10)

    @field_validator("preferred_date", mode="before")
    @classmethod
    def parse_iso_date(cls, value):
        if not isinstance(value, str):
            raise ValueError("Expected an ISO date string")
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            raise ValueError("Invalid date")


class BookingResponse(CamelModel):
    success: bool
    message: str
    email_id: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=BookingResponse,
    summary="Submit a booking request",
    responses={
        400: {"description": "Invalid form data"},
        500: {"description": "Failed to send email"},
    },
)
async def submit_booking(request: Request, booking: BookingServiceDep):
    """
    Validate the form and email it to the studio.

    Validation failures are reported as 400 with the individual issues,
    matching what the booking form expects.
    """
    try:
        form = BookingForm.model_validate_json(await request.body())
    except ValidationError as e:
        logger.info("Rejected booking form", extra={"error_count": e.error_count()})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "error": "Invalid form data",
                "details": e.errors(include_url=False, include_context=False, include_input=False),
            },
        )

    try:
        email_id = await booking.submit(BookingRequest(
            name=form.name,
            email=form.email,
            service_type=form.service_type,
            preferred_date=form.preferred_date,
            message=form.message,
        ))
    except EmailError as e:
        logger.error("Booking email failed", extra={"error": str(e)})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Failed to send email"},
        )

    return BookingResponse(
        success=True,
        message="Booking request sent successfully!",
        email_id=email_id,
    )
