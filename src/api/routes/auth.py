"""
Admin login endpoints.

A single admin account is configured through the environment. Login sets
an HTTP-only cookie holding a signed session token; the admin UI never
sees the token itself.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from ..dependencies import SessionTokensDep, SettingsDep
from ..schemas import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    email: str = Field("", description="Admin email")
    password: str = Field("", description="Admin password")


class LoginResponse(BaseModel):
    success: bool
    message: str


class SessionCheckResponse(CamelModel):
    authenticated: bool
    email: str | None = None
    expires_at: str | None = Field(None, description="Session expiry (ISO format)")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Admin login",
    responses={401: {"model": LoginResponse}},
)
async def login(
    request: Request,
    response: Response,
    settings: SettingsDep,
    tokens: SessionTokensDep,
):
    """
    Check the credentials and set the session cookie.

    The body is parsed here rather than by FastAPI so that a missing or
    malformed field is answered like any other mismatch.
    """
    try:
        credentials = LoginRequest.model_validate_json(await request.body())
    except ValidationError:
        credentials = None

    if credentials is None or not tokens.verify_credentials(credentials.email, credentials.password):
        logger.warning("Failed admin login attempt")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"success": False, "message": "Invalid credentials"},
        )

    response.set_cookie(
        key=settings.session_cookie_name,
        value=tokens.issue(credentials.email),
        max_age=settings.session_ttl_seconds,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )

    logger.info("Admin logged in")

    return LoginResponse(success=True, message="Login successful")


@router.get(
    "/check",
    response_model=SessionCheckResponse,
    summary="Check admin session",
    responses={401: {"model": SessionCheckResponse}},
)
async def check_session(
    request: Request,
    settings: SettingsDep,
    tokens: SessionTokensDep,
):
    session = tokens.verify(request.cookies.get(settings.session_cookie_name))

    if session is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"authenticated": False},
        )

    return SessionCheckResponse(
        authenticated=True,
        email=session.email,
        expires_at=datetime.fromtimestamp(session.expires_at, tz=timezone.utc).isoformat(),
    )


@router.post("/logout", summary="Admin logout")
async def logout(response: Response, settings: SettingsDep) -> dict:
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    return {"success": True}
