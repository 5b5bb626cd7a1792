"""
FastAPI dependency injection.

Dependencies provide instances of services, clients, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be mocked for testing
- Configuration is centralized
- Resource lifecycle (connections, clients) is managed properly

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from contextlib import contextmanager
from typing import Annotated, Generator, Iterator, Optional

from fastapi import Depends, HTTPException, Request, status

from ..config.settings import Settings, get_settings
from ..core.auth.sessions import AdminSession, SessionTokenService
from ..core.booking import BookingService
from ..core.inbox.service import InboxService
from ..core.media.galleries import GalleryService
from ..core.media.portfolio import PortfolioService
from ..core.media.videos import VideoService
from ..core.notifications import EmailSender
from ..infrastructure.email.client import EmailConfig, create_email_client
from ..infrastructure.instagram.client import FeedClient
from ..infrastructure.snowflake.client import MockSnowflakeConnection, create_snowflake_connection
from ..infrastructure.snowflake.repositories import (
    DisplayNameRepository,
    GalleryRenameRepository,
    MessageRepository,
    SnowflakeConfig,
    SnowflakeConnection,
)
from ..infrastructure.storage.client import StorageClient, StorageConfig, create_storage_client

logger = logging.getLogger(__name__)

# Global mock instances (shared across requests for testing)
_mock_storage_client = None
_mock_snowflake_connection = None
_mock_email_client = None

# The feed client holds the feed cache, so it lives as long as the process
_feed_client: Optional[FeedClient] = None


def reset_shared_clients() -> None:
    """Drop shared mock instances and the feed cache (for test isolation)."""
    global _mock_storage_client, _mock_snowflake_connection, _mock_email_client, _feed_client
    _mock_storage_client = None
    _mock_snowflake_connection = None
    _mock_email_client = None
    _feed_client = None


# ---------------------------------------------------------------------------
# Infrastructure Dependencies
# ---------------------------------------------------------------------------

def snowflake_config(settings: Settings) -> SnowflakeConfig:
    return SnowflakeConfig(
        account=settings.snowflake_account,
        user=settings.snowflake_user,
        password=settings.snowflake_password or None,
        private_key_path=settings.snowflake_private_key_path,
        database=settings.snowflake_database,
        schema=settings.snowflake_schema,
        warehouse=settings.snowflake_warehouse,
        role=settings.snowflake_role,
    )


@contextmanager
def open_snowflake_connection(settings: Settings) -> Iterator[SnowflakeConnection]:
    """
    Connection for one unit of work.

    In mock mode, we reuse the same connection across requests
    so that data persists during the testing session.
    """
    global _mock_snowflake_connection

    if settings.snowflake_mock_mode:
        if _mock_snowflake_connection is None:
            _mock_snowflake_connection = MockSnowflakeConnection()
            logger.info("Created shared mock Snowflake connection")
        yield _mock_snowflake_connection
    else:
        with create_snowflake_connection(config=snowflake_config(settings)) as conn:
            yield conn


def get_snowflake_connection(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Generator[SnowflakeConnection, None, None]:
    """
    Provide one connection per request.

    FastAPI caches a dependency within a request, so every repository a
    route asks for shares this connection. It's closed after the request.
    """
    with open_snowflake_connection(settings) as conn:
        yield conn


def get_display_name_repository(
    conn: Annotated[SnowflakeConnection, Depends(get_snowflake_connection)],
) -> DisplayNameRepository:
    return DisplayNameRepository(conn)


def get_message_repository(
    conn: Annotated[SnowflakeConnection, Depends(get_snowflake_connection)],
) -> MessageRepository:
    return MessageRepository(conn)


def get_gallery_rename_repository(
    conn: Annotated[SnowflakeConnection, Depends(get_snowflake_connection)],
) -> GalleryRenameRepository:
    return GalleryRenameRepository(conn)


def get_storage_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> StorageClient:
    """
    Provide storage client for photos and videos.

    Returns either R2 client or mock client based on settings.

    In mock mode, we reuse the same client across requests
    so that uploaded files persist during the testing session.
    """
    global _mock_storage_client

    if settings.r2_mock_mode:
        if _mock_storage_client is None:
            _mock_storage_client = create_storage_client(mock_mode=True)
            logger.info("Created shared mock storage client")
        return _mock_storage_client

    config = StorageConfig(
        access_key_id=settings.r2_access_key_id,
        secret_access_key=settings.r2_secret_access_key,
        bucket_name=settings.r2_bucket_name,
        endpoint_url=settings.r2_endpoint,
        public_base_url=settings.r2_public_base_url,
        presigned_url_ttl_seconds=settings.r2_presigned_url_ttl_seconds,
    )
    return create_storage_client(config=config)


def get_email_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> EmailSender:
    global _mock_email_client

    if settings.resend_mock_mode:
        if _mock_email_client is None:
            _mock_email_client = create_email_client(mock_mode=True)
            logger.info("Created shared mock email client")
        return _mock_email_client

    return create_email_client(config=EmailConfig(api_key=settings.resend_api_key))


def get_feed_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Optional[FeedClient]:
    """The shared feed client, or None when no feed URL is configured."""
    global _feed_client

    if not settings.instagram_feed_url:
        return None

    if _feed_client is None:
        _feed_client = FeedClient(
            feed_url=settings.instagram_feed_url,
            cache_seconds=settings.instagram_cache_seconds,
            timeout_seconds=settings.instagram_timeout_seconds,
        )
    return _feed_client


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_gallery_service(
    settings: Annotated[Settings, Depends(get_settings)],
    storage: Annotated[StorageClient, Depends(get_storage_client)],
    display_names: Annotated[DisplayNameRepository, Depends(get_display_name_repository)],
    renames: Annotated[GalleryRenameRepository, Depends(get_gallery_rename_repository)],
) -> GalleryService:
    return GalleryService(
        storage=storage,
        display_names=display_names,
        renames=renames,
        photos_prefix=settings.photos_prefix,
    )


def get_video_service(
    settings: Annotated[Settings, Depends(get_settings)],
    storage: Annotated[StorageClient, Depends(get_storage_client)],
    display_names: Annotated[DisplayNameRepository, Depends(get_display_name_repository)],
) -> VideoService:
    return VideoService(
        storage=storage,
        display_names=display_names,
        videos_prefix=settings.videos_prefix,
    )


def get_portfolio_service(
    settings: Annotated[Settings, Depends(get_settings)],
    storage: Annotated[StorageClient, Depends(get_storage_client)],
    videos: Annotated[VideoService, Depends(get_video_service)],
) -> PortfolioService:
    return PortfolioService(
        storage=storage,
        videos=videos,
        photos_prefix=settings.photos_prefix,
    )


def build_inbox_service(
    settings: Settings,
    messages: MessageRepository,
    email: EmailSender,
) -> InboxService:
    return InboxService(
        messages=messages,
        email=email,
        forward_to=settings.inbox_forward_email,
        forward_from=settings.inbox_from_email,
        site_domain=settings.site_domain,
        email_configured=settings.email_configured,
    )


def get_inbox_service(
    settings: Annotated[Settings, Depends(get_settings)],
    messages: Annotated[MessageRepository, Depends(get_message_repository)],
    email: Annotated[EmailSender, Depends(get_email_client)],
) -> InboxService:
    return build_inbox_service(settings, messages, email)


def get_booking_service(
    settings: Annotated[Settings, Depends(get_settings)],
    email: Annotated[EmailSender, Depends(get_email_client)],
) -> BookingService:
    return BookingService(
        email=email,
        notify_to=settings.booking_notification_email,
        from_address=settings.booking_from_email,
    )


def get_session_tokens(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionTokenService:
    return SessionTokenService(
        secret_key=settings.session_secret_key,
        admin_email=settings.admin_email,
        admin_password=settings.admin_password,
        ttl_seconds=settings.session_ttl_seconds,
    )


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def require_admin(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    tokens: Annotated[SessionTokenService, Depends(get_session_tokens)],
) -> AdminSession:
    """
    Validate the admin session cookie.

    Raises 401 if the cookie is missing, forged, or expired.
    """
    session = tokens.verify(request.cookies.get(settings.session_cookie_name))

    if session is None:
        logger.warning(
            "Rejected admin request without valid session",
            extra={"path": request.url.path}
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    return session


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
SettingsDep = Annotated[Settings, Depends(get_settings)]
AdminSessionDep = Annotated[AdminSession, Depends(require_admin)]
SessionTokensDep = Annotated[SessionTokenService, Depends(get_session_tokens)]
SnowflakeConnectionDep = Annotated[SnowflakeConnection, Depends(get_snowflake_connection)]
StorageClientDep = Annotated[StorageClient, Depends(get_storage_client)]
EmailClientDep = Annotated[EmailSender, Depends(get_email_client)]
FeedClientDep = Annotated[Optional[FeedClient], Depends(get_feed_client)]
GalleryServiceDep = Annotated[GalleryService, Depends(get_gallery_service)]
VideoServiceDep = Annotated[VideoService, Depends(get_video_service)]
PortfolioServiceDep = Annotated[PortfolioService, Depends(get_portfolio_service)]
InboxServiceDep = Annotated[InboxService, Depends(get_inbox_service)]
BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]
