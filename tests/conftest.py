"""
Shared test configuration.

Every external service runs in mock mode. The environment is set before
any test module imports the application, because src.main builds the
app at import time.
"""

import os

os.environ.update({
    "SNOWFLAKE_MOCK_MODE": "true",
    "R2_MOCK_MODE": "true",
    "RESEND_MOCK_MODE": "true",
    "ADMIN_EMAIL": "admin@example.com",
    "ADMIN_PASSWORD": "correct horse",
    "SESSION_SECRET_KEY": "test-secret",
    "ENVIRONMENT": "development",
    "INSTAGRAM_FEED_URL": "",
})

import pytest

from src.infrastructure.snowflake.client import MockSnowflakeConnection
from src.infrastructure.snowflake.repositories import (
    DisplayNameRepository,
    GalleryRenameRepository,
    MessageRepository,
)
from src.infrastructure.storage.client import MockStorageClient


@pytest.fixture
def storage() -> MockStorageClient:
    return MockStorageClient()


@pytest.fixture
def snowflake() -> MockSnowflakeConnection:
    return MockSnowflakeConnection()


@pytest.fixture
def display_names(snowflake) -> DisplayNameRepository:
    return DisplayNameRepository(snowflake)


@pytest.fixture
def renames(snowflake) -> GalleryRenameRepository:
    return GalleryRenameRepository(snowflake)


@pytest.fixture
def messages(snowflake) -> MessageRepository:
    return MessageRepository(snowflake)
