"""
Shared types for Snowflake repositories.

The site keeps three document-like collections in Snowflake. Each row has
plain columns for the fields we query on, and VARIANT columns for raw
payloads and path lists, so they behave like documents without a schema
migration every time a provider adds a field.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional, Protocol


class SnowflakeConnection(Protocol):
    """
    Protocol for Snowflake connections.

    Using a protocol means tests can provide a mock without
    importing the actual snowflake-connector-python.
    """

    def cursor(self): ...
    def commit(self) -> None: ...


@dataclass
class SnowflakeConfig:
    """Configuration for Snowflake connection."""
    account: str
    user: str
    password: Optional[str] = None
    private_key_path: Optional[str] = None
    database: str = "STUDIO"
    schema: str = "SITE"
    warehouse: str = "COMPUTE_WH"
    role: Optional[str] = None


SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS display_names (
        key STRING PRIMARY KEY,
        path STRING,
        gallery_id STRING,
        display_name STRING NOT NULL,
        type STRING NOT NULL,
        updated_at NUMBER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS received_emails (
        id STRING PRIMARY KEY,
        from_address STRING,
        to_address STRING,
        subject STRING,
        text STRING,
        html STRING,
        received_at TIMESTAMP_TZ NOT NULL,
        status STRING NOT NULL,
        payload VARIANT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS gallery_renames (
        intent_id STRING PRIMARY KEY,
        old_slug STRING NOT NULL,
        new_slug STRING NOT NULL,
        source_paths VARIANT,
        copied_paths VARIANT,
        deleted_paths VARIANT,
        status STRING NOT NULL,
        error STRING,
        created_at NUMBER NOT NULL,
        updated_at NUMBER NOT NULL
    )
    """,
)


def ensure_schema(connection: SnowflakeConnection) -> None:
    """Create the site's tables if they don't exist yet."""
    cursor = connection.cursor()
    try:
        for statement in SCHEMA_STATEMENTS:
            cursor.execute(statement)
        connection.commit()
    finally:
        cursor.close()


def load_variant(value: Any, default: Any = None) -> Any:
    """
    Decode a VARIANT column.

    The connector hands VARIANT values back as JSON text; NULL comes back
    as None.
    """
    if value is None:
        return default
    if isinstance(value, (dict, list)):
        return value
    return json.loads(value)
