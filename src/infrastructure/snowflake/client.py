"""
Snowflake database connection management.

Provides connection factory and context manager for Snowflake operations.
Includes mock mode with in-memory storage for local development.

Using the repository pattern means most code never touches this module
directly - it goes through the repositories, which handle the translation
between domain models and database rows.
"""

import json
import logging
import re
from contextlib import contextmanager
from typing import Generator, Optional

from .repositories.base import SnowflakeConfig, SnowflakeConnection

logger = logging.getLogger(__name__)


class SnowflakeConnectionError(Exception):
    """Raised when Snowflake connection fails."""
    pass


def _load_private_key(key_path: str):
    """
    Load private key from file for key-pair authentication.

    Snowflake requires the private key as DER bytes, not a file path.
    """
    from cryptography.hazmat.backends import default_backend
    from cryptography.hazmat.primitives import serialization

    with open(key_path, 'rb') as key_file:
        private_key = serialization.load_pem_private_key(
            key_file.read(),
            password=None,  # No password on the key
            backend=default_backend()
        )

    return private_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )


@contextmanager
def get_snowflake_connection(config: SnowflakeConfig) -> Generator[SnowflakeConnection, None, None]:
    """
    Provide Snowflake connection with automatic cleanup.

    Supports both password and key-pair authentication:
    - If private_key_path is set, uses key-pair auth
    - Otherwise, uses password auth

    Usage:
        with get_snowflake_connection(config) as conn:
            repo = MessageRepository(conn)
    """
    try:
        import snowflake.connector
    except ImportError:
        raise ImportError(
            "snowflake-connector-python is required. "
            "Install with: pip install snowflake-connector-python"
        )

    conn = None
    try:
        connect_params = {
            'account': config.account,
            'user': config.user,
            'database': config.database,
            'schema': config.schema,
            'warehouse': config.warehouse,
            'role': config.role,
            'client_session_keep_alive': True,
        }

        if config.private_key_path:
            logger.info("Using key-pair authentication for Snowflake")
            connect_params['private_key'] = _load_private_key(config.private_key_path)
        elif config.password:
            logger.info("Using password authentication for Snowflake")
            connect_params['password'] = config.password
        else:
            raise SnowflakeConnectionError(
                "Either password or private_key_path must be provided"
            )

        conn = snowflake.connector.connect(**connect_params)

        logger.debug(
            "Established Snowflake connection",
            extra={
                "account": config.account,
                "database": config.database,
                "schema": config.schema,
            }
        )

    except snowflake.connector.errors.DatabaseError as e:
        logger.error(
            "Snowflake connection failed",
            extra={"error": str(e), "account": config.account}
        )
        raise SnowflakeConnectionError(f"Database connection failed: {e}")

    try:
        yield conn
    finally:
        try:
            conn.close()
            logger.debug("Closed Snowflake connection")
        except Exception as e:
            logger.warning(
                "Error closing Snowflake connection",
                extra={"error": str(e)}
            )


# ---------------------------------------------------------------------------
# Mock Connection for Local Development
# ---------------------------------------------------------------------------

_TABLE_PATTERN = re.compile(r'\b(?:INTO|FROM|UPDATE)\s+([A-Z_]+)')


class MockSnowflakeCursor:
    """
    Mock Snowflake cursor for testing.

    Implements just enough of the cursor interface to support the
    repositories without a real database. Queries are recognized by
    statement type and table name; parameters are read in the order the
    repositories bind them.

    VARIANT columns are handed back as JSON text, like the real connector.
    """

    def __init__(self, storage: dict) -> None:
        self._storage = storage
        self._results: list = []
        self._rowcount: int = 0

    def execute(self, query: str, params: Optional[tuple] = None) -> 'MockSnowflakeCursor':
        logger.debug(
            "Mock cursor execute",
            extra={"query": query.strip()[:100], "params": params}
        )

        query_upper = " ".join(query.upper().split())
        self._results = []
        self._rowcount = 0

        if query_upper.startswith('CREATE'):
            return self

        match = _TABLE_PATTERN.search(query_upper)
        if not match:
            return self

        table = match.group(1).lower()
        handler = getattr(self, f"_handle_{table}", None)
        if handler is None:
            raise ValueError(f"Mock cursor has no table {table}")

        handler(query_upper, tuple(params or ()))
        return self

    # -- display_names ------------------------------------------------------

    def _handle_display_names(self, query: str, params: tuple) -> None:
        table = self._storage['display_names']

        if query.startswith('MERGE'):
            key, path, gallery_id, display_name, type_, updated_at = params
            table[key] = (key, path, gallery_id, display_name, type_, updated_at)
            self._rowcount = 1

        elif query.startswith('SELECT'):
            row = table.get(params[0])
            self._results = [row] if row else []

        elif query.startswith('DELETE'):
            self._rowcount = 1 if table.pop(params[0], None) else 0

    # -- received_emails ----------------------------------------------------

    def _handle_received_emails(self, query: str, params: tuple) -> None:
        table = self._storage['received_emails']

        if query.startswith('INSERT'):
            table[params[0]] = list(params)
            self._rowcount = 1

        elif query.startswith('SELECT COUNT'):
            status = params[0]
            self._results = [(sum(1 for row in table.values() if row[7] == status),)]

        elif query.startswith('SELECT') and 'WHERE ID' in query:
            row = table.get(params[0])
            self._results = [tuple(row)] if row else []

        elif query.startswith('SELECT'):
            rows = sorted(table.values(), key=lambda row: row[6], reverse=True)
            self._results = [tuple(row) for row in rows]

        elif query.startswith('UPDATE'):
            status, message_id = params
            row = table.get(message_id)
            if row:
                row[7] = status
                self._rowcount = 1

        elif query.startswith('DELETE'):
            self._rowcount = 1 if table.pop(params[0], None) else 0

    # -- gallery_renames ----------------------------------------------------

    def _handle_gallery_renames(self, query: str, params: tuple) -> None:
        table = self._storage['gallery_renames']

        if query.startswith('MERGE'):
            intent_id = params[0]
            existing = table.get(intent_id)
            if existing:
                # Matched rows keep their slugs, sources and creation time
                existing[4] = params[4]
                existing[5] = params[5]
                existing[6] = params[6]
                existing[7] = params[7]
                existing[9] = params[9]
            else:
                table[intent_id] = list(params)
            self._rowcount = 1

        elif query.startswith('SELECT') and 'WHERE INTENT_ID' in query:
            row = table.get(params[0])
            self._results = [tuple(row)] if row else []

        elif query.startswith('SELECT'):
            statuses = set(params)
            rows = [row for row in table.values() if row[6] in statuses]
            self._results = [tuple(row) for row in sorted(rows, key=lambda row: row[8])]

    def fetchone(self):
        if not self._results:
            return None
        return self._results[0]

    def fetchall(self) -> list:
        return list(self._results)

    def close(self) -> None:
        pass

    @property
    def rowcount(self) -> int:
        return self._rowcount


class MockSnowflakeConnection:
    """
    Mock Snowflake connection for local development.

    Stores rows in memory: {table_name: {primary_key: row}}.

    Not suitable for production, but perfect for:
    - Local development
    - Unit tests
    - CI/CD environments
    """

    def __init__(self) -> None:
        self._storage: dict[str, dict] = {
            'display_names': {},
            'received_emails': {},
            'gallery_renames': {},
        }

        logger.info("Initialized mock Snowflake connection (in-memory)")

    def cursor(self) -> MockSnowflakeCursor:
        return MockSnowflakeCursor(self._storage)

    def commit(self) -> None:
        logger.debug("Mock connection commit")

    def rollback(self) -> None:
        logger.debug("Mock connection rollback")

    def close(self) -> None:
        logger.debug("Mock connection close")

    # Helper methods for testing
    def _rows(self, table: str) -> list:
        """All rows of a table (for test assertions)."""
        return list(self._storage[table].values())

    def _payload(self, message_id: str) -> Optional[dict]:
        """Decoded raw payload of a stored message (for test assertions)."""
        row = self._storage['received_emails'].get(message_id)
        return json.loads(row[8]) if row else None

    def _clear(self) -> None:
        """Clear all mock storage (for test cleanup)."""
        for table in self._storage.values():
            table.clear()


@contextmanager
def get_mock_snowflake_connection() -> Generator[MockSnowflakeConnection, None, None]:
    conn = MockSnowflakeConnection()
    try:
        yield conn
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

@contextmanager
def create_snowflake_connection(
    config: Optional[SnowflakeConfig] = None,
    mock_mode: bool = False,
) -> Generator[SnowflakeConnection, None, None]:
    """
    Create Snowflake connection based on configuration.

    Args:
        config: Snowflake configuration (required if not mock_mode)
        mock_mode: If True, return mock connection for testing

    Yields:
        SnowflakeConnection implementation (real or mock)
    """
    if mock_mode:
        with get_mock_snowflake_connection() as conn:
            yield conn
    else:
        if config is None:
            raise ValueError("config is required when not in mock mode")

        with get_snowflake_connection(config) as conn:
            yield conn
