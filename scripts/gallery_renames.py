#!/usr/bin/env python3
"""
Inspect and repair gallery renames.

A gallery rename that dies partway (process killed, R2 outage) leaves an
open intent in the gallery_renames table. This script lists those and
carries them forward or back without going through the admin UI.

Usage:
    python scripts/gallery_renames.py init-db
    python scripts/gallery_renames.py list
    python scripts/gallery_renames.py resume <rename-id>
    python scripts/gallery_renames.py rollback <rename-id>

Requires:
    - .env file with Snowflake and R2 credentials
"""

import asyncio
import sys
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from src.config.settings import get_settings
from src.core.media.galleries import GalleryError, GalleryService
from src.infrastructure.snowflake.client import create_snowflake_connection
from src.infrastructure.snowflake.repositories import (
    DisplayNameRepository,
    GalleryRenameRepository,
    RenameIntentNotFoundError,
    SnowflakeConfig,
    ensure_schema,
)
from src.infrastructure.storage.client import StorageConfig, create_storage_client


def _snowflake_config(settings) -> SnowflakeConfig:
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


def _storage(settings):
    if settings.r2_mock_mode:
        return create_storage_client(mock_mode=True)

    return create_storage_client(config=StorageConfig(
        access_key_id=settings.r2_access_key_id,
        secret_access_key=settings.r2_secret_access_key,
        bucket_name=settings.r2_bucket_name,
        endpoint_url=settings.r2_endpoint,
        public_base_url=settings.r2_public_base_url,
        presigned_url_ttl_seconds=settings.r2_presigned_url_ttl_seconds,
    ))


def _print_intent(intent) -> None:
    print(
        f"{intent.id}  {intent.status.value:<11}  {intent.old_slug} -> {intent.new_slug}  "
        f"copied {len(intent.copied_paths)}/{len(intent.source_paths)}  "
        f"deleted {len(intent.deleted_paths)}/{len(intent.source_paths)}"
    )
    if intent.error:
        print(f"    error: {intent.error}")


async def run(command: str, rename_id: str | None) -> bool:
    settings = get_settings()

    with create_snowflake_connection(
        config=None if settings.snowflake_mock_mode else _snowflake_config(settings),
        mock_mode=settings.snowflake_mock_mode,
    ) as conn:
        if command == "init-db":
            ensure_schema(conn)
            print("Tables ready")
            return True

        service = GalleryService(
            storage=_storage(settings),
            display_names=DisplayNameRepository(conn),
            renames=GalleryRenameRepository(conn),
            photos_prefix=settings.photos_prefix,
        )

        if command == "list":
            intents = service.list_open_renames()
            if not intents:
                print("No unfinished renames")
            for intent in intents:
                _print_intent(intent)
            return True

        try:
            if command == "resume":
                intent = await service.resume_rename(rename_id)
            else:
                intent = await service.rollback_rename(rename_id)
        except RenameIntentNotFoundError as e:
            print(f"ERROR: {e}")
            return False
        except GalleryError as e:
            print(f"ERROR: {e}")
            intent = getattr(e, "intent", None)
            if intent:
                _print_intent(intent)
            return False

        _print_intent(intent)
        return True


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Inspect and repair gallery renames')
    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('init-db', help='Create the site tables if missing')
    sub.add_parser('list', help='Show unfinished renames')
    resume = sub.add_parser('resume', help='Carry a rename forward')
    resume.add_argument('rename_id')
    rollback = sub.add_parser('rollback', help='Undo a rename that has not finished copying')
    rollback.add_argument('rename_id')
    args = parser.parse_args()

    success = asyncio.run(run(args.command, getattr(args, 'rename_id', None)))

    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
