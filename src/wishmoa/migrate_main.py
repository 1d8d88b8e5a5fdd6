from __future__ import annotations

import asyncio
import logging
import os

from .application.use_cases.migration import MigrationReport
from .dependencies import get_account_migration, get_key_value_store
from .env import Settings, get_settings
from .infrastructure.database import DatabaseClient


async def run_migration(settings: Settings, dry_run: bool = False) -> MigrationReport:
    db_client = DatabaseClient(settings)
    db_client.initialize_database()
    try:
        migration = get_account_migration(get_key_value_store(db_client), settings)
        return await migration.run(dry_run=dry_run)
    finally:
        await db_client.close()


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    dry_run = os.environ.get("MIGRATION_DRY_RUN", "false").lower() == "true"

    print(f"Starting {settings.app_name} account number migration v{settings.app_version}")
    print(f"Database: {settings.database_url}")
    if not settings.encryption_secret:
        print("Warning: ENCRYPTION_KEY and SECRET are unset; using the empty-secret key")

    report = asyncio.run(run_migration(settings, dry_run=dry_run))
    print(
        f"Scanned {report.scanned}, encrypted {report.encrypted}, "
        f"skipped {report.skipped}, failed {report.failed}"
        + (" (dry run)" if dry_run else "")
    )


if __name__ == "__main__":
    main()
