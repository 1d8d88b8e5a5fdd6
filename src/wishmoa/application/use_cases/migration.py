"""Encrypt account numbers that were stored before encryption existed."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from ...crypto.account_cipher import AccountCipher, is_encrypted
from ...domain.repositories import ProjectRepository

logger = logging.getLogger(__name__)


class MigrationReport(BaseModel):
    scanned: int = 0
    encrypted: int = 0
    skipped: int = 0
    failed: int = 0


class AccountNumberMigration:
    """Rewrites legacy plaintext account numbers in their encrypted form.

    Safe to re-run: values already in the stored triplet format are skipped.
    """

    def __init__(self, project_repository: ProjectRepository, cipher: AccountCipher):
        self.project_repository = project_repository
        self.cipher = cipher

    async def run(self, dry_run: bool = False) -> MigrationReport:
        report = MigrationReport()
        for project in await self.project_repository.get_all():
            report.scanned += 1
            if is_encrypted(project.account_number):
                report.skipped += 1
                continue

            encrypted = self.cipher.encrypt(project.account_number)
            # encrypt() fails open and hands the plaintext back
            if not is_encrypted(encrypted):
                report.failed += 1
                logger.warning(
                    "Could not encrypt account number of project %s",
                    project.project_id,
                )
                continue

            report.encrypted += 1
            if dry_run:
                continue
            project.account_number = encrypted
            await self.project_repository.update(project)

        logger.info(
            "Account number migration: scanned=%d encrypted=%d skipped=%d failed=%d",
            report.scanned,
            report.encrypted,
            report.skipped,
            report.failed,
        )
        return report
