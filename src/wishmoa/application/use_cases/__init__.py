"""Application services."""

from .donation import DonationService
from .item import ItemService
from .migration import AccountNumberMigration, MigrationReport
from .project import ProjectService

__all__ = [
    "AccountNumberMigration",
    "DonationService",
    "ItemService",
    "MigrationReport",
    "ProjectService",
]
