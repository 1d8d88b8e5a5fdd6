"""Service wiring from settings, for whatever surface hosts the services."""

from __future__ import annotations

from .application.use_cases import DonationService, ItemService, ProjectService
from .application.use_cases.migration import AccountNumberMigration
from .crypto.account_cipher import get_account_cipher
from .env import Settings
from .infrastructure.database import DatabaseClient
from .infrastructure.rate_limit import FixedWindowRateLimiter, RateLimitOptions
from .infrastructure.repositories import (
    DonationRepositoryImpl,
    ItemRepositoryImpl,
    ProjectRepositoryImpl,
)
from .infrastructure.storage import KeyValueStore, RedisKeyValueStore


def get_key_value_store(db_client: DatabaseClient) -> KeyValueStore:
    """Get key-value store."""
    return RedisKeyValueStore(db_client)


def get_rate_limit_options(settings: Settings) -> RateLimitOptions:
    """General API window taken from settings."""
    return RateLimitOptions(
        window_seconds=settings.rate_limit_window_seconds,
        max_requests=settings.rate_limit_max_requests,
    )


def get_project_service(store: KeyValueStore, settings: Settings) -> ProjectService:
    """Get project service."""
    return ProjectService(
        ProjectRepositoryImpl(store),
        ItemRepositoryImpl(store),
        DonationRepositoryImpl(store),
        get_account_cipher(settings),
        default_donation_amounts=tuple(settings.default_donation_amounts),
    )


def get_item_service(store: KeyValueStore) -> ItemService:
    """Get item service."""
    return ItemService(ProjectRepositoryImpl(store), ItemRepositoryImpl(store))


def get_donation_service(
    store: KeyValueStore,
    settings: Settings,
    rate_limiter: FixedWindowRateLimiter,
) -> DonationService:
    """Get donation service.

    The limiter is passed in so one instance is shared by every service built
    in the process.
    """
    return DonationService(
        ProjectRepositoryImpl(store),
        ItemRepositoryImpl(store),
        DonationRepositoryImpl(store),
        get_account_cipher(settings),
        rate_limiter=rate_limiter,
        rate_limit=get_rate_limit_options(settings),
    )


def get_account_migration(
    store: KeyValueStore, settings: Settings
) -> AccountNumberMigration:
    """Get account number migration."""
    return AccountNumberMigration(
        ProjectRepositoryImpl(store), get_account_cipher(settings)
    )
