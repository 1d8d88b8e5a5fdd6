"""Shared pytest fixtures: cipher, in-memory storage and services."""

from __future__ import annotations

from typing import AsyncGenerator

import pytest

from wishmoa.application.use_cases import DonationService, ItemService, ProjectService
from wishmoa.crypto.account_cipher import AccountCipher
from wishmoa.infrastructure.rate_limit import FixedWindowRateLimiter
from wishmoa.infrastructure.repositories import (
    DonationRepositoryImpl,
    ItemRepositoryImpl,
    ProjectRepositoryImpl,
)
from tests.fixtures import FakeClock, InMemoryKeyValueStore

TEST_SECRET = "test-encryption-secret"


@pytest.fixture
def cipher() -> AccountCipher:
    return AccountCipher(TEST_SECRET)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def store() -> AsyncGenerator[InMemoryKeyValueStore, None]:
    kv = InMemoryKeyValueStore()
    yield kv
    kv.clear()


@pytest.fixture
def project_repository(store: InMemoryKeyValueStore) -> ProjectRepositoryImpl:
    return ProjectRepositoryImpl(store)


@pytest.fixture
def item_repository(store: InMemoryKeyValueStore) -> ItemRepositoryImpl:
    return ItemRepositoryImpl(store)


@pytest.fixture
def donation_repository(store: InMemoryKeyValueStore) -> DonationRepositoryImpl:
    return DonationRepositoryImpl(store)


@pytest.fixture
def project_service(
    project_repository: ProjectRepositoryImpl,
    item_repository: ItemRepositoryImpl,
    donation_repository: DonationRepositoryImpl,
    cipher: AccountCipher,
) -> ProjectService:
    return ProjectService(project_repository, item_repository, donation_repository, cipher)


@pytest.fixture
def item_service(
    project_repository: ProjectRepositoryImpl, item_repository: ItemRepositoryImpl
) -> ItemService:
    return ItemService(project_repository, item_repository)


@pytest.fixture
def donation_service(
    project_repository: ProjectRepositoryImpl,
    item_repository: ItemRepositoryImpl,
    donation_repository: DonationRepositoryImpl,
    cipher: AccountCipher,
    fake_clock: FakeClock,
) -> DonationService:
    return DonationService(
        project_repository,
        item_repository,
        donation_repository,
        cipher,
        rate_limiter=FixedWindowRateLimiter(clock=fake_clock),
    )
