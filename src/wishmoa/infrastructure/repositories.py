"""Repository implementations over the KeyValueStore abstraction."""

from __future__ import annotations

from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel

from ..domain.entities import Donation, Item, Project
from ..domain.repositories import (
    DonationRepository,
    ItemRepository,
    ProjectRepository,
)
from .storage import KeyValueStore

T = TypeVar("T", bound=BaseModel)


async def _load_many(store: KeyValueStore, keys: List[str], model: Type[T]) -> List[T]:
    raw_values = await store.mget(keys)
    return [model.model_validate_json(raw) for raw in raw_values if raw]


class ProjectRepositoryImpl(ProjectRepository):
    """Project repository using a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def create(self, project: Project) -> Project:
        project_key = f"project:{project.project_id}"
        if await self.store.get(project_key) is not None:
            raise ValueError("Project id already exists")

        await self.store.set(project_key, project.model_dump_json())
        created_ts = project.created_at.timestamp()
        await self.store.zadd("projects:all", {project.project_id: created_ts})
        await self.store.zadd(
            f"user:{project.user_id}:projects", {project.project_id: created_ts}
        )
        return project

    async def get_by_id(self, project_id: str) -> Optional[Project]:
        data = await self.store.get(f"project:{project_id}")
        if not data:
            return None
        return Project.model_validate_json(data)

    async def get_by_owner(self, user_id: str) -> List[Project]:
        ids = await self.store.zrevrange(f"user:{user_id}:projects", 0, -1)
        return await _load_many(self.store, [f"project:{i}" for i in ids], Project)

    async def get_all(self) -> List[Project]:
        ids = await self.store.zrevrange("projects:all", 0, -1)
        return await _load_many(self.store, [f"project:{i}" for i in ids], Project)

    async def update(self, project: Project) -> Project:
        await self.store.set(f"project:{project.project_id}", project.model_dump_json())
        return project


class ItemRepositoryImpl(ItemRepository):
    """Item repository; a per-project sorted set keeps display order."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def create(self, item: Item) -> Item:
        await self.store.set(f"item:{item.item_id}", item.model_dump_json())
        await self.store.zadd(
            f"project:{item.project_id}:items", {item.item_id: item.order}
        )
        return item

    async def get_by_id(self, item_id: str) -> Optional[Item]:
        data = await self.store.get(f"item:{item_id}")
        if not data:
            return None
        return Item.model_validate_json(data)

    async def get_by_project(self, project_id: str) -> List[Item]:
        ids = await self.store.zrange(f"project:{project_id}:items", 0, -1)
        items = await _load_many(self.store, [f"item:{i}" for i in ids], Item)
        return sorted(items, key=lambda item: item.order)

    async def update(self, item: Item) -> Item:
        await self.store.set(f"item:{item.item_id}", item.model_dump_json())
        await self.store.zadd(
            f"project:{item.project_id}:items", {item.item_id: item.order}
        )
        return item


class DonationRepositoryImpl(DonationRepository):
    """Donation repository indexed by item and by project."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def create(self, donation: Donation) -> Donation:
        await self.store.set(
            f"donation:{donation.donation_id}", donation.model_dump_json()
        )
        created_ts = donation.created_at.timestamp()
        await self.store.zadd(
            f"item:{donation.item_id}:donations", {donation.donation_id: created_ts}
        )
        await self.store.zadd(
            f"project:{donation.project_id}:donations",
            {donation.donation_id: created_ts},
        )
        return donation

    async def get_by_id(self, donation_id: str) -> Optional[Donation]:
        data = await self.store.get(f"donation:{donation_id}")
        if not data:
            return None
        return Donation.model_validate_json(data)

    async def get_by_item(self, item_id: str) -> List[Donation]:
        ids = await self.store.zrevrange(f"item:{item_id}:donations", 0, -1)
        return await _load_many(self.store, [f"donation:{i}" for i in ids], Donation)

    async def get_by_project(self, project_id: str) -> List[Donation]:
        ids = await self.store.zrevrange(f"project:{project_id}:donations", 0, -1)
        return await _load_many(self.store, [f"donation:{i}" for i in ids], Donation)

    async def update(self, donation: Donation) -> Donation:
        await self.store.set(
            f"donation:{donation.donation_id}", donation.model_dump_json()
        )
        return donation
