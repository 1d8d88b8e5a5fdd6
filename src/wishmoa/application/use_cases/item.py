"""Item use cases for the project owner."""

from __future__ import annotations

from typing import List

from ...domain.entities import Item, ItemStatus
from ...domain.errors import ItemNotFoundError
from ...domain.repositories import ItemRepository, ProjectRepository
from ..dtos import CreateItemDTO, ItemResponseDTO, UpdateItemDTO
from .project import get_owned_project


def _to_dto(item: Item) -> ItemResponseDTO:
    return ItemResponseDTO(**item.model_dump())


class ItemService:
    """Service for managing a project's gift items."""

    def __init__(
        self, project_repository: ProjectRepository, item_repository: ItemRepository
    ):
        self.project_repository = project_repository
        self.item_repository = item_repository

    async def _get_owned_item(self, item_id: str, user_id: str) -> Item:
        item = await self.item_repository.get_by_id(item_id)
        if item is None or item.status == "deleted":
            raise ItemNotFoundError(item_id)
        await get_owned_project(self.project_repository, item.project_id, user_id)
        return item

    async def list_items(self, project_id: str, user_id: str) -> List[ItemResponseDTO]:
        """All non-deleted items in display order, hidden ones included."""
        await get_owned_project(self.project_repository, project_id, user_id)
        items = await self.item_repository.get_by_project(project_id)
        return [_to_dto(item) for item in items if item.status != "deleted"]

    async def add_item(
        self, project_id: str, user_id: str, dto: CreateItemDTO
    ) -> ItemResponseDTO:
        await get_owned_project(self.project_repository, project_id, user_id)
        title = dto.title.strip()
        if not title:
            raise ValueError("Enter a gift name")

        existing = await self.item_repository.get_by_project(project_id)
        next_order = max((item.order for item in existing), default=-1) + 1
        item = Item(
            project_id=project_id,
            title=title,
            url=dto.url.strip(),
            image=dto.image or None,
            price=dto.price,
            order=next_order,
        )
        return _to_dto(await self.item_repository.create(item))

    async def update_item(
        self, item_id: str, user_id: str, dto: UpdateItemDTO
    ) -> ItemResponseDTO:
        item = await self._get_owned_item(item_id, user_id)
        kwargs = {}
        if "image" in dto.model_fields_set:
            kwargs["image"] = dto.image
        item.update_details(
            title=(dto.title or "").strip() or None,
            url=dto.url.strip() if dto.url is not None else None,
            price=dto.price,
            **kwargs,
        )
        if dto.status is not None:
            if dto.status == "deleted":
                item.soft_delete()
            else:
                item.change_status(dto.status)
        return _to_dto(await self.item_repository.update(item))

    async def change_status(
        self, item_id: str, user_id: str, status: ItemStatus
    ) -> ItemResponseDTO:
        """Owner toggles active, hidden or completed."""
        if status == "deleted":
            raise ValueError("Use delete_item to remove an item")
        item = await self._get_owned_item(item_id, user_id)
        item.change_status(status)
        return _to_dto(await self.item_repository.update(item))

    async def delete_item(self, item_id: str, user_id: str) -> None:
        item = await self._get_owned_item(item_id, user_id)
        item.soft_delete()
        await self.item_repository.update(item)

    async def reorder_items(
        self, project_id: str, user_id: str, item_ids: List[str]
    ) -> List[ItemResponseDTO]:
        """Persist a new display order given as a list of item ids."""
        await get_owned_project(self.project_repository, project_id, user_id)
        if len(set(item_ids)) != len(item_ids):
            raise ValueError("Duplicate item in new order")

        items = {
            item.item_id: item
            for item in await self.item_repository.get_by_project(project_id)
        }
        unknown = [item_id for item_id in item_ids if item_id not in items]
        if unknown:
            raise ItemNotFoundError(unknown[0])

        reordered: List[ItemResponseDTO] = []
        for index, item_id in enumerate(item_ids):
            item = items[item_id]
            if item.order != index:
                item.order = index
                item.touch()
                await self.item_repository.update(item)
            reordered.append(_to_dto(item))
        return reordered
