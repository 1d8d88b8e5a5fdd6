"""Repository interfaces for projects, items and donations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import Donation, Item, Project


class ProjectRepository(ABC):
    """Abstract repository interface for Project entities."""

    @abstractmethod
    async def create(self, project: Project) -> Project:
        """Create a new project."""
        pass

    @abstractmethod
    async def get_by_id(self, project_id: str) -> Optional[Project]:
        """Get project by its short id, including deleted ones."""
        pass

    @abstractmethod
    async def get_by_owner(self, user_id: str) -> List[Project]:
        """Get a user's projects, newest first."""
        pass

    @abstractmethod
    async def get_all(self) -> List[Project]:
        """Get every stored project."""
        pass

    @abstractmethod
    async def update(self, project: Project) -> Project:
        """Update an existing project."""
        pass


class ItemRepository(ABC):
    """Abstract repository interface for Item entities."""

    @abstractmethod
    async def create(self, item: Item) -> Item:
        pass

    @abstractmethod
    async def get_by_id(self, item_id: str) -> Optional[Item]:
        pass

    @abstractmethod
    async def get_by_project(self, project_id: str) -> List[Item]:
        """Get a project's items sorted by display order."""
        pass

    @abstractmethod
    async def update(self, item: Item) -> Item:
        pass


class DonationRepository(ABC):
    """Abstract repository interface for Donation entities."""

    @abstractmethod
    async def create(self, donation: Donation) -> Donation:
        pass

    @abstractmethod
    async def get_by_id(self, donation_id: str) -> Optional[Donation]:
        pass

    @abstractmethod
    async def get_by_item(self, item_id: str) -> List[Donation]:
        """Get an item's donations, newest first."""
        pass

    @abstractmethod
    async def get_by_project(self, project_id: str) -> List[Donation]:
        """Get all donations across a project's items, newest first."""
        pass

    @abstractmethod
    async def update(self, donation: Donation) -> Donation:
        pass
