"""Key-value storage abstraction and its Redis implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Mapping, Optional

from .database import DatabaseClient


class KeyValueStore(ABC):
    """Minimal string and sorted-set operations the repositories rely on."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def mget(self, keys: List[str]) -> List[Optional[str]]:
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    async def zadd(self, key: str, mapping: Mapping[str, float]) -> int:
        pass

    @abstractmethod
    async def zrange(self, key: str, start: int, end: int) -> List[str]:
        """Members by ascending score, both ends inclusive (Redis semantics)."""
        pass

    @abstractmethod
    async def zrevrange(self, key: str, start: int, end: int) -> List[str]:
        """Members by descending score, both ends inclusive (Redis semantics)."""
        pass


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed implementation of KeyValueStore."""

    def __init__(self, db_client: DatabaseClient):
        self._db_client = db_client

    async def get(self, key: str) -> Optional[str]:
        async with self._db_client.get_connection() as conn:
            return await conn.get(key)

    async def mget(self, keys: List[str]) -> List[Optional[str]]:
        if not keys:
            return []
        async with self._db_client.get_connection() as conn:
            return await conn.mget(keys)

    async def set(self, key: str, value: str) -> None:
        async with self._db_client.get_connection() as conn:
            await conn.set(key, value)

    async def zadd(self, key: str, mapping: Mapping[str, float]) -> int:
        async with self._db_client.get_connection() as conn:
            return await conn.zadd(key, dict(mapping))

    async def zrange(self, key: str, start: int, end: int) -> List[str]:
        async with self._db_client.get_connection() as conn:
            return await conn.zrange(key, start, end)

    async def zrevrange(self, key: str, start: int, end: int) -> List[str]:
        async with self._db_client.get_connection() as conn:
            return await conn.zrevrange(key, start, end)
