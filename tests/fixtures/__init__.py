"""Test fixtures for in-memory implementations."""

from .clock import FakeClock
from .in_memory_storage import InMemoryKeyValueStore

__all__ = ["FakeClock", "InMemoryKeyValueStore"]
