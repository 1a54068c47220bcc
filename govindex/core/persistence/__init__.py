from __future__ import annotations

from .config import PersistenceConfig, PersistenceMode
from .entity_store import EntityStore, MemoryEntityStore, SQLiteEntityStore
from .registry import open_entity_store

__all__ = [
    "PersistenceConfig",
    "PersistenceMode",
    "EntityStore",
    "MemoryEntityStore",
    "SQLiteEntityStore",
    "open_entity_store",
]
