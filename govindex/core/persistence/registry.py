from __future__ import annotations

from loguru import logger

from .config import PersistenceConfig, PersistenceMode
from .entity_store import EntityStore, MemoryEntityStore, SQLiteEntityStore


def open_entity_store(config: PersistenceConfig) -> EntityStore:
    """Create and open the entity store selected by ``config.mode``."""
    if config.mode is PersistenceMode.SQLITE:
        logger.info("Initializing SQLite entity store at {}", config.sqlite_path())
        store = SQLiteEntityStore(
            db_path=config.sqlite_path(),
            wal_mode=config.sqlite_wal,
            synchronous_mode=config.sqlite_synchronous,
        )
        store.open()
        return store
    logger.info("Initializing in-memory entity store")
    return MemoryEntityStore()
