from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from loguru import logger

from govindex.datastructures.type_aliases import (
    EntityId,
    EntityTypeName,
    SerializedRecord,
)


class EntityStore(Protocol):
    """Durable mapping from (entity type, id) to a serialized record."""

    def load(
        self, entity_type: EntityTypeName, entity_id: EntityId
    ) -> SerializedRecord | None: ...

    def save(
        self, entity_type: EntityTypeName, entity_id: EntityId, record: SerializedRecord
    ) -> None: ...

    def delete(self, entity_type: EntityTypeName, entity_id: EntityId) -> None: ...

    def list_ids(self, entity_type: EntityTypeName) -> list[EntityId]: ...

    def close(self) -> None: ...


@dataclass(slots=True)
class MemoryEntityStore:
    """In-memory entity store for development and tests."""

    _records: dict[tuple[EntityTypeName, EntityId], SerializedRecord] = field(
        default_factory=dict
    )

    def load(
        self, entity_type: EntityTypeName, entity_id: EntityId
    ) -> SerializedRecord | None:
        return self._records.get((entity_type, entity_id))

    def save(
        self, entity_type: EntityTypeName, entity_id: EntityId, record: SerializedRecord
    ) -> None:
        self._records[(entity_type, entity_id)] = record

    def delete(self, entity_type: EntityTypeName, entity_id: EntityId) -> None:
        self._records.pop((entity_type, entity_id), None)

    def list_ids(self, entity_type: EntityTypeName) -> list[EntityId]:
        return sorted(
            entity_id
            for (stored_type, entity_id) in self._records
            if stored_type == entity_type
        )

    def count(self, entity_type: EntityTypeName) -> int:
        return len(self.list_ids(entity_type))

    def close(self) -> None:
        self._records.clear()


@dataclass(slots=True)
class SQLiteEntityStore:
    """SQLite-backed entity store with WAL support."""

    db_path: Path
    wal_mode: bool = True
    synchronous_mode: str = "NORMAL"
    _conn: sqlite3.Connection | None = field(init=False, default=None)

    def open(self) -> None:
        if self._conn is not None:
            return
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.db_path)
        self._execute(
            "PRAGMA journal_mode=WAL" if self.wal_mode else "PRAGMA journal_mode=DELETE"
        )
        self._execute(f"PRAGMA synchronous={self.synchronous_mode}")
        self._execute(
            """
            CREATE TABLE IF NOT EXISTS entities (
                entity_type TEXT NOT NULL,
                entity_id BLOB NOT NULL,
                record BLOB NOT NULL,
                PRIMARY KEY (entity_type, entity_id)
            )
            """
        )

    def load(
        self, entity_type: EntityTypeName, entity_id: EntityId
    ) -> SerializedRecord | None:
        row = self._connection().execute(
            "SELECT record FROM entities WHERE entity_type=? AND entity_id=?",
            (entity_type, entity_id),
        ).fetchone()
        if row is None:
            return None
        return bytes(row[0])

    def save(
        self, entity_type: EntityTypeName, entity_id: EntityId, record: SerializedRecord
    ) -> None:
        self._execute(
            "INSERT OR REPLACE INTO entities (entity_type, entity_id, record)"
            " VALUES (?, ?, ?)",
            (entity_type, entity_id, record),
        )

    def delete(self, entity_type: EntityTypeName, entity_id: EntityId) -> None:
        self._execute(
            "DELETE FROM entities WHERE entity_type=? AND entity_id=?",
            (entity_type, entity_id),
        )

    def list_ids(self, entity_type: EntityTypeName) -> list[EntityId]:
        rows = self._connection().execute(
            "SELECT entity_id FROM entities WHERE entity_type=? ORDER BY entity_id",
            (entity_type,),
        ).fetchall()
        return [bytes(row[0]) for row in rows]

    def close(self) -> None:
        if self._conn is None:
            return
        logger.debug("SQLiteEntityStore close: {}", self.db_path)
        self._conn.close()
        self._conn = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("SQLiteEntityStore.open() must be called before use")
        return self._conn

    def _execute(self, query: str, params: tuple[object, ...] = ()) -> None:
        conn = self._connection()
        conn.execute(query, params)
        conn.commit()
