from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path


class PersistenceMode(StrEnum):
    """Supported entity store backends."""

    MEMORY = "memory"
    SQLITE = "sqlite"


@dataclass(slots=True)
class PersistenceConfig:
    """Configuration for the entity store."""

    mode: PersistenceMode = PersistenceMode.MEMORY
    data_dir: Path = field(default_factory=lambda: Path("./govindex_data"))
    sqlite_filename: str = "govindex.sqlite"
    sqlite_wal: bool = True
    sqlite_synchronous: str = "NORMAL"

    def sqlite_path(self) -> Path:
        """Resolve the sqlite database path."""
        return self.data_dir / self.sqlite_filename

    @classmethod
    def for_sqlite_file(cls, db_path: Path) -> PersistenceConfig:
        return cls(
            mode=PersistenceMode.SQLITE,
            data_dir=db_path.parent,
            sqlite_filename=db_path.name,
        )
