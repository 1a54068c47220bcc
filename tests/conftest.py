"""Pytest configuration and fixtures for govindex testing.

Every test gets a fresh in-memory entity store wired into a dispatcher, plus
helpers for building chain provenance without repeating block boilerplate.
"""

import sys
from collections.abc import Iterator

import pytest
from loguru import logger

from govindex.core.dispatcher import EventDispatcher
from govindex.core.events import EventProvenance
from govindex.core.persistence import MemoryEntityStore
from govindex.core.repository import GovernanceRepository

ALICE = bytes.fromhex("a1" * 20)
BOB = bytes.fromhex("b0" * 20)
CAROL = bytes.fromhex("c4" * 20)
TX_HASH = bytes.fromhex("ab" * 32)


def make_block(
    number: int = 1,
    timestamp: int = 1_000,
    *,
    sender: bytes = ALICE,
    transaction_hash: bytes = TX_HASH,
    log_index: int = 0,
) -> EventProvenance:
    """Build event provenance for a synthetic block."""
    return EventProvenance(
        number=number,
        timestamp=timestamp,
        transaction_hash=transaction_hash,
        transaction_from=sender,
        log_index=log_index,
    )


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Put loguru back on stderr after tests that reconfigure it."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def store() -> Iterator[MemoryEntityStore]:
    entity_store = MemoryEntityStore()
    yield entity_store
    entity_store.close()


@pytest.fixture
def repository(store: MemoryEntityStore) -> GovernanceRepository:
    return GovernanceRepository(store)


@pytest.fixture
def dispatcher(repository: GovernanceRepository) -> EventDispatcher:
    return EventDispatcher(repository)


@pytest.fixture
def captured_warnings() -> Iterator[list[str]]:
    """Collect WARNING-level log messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]),
        level="WARNING",
        format="{message}",
    )
    yield messages
    logger.remove(handler_id)
