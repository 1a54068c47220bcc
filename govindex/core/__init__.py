"""
govindex core

Event models, the entity repository, and the ledgers that turn governance
chain events into indexed entities.
"""

from .config import IndexerSettings
from .dispatcher import EventDispatcher
from .events import ChainEvent, EventProvenance, parse_event, read_event_file
from .repository import GovernanceRepository
from .serialization import EntitySerializer

__all__ = [
    # Config
    "IndexerSettings",
    # Events
    "ChainEvent",
    "EventProvenance",
    "parse_event",
    "read_event_file",
    # Storage
    "EntitySerializer",
    "GovernanceRepository",
    # Dispatch
    "EventDispatcher",
]
