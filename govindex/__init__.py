"""
govindex - governance event indexer

Indexes events from an on-chain governance protocol (token, governor and
executor) into entities in a key/value entity store:

- **datastructures**: entity records, the 32-byte identifier codec, title
  extraction
- **core**: typed events, persistence, the proposal lifecycle engine, the vote
  tally accumulator and the other ledgers, plus the dispatcher tying them
  together
- **cli**: ``govindex replay`` and ``govindex show``

## Quick Start

```python
from pathlib import Path

from govindex.core import EventDispatcher, read_event_file
from govindex.core.persistence import MemoryEntityStore

dispatcher = EventDispatcher.for_store(MemoryEntityStore())
dispatcher.replay(read_event_file(Path("events.jsonl")))
```
"""

from .core import EventDispatcher, GovernanceRepository, IndexerSettings
from .exceptions import (
    EventDecodeError,
    GovernanceIndexError,
    IdentifierDecodeError,
    IdentifierEncodeError,
    ProposalActionsMismatchError,
)

__all__ = [
    "EventDispatcher",
    "GovernanceRepository",
    "IndexerSettings",
    "GovernanceIndexError",
    "IdentifierEncodeError",
    "IdentifierDecodeError",
    "EventDecodeError",
    "ProposalActionsMismatchError",
]
