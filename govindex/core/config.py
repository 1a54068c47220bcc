from dataclasses import dataclass, field

from govindex.core.persistence.config import PersistenceConfig


@dataclass(slots=True)
class IndexerSettings:
    """Governance indexer configuration settings."""

    log_level: str = "INFO"
    debug_scopes: tuple[str, ...] = ()
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)

    # Reject proposals whose targets/values/calldatas/signatures differ in
    # length instead of logging a warning.
    strict_proposal_actions: bool = False
