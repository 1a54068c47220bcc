"""Exception hierarchy for the governance indexer."""


class GovernanceIndexError(Exception):
    """Base exception for governance indexing errors."""

    pass


class IdentifierEncodeError(GovernanceIndexError, ValueError):
    """Raised when an integer cannot be represented as a fixed-width key."""

    pass


class IdentifierDecodeError(GovernanceIndexError, ValueError):
    """Raised when a stored key does not have the fixed identifier width.

    This indicates protocol-level corruption and is never recovered from.
    """

    pass


class EventDecodeError(GovernanceIndexError):
    """Raised when an inbound event record cannot be parsed."""

    pass


class ProposalActionsMismatchError(GovernanceIndexError):
    """Raised in strict mode when proposal action arrays differ in length."""

    pass
