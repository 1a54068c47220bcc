"""
Semantic type aliases for govindex datastructures.

These aliases keep entity and event signatures self-documenting: an
``Address`` and a ``TransactionHash`` are both raw bytes on the wire, but they
never mean the same thing.
"""

from typing import Any

# Chain provenance types
type BlockNumber = int
type BlockTimestamp = int
type LogIndex = int
type TransactionHash = bytes

# Account and identifier types
type Address = bytes
type EntityId = bytes
type EntityTypeName = str
type ProposalNumber = int
type OperationNonce = int
type RoleHash = bytes

# Governance quantities
type VotingPower = int
type TokenAmount = int
type BasisPoints = int
type Percentage = int
type ClockValue = int
type SupportCode = int

# Serialization types
type JsonDict = dict[str, Any]
type SerializedRecord = bytes
