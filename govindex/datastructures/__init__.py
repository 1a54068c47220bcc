"""
govindex datastructures

Entity records, identifier codec and text helpers shared by the core
ledgers.
"""

from __future__ import annotations

from .governance_types import (
    ClockMode,
    Delegate,
    GovernanceData,
    Member,
    Proposal,
    ProposalState,
    ProposalVote,
    VoteSupport,
)
from .identifiers import ZERO_ADDRESS, decode_id, encode_id
from .title import extract_title

__all__ = [
    "ClockMode",
    "Delegate",
    "GovernanceData",
    "Member",
    "Proposal",
    "ProposalState",
    "ProposalVote",
    "VoteSupport",
    "ZERO_ADDRESS",
    "decode_id",
    "encode_id",
    "extract_title",
]
