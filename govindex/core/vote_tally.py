"""
Per-voter vote records and running proposal tallies.

Each (proposal, voter) pair owns exactly one :class:`ProposalVote`. When a
voter votes again, or the same vote event is delivered twice, the previous
record's contribution is taken back out of the tally before the new one is
added, so the three sums always equal the weights of the latest vote of
every voter.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from govindex.datastructures.governance_types import (
    Proposal,
    ProposalState,
    ProposalVote,
    VoteSupport,
)
from govindex.datastructures.identifiers import encode_id
from govindex.datastructures.type_aliases import SupportCode, VotingPower

from .events import VoteCast, VoteCastWithParams
from .repository import GovernanceRepository


def _apply_to_tally(
    proposal: Proposal, support: SupportCode, weight: VotingPower
) -> bool:
    """Add ``weight`` (which may be negative) to the bucket for ``support``.

    Returns False when the support code has no bucket.
    """
    match VoteSupport.from_code(support):
        case VoteSupport.AGAINST:
            proposal.against_votes += weight
        case VoteSupport.FOR:
            proposal.for_votes += weight
        case VoteSupport.ABSTAIN:
            proposal.abstain_votes += weight
        case None:
            return False
    return True


@dataclass(slots=True)
class VoteTallyAccumulator:
    """Records votes and keeps proposal tallies consistent with them."""

    repository: GovernanceRepository

    def handle_vote(self, event: VoteCast | VoteCastWithParams) -> ProposalVote:
        params = event.params if isinstance(event, VoteCastWithParams) else b""
        return self.record_vote(event, params)

    def record_vote(
        self, event: VoteCast | VoteCastWithParams, params: bytes
    ) -> ProposalVote:
        block = event.block
        self.repository.get_or_create_delegate(event.voter)

        proposal = self.repository.get_or_create_proposal(event.proposal_id)
        vote, existed = self.repository.get_or_create_proposal_vote(
            event.proposal_id, event.voter
        )
        if existed:
            _apply_to_tally(proposal, vote.support, -vote.weight)
            logger.debug(
                "Voter {} replaced earlier vote on proposal {} (support={}, weight={})",
                event.voter.hex(),
                event.proposal_id,
                vote.support,
                vote.weight,
            )

        vote.proposal = encode_id(event.proposal_id)
        vote.voter = event.voter
        vote.weight = event.weight
        vote.support = event.support
        vote.is_for_proposal = event.support == VoteSupport.FOR
        vote.reason = event.reason or None
        vote.params = params or None
        vote.block_number = block.number
        vote.block_timestamp = block.timestamp
        vote.transaction_hash = block.transaction_hash

        if proposal.state is not ProposalState.ACTIVE:
            logger.debug(
                "Vote on proposal {} moves it from {} to Active",
                event.proposal_id,
                proposal.state.value if proposal.state else "unknown",
            )
            proposal.state = ProposalState.ACTIVE

        if not _apply_to_tally(proposal, event.support, event.weight):
            logger.warning(
                "Vote by {} on proposal {} has unsupported support code {}; "
                "recorded but not tallied",
                event.voter.hex(),
                event.proposal_id,
                event.support,
            )

        self.repository.save(vote)
        self.repository.save(proposal)
        return vote
