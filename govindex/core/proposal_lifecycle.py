"""
Proposal lifecycle state machine.

States move ``Pending -> Active -> Queued -> Executed`` with ``Canceled``
reachable from anywhere. The engine never consults on-chain state: each
transition is derived from one lifecycle event, and the executed and canceled
transitions overwrite whatever state was recorded before them. Transitions on
a proposal whose creation event has not been seen operate on an empty shell
record instead of failing.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from govindex.datastructures.governance_types import (
    ClockMode,
    Proposal,
    ProposalState,
)
from govindex.datastructures.identifiers import ZERO_ADDRESS
from govindex.datastructures.title import extract_title
from govindex.datastructures.type_aliases import ClockValue
from govindex.exceptions import ProposalActionsMismatchError

from .events import (
    EventProvenance,
    ProposalCanceled,
    ProposalCreated,
    ProposalDeadlineExtended,
    ProposalExecuted,
    ProposalQueued,
)
from .governance_data import GovernanceDataLedger
from .repository import GovernanceRepository
from .role_ledger import GovernorRole, delegate_has_role


def resolve_clock_mode(vote_start: ClockValue, event_timestamp: int) -> ClockMode:
    """
    Infer whether a proposal counts time in seconds or blocks.

    A vote start at or beyond the creating block's timestamp can only be a
    timestamp; anything smaller is a block number.
    """
    if vote_start >= event_timestamp:
        return ClockMode.TIMESTAMP
    return ClockMode.BLOCKNUMBER


def current_clock(block: EventProvenance, clock_mode: ClockMode) -> ClockValue:
    match clock_mode:
        case ClockMode.TIMESTAMP:
            return block.timestamp
        case ClockMode.BLOCKNUMBER:
            return block.number


def initial_state(vote_start: ClockValue, clock: ClockValue) -> ProposalState:
    if clock < vote_start:
        return ProposalState.PENDING
    return ProposalState.ACTIVE


@dataclass(slots=True)
class ProposalLifecycleEngine:
    """Applies lifecycle events to proposal records."""

    repository: GovernanceRepository
    governance_data: GovernanceDataLedger
    strict_actions: bool = False

    def handle_created(self, event: ProposalCreated) -> Proposal:
        block = event.block
        proposal = self.repository.get_or_create_proposal(event.proposal_id)

        proposal.proposer = event.proposer
        proposer = self.repository.get_or_create_delegate(event.proposer)
        proposal.is_proposer_role = delegate_has_role(
            proposer, GovernorRole.PROPOSER, block.timestamp
        )

        proposal.targets = event.targets
        proposal.values = event.values
        proposal.calldatas = event.calldatas
        proposal.signatures = event.signatures
        if not proposal.actions_consistent():
            message = (
                f"Proposal {event.proposal_id} action arrays differ in length: "
                f"targets={len(event.targets)} values={len(event.values)} "
                f"calldatas={len(event.calldatas)} "
                f"signatures={len(event.signatures)}"
            )
            if self.strict_actions:
                raise ProposalActionsMismatchError(message)
            logger.warning(message)

        proposal.description = event.description
        proposal.title = extract_title(event.description)

        proposal.clock_mode = resolve_clock_mode(event.vote_start, block.timestamp)
        proposal.vote_start = event.vote_start
        proposal.vote_end = event.vote_end
        proposal.original_vote_end = event.vote_end

        # A shell keeps the state and tallies it reached before this event.
        if proposal.state is None:
            proposal.state = initial_state(
                event.vote_start, current_clock(block, proposal.clock_mode)
            )
        else:
            logger.debug(
                "Proposal {} created late; keeping state {}",
                event.proposal_id,
                proposal.state.value,
            )

        proposal.created_at_block = block.number
        proposal.created_at_timestamp = block.timestamp
        proposal.created_transaction_hash = block.transaction_hash

        self.repository.save(proposal)
        count = self.governance_data.increment_proposal_count()
        logger.debug(
            "Proposal {} created ({}, clock={}); proposal count now {}",
            event.proposal_id,
            proposal.state.value,
            proposal.clock_mode.value,
            count,
        )
        return proposal

    def handle_deadline_extended(self, event: ProposalDeadlineExtended) -> Proposal:
        proposal = self.repository.get_or_create_proposal(event.proposal_id)
        proposal.vote_end = event.extended_deadline
        self.repository.save(proposal)
        logger.debug(
            "Proposal {} deadline extended to {}",
            event.proposal_id,
            event.extended_deadline,
        )
        return proposal

    def handle_queued(self, event: ProposalQueued) -> Proposal:
        proposal = self.repository.get_or_create_proposal(event.proposal_id)
        proposal.state = ProposalState.QUEUED
        proposal.eta = event.eta
        proposal.queued_at_block = event.block.number
        proposal.queued_at_timestamp = event.block.timestamp
        self.repository.save(proposal)
        logger.debug("Proposal {} queued with eta {}", event.proposal_id, event.eta)
        return proposal

    def handle_executed(self, event: ProposalExecuted) -> Proposal:
        proposal = self.repository.get_or_create_proposal(event.proposal_id)
        proposal.state = ProposalState.EXECUTED
        proposal.executed_at_block = event.block.number
        proposal.executed_at_timestamp = event.block.timestamp
        proposal.executed_transaction_hash = event.block.transaction_hash
        self.repository.save(proposal)
        logger.debug("Proposal {} executed", event.proposal_id)
        return proposal

    def handle_canceled(self, event: ProposalCanceled) -> Proposal:
        block = event.block
        proposal = self.repository.get_or_create_proposal(event.proposal_id)
        if block.transaction_from == ZERO_ADDRESS:
            logger.warning(
                "Proposal {} canceled without a transaction sender; "
                "recording the zero address as canceler",
                event.proposal_id,
            )
        canceler = self.repository.get_or_create_delegate(block.transaction_from)

        proposal.state = ProposalState.CANCELED
        proposal.canceler = canceler.id
        proposal.is_canceler_role = delegate_has_role(
            canceler, GovernorRole.CANCELER, block.timestamp
        )
        proposal.canceled_at_block = block.number
        proposal.canceled_at_timestamp = block.timestamp
        self.repository.save(proposal)
        logger.debug(
            "Proposal {} canceled by {} (canceler role: {})",
            event.proposal_id,
            canceler.id.hex(),
            proposal.is_canceler_role,
        )
        return proposal
