"""
Governance entity records.

Every indexed entity is a mutable slots dataclass addressed by
``(ENTITY_TYPE, id)`` in the entity store. Handlers load a record, mutate it
for exactly one chain event, and save it back.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import ClassVar

from hypothesis import strategies as st

from .identifiers import ZERO_ADDRESS, address_strategy, decode_id, encode_id
from .type_aliases import (
    Address,
    BasisPoints,
    BlockNumber,
    BlockTimestamp,
    ClockValue,
    EntityId,
    OperationNonce,
    Percentage,
    ProposalNumber,
    SupportCode,
    TokenAmount,
    TransactionHash,
    VotingPower,
)

GOVERNANCE_DATA_ID: EntityId = b"GOVERNANCE_DATA"
DEFAULT_PERCENT_MAJORITY: Percentage = 50


class ProposalState(Enum):
    """Lifecycle states of a governor proposal."""

    PENDING = "Pending"
    ACTIVE = "Active"
    QUEUED = "Queued"
    EXECUTED = "Executed"
    CANCELED = "Canceled"


class ClockMode(Enum):
    """Unit in which a proposal's voting window is measured."""

    TIMESTAMP = "timestamp"
    BLOCKNUMBER = "blocknumber"


class VoteSupport(IntEnum):
    """Stance encoded in a cast vote."""

    AGAINST = 0
    FOR = 1
    ABSTAIN = 2

    @classmethod
    def from_code(cls, code: SupportCode) -> VoteSupport | None:
        """Return the matching stance, or None for codes outside 0-2."""
        try:
            return cls(code)
        except ValueError:
            return None


@dataclass(slots=True)
class Proposal:
    """Indexed governor proposal with lifecycle state and running tallies."""

    ENTITY_TYPE: ClassVar[str] = "Proposal"

    id: EntityId
    proposer: Address | None = None
    is_proposer_role: bool = False
    targets: tuple[Address, ...] = ()
    values: tuple[TokenAmount, ...] = ()
    calldatas: tuple[bytes, ...] = ()
    signatures: tuple[str, ...] = ()
    title: str = ""
    description: str = ""
    clock_mode: ClockMode | None = None
    vote_start: ClockValue = 0
    vote_end: ClockValue = 0
    original_vote_end: ClockValue = 0
    state: ProposalState | None = None
    for_votes: VotingPower = 0
    against_votes: VotingPower = 0
    abstain_votes: VotingPower = 0
    created_at_block: BlockNumber | None = None
    created_at_timestamp: BlockTimestamp | None = None
    created_transaction_hash: TransactionHash | None = None
    queued_at_block: BlockNumber | None = None
    queued_at_timestamp: BlockTimestamp | None = None
    eta: BlockTimestamp | None = None
    executed_at_block: BlockNumber | None = None
    executed_at_timestamp: BlockTimestamp | None = None
    executed_transaction_hash: TransactionHash | None = None
    canceled_at_block: BlockNumber | None = None
    canceled_at_timestamp: BlockTimestamp | None = None
    canceler: Address | None = None
    is_canceler_role: bool | None = None

    @property
    def proposal_number(self) -> ProposalNumber:
        return decode_id(self.id)

    @property
    def is_shell(self) -> bool:
        """True until the creation event for this proposal has been applied."""
        return self.created_at_block is None

    def total_votes(self) -> VotingPower:
        return self.for_votes + self.against_votes + self.abstain_votes

    def actions_consistent(self) -> bool:
        """Check that the parallel action sequences have equal length."""
        return (
            len(self.targets)
            == len(self.values)
            == len(self.calldatas)
            == len(self.signatures)
        )


@dataclass(slots=True)
class ProposalVote:
    """The latest vote of one voter on one proposal."""

    ENTITY_TYPE: ClassVar[str] = "ProposalVote"

    id: EntityId
    proposal: EntityId = b""
    voter: Address = ZERO_ADDRESS
    weight: VotingPower = 0
    support: SupportCode = 0
    is_for_proposal: bool = False
    reason: str | None = None
    params: bytes | None = None
    block_number: BlockNumber = 0
    block_timestamp: BlockTimestamp = 0
    transaction_hash: TransactionHash = b""


@dataclass(slots=True)
class Delegate:
    """Delegated voting power and time-bounded role grants of one account."""

    ENTITY_TYPE: ClassVar[str] = "Delegate"

    id: Address
    delegated_votes_balance: VotingPower = 0
    proposer_role_expires_at: BlockTimestamp = 0
    canceler_role_expires_at: BlockTimestamp = 0


@dataclass(slots=True)
class Member:
    """Token holder balance and delegation pointer."""

    ENTITY_TYPE: ClassVar[str] = "Member"

    id: Address
    token_balance: TokenAmount = 0
    delegate: Address | None = None


@dataclass(slots=True)
class GovernanceData:
    """Singleton aggregate counters and mirrored protocol configuration."""

    ENTITY_TYPE: ClassVar[str] = "GovernanceData"

    id: EntityId = GOVERNANCE_DATA_ID
    proposal_count: int = 0
    total_supply: TokenAmount = 0
    max_supply: TokenAmount = 0

    # Governor configuration mirror
    proposal_threshold_bps: BasisPoints = 0
    quorum_bps: BasisPoints = 0
    proposal_grace_period: int = 0
    governance_can_begin_at: BlockTimestamp = 0
    governance_threshold_bps: BasisPoints = 0
    is_founded: bool = False
    founding_proposal: EntityId | None = None
    voting_delay: int = 0
    voting_period: int = 0
    percent_majority: Percentage = DEFAULT_PERCENT_MAJORITY
    max_deadline_extension: int = 0
    base_deadline_extension: int = 0
    extension_decay_period: int = 0
    extension_percent_decay: Percentage = 0
    executor: Address = ZERO_ADDRESS
    token: Address = ZERO_ADDRESS

    # Executor configuration mirror
    balance_shares_manager: Address = ZERO_ADDRESS
    shares_onboarder: Address = ZERO_ADDRESS
    distributor: Address = ZERO_ADDRESS
    guard: Address = ZERO_ADDRESS
    executor_min_delay: int = 0


@dataclass(slots=True)
class ExecutorModule:
    """A module currently enabled on the executor."""

    ENTITY_TYPE: ClassVar[str] = "ExecutorModule"

    id: Address
    enabled: bool = False
    enabled_at_block: BlockNumber = 0
    enabled_at_timestamp: BlockTimestamp = 0


@dataclass(slots=True)
class ExecutorOperation:
    """An operation scheduled on the executor by a module."""

    ENTITY_TYPE: ClassVar[str] = "ExecutorOperation"

    id: EntityId
    module: Address = ZERO_ADDRESS
    to: Address = ZERO_ADDRESS
    value: TokenAmount = 0
    calldata: bytes = b""
    operation: int = 0
    delay: int = 0
    scheduled_at_block: BlockNumber = 0
    scheduled_at_timestamp: BlockTimestamp = 0
    is_canceled: bool = False
    canceled_at_block: BlockNumber | None = None
    canceled_at_timestamp: BlockTimestamp | None = None
    is_executed: bool = False
    executed_at_block: BlockNumber | None = None
    executed_at_timestamp: BlockTimestamp | None = None

    @property
    def op_nonce(self) -> OperationNonce:
        return decode_id(self.id)


@dataclass(slots=True)
class ExecutorCallExecuted:
    """A single call performed by the executor."""

    ENTITY_TYPE: ClassVar[str] = "ExecutorCallExecutedEvent"

    id: EntityId
    target: Address = ZERO_ADDRESS
    value: TokenAmount = 0
    calldata: bytes = b""
    operation: int = 0
    block_number: BlockNumber = 0
    block_timestamp: BlockTimestamp = 0
    transaction_hash: TransactionHash = b""


@dataclass(slots=True)
class DepositRegistered:
    """A deposit that minted shares through the executor."""

    ENTITY_TYPE: ClassVar[str] = "DepositRegistered"

    id: EntityId
    account: Address = ZERO_ADDRESS
    quote_asset: Address = ZERO_ADDRESS
    deposit_amount: TokenAmount = 0
    mint_amount: TokenAmount = 0
    block_number: BlockNumber = 0
    block_timestamp: BlockTimestamp = 0
    transaction_hash: TransactionHash = b""


@dataclass(slots=True)
class WithdrawalProcessed:
    """A share burn paid out in one or more assets."""

    ENTITY_TYPE: ClassVar[str] = "WithdrawalProcessed"

    id: EntityId
    account: Address = ZERO_ADDRESS
    receiver: Address = ZERO_ADDRESS
    shares_burned: TokenAmount = 0
    total_shares_supply: TokenAmount = 0
    assets: tuple[Address, ...] = ()
    payouts: tuple[TokenAmount, ...] = ()
    block_number: BlockNumber = 0
    block_timestamp: BlockTimestamp = 0
    transaction_hash: TransactionHash = b""


type GovernanceEntity = (
    Proposal
    | ProposalVote
    | Delegate
    | Member
    | GovernanceData
    | ExecutorModule
    | ExecutorOperation
    | ExecutorCallExecuted
    | DepositRegistered
    | WithdrawalProcessed
)

ENTITY_CLASSES: tuple[type, ...] = (
    Proposal,
    ProposalVote,
    Delegate,
    Member,
    GovernanceData,
    ExecutorModule,
    ExecutorOperation,
    ExecutorCallExecuted,
    DepositRegistered,
    WithdrawalProcessed,
)


# Hypothesis strategies for property-based testing


def proposal_strategy() -> st.SearchStrategy[Proposal]:
    """Generate created proposals with consistent action arrays."""

    @st.composite
    def generate_proposal(draw):
        action_count = draw(st.integers(min_value=0, max_value=4))
        vote_start = draw(st.integers(min_value=0, max_value=2**40))
        vote_end = draw(st.integers(min_value=vote_start, max_value=2**41))

        def actions(elements):
            return tuple(
                draw(st.lists(elements, min_size=action_count, max_size=action_count))
            )

        return Proposal(
            id=encode_id(draw(st.integers(min_value=0, max_value=2**256 - 1))),
            proposer=draw(address_strategy()),
            is_proposer_role=draw(st.booleans()),
            targets=actions(address_strategy()),
            values=actions(st.integers(min_value=0, max_value=2**256 - 1)),
            calldatas=actions(st.binary(max_size=64)),
            signatures=actions(st.text(max_size=32)),
            title=draw(st.text(max_size=80)),
            description=draw(st.text(max_size=400)),
            clock_mode=draw(st.sampled_from(ClockMode)),
            vote_start=vote_start,
            vote_end=vote_end,
            original_vote_end=vote_end,
            state=draw(st.sampled_from(ProposalState)),
            for_votes=draw(st.integers(min_value=0, max_value=2**128)),
            against_votes=draw(st.integers(min_value=0, max_value=2**128)),
            abstain_votes=draw(st.integers(min_value=0, max_value=2**128)),
            created_at_block=draw(st.integers(min_value=0, max_value=2**32)),
            created_at_timestamp=draw(st.integers(min_value=0, max_value=2**40)),
            created_transaction_hash=draw(st.binary(min_size=32, max_size=32)),
            eta=draw(st.one_of(st.none(), st.integers(min_value=0, max_value=2**40))),
            canceler=draw(st.one_of(st.none(), address_strategy())),
            is_canceler_role=draw(st.one_of(st.none(), st.booleans())),
        )

    return generate_proposal()


def proposal_vote_strategy() -> st.SearchStrategy[ProposalVote]:
    """Generate vote records, including unsupported support codes."""
    return st.builds(
        ProposalVote,
        id=st.binary(min_size=52, max_size=52),
        proposal=st.binary(min_size=32, max_size=32),
        voter=address_strategy(),
        weight=st.integers(min_value=0, max_value=2**200),
        support=st.integers(min_value=0, max_value=255),
        is_for_proposal=st.booleans(),
        reason=st.one_of(st.none(), st.text(min_size=1, max_size=200)),
        params=st.one_of(st.none(), st.binary(min_size=1, max_size=64)),
        block_number=st.integers(min_value=0, max_value=2**32),
        block_timestamp=st.integers(min_value=0, max_value=2**40),
        transaction_hash=st.binary(min_size=32, max_size=32),
    )
