"""
Typed inbound chain events.

Every event the indexer consumes is a pydantic model tagged by a ``name``
literal, and :data:`ChainEvent` is the closed union of all of them. Records
arrive as ``{"name": ..., "params": {...}, "block": {...}}`` with ABI
(camelCase) parameter names; the params mapping is lifted onto the model so
handlers read ``event.proposal_id`` rather than digging through dicts.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    TypeAdapter,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from govindex.datastructures.identifiers import ZERO_ADDRESS
from govindex.exceptions import EventDecodeError


def _parse_hex(value: Any) -> Any:
    if isinstance(value, str):
        digits = value.removeprefix("0x")
        try:
            return bytes.fromhex(digits)
        except ValueError as exc:
            raise ValueError(f"Invalid hex string: {value!r}") from exc
    return value


HexBytes = Annotated[
    bytes,
    BeforeValidator(_parse_hex),
    PlainSerializer(lambda value: "0x" + value.hex(), return_type=str),
]
Uint = Annotated[int, Field(ge=0)]


class EventProvenance(BaseModel):
    """Where in the chain an event was emitted."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    number: Uint = Field(description="Block number containing the log.")
    timestamp: Uint = Field(description="Block timestamp in seconds.")
    transaction_hash: HexBytes = Field(
        default=b"", description="Hash of the emitting transaction."
    )
    transaction_from: HexBytes = Field(
        default=ZERO_ADDRESS, description="Sender of the emitting transaction."
    )
    log_index: Uint = Field(default=0, description="Log index within the block.")


class ChainEventBase(BaseModel):
    """Shared behaviour for all inbound events."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    block: EventProvenance

    @model_validator(mode="before")
    @classmethod
    def _lift_params(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and isinstance(data.get("params"), Mapping):
            lifted = {key: value for key, value in data.items() if key != "params"}
            return {**data["params"], **lifted}
        return data


# Governor lifecycle


class ProposalCreated(ChainEventBase):
    name: Literal["ProposalCreated"] = "ProposalCreated"
    proposal_id: Uint
    proposer: HexBytes
    targets: tuple[HexBytes, ...] = ()
    values: tuple[Uint, ...] = ()
    signatures: tuple[str, ...] = ()
    calldatas: tuple[HexBytes, ...] = ()
    vote_start: Uint
    vote_end: Uint
    description: str = ""


class ProposalDeadlineExtended(ChainEventBase):
    name: Literal["ProposalDeadlineExtended"] = "ProposalDeadlineExtended"
    proposal_id: Uint
    extended_deadline: Uint


class ProposalQueued(ChainEventBase):
    name: Literal["ProposalQueued"] = "ProposalQueued"
    proposal_id: Uint
    eta: Uint


class ProposalExecuted(ChainEventBase):
    name: Literal["ProposalExecuted"] = "ProposalExecuted"
    proposal_id: Uint


class ProposalCanceled(ChainEventBase):
    name: Literal["ProposalCanceled"] = "ProposalCanceled"
    proposal_id: Uint


class _VoteEvent(ChainEventBase):
    voter: HexBytes
    proposal_id: Uint
    support: Uint
    weight: Uint
    reason: str = ""


class VoteCast(_VoteEvent):
    name: Literal["VoteCast"] = "VoteCast"


class VoteCastWithParams(_VoteEvent):
    name: Literal["VoteCastWithParams"] = "VoteCastWithParams"
    params: HexBytes = b""


class RoleGranted(ChainEventBase):
    name: Literal["RoleGranted"] = "RoleGranted"
    role: HexBytes
    account: HexBytes
    expires_at: Uint


class RoleRevoked(ChainEventBase):
    name: Literal["RoleRevoked"] = "RoleRevoked"
    role: HexBytes
    account: HexBytes


# Governor configuration


class ProposalThresholdBPSUpdate(ChainEventBase):
    name: Literal["ProposalThresholdBPSUpdate"] = "ProposalThresholdBPSUpdate"
    old_proposal_threshold_bps: Uint
    new_proposal_threshold_bps: Uint


class QuorumBPSUpdate(ChainEventBase):
    name: Literal["QuorumBPSUpdate"] = "QuorumBPSUpdate"
    old_quorum_bps: Uint
    new_quorum_bps: Uint


class ProposalGracePeriodUpdate(ChainEventBase):
    name: Literal["ProposalGracePeriodUpdate"] = "ProposalGracePeriodUpdate"
    old_grace_period: Uint
    new_grace_period: Uint


class GovernorBaseInitialized(ChainEventBase):
    name: Literal["GovernorBaseInitialized"] = "GovernorBaseInitialized"
    executor: HexBytes
    token: HexBytes
    governance_can_begin_at: Uint
    governance_threshold_bps: Uint
    is_founded: bool


class GovernorFounded(ChainEventBase):
    name: Literal["GovernorFounded"] = "GovernorFounded"
    proposal_id: Uint


class VotingDelayUpdate(ChainEventBase):
    name: Literal["VotingDelayUpdate"] = "VotingDelayUpdate"
    old_voting_delay: Uint
    new_voting_delay: Uint


class VotingPeriodUpdate(ChainEventBase):
    name: Literal["VotingPeriodUpdate"] = "VotingPeriodUpdate"
    old_voting_period: Uint
    new_voting_period: Uint


class PercentMajorityUpdate(ChainEventBase):
    name: Literal["PercentMajorityUpdate"] = "PercentMajorityUpdate"
    old_percent_majority: Uint
    new_percent_majority: Uint


class MaxDeadlineExtensionUpdate(ChainEventBase):
    name: Literal["MaxDeadlineExtensionUpdate"] = "MaxDeadlineExtensionUpdate"
    old_max_deadline_extension: Uint
    new_max_deadline_extension: Uint


class BaseDeadlineExtensionUpdate(ChainEventBase):
    name: Literal["BaseDeadlineExtensionUpdate"] = "BaseDeadlineExtensionUpdate"
    old_base_deadline_extension: Uint
    new_base_deadline_extension: Uint


class ExtensionDecayPeriodUpdate(ChainEventBase):
    name: Literal["ExtensionDecayPeriodUpdate"] = "ExtensionDecayPeriodUpdate"
    old_decay_period: Uint
    new_decay_period: Uint


class ExtensionPercentDecayUpdate(ChainEventBase):
    name: Literal["ExtensionPercentDecayUpdate"] = "ExtensionPercentDecayUpdate"
    old_percent_decay: Uint
    new_percent_decay: Uint


# Token


class Transfer(ChainEventBase):
    name: Literal["Transfer"] = "Transfer"
    sender: HexBytes = Field(alias="from")
    to: HexBytes
    value: Uint


class DelegateChanged(ChainEventBase):
    name: Literal["DelegateChanged"] = "DelegateChanged"
    delegator: HexBytes
    from_delegate: HexBytes
    to_delegate: HexBytes


class DelegateVotesChanged(ChainEventBase):
    name: Literal["DelegateVotesChanged"] = "DelegateVotesChanged"
    delegate: HexBytes
    previous_votes: Uint
    new_votes: Uint


class MaxSupplyChange(ChainEventBase):
    name: Literal["MaxSupplyChange"] = "MaxSupplyChange"
    old_max_supply: Uint
    new_max_supply: Uint


# Executor


class BalanceSharesManagerUpdate(ChainEventBase):
    name: Literal["BalanceSharesManagerUpdate"] = "BalanceSharesManagerUpdate"
    old_balance_shares_manager: HexBytes
    new_balance_shares_manager: HexBytes


class SharesOnboarderUpdate(ChainEventBase):
    name: Literal["SharesOnboarderUpdate"] = "SharesOnboarderUpdate"
    old_shares_onboarder: HexBytes
    new_shares_onboarder: HexBytes


class DistributorUpdate(ChainEventBase):
    name: Literal["DistributorUpdate"] = "DistributorUpdate"
    old_distributor: HexBytes
    new_distributor: HexBytes


class ChangedGuard(ChainEventBase):
    name: Literal["ChangedGuard"] = "ChangedGuard"
    guard: HexBytes


class MinDelayUpdate(ChainEventBase):
    name: Literal["MinDelayUpdate"] = "MinDelayUpdate"
    old_min_delay: Uint
    new_min_delay: Uint


class EnabledModule(ChainEventBase):
    name: Literal["EnabledModule"] = "EnabledModule"
    module: HexBytes


class DisabledModule(ChainEventBase):
    name: Literal["DisabledModule"] = "DisabledModule"
    module: HexBytes


class CallExecuted(ChainEventBase):
    name: Literal["CallExecuted"] = "CallExecuted"
    target: HexBytes
    tx_value: Uint
    data: HexBytes = b""
    operation: Uint = 0


class OperationScheduled(ChainEventBase):
    name: Literal["OperationScheduled"] = "OperationScheduled"
    op_nonce: Uint
    module: HexBytes
    to: HexBytes
    tx_value: Uint
    data: HexBytes = b""
    operation: Uint = 0
    delay: Uint = 0


class OperationCanceled(ChainEventBase):
    name: Literal["OperationCanceled"] = "OperationCanceled"
    op_nonce: Uint
    module: HexBytes


class OperationExecuted(ChainEventBase):
    name: Literal["OperationExecuted"] = "OperationExecuted"
    op_nonce: Uint
    module: HexBytes


class DepositRegistered(ChainEventBase):
    name: Literal["DepositRegistered"] = "DepositRegistered"
    account: HexBytes
    quote_asset: HexBytes
    deposit_amount: Uint
    mint_amount: Uint


class WithdrawalProcessed(ChainEventBase):
    name: Literal["WithdrawalProcessed"] = "WithdrawalProcessed"
    account: HexBytes
    receiver: HexBytes
    shares_burned: Uint
    total_shares_supply: Uint
    assets: tuple[HexBytes, ...] = ()
    payouts: tuple[Uint, ...] = ()


ChainEvent = Annotated[
    ProposalCreated
    | ProposalDeadlineExtended
    | ProposalQueued
    | ProposalExecuted
    | ProposalCanceled
    | VoteCast
    | VoteCastWithParams
    | RoleGranted
    | RoleRevoked
    | ProposalThresholdBPSUpdate
    | QuorumBPSUpdate
    | ProposalGracePeriodUpdate
    | GovernorBaseInitialized
    | GovernorFounded
    | VotingDelayUpdate
    | VotingPeriodUpdate
    | PercentMajorityUpdate
    | MaxDeadlineExtensionUpdate
    | BaseDeadlineExtensionUpdate
    | ExtensionDecayPeriodUpdate
    | ExtensionPercentDecayUpdate
    | Transfer
    | DelegateChanged
    | DelegateVotesChanged
    | MaxSupplyChange
    | BalanceSharesManagerUpdate
    | SharesOnboarderUpdate
    | DistributorUpdate
    | ChangedGuard
    | MinDelayUpdate
    | EnabledModule
    | DisabledModule
    | CallExecuted
    | OperationScheduled
    | OperationCanceled
    | OperationExecuted
    | DepositRegistered
    | WithdrawalProcessed,
    Field(discriminator="name"),
]

_EVENT_ADAPTER: TypeAdapter[ChainEvent] = TypeAdapter(ChainEvent)


def parse_event(record: Mapping[str, Any]) -> ChainEvent:
    """Validate a decoded event record into its typed model."""
    try:
        return _EVENT_ADAPTER.validate_python(record)
    except ValidationError as exc:
        raise EventDecodeError(f"Invalid event record: {exc}") from exc


def parse_event_json(line: str | bytes) -> ChainEvent:
    """Validate one JSON document into its typed model.

    Parsing goes through pydantic's JSON reader so integers wider than 64 bits
    survive intact.
    """
    try:
        return _EVENT_ADAPTER.validate_json(line)
    except ValidationError as exc:
        raise EventDecodeError(f"Invalid event record: {exc}") from exc


def read_event_file(path: Path) -> Iterator[ChainEvent]:
    """Yield events from a JSON-lines file, skipping blank lines.

    Param and ``block`` keys are accepted in camelCase or snake_case.
    """
    with path.open("rb") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                yield parse_event_json(line)
            except EventDecodeError as exc:
                raise EventDecodeError(f"{path}:{line_number}: {exc}") from exc
