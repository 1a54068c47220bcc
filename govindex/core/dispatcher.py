"""
Event dispatcher.

Routes each typed chain event to the handler that owns it. Events are applied
strictly one at a time in the order given; a handler failure propagates and
stops the replay.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import assert_never

from loguru import logger

from . import events
from .events import ChainEvent
from .executor_ledger import ExecutorLedger
from .governance_data import GovernanceDataLedger
from .persistence.entity_store import EntityStore
from .proposal_lifecycle import ProposalLifecycleEngine
from .repository import GovernanceRepository
from .role_ledger import RoleLedger
from .token_ledger import TokenLedger
from .vote_tally import VoteTallyAccumulator


@dataclass(slots=True)
class EventDispatcher:
    """Applies chain events to the entity store through the domain ledgers."""

    repository: GovernanceRepository
    strict_proposal_actions: bool = False
    governance_data: GovernanceDataLedger = field(init=False)
    roles: RoleLedger = field(init=False)
    lifecycle: ProposalLifecycleEngine = field(init=False)
    tally: VoteTallyAccumulator = field(init=False)
    tokens: TokenLedger = field(init=False)
    executor: ExecutorLedger = field(init=False)
    events_processed: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.governance_data = GovernanceDataLedger(self.repository)
        self.roles = RoleLedger(self.repository)
        self.lifecycle = ProposalLifecycleEngine(
            self.repository,
            self.governance_data,
            strict_actions=self.strict_proposal_actions,
        )
        self.tally = VoteTallyAccumulator(self.repository)
        self.tokens = TokenLedger(self.repository, self.governance_data)
        self.executor = ExecutorLedger(self.repository)

    @classmethod
    def for_store(
        cls, store: EntityStore, *, strict_proposal_actions: bool = False
    ) -> EventDispatcher:
        return cls(
            GovernanceRepository(store),
            strict_proposal_actions=strict_proposal_actions,
        )

    def dispatch(self, event: ChainEvent) -> None:
        logger.debug(
            "Dispatching {} from block {} log {}",
            event.name,
            event.block.number,
            event.block.log_index,
        )
        match event:
            case events.ProposalCreated():
                self.lifecycle.handle_created(event)
            case events.ProposalDeadlineExtended():
                self.lifecycle.handle_deadline_extended(event)
            case events.ProposalQueued():
                self.lifecycle.handle_queued(event)
            case events.ProposalExecuted():
                self.lifecycle.handle_executed(event)
            case events.ProposalCanceled():
                self.lifecycle.handle_canceled(event)
            case events.VoteCast() | events.VoteCastWithParams():
                self.tally.handle_vote(event)
            case events.RoleGranted():
                self.roles.handle_role_granted(event)
            case events.RoleRevoked():
                self.roles.handle_role_revoked(event)
            case events.GovernorBaseInitialized():
                self.governance_data.handle_governor_initialized(event)
            case events.GovernorFounded():
                self.governance_data.handle_governor_founded(event)
            case (
                events.ProposalThresholdBPSUpdate()
                | events.QuorumBPSUpdate()
                | events.ProposalGracePeriodUpdate()
                | events.VotingDelayUpdate()
                | events.VotingPeriodUpdate()
                | events.PercentMajorityUpdate()
                | events.MaxDeadlineExtensionUpdate()
                | events.BaseDeadlineExtensionUpdate()
                | events.ExtensionDecayPeriodUpdate()
                | events.ExtensionPercentDecayUpdate()
                | events.MaxSupplyChange()
                | events.BalanceSharesManagerUpdate()
                | events.SharesOnboarderUpdate()
                | events.DistributorUpdate()
                | events.ChangedGuard()
                | events.MinDelayUpdate()
            ):
                self.governance_data.handle_parameter_update(event)
            case events.Transfer():
                self.tokens.handle_transfer(event)
            case events.DelegateChanged():
                self.tokens.handle_delegate_changed(event)
            case events.DelegateVotesChanged():
                self.tokens.handle_delegate_votes_changed(event)
            case events.EnabledModule():
                self.executor.handle_enabled_module(event)
            case events.DisabledModule():
                self.executor.handle_disabled_module(event)
            case events.OperationScheduled():
                self.executor.handle_operation_scheduled(event)
            case events.OperationCanceled():
                self.executor.handle_operation_canceled(event)
            case events.OperationExecuted():
                self.executor.handle_operation_executed(event)
            case events.CallExecuted():
                self.executor.handle_call_executed(event)
            case events.DepositRegistered():
                self.executor.handle_deposit_registered(event)
            case events.WithdrawalProcessed():
                self.executor.handle_withdrawal_processed(event)
            case _:
                assert_never(event)
        self.events_processed += 1

    def replay(self, chain_events: Iterable[ChainEvent]) -> int:
        """Dispatch events in order; returns how many were applied."""
        applied = 0
        for event in chain_events:
            self.dispatch(event)
            applied += 1
        logger.info("Replayed {} events", applied)
        return applied
