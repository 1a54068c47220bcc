"""
Aggregate governance counters and the mirrored protocol configuration.

All values live on the :class:`GovernanceData` singleton. Configuration
update events set exactly one field each; events that also report the value
being replaced are checked against what is stored, and a mismatch is logged
without changing the outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

from govindex.datastructures.governance_types import GovernanceData
from govindex.datastructures.identifiers import encode_id
from govindex.datastructures.type_aliases import TokenAmount

from .events import (
    BalanceSharesManagerUpdate,
    BaseDeadlineExtensionUpdate,
    ChangedGuard,
    DistributorUpdate,
    ExtensionDecayPeriodUpdate,
    ExtensionPercentDecayUpdate,
    GovernorBaseInitialized,
    GovernorFounded,
    MaxDeadlineExtensionUpdate,
    MaxSupplyChange,
    MinDelayUpdate,
    PercentMajorityUpdate,
    ProposalGracePeriodUpdate,
    ProposalThresholdBPSUpdate,
    QuorumBPSUpdate,
    SharesOnboarderUpdate,
    VotingDelayUpdate,
    VotingPeriodUpdate,
)
from .repository import GovernanceRepository

type ParameterUpdate = (
    ProposalThresholdBPSUpdate
    | QuorumBPSUpdate
    | ProposalGracePeriodUpdate
    | VotingDelayUpdate
    | VotingPeriodUpdate
    | PercentMajorityUpdate
    | MaxDeadlineExtensionUpdate
    | BaseDeadlineExtensionUpdate
    | ExtensionDecayPeriodUpdate
    | ExtensionPercentDecayUpdate
    | MaxSupplyChange
    | BalanceSharesManagerUpdate
    | SharesOnboarderUpdate
    | DistributorUpdate
    | ChangedGuard
    | MinDelayUpdate
)

_NO_PREVIOUS = object()


def _describe(value: Any) -> str:
    return "0x" + value.hex() if isinstance(value, bytes) else str(value)


@dataclass(slots=True)
class GovernanceDataLedger:
    """Maintains the governance singleton."""

    repository: GovernanceRepository

    def get(self) -> GovernanceData:
        return self.repository.governance_data()

    def increment_proposal_count(self) -> int:
        data = self.repository.governance_data()
        data.proposal_count += 1
        self.repository.save(data)
        return data.proposal_count

    def adjust_total_supply(self, delta: TokenAmount) -> TokenAmount:
        """Apply a mint (positive) or burn (negative) to the total supply."""
        data = self.repository.governance_data()
        new_supply = data.total_supply + delta
        if new_supply < 0:
            logger.warning(
                "Burn of {} exceeds recorded total supply {}; clamping to zero",
                -delta,
                data.total_supply,
            )
            new_supply = 0
        data.total_supply = new_supply
        self.repository.save(data)
        return new_supply

    def set_parameter(
        self, field_name: str, new_value: Any, previous: Any = _NO_PREVIOUS
    ) -> GovernanceData:
        data = self.repository.governance_data()
        stored = getattr(data, field_name)
        if previous is not _NO_PREVIOUS and previous != stored:
            logger.warning(
                "GovernanceData.{} mismatch: event reports previous value {} "
                "but {} is stored; applying {}",
                field_name,
                _describe(previous),
                _describe(stored),
                _describe(new_value),
            )
        setattr(data, field_name, new_value)
        self.repository.save(data)
        logger.debug("GovernanceData.{} = {}", field_name, _describe(new_value))
        return data

    def handle_parameter_update(self, event: ParameterUpdate) -> GovernanceData:
        match event:
            case ProposalThresholdBPSUpdate():
                return self.set_parameter(
                    "proposal_threshold_bps",
                    event.new_proposal_threshold_bps,
                    event.old_proposal_threshold_bps,
                )
            case QuorumBPSUpdate():
                return self.set_parameter(
                    "quorum_bps", event.new_quorum_bps, event.old_quorum_bps
                )
            case ProposalGracePeriodUpdate():
                return self.set_parameter(
                    "proposal_grace_period",
                    event.new_grace_period,
                    event.old_grace_period,
                )
            case VotingDelayUpdate():
                return self.set_parameter(
                    "voting_delay", event.new_voting_delay, event.old_voting_delay
                )
            case VotingPeriodUpdate():
                return self.set_parameter(
                    "voting_period", event.new_voting_period, event.old_voting_period
                )
            case PercentMajorityUpdate():
                return self.set_parameter(
                    "percent_majority",
                    event.new_percent_majority,
                    event.old_percent_majority,
                )
            case MaxDeadlineExtensionUpdate():
                return self.set_parameter(
                    "max_deadline_extension",
                    event.new_max_deadline_extension,
                    event.old_max_deadline_extension,
                )
            case BaseDeadlineExtensionUpdate():
                return self.set_parameter(
                    "base_deadline_extension",
                    event.new_base_deadline_extension,
                    event.old_base_deadline_extension,
                )
            case ExtensionDecayPeriodUpdate():
                return self.set_parameter(
                    "extension_decay_period",
                    event.new_decay_period,
                    event.old_decay_period,
                )
            case ExtensionPercentDecayUpdate():
                return self.set_parameter(
                    "extension_percent_decay",
                    event.new_percent_decay,
                    event.old_percent_decay,
                )
            case MaxSupplyChange():
                return self.set_parameter(
                    "max_supply", event.new_max_supply, event.old_max_supply
                )
            case BalanceSharesManagerUpdate():
                return self.set_parameter(
                    "balance_shares_manager",
                    event.new_balance_shares_manager,
                    event.old_balance_shares_manager,
                )
            case SharesOnboarderUpdate():
                return self.set_parameter(
                    "shares_onboarder",
                    event.new_shares_onboarder,
                    event.old_shares_onboarder,
                )
            case DistributorUpdate():
                return self.set_parameter(
                    "distributor", event.new_distributor, event.old_distributor
                )
            case ChangedGuard():
                return self.set_parameter("guard", event.guard)
            case MinDelayUpdate():
                return self.set_parameter(
                    "executor_min_delay", event.new_min_delay, event.old_min_delay
                )

    def handle_governor_initialized(self, event: GovernorBaseInitialized) -> None:
        data = self.repository.governance_data()
        data.executor = event.executor
        data.token = event.token
        data.governance_can_begin_at = event.governance_can_begin_at
        data.governance_threshold_bps = event.governance_threshold_bps
        data.is_founded = event.is_founded
        self.repository.save(data)
        logger.info(
            "Governor initialized: executor={} token={} founded={}",
            event.executor.hex(),
            event.token.hex(),
            event.is_founded,
        )

    def handle_governor_founded(self, event: GovernorFounded) -> None:
        data = self.repository.governance_data()
        data.is_founded = True
        data.founding_proposal = encode_id(event.proposal_id)
        self.repository.save(data)
        logger.info("Governor founded by proposal {}", event.proposal_id)
