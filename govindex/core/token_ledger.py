"""Token balances, supply changes and vote delegation."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from govindex.datastructures.governance_types import Delegate, Member
from govindex.datastructures.identifiers import is_zero_address
from govindex.datastructures.type_aliases import Address, TokenAmount

from .events import DelegateChanged, DelegateVotesChanged, Transfer
from .governance_data import GovernanceDataLedger
from .repository import GovernanceRepository


@dataclass(slots=True)
class TokenLedger:
    """Applies token events to members, delegates and the total supply."""

    repository: GovernanceRepository
    governance_data: GovernanceDataLedger

    def handle_transfer(self, event: Transfer) -> None:
        if is_zero_address(event.sender):
            self.governance_data.adjust_total_supply(event.value)
        else:
            self._debit(event.sender, event.value)

        if is_zero_address(event.to):
            self.governance_data.adjust_total_supply(-event.value)
        else:
            self._credit(event.to, event.value)

    def _credit(self, address: Address, amount: TokenAmount) -> Member:
        member = self.repository.get_or_create_member(address)
        member.token_balance += amount
        self.repository.save(member)
        return member

    def _debit(self, address: Address, amount: TokenAmount) -> Member:
        member = self.repository.get_or_create_member(address)
        if amount > member.token_balance:
            logger.warning(
                "Transfer of {} from {} exceeds recorded balance {}; clamping to zero",
                amount,
                address.hex(),
                member.token_balance,
            )
            member.token_balance = 0
        else:
            member.token_balance -= amount
        self.repository.save(member)
        return member

    def handle_delegate_changed(self, event: DelegateChanged) -> Member:
        member = self.repository.get_or_create_member(event.delegator)
        if is_zero_address(event.to_delegate):
            member.delegate = None
        else:
            member.delegate = event.to_delegate
        self.repository.save(member)
        logger.debug(
            "Member {} delegates to {}",
            event.delegator.hex(),
            member.delegate.hex() if member.delegate else "nobody",
        )
        return member

    def handle_delegate_votes_changed(self, event: DelegateVotesChanged) -> Delegate:
        delegate = self.repository.get_or_create_delegate(event.delegate)
        if delegate.delegated_votes_balance != event.previous_votes:
            logger.warning(
                "Delegate {} recorded votes {} do not match event previous votes {}",
                event.delegate.hex(),
                delegate.delegated_votes_balance,
                event.previous_votes,
            )
        delegate.delegated_votes_balance = event.new_votes
        self.repository.save(delegate)
        return delegate
