"""
Time-bounded governor roles.

Each account holds at most one grant per role, stored as an absolute expiry
timestamp on its :class:`Delegate` record. A later grant overwrites an earlier
one and a revocation resets the expiry to zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from govindex.datastructures.governance_types import Delegate
from govindex.datastructures.type_aliases import Address, BlockTimestamp, RoleHash

from .events import RoleGranted, RoleRevoked
from .repository import GovernanceRepository


class GovernorRole(Enum):
    """Roles tracked by the ledger, valued by their on-chain keccak256 hash."""

    PROPOSER = bytes.fromhex(
        "c4338366b9cfc07901c46677a3a32746bd05d5c114e4d0d293c468cff87acde0"
    )
    CANCELER = bytes.fromhex(
        "f8d10b365a707974a9f5413ba4e942506c544deb0feb43da0a9f3a0763bf308c"
    )

    @classmethod
    def from_hash(cls, role_hash: RoleHash) -> GovernorRole | None:
        try:
            return cls(role_hash)
        except ValueError:
            return None


def role_expiry(delegate: Delegate, role: GovernorRole) -> BlockTimestamp:
    match role:
        case GovernorRole.PROPOSER:
            return delegate.proposer_role_expires_at
        case GovernorRole.CANCELER:
            return delegate.canceler_role_expires_at


def _set_role_expiry(
    delegate: Delegate, role: GovernorRole, expires_at: BlockTimestamp
) -> None:
    match role:
        case GovernorRole.PROPOSER:
            delegate.proposer_role_expires_at = expires_at
        case GovernorRole.CANCELER:
            delegate.canceler_role_expires_at = expires_at


def delegate_has_role(
    delegate: Delegate, role: GovernorRole, at_time: BlockTimestamp
) -> bool:
    """A role is held while its expiry is strictly after ``at_time``."""
    return role_expiry(delegate, role) > at_time


@dataclass(slots=True)
class RoleLedger:
    """Grants, revokes and answers role queries against delegate records."""

    repository: GovernanceRepository

    def grant_role(
        self, account: Address, role: GovernorRole, expires_at: BlockTimestamp
    ) -> Delegate:
        delegate = self.repository.get_or_create_delegate(account)
        _set_role_expiry(delegate, role, expires_at)
        self.repository.save(delegate)
        logger.debug(
            "Granted {} to {} until {}", role.name, account.hex(), expires_at
        )
        return delegate

    def revoke_role(self, account: Address, role: GovernorRole) -> Delegate:
        delegate = self.repository.get_or_create_delegate(account)
        _set_role_expiry(delegate, role, 0)
        self.repository.save(delegate)
        logger.debug("Revoked {} from {}", role.name, account.hex())
        return delegate

    def has_role(
        self, account: Address, role: GovernorRole, at_time: BlockTimestamp
    ) -> bool:
        delegate = self.repository.get_or_create_delegate(account)
        return delegate_has_role(delegate, role, at_time)

    def handle_role_granted(self, event: RoleGranted) -> None:
        role = GovernorRole.from_hash(event.role)
        if role is None:
            logger.debug("Ignoring grant of untracked role {}", event.role.hex())
            return
        self.grant_role(event.account, role, event.expires_at)

    def handle_role_revoked(self, event: RoleRevoked) -> None:
        role = GovernorRole.from_hash(event.role)
        if role is None:
            logger.debug("Ignoring revocation of untracked role {}", event.role.hex())
            return
        self.revoke_role(event.account, role)
