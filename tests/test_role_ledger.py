"""Tests for time-bounded proposer and canceler roles."""

from hypothesis import given
from hypothesis import strategies as st

from govindex.core.events import RoleGranted, RoleRevoked
from govindex.core.persistence import MemoryEntityStore
from govindex.core.repository import GovernanceRepository
from govindex.core.role_ledger import GovernorRole, RoleLedger, delegate_has_role
from govindex.datastructures.governance_types import Delegate
from tests.conftest import ALICE, BOB, make_block


class TestGovernorRole:
    def test_hashes_are_32_bytes(self):
        for role in GovernorRole:
            assert len(role.value) == 32

    def test_from_hash(self):
        for role in GovernorRole:
            assert GovernorRole.from_hash(role.value) is role
        assert GovernorRole.from_hash(b"\x00" * 32) is None

    def test_expiry_is_strict(self):
        delegate = Delegate(id=ALICE, proposer_role_expires_at=100)
        assert delegate_has_role(delegate, GovernorRole.PROPOSER, 99)
        assert not delegate_has_role(delegate, GovernorRole.PROPOSER, 100)
        assert not delegate_has_role(delegate, GovernorRole.CANCELER, 0)


class TestRoleLedger:
    def test_grant_then_revoke(self, repository: GovernanceRepository):
        ledger = RoleLedger(repository)
        ledger.grant_role(ALICE, GovernorRole.PROPOSER, 100)
        assert ledger.has_role(ALICE, GovernorRole.PROPOSER, 50)

        ledger.revoke_role(ALICE, GovernorRole.PROPOSER)
        assert not ledger.has_role(ALICE, GovernorRole.PROPOSER, 50)
        assert repository.load(Delegate, ALICE).proposer_role_expires_at == 0

    def test_roles_are_independent(self, repository: GovernanceRepository):
        ledger = RoleLedger(repository)
        ledger.grant_role(ALICE, GovernorRole.CANCELER, 500)
        assert ledger.has_role(ALICE, GovernorRole.CANCELER, 10)
        assert not ledger.has_role(ALICE, GovernorRole.PROPOSER, 10)

    def test_later_grant_overwrites(self, repository: GovernanceRepository):
        ledger = RoleLedger(repository)
        ledger.grant_role(ALICE, GovernorRole.PROPOSER, 1_000)
        ledger.grant_role(ALICE, GovernorRole.PROPOSER, 10)
        assert not ledger.has_role(ALICE, GovernorRole.PROPOSER, 50)

    def test_has_role_creates_delegate(self, repository: GovernanceRepository):
        ledger = RoleLedger(repository)
        assert not ledger.has_role(BOB, GovernorRole.PROPOSER, 0)
        assert repository.load(Delegate, BOB) == Delegate(id=BOB)

    def test_events_update_ledger(self, repository: GovernanceRepository):
        ledger = RoleLedger(repository)
        ledger.handle_role_granted(
            RoleGranted(
                block=make_block(),
                role=GovernorRole.CANCELER.value,
                account=BOB,
                expires_at=2_000,
            )
        )
        assert repository.load(Delegate, BOB).canceler_role_expires_at == 2_000

        ledger.handle_role_revoked(
            RoleRevoked(
                block=make_block(), role=GovernorRole.CANCELER.value, account=BOB
            )
        )
        assert repository.load(Delegate, BOB).canceler_role_expires_at == 0

    def test_untracked_role_is_ignored(self, repository: GovernanceRepository):
        ledger = RoleLedger(repository)
        ledger.handle_role_granted(
            RoleGranted(
                block=make_block(), role=b"\x11" * 32, account=BOB, expires_at=9
            )
        )
        assert repository.load(Delegate, BOB) is None

    @given(
        role=st.sampled_from(GovernorRole),
        at_time=st.integers(min_value=0, max_value=2**64),
    )
    def test_grant_just_past_time_is_held(self, role: GovernorRole, at_time: int):
        ledger = RoleLedger(GovernanceRepository(MemoryEntityStore()))
        ledger.grant_role(ALICE, role, at_time + 1)
        assert ledger.has_role(ALICE, role, at_time)
        ledger.revoke_role(ALICE, role)
        assert not ledger.has_role(ALICE, role, at_time)
