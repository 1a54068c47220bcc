"""Tests for token transfers, total supply and vote delegation."""

from hypothesis import given
from hypothesis import strategies as st

from govindex.core.events import DelegateChanged, DelegateVotesChanged, Transfer
from govindex.core.governance_data import GovernanceDataLedger
from govindex.core.persistence import MemoryEntityStore
from govindex.core.repository import GovernanceRepository
from govindex.core.token_ledger import TokenLedger
from govindex.datastructures.governance_types import Delegate, Member
from govindex.datastructures.identifiers import ZERO_ADDRESS
from tests.conftest import ALICE, BOB, CAROL, make_block


def make_ledger(repository: GovernanceRepository) -> TokenLedger:
    return TokenLedger(repository, GovernanceDataLedger(repository))


def transfer(sender: bytes, to: bytes, value: int) -> Transfer:
    return Transfer(block=make_block(), sender=sender, to=to, value=value)


class TestTransfers:
    def test_mint_increases_supply(self, repository: GovernanceRepository):
        ledger = make_ledger(repository)
        ledger.handle_transfer(transfer(ZERO_ADDRESS, ALICE, 100))

        assert ledger.governance_data.get().total_supply == 100
        assert repository.load(Member, ALICE).token_balance == 100
        assert repository.load(Member, ZERO_ADDRESS) is None

    def test_transfer_moves_balance(self, repository: GovernanceRepository):
        ledger = make_ledger(repository)
        ledger.handle_transfer(transfer(ZERO_ADDRESS, ALICE, 100))
        ledger.handle_transfer(transfer(ALICE, BOB, 30))

        assert repository.load(Member, ALICE).token_balance == 70
        assert repository.load(Member, BOB).token_balance == 30
        assert ledger.governance_data.get().total_supply == 100

    def test_burn_decreases_supply(self, repository: GovernanceRepository):
        ledger = make_ledger(repository)
        ledger.handle_transfer(transfer(ZERO_ADDRESS, ALICE, 100))
        ledger.handle_transfer(transfer(ALICE, ZERO_ADDRESS, 40))

        assert ledger.governance_data.get().total_supply == 60
        assert repository.load(Member, ALICE).token_balance == 60
        assert repository.load(Member, ZERO_ADDRESS) is None

    def test_member_kept_at_zero_balance(self, repository: GovernanceRepository):
        ledger = make_ledger(repository)
        ledger.handle_transfer(transfer(ZERO_ADDRESS, ALICE, 5))
        ledger.handle_transfer(transfer(ALICE, ZERO_ADDRESS, 5))

        assert repository.load(Member, ALICE) == Member(id=ALICE, token_balance=0)
        assert ledger.governance_data.get().total_supply == 0

    def test_overdraft_clamps_to_zero(
        self, repository: GovernanceRepository, captured_warnings: list[str]
    ):
        ledger = make_ledger(repository)
        ledger.handle_transfer(transfer(ALICE, BOB, 10))

        assert repository.load(Member, ALICE).token_balance == 0
        assert repository.load(Member, BOB).token_balance == 10
        assert any("exceeds recorded balance" in m for m in captured_warnings)

    @given(
        amounts=st.lists(
            st.tuples(
                st.sampled_from([ALICE, BOB, CAROL]),
                st.integers(min_value=0, max_value=2**200),
            ),
            max_size=10,
        )
    )
    def test_supply_equals_sum_of_mints(self, amounts: list[tuple[bytes, int]]):
        repository = GovernanceRepository(MemoryEntityStore())
        ledger = make_ledger(repository)
        for recipient, amount in amounts:
            ledger.handle_transfer(transfer(ZERO_ADDRESS, recipient, amount))

        balances = sum(member.token_balance for member in repository.all(Member))
        assert ledger.governance_data.get().total_supply == balances
        assert balances == sum(amount for _, amount in amounts)


class TestDelegation:
    def test_delegate_to_other(self, repository: GovernanceRepository):
        member = make_ledger(repository).handle_delegate_changed(
            DelegateChanged(
                block=make_block(),
                delegator=ALICE,
                from_delegate=ZERO_ADDRESS,
                to_delegate=BOB,
            )
        )
        assert member.delegate == BOB
        assert repository.load(Member, ALICE).delegate == BOB

    def test_self_delegation(self, repository: GovernanceRepository):
        make_ledger(repository).handle_delegate_changed(
            DelegateChanged(
                block=make_block(),
                delegator=ALICE,
                from_delegate=ZERO_ADDRESS,
                to_delegate=ALICE,
            )
        )
        assert repository.load(Member, ALICE).delegate == ALICE

    def test_delegating_to_zero_clears(self, repository: GovernanceRepository):
        ledger = make_ledger(repository)
        ledger.handle_delegate_changed(
            DelegateChanged(
                block=make_block(),
                delegator=ALICE,
                from_delegate=ZERO_ADDRESS,
                to_delegate=BOB,
            )
        )
        ledger.handle_delegate_changed(
            DelegateChanged(
                block=make_block(),
                delegator=ALICE,
                from_delegate=BOB,
                to_delegate=ZERO_ADDRESS,
            )
        )
        assert repository.load(Member, ALICE).delegate is None

    def test_delegate_votes_changed(self, repository: GovernanceRepository):
        ledger = make_ledger(repository)
        ledger.handle_delegate_votes_changed(
            DelegateVotesChanged(
                block=make_block(), delegate=BOB, previous_votes=0, new_votes=250
            )
        )
        ledger.handle_delegate_votes_changed(
            DelegateVotesChanged(
                block=make_block(), delegate=BOB, previous_votes=250, new_votes=75
            )
        )
        assert repository.load(Delegate, BOB).delegated_votes_balance == 75

    def test_previous_votes_mismatch_is_advisory(
        self, repository: GovernanceRepository, captured_warnings: list[str]
    ):
        ledger = make_ledger(repository)
        delegate = ledger.handle_delegate_votes_changed(
            DelegateVotesChanged(
                block=make_block(), delegate=BOB, previous_votes=999, new_votes=10
            )
        )
        assert delegate.delegated_votes_balance == 10
        assert repository.load(Delegate, BOB).delegated_votes_balance == 10
        assert any("do not match" in m for m in captured_warnings)
