"""
End-to-end tests: parsed event records replayed through the dispatcher.
"""

import pytest

from govindex.core.dispatcher import EventDispatcher
from govindex.core.events import parse_event
from govindex.core.persistence import MemoryEntityStore
from govindex.core.role_ledger import GovernorRole
from govindex.datastructures.governance_types import (
    ClockMode,
    Delegate,
    ExecutorModule,
    GovernanceData,
    Member,
    Proposal,
    ProposalState,
    ProposalVote,
)
from govindex.datastructures.identifiers import encode_id, proposal_vote_id
from govindex.exceptions import ProposalActionsMismatchError

ZERO = "0x" + "00" * 20
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
CAROL = "0x" + "c4" * 20
EXECUTOR = "0x" + "e0" * 20


def record(name: str, number: int, timestamp: int, sender: str = ALICE, **params):
    return {
        "name": name,
        "params": params,
        "block": {
            "number": number,
            "timestamp": timestamp,
            "transaction_hash": "0x" + f"{number:064x}",
            "transaction_from": sender,
            "log_index": 0,
        },
    }


def governance_history() -> list[dict]:
    return [
        record(
            "GovernorBaseInitialized",
            1,
            1_000,
            executor=EXECUTOR,
            token="0x" + "70" * 20,
            governanceCanBeginAt=1_000,
            governanceThresholdBps=2_000,
            isFounded=True,
        ),
        record("Transfer", 2, 1_012, **{"from": ZERO, "to": ALICE, "value": 600}),
        record("Transfer", 3, 1_024, **{"from": ZERO, "to": BOB, "value": 400}),
        record("Transfer", 4, 1_036, **{"from": ALICE, "to": CAROL, "value": 100}),
        record(
            "DelegateChanged",
            5,
            1_048,
            delegator=ALICE,
            fromDelegate=ZERO,
            toDelegate=ALICE,
        ),
        record(
            "DelegateVotesChanged",
            5,
            1_048,
            delegate=ALICE,
            previousVotes=0,
            newVotes=500,
        ),
        record(
            "RoleGranted",
            6,
            1_060,
            role="0x" + GovernorRole.PROPOSER.value.hex(),
            account=ALICE,
            expiresAt=10_000,
        ),
        record(
            "ProposalCreated",
            7,
            1_072,
            proposalId=1,
            proposer=ALICE,
            targets=[EXECUTOR],
            values=[0],
            signatures=[""],
            calldatas=["0x"],
            voteStart=1_100,
            voteEnd=2_000,
            description="# Enable the distributor\n\nRationale...",
        ),
        record(
            "VoteCast", 9, 1_108, voter=ALICE, proposalId=1, support=1, weight=500
        ),
        record(
            "VoteCastWithParams",
            10,
            1_120,
            sender=BOB,
            voter=BOB,
            proposalId=1,
            support=0,
            weight=400,
            reason="too early",
            params="0x01",
        ),
        record(
            "ProposalDeadlineExtended", 11, 1_132, proposalId=1, extendedDeadline=2_100
        ),
        record("ProposalQueued", 12, 2_200, proposalId=1, eta=2_400),
        record("ProposalExecuted", 13, 2_412, proposalId=1),
        record("EnabledModule", 13, 2_412, module="0x" + "3d" * 20),
        record("MaxSupplyChange", 14, 2_424, oldMaxSupply=0, newMaxSupply=10**24),
    ]


class TestEventDispatcher:
    def test_full_history(self):
        store = MemoryEntityStore()
        dispatcher = EventDispatcher.for_store(store)
        events = [parse_event(item) for item in governance_history()]

        assert dispatcher.replay(events) == len(events)
        assert dispatcher.events_processed == len(events)

        repository = dispatcher.repository
        proposal = repository.load(Proposal, encode_id(1))
        assert proposal.state is ProposalState.EXECUTED
        assert proposal.clock_mode is ClockMode.TIMESTAMP
        assert proposal.title == "Enable the distributor"
        assert proposal.is_proposer_role
        assert proposal.for_votes == 500
        assert proposal.against_votes == 400
        assert proposal.vote_end == 2_100
        assert proposal.original_vote_end == 2_000
        assert proposal.eta == 2_400

        bob_vote = repository.load(
            ProposalVote, proposal_vote_id(1, bytes.fromhex("b0" * 20))
        )
        assert bob_vote.reason == "too early"
        assert bob_vote.params == b"\x01"

        data = repository.load(GovernanceData, b"GOVERNANCE_DATA")
        assert data.proposal_count == 1
        assert data.total_supply == 1_000
        assert data.max_supply == 10**24
        assert data.is_founded
        assert data.executor == bytes.fromhex("e0" * 20)

        balances = {
            member.id.hex(): member.token_balance for member in repository.all(Member)
        }
        assert balances == {"a1" * 20: 500, "b0" * 20: 400, "c4" * 20: 100}

        alice = repository.load(Delegate, bytes.fromhex("a1" * 20))
        assert alice.delegated_votes_balance == 500
        assert alice.proposer_role_expires_at == 10_000
        assert repository.load(ExecutorModule, bytes.fromhex("3d" * 20)).enabled

    def test_replay_is_stable_under_duplicate_votes(self):
        history = governance_history()
        vote_index = next(
            index for index, item in enumerate(history) if item["name"] == "VoteCast"
        )
        history.insert(vote_index + 1, history[vote_index])

        dispatcher = EventDispatcher.for_store(MemoryEntityStore())
        dispatcher.replay(parse_event(item) for item in history)

        proposal = dispatcher.repository.load(Proposal, encode_id(1))
        assert proposal.for_votes == 500

    def test_strict_mode_halts_replay(self):
        history = governance_history()
        for item in history:
            if item["name"] == "ProposalCreated":
                item["params"]["signatures"] = []

        dispatcher = EventDispatcher.for_store(
            MemoryEntityStore(), strict_proposal_actions=True
        )
        with pytest.raises(ProposalActionsMismatchError):
            dispatcher.replay(parse_event(item) for item in history)
        assert dispatcher.repository.load(Proposal, encode_id(1)) is None
