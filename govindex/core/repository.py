"""
Typed access to governance entities in an entity store.

The repository is the only place that knows how entity records are keyed and
serialized. Handlers use it to load, lazily create, and save records; every
get-or-create here mirrors a lazy-creation rule of the data model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from govindex.datastructures.governance_types import (
    GOVERNANCE_DATA_ID,
    Delegate,
    GovernanceData,
    Member,
    Proposal,
    ProposalVote,
)
from govindex.datastructures.identifiers import encode_id, proposal_vote_id
from govindex.datastructures.type_aliases import Address, EntityId

from .persistence.entity_store import EntityStore
from .serialization import EntitySerializer


@dataclass(slots=True)
class GovernanceRepository:
    """Load/save facade over an :class:`EntityStore`."""

    store: EntityStore
    serializer: EntitySerializer = field(default_factory=EntitySerializer)

    def load[E](self, entity_cls: type[E], entity_id: EntityId) -> E | None:
        payload = self.store.load(entity_cls.ENTITY_TYPE, entity_id)  # type: ignore[attr-defined]
        if payload is None:
            return None
        return self.serializer.decode(entity_cls, payload)

    def save(self, entity: Any) -> None:
        self.store.save(entity.ENTITY_TYPE, entity.id, self.serializer.encode(entity))

    def delete(self, entity_cls: type, entity_id: EntityId) -> None:
        self.store.delete(entity_cls.ENTITY_TYPE, entity_id)  # type: ignore[attr-defined]

    def all[E](self, entity_cls: type[E]) -> list[E]:
        entities: list[E] = []
        for entity_id in self.store.list_ids(entity_cls.ENTITY_TYPE):  # type: ignore[attr-defined]
            entity = self.load(entity_cls, entity_id)
            if entity is not None:
                entities.append(entity)
        return entities

    # Lazily created records. Members, delegates and the governance singleton
    # are saved as soon as they are created; proposals and votes are saved by
    # the handler that populates them.

    def get_or_create_member(self, address: Address) -> Member:
        member = self.load(Member, address)
        if member is None:
            member = Member(id=address)
            self.save(member)
            logger.debug("Created member {}", address.hex())
        return member

    def get_or_create_delegate(self, address: Address) -> Delegate:
        delegate = self.load(Delegate, address)
        if delegate is None:
            delegate = Delegate(id=address)
            self.save(delegate)
            logger.debug("Created delegate {}", address.hex())
        return delegate

    def get_or_create_proposal(self, proposal_id: int | EntityId) -> Proposal:
        key = encode_id(proposal_id) if isinstance(proposal_id, int) else proposal_id
        proposal = self.load(Proposal, key)
        if proposal is None:
            proposal = Proposal(id=key)
        return proposal

    def get_or_create_proposal_vote(
        self, proposal_id: int, voter: Address
    ) -> tuple[ProposalVote, bool]:
        """Return the voter's record on a proposal and whether it already existed."""
        vote_id = proposal_vote_id(proposal_id, voter)
        vote = self.load(ProposalVote, vote_id)
        if vote is None:
            return ProposalVote(id=vote_id), False
        return vote, True

    def governance_data(self) -> GovernanceData:
        data = self.load(GovernanceData, GOVERNANCE_DATA_ID)
        if data is None:
            data = GovernanceData()
            self.save(data)
        return data
