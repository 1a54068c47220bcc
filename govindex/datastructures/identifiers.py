"""
Fixed-width identifier codec.

Numeric chain identifiers (proposal ids, executor operation nonces) are stored
as 32-byte big-endian keys so that byte order matches numeric order and the
original integer can always be recovered.
"""

from __future__ import annotations

from hypothesis import strategies as st

from ..exceptions import IdentifierDecodeError, IdentifierEncodeError
from .type_aliases import Address, EntityId, LogIndex, TransactionHash

ID_WIDTH_BYTES = 32
MAX_ENCODABLE_ID = (1 << (ID_WIDTH_BYTES * 8)) - 1
ADDRESS_WIDTH_BYTES = 20
ZERO_ADDRESS: Address = bytes(ADDRESS_WIDTH_BYTES)


def encode_id(value: int) -> EntityId:
    """Encode a non-negative integer as a 32-byte big-endian key."""
    if value < 0:
        raise IdentifierEncodeError(f"Identifier cannot be negative: {value}")
    if value > MAX_ENCODABLE_ID:
        raise IdentifierEncodeError(
            f"Identifier does not fit in {ID_WIDTH_BYTES} bytes: {value}"
        )
    return value.to_bytes(ID_WIDTH_BYTES, "big")


def decode_id(key: bytes) -> int:
    """Decode a 32-byte big-endian key back into its integer value."""
    if len(key) != ID_WIDTH_BYTES:
        raise IdentifierDecodeError(
            f"Identifier key must be {ID_WIDTH_BYTES} bytes, got {len(key)}"
        )
    return int.from_bytes(key, "big")


def proposal_vote_id(proposal_id: int, voter: Address) -> EntityId:
    """Composite key for the single vote record of ``voter`` on a proposal."""
    return encode_id(proposal_id) + voter


def log_entity_id(transaction_hash: TransactionHash, log_index: LogIndex) -> EntityId:
    """Key for records that are unique per emitted log."""
    return transaction_hash + log_index.to_bytes(4, "little", signed=True)


def is_zero_address(address: Address) -> bool:
    return address == ZERO_ADDRESS


# Hypothesis strategies for property-based testing


def encodable_id_strategy() -> st.SearchStrategy[int]:
    """Generate integers across the full 256-bit identifier range."""
    return st.one_of(
        st.integers(min_value=0, max_value=1000),
        st.integers(min_value=0, max_value=MAX_ENCODABLE_ID),
        st.just(MAX_ENCODABLE_ID),
    )


def address_strategy() -> st.SearchStrategy[Address]:
    """Generate non-zero 20-byte addresses."""
    return st.binary(
        min_size=ADDRESS_WIDTH_BYTES, max_size=ADDRESS_WIDTH_BYTES
    ).filter(lambda address: address != ZERO_ADDRESS)
