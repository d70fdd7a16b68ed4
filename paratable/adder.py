"""A minimal parachain whose state is a counter that each block adds to."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from Crypto.Hash import keccak

_U64 = struct.Struct("<Q")
_U64_MASK = (1 << 64) - 1
_HASH_LEN = 32
_ZERO_HASH = bytes(_HASH_LEN)


def keccak256(data: bytes) -> bytes:
    """Return the 32-byte Keccak-256 digest of ``data``."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def _check_u64(name: str, value: int) -> None:
    if not 0 <= value <= _U64_MASK:
        raise ValueError(f"{name} must fit in an unsigned 64-bit integer, got {value}")


def _read_u64(data: bytes, offset: int, what: str) -> int:
    end = offset + _U64.size
    if len(data) < end:
        raise ValueError(f"truncated {what}: expected at least {end} bytes, got {len(data)}")
    return _U64.unpack_from(data, offset)[0]


def _read_hash(data: bytes, offset: int, what: str) -> bytes:
    end = offset + _HASH_LEN
    if len(data) < end:
        raise ValueError(f"truncated {what}: expected at least {end} bytes, got {len(data)}")
    return bytes(data[offset:end])


def hash_state(state: int) -> bytes:
    """Hash a counter state as it is committed to in a head."""
    _check_u64("state", state)
    return keccak256(_U64.pack(state))


@dataclass(frozen=True)
class HeadData:
    """Head data of the parachain."""

    number: int = 0
    parent_hash: bytes = _ZERO_HASH
    post_state: bytes = _ZERO_HASH

    def __post_init__(self) -> None:
        _check_u64("number", self.number)
        for name in ("parent_hash", "post_state"):
            value = bytes(getattr(self, name))
            if len(value) != _HASH_LEN:
                raise ValueError(f"{name} must be {_HASH_LEN} bytes, got {len(value)}")
            object.__setattr__(self, name, value)

    def encode(self) -> bytes:
        """Encode as little-endian number followed by the two raw hashes."""
        return _U64.pack(self.number) + self.parent_hash + self.post_state

    @classmethod
    def decode(cls, data: bytes) -> "HeadData":
        """Decode a head from the start of ``data``; trailing bytes are ignored."""
        data = bytes(data)
        number = _read_u64(data, 0, "head data")
        parent_hash = _read_hash(data, _U64.size, "head data")
        post_state = _read_hash(data, _U64.size + _HASH_LEN, "head data")
        return cls(number, parent_hash, post_state)

    def hash(self) -> bytes:
        """Keccak-256 of the encoded head."""
        return keccak256(self.encode())


@dataclass(frozen=True)
class BlockData:
    """Block body: the state to start from and the amount to add."""

    state: int = 0
    add: int = 0

    def __post_init__(self) -> None:
        _check_u64("state", self.state)
        _check_u64("add", self.add)

    def encode(self) -> bytes:
        """Encode as two little-endian 64-bit integers."""
        return _U64.pack(self.state) + _U64.pack(self.add)

    @classmethod
    def decode(cls, data: bytes) -> "BlockData":
        """Decode a body from the start of ``data``; trailing bytes are ignored."""
        data = bytes(data)
        state = _read_u64(data, 0, "block data")
        add = _read_u64(data, _U64.size, "block data")
        return cls(state, add)


class StateMismatch(Exception):
    """The block's starting state does not match the parent head's state hash."""


def execute(parent_hash: bytes, parent_head: HeadData, block_data: BlockData) -> HeadData:
    """Execute ``block_data`` on top of ``parent_head`` and return the new head."""
    assert parent_hash == parent_head.hash(), "parent hash does not match parent head"

    if hash_state(block_data.state) != parent_head.post_state:
        raise StateMismatch("block start state does not match parent post-state")

    new_state = (block_data.state + block_data.add) & _U64_MASK
    return HeadData(
        number=parent_head.number + 1,
        parent_hash=parent_hash,
        post_state=hash_state(new_state),
    )


def validate(parent_head: bytes, block_data: bytes) -> bytes:
    """Validate an encoded block against an encoded parent head.

    Returns the encoded new head. Raises ``ValueError`` for malformed input
    and ``StateMismatch`` when execution fails.
    """
    head = HeadData.decode(parent_head)
    body = BlockData.decode(block_data)
    parent_hash = keccak256(bytes(parent_head))
    return execute(parent_hash, head, body).encode()