import pytest

from paratable.adder import (
    BlockData,
    HeadData,
    StateMismatch,
    execute,
    hash_state,
    keccak256,
    validate,
)

GENESIS_POST_STATE = bytes(
    [
        1, 27, 77, 3, 221, 140, 1, 241, 4, 145, 67, 207, 156, 76, 129, 126,
        75, 22, 127, 29, 27, 131, 229, 198, 240, 241, 13, 137, 186, 30, 123, 206,
    ]
)


def test_keccak_of_empty_input():
    assert keccak256(b"").hex() == (
        "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )


def test_hash_state_zero_matches_genesis_post_state():
    assert hash_state(0) == GENESIS_POST_STATE


def test_hash_state_hashes_little_endian_encoding():
    assert hash_state(5) == keccak256((5).to_bytes(8, "little"))


def test_head_encoding_layout():
    head = HeadData(number=3, parent_hash=b"\x11" * 32, post_state=b"\x22" * 32)
    encoded = head.encode()
    assert len(encoded) == 72
    assert encoded[:8] == (3).to_bytes(8, "little")
    assert encoded[8:40] == b"\x11" * 32
    assert encoded[40:] == b"\x22" * 32


def test_head_round_trip():
    head = HeadData(number=42, parent_hash=b"\x01" * 32, post_state=hash_state(9))
    assert HeadData.decode(head.encode()) == head


def test_head_decode_ignores_trailing_bytes():
    head = HeadData(number=7)
    assert HeadData.decode(head.encode() + b"extra") == head


def test_head_decode_truncated():
    with pytest.raises(ValueError):
        HeadData.decode(b"\x00" * 40)


def test_head_rejects_bad_hash_length():
    with pytest.raises(ValueError):
        HeadData(number=1, parent_hash=b"\x00" * 31)


def test_head_hash_is_keccak_of_encoding():
    head = HeadData(number=2, post_state=hash_state(4))
    assert head.hash() == keccak256(head.encode())


def test_block_round_trip():
    body = BlockData(state=123, add=2**64 - 1)
    encoded = body.encode()
    assert len(encoded) == 16
    assert BlockData.decode(encoded) == body


def test_block_rejects_out_of_range():
    with pytest.raises(ValueError):
        BlockData(state=-1, add=0)
    with pytest.raises(ValueError):
        BlockData(state=0, add=2**64)


def test_block_decode_truncated():
    with pytest.raises(ValueError):
        BlockData.decode(b"\x00" * 10)


def test_execute_produces_next_head():
    parent = HeadData(number=5, post_state=hash_state(10))
    new = execute(parent.hash(), parent, BlockData(state=10, add=7))
    assert new.number == 6
    assert new.parent_hash == parent.hash()
    assert new.post_state == hash_state(17)


def test_execute_wraps_on_overflow():
    parent = HeadData(number=0, post_state=hash_state(2**64 - 1))
    new = execute(parent.hash(), parent, BlockData(state=2**64 - 1, add=2))
    assert new.post_state == hash_state(1)


def test_execute_state_mismatch():
    parent = HeadData(number=0, post_state=hash_state(1))
    with pytest.raises(StateMismatch):
        execute(parent.hash(), parent, BlockData(state=2, add=0))


def test_validate_matches_execute():
    parent = HeadData(number=9, post_state=hash_state(3))
    body = BlockData(state=3, add=4)
    result = validate(parent.encode(), body.encode())
    assert HeadData.decode(result) == execute(parent.hash(), parent, body)


def test_validate_state_mismatch():
    parent = HeadData(number=9, post_state=hash_state(3))
    with pytest.raises(StateMismatch):
        validate(parent.encode(), BlockData(state=4, add=0).encode())


def test_validate_bad_block_data():
    parent = HeadData(number=9, post_state=hash_state(3))
    with pytest.raises(ValueError):
        validate(parent.encode(), b"\x00")