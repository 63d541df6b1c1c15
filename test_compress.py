import pytest

from compress import (
    CONSTANTS,
    IV224,
    IV256,
    MASK32,
    ROUNDS,
    SIGMA,
    _rotr,
    block_to_words,
    compress,
    initial_vector,
    mix,
    split_counter,
)


ZERO_SALT = (0, 0, 0, 0)


def _final_block(bits: int) -> bytes:
    """The single padded block of the empty message."""
    block = bytearray(64)
    block[0] = 0x80
    if bits == 256:
        block[55] = 0x01
    return bytes(block)


def _to_bytes(words) -> bytes:
    return b"".join(w.to_bytes(4, byteorder="big") for w in words)


def test_rotr():
    assert _rotr(1, 1) == 0x80000000
    assert _rotr(0x12345678, 16) == 0x56781234
    assert _rotr(0x12345678, 8) == 0x78123456
    assert _rotr(0x80000000, 7) == 0x01000000


@pytest.mark.parametrize(
    "t,expected",
    [
        (0, (0, 0)),
        (512, (512, 0)),
        (2**32 + 5, (5, 1)),
        (2**64 + 3, (3, 0)),
        (-8, (0xFFFFFFF8, 0xFFFFFFFF)),
    ],
)
def test_split_counter(t, expected):
    assert split_counter(t) == expected


def test_block_to_words_is_big_endian():
    words = block_to_words(bytes(range(64)))
    assert len(words) == 16
    assert words[0] == 0x00010203
    assert words[15] == 0x3C3D3E3F


@pytest.mark.parametrize("length", [0, 63, 65])
def test_block_to_words_rejects_wrong_length(length):
    with pytest.raises(ValueError):
        block_to_words(bytes(length))


def test_sigma_tables():
    assert len(SIGMA) == ROUNDS == 14
    for row in SIGMA:
        assert sorted(row) == list(range(16))
    # Rounds 10..13 reuse the first four permutations.
    for r in range(10, 14):
        assert SIGMA[r] == SIGMA[r - 10]


def test_initial_vector_layout():
    chain = tuple(range(1, 9))
    salt = (0x11111111, 0x22222222, 0x33333333, 0x44444444)

    v = initial_vector(chain, salt, (0xAAAA0000, 0x0000BBBB), False)
    assert v[:8] == list(chain)
    assert v[8:12] == [salt[i] ^ CONSTANTS[i] for i in range(4)]
    assert v[12] == CONSTANTS[4] ^ 0xAAAA0000
    assert v[13] == CONSTANTS[5] ^ 0xAAAA0000
    assert v[14] == CONSTANTS[6] ^ 0x0000BBBB
    assert v[15] == CONSTANTS[7] ^ 0x0000BBBB

    v_no_counter = initial_vector(chain, salt, (0xAAAA0000, 0x0000BBBB), True)
    assert v_no_counter[12:] == list(CONSTANTS[4:8])


def test_mix_touches_only_its_four_words():
    v = list(range(16))
    m = list(range(100, 116))
    before = list(v)

    mix(v, m, SIGMA[0], 0, 4, 8, 12, 0)

    for i in range(16):
        if i in (0, 4, 8, 12):
            assert 0 <= v[i] <= MASK32
        else:
            assert v[i] == before[i]
    assert v[0] != before[0]


@pytest.mark.parametrize(
    "iv,bits,expected_hex",
    [
        (IV256, 256, "716f6e863f744b9ac22c97ec7b76ea5f5908bc5b2f67c61510bfc4751384ea7a"),
        (IV224, 224, "7dc5313b1c04512a174bd6503b89607aecbee0903d40a8a569c94eed"),
    ],
)
def test_compress_empty_message_block(iv, bits, expected_hex):
    """
    The empty message is a single padded block compressed without the
    counter; serializing the result gives the published digest.
    """
    chain = compress(iv, ZERO_SALT, (0, 0), True, _final_block(bits))
    assert _to_bytes(chain)[: bits // 8].hex() == expected_hex


def test_compress_salted_empty_message_block():
    salt = b"1234567890123456"
    salt_words = tuple(int.from_bytes(salt[4 * i : 4 * i + 4], "big") for i in range(4))

    chain = compress(IV256, salt_words, (0, 0), True, _final_block(256))

    assert (
        _to_bytes(chain).hex()
        == "561d6d0cfa3d31d5eedaf2d575f3942539b03522befc2a1196ba0e51af8992a8"
    )


def test_no_counter_ignores_counter_value():
    block = bytes(range(64))
    without = compress(IV256, ZERO_SALT, (0, 0), True, block)

    # A zero counter injects nothing, so it matches the no-counter form.
    assert compress(IV256, ZERO_SALT, (0, 0), False, block) == without
    assert compress(IV256, ZERO_SALT, (512, 7), True, block) == without
    assert compress(IV256, ZERO_SALT, (512, 7), False, block) != without


def test_compress_is_deterministic_and_word_sized():
    block = bytes(range(64))
    first = compress(IV256, ZERO_SALT, (512, 0), False, block)
    second = compress(IV256, ZERO_SALT, (512, 0), False, block)

    assert first == second
    assert len(first) == 8
    assert all(0 <= w <= MASK32 for w in first)


def test_compress_depends_on_salt_and_chain():
    block = bytes(64)
    base = compress(IV256, ZERO_SALT, (512, 0), False, block)

    assert compress(IV256, (1, 0, 0, 0), (512, 0), False, block) != base
    assert compress(IV224, ZERO_SALT, (512, 0), False, block) != base


@pytest.mark.parametrize(
    "chain,salt,counter,block",
    [
        (IV256[:7], ZERO_SALT, (0, 0), bytes(64)),
        (IV256, (0, 0, 0), (0, 0), bytes(64)),
        (IV256, ZERO_SALT, (0,), bytes(64)),
        (IV256, ZERO_SALT, (0, 0), bytes(32)),
    ],
)
def test_compress_rejects_bad_shapes(chain, salt, counter, block):
    with pytest.raises(ValueError):
        compress(chain, salt, counter, False, block)
