"""BLAKE-256 compression function (14 rounds).

This folds one 64-byte message block into the 8-word chain value `h`.

The 16-word working vector is laid out as a 4x4 matrix

    v0  v1  v2  v3
    v4  v5  v6  v7
    v8  v9  v10 v11
    v12 v13 v14 v15

and initialised from the chain value, the salt, the constants and the bit
counter `t = (t0, t1)`:

    v[0..7]   = h[0..7]
    v[8..11]  = s[0..3] ^ c[0..3]
    v[12..15] = t0 ^ c[4], t0 ^ c[5], t1 ^ c[6], t1 ^ c[7]

Each round applies the G function to the four columns and then to the four
diagonals. G on `(a, b, c, d)` with message indices `(x, y)` is:

    a = a + b + (m[x] ^ c[y])
    d = (d ^ a) >>> 16
    c = c + d
    b = (b ^ c) >>> 12
    a = a + b + (m[y] ^ c[x])
    d = (d ^ a) >>> 8
    c = c + d
    b = (b ^ c) >>> 7

After the last round the chain value is updated with the feed-forward

    h'[i] = h[i] ^ s[i % 4] ^ v[i] ^ v[i + 8]

All additions are performed modulo 2**32.
"""

from __future__ import annotations

from typing import List, MutableSequence, Sequence, Tuple


MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

ROUNDS = 14

Words8 = Tuple[int, int, int, int, int, int, int, int]

# BLAKE-256 initial chain value (same as the SHA-256 IV).
IV256: Words8 = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

# BLAKE-224 initial chain value (same as the SHA-224 IV).
IV224: Words8 = (
    0xC1059ED8,
    0x367CD507,
    0x3070DD17,
    0xF70E5939,
    0xFFC00B31,
    0x68581511,
    0x64F98FA7,
    0xBEFA4FA4,
)

# Leading digits of pi.
CONSTANTS: Tuple[int, ...] = (
    0x243F6A88,
    0x85A308D3,
    0x13198A2E,
    0x03707344,
    0xA4093822,
    0x299F31D0,
    0x082EFA98,
    0xEC4E6C89,
    0x452821E6,
    0x38D01377,
    0xBE5466CF,
    0x34E90C6C,
    0xC0AC29B7,
    0xC97C50DD,
    0x3F84D5B5,
    0xB5470917,
)

# Message permutations; rounds 10..13 reuse permutations 0..3.
SIGMA: Tuple[Tuple[int, ...], ...] = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3),
    (11, 8, 12, 0, 5, 2, 15, 13, 10, 14, 3, 6, 7, 1, 9, 4),
    (7, 9, 3, 1, 13, 12, 11, 14, 2, 6, 5, 10, 4, 0, 15, 8),
    (9, 0, 5, 7, 2, 4, 10, 15, 14, 1, 11, 12, 6, 8, 3, 13),
    (2, 12, 6, 10, 0, 11, 8, 3, 4, 13, 7, 5, 15, 14, 1, 9),
    (12, 5, 1, 15, 14, 13, 4, 10, 0, 7, 6, 3, 9, 2, 8, 11),
    (13, 11, 7, 14, 12, 1, 3, 9, 5, 0, 15, 4, 8, 6, 2, 10),
    (6, 15, 14, 9, 11, 3, 0, 8, 12, 2, 13, 7, 1, 4, 10, 5),
    (10, 2, 8, 4, 7, 6, 1, 5, 15, 11, 9, 14, 3, 12, 13, 0),
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3),
    (11, 8, 12, 0, 5, 2, 15, 13, 10, 14, 3, 6, 7, 1, 9, 4),
    (7, 9, 3, 1, 13, 12, 11, 14, 2, 6, 5, 10, 4, 0, 15, 8),
)


def _rotr(x: int, n: int) -> int:
    """Right-rotate a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return ((x >> n) | (x << (32 - n))) & MASK32


def split_counter(t: int) -> Tuple[int, int]:
    """Split a 64-bit bit count into its `(low, high)` 32-bit halves."""
    t &= MASK64
    return t & MASK32, t >> 32


def block_to_words(block: bytes) -> List[int]:
    """Parse a 64-byte block into 16 big-endian 32-bit words."""
    if len(block) != 64:
        raise ValueError(f"Expected 64-byte block, got {len(block)}")
    return [int.from_bytes(block[4 * i : 4 * (i + 1)], byteorder="big") for i in range(16)]


def mix(
    v: MutableSequence[int],
    m: Sequence[int],
    sigma: Sequence[int],
    a: int,
    b: int,
    c: int,
    d: int,
    i: int,
) -> None:
    """Apply the G function to positions `(a, b, c, d)` of `v` in place.

    `i` is the even offset into the round permutation `sigma`; the two
    injected words are `m[sigma[i]] ^ c[sigma[i+1]]` and
    `m[sigma[i+1]] ^ c[sigma[i]]`.
    """
    x = sigma[i]
    y = sigma[i + 1]

    va, vb, vc, vd = v[a], v[b], v[c], v[d]

    va = (va + vb + (m[x] ^ CONSTANTS[y])) & MASK32
    vd = _rotr(vd ^ va, 16)
    vc = (vc + vd) & MASK32
    vb = _rotr(vb ^ vc, 12)

    va = (va + vb + (m[y] ^ CONSTANTS[x])) & MASK32
    vd = _rotr(vd ^ va, 8)
    vc = (vc + vd) & MASK32
    vb = _rotr(vb ^ vc, 7)

    v[a], v[b], v[c], v[d] = va, vb, vc, vd


def blake_round(v: MutableSequence[int], m: Sequence[int], r: int) -> None:
    """Run round `r` (0-based) over the working vector `v` in place."""
    sigma = SIGMA[r]

    # Columns.
    mix(v, m, sigma, 0, 4, 8, 12, 0)
    mix(v, m, sigma, 1, 5, 9, 13, 2)
    mix(v, m, sigma, 2, 6, 10, 14, 4)
    mix(v, m, sigma, 3, 7, 11, 15, 6)

    # Diagonals.
    mix(v, m, sigma, 0, 5, 10, 15, 8)
    mix(v, m, sigma, 1, 6, 11, 12, 10)
    mix(v, m, sigma, 2, 7, 8, 13, 12)
    mix(v, m, sigma, 3, 4, 9, 14, 14)


def initial_vector(
    chain: Sequence[int],
    salt: Sequence[int],
    counter: Sequence[int],
    no_counter: bool,
) -> List[int]:
    """Build the 16-word working vector for one compression."""
    v = list(chain) + [0] * 8
    for i in range(4):
        v[8 + i] = (salt[i] ^ CONSTANTS[i]) & MASK32
    for i in range(4):
        v[12 + i] = CONSTANTS[4 + i]

    if not no_counter:
        t0, t1 = counter
        v[12] ^= t0 & MASK32
        v[13] ^= t0 & MASK32
        v[14] ^= t1 & MASK32
        v[15] ^= t1 & MASK32

    return v


def compress(
    chain: Sequence[int],
    salt: Sequence[int],
    counter: Sequence[int],
    no_counter: bool,
    block: bytes,
) -> Words8:
    """Compress one 64-byte block into the chain value.

    Parameters
    ----------
    chain : Sequence[int]
        The current 8-word chain value.
    salt : Sequence[int]
        The 4-word salt (all zero when unsalted).
    counter : Sequence[int]
        Bits hashed so far, as `(low, high)` 32-bit words.
    no_counter : bool
        When true the counter is not injected into `v[12..15]`. This is
        used for a final block that carries no message bits.
    block : bytes
        The 64-byte message block.

    Returns
    -------
    tuple[int, ...]
        The updated 8-word chain value.
    """
    if len(chain) != 8:
        raise ValueError(f"compress expects 8 chain words, got {len(chain)}")
    if len(salt) != 4:
        raise ValueError(f"compress expects 4 salt words, got {len(salt)}")
    if len(counter) != 2:
        raise ValueError(f"compress expects 2 counter words, got {len(counter)}")

    m = block_to_words(block)
    v = initial_vector(chain, salt, counter, no_counter)

    for r in range(ROUNDS):
        blake_round(v, m, r)

    h0, h1, h2, h3, h4, h5, h6, h7 = (
        (chain[i] ^ v[i] ^ v[i + 8] ^ salt[i & 0x3]) & MASK32 for i in range(8)
    )
    return h0, h1, h2, h3, h4, h5, h6, h7
