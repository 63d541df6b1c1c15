"""Incremental BLAKE-256 / BLAKE-224 built on `compress` from `compress.py`.

This module provides:

- `Blake256`: a hashlib-style object (`update`, `digest`, `hexdigest`,
  `copy`, `reset`) for both output widths, with an optional 16-byte salt.
- `blake256(data)` / `blake224(data)`: one-shot helpers.
- CLI usage: `python blake256.py "message"` prints the hex digest of the
  UTF-8 encoding of `"message"`; `python blake256.py -f path/to/file` hashes
  a file.

Padding appends a 1 bit and zero bits up to 447 bits modulo 512, then the
width marker bit (1 for BLAKE-256, 0 for BLAKE-224), then the 64-bit
big-endian message length in bits. A final block that holds no message bits
is compressed with a zero counter.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Tuple

from compress import IV224, IV256, MASK64, Words8, compress, split_counter


BLOCK_SIZE = 64
SALT_SIZE = 16

# Bytes of the final block before the marker byte and the 8-byte length.
_SIZE_WITHOUT_LENGTH = 55

_PADDING = b"\x80" + b"\x00" * (BLOCK_SIZE - 1)

_CHUNK_SIZE = 1 << 16


class InvalidSaltLength(ValueError):
    """Raised when a salt is not exactly 16 bytes long."""

    def __init__(self, length: int):
        super().__init__(f"salt must be {SALT_SIZE} bytes, got {length}")
        self.length = length


def _salt_words(salt: Optional[bytes]) -> Tuple[int, int, int, int]:
    if salt is None:
        return 0, 0, 0, 0
    if not isinstance(salt, (bytes, bytearray, memoryview)):
        raise TypeError(f"salt must be bytes, not {type(salt).__name__}")
    salt = memoryview(salt).cast("B").tobytes()
    if len(salt) != SALT_SIZE:
        raise InvalidSaltLength(len(salt))
    s0, s1, s2, s3 = (
        int.from_bytes(salt[4 * i : 4 * (i + 1)], byteorder="big") for i in range(4)
    )
    return s0, s1, s2, s3


class Blake256:
    """Streaming BLAKE-256 (or BLAKE-224 with ``digest_bits=224``).

    ``digest()`` works on a private copy, so more data may be fed after
    taking a digest. ``reset()`` keeps the salt given at construction.
    Instances are not thread-safe.
    """

    block_size = BLOCK_SIZE

    def __init__(
        self,
        data: bytes = b"",
        digest_bits: int = 256,
        salt: Optional[bytes] = None,
    ):
        if digest_bits not in (224, 256):
            raise ValueError(f"digest_bits must be 224 or 256, got {digest_bits}")

        self.digest_bits = digest_bits
        self.digest_size = digest_bits // 8
        self.name = f"blake{digest_bits}"

        self._salt = _salt_words(salt)
        self.reset()

        if data:
            self.update(data)

    def reset(self) -> None:
        """Restart hashing from the IV; the salt is kept."""
        self._chain: Words8 = IV256 if self.digest_bits == 256 else IV224
        # Bits compressed so far, modulo 2**64.
        self._t = 0
        self._buffer = bytearray()
        self._no_counter = False

    @property
    def salt(self) -> bytes:
        """The 16-byte salt (all zero when none was given)."""
        return b"".join(word.to_bytes(4, byteorder="big") for word in self._salt)

    def size(self) -> int:
        return self.digest_size

    def blocksize(self) -> int:
        return self.block_size

    def copy(self) -> "Blake256":
        """Return an independent copy of the current hashing state."""
        other = self.__class__.__new__(self.__class__)
        other.digest_bits = self.digest_bits
        other.digest_size = self.digest_size
        other.name = self.name
        other._salt = self._salt
        other._chain = self._chain
        other._t = self._t
        other._buffer = bytearray(self._buffer)
        other._no_counter = self._no_counter
        return other

    def _compress(self, block: bytes) -> None:
        self._chain = compress(
            self._chain, self._salt, split_counter(self._t), self._no_counter, block
        )

    def _advance(self, bits: int) -> None:
        self._t = (self._t + bits) & MASK64

    def update(self, data: bytes) -> None:
        """Feed `data` into the hash.

        Full blocks are compressed immediately; a trailing partial block is
        kept until the next call.
        """
        if isinstance(data, str):
            raise TypeError("Strings must be encoded before hashing")

        data = memoryview(data).cast("B")
        datalen = len(data)
        if not datalen:
            return

        offset = 0
        left = len(self._buffer)
        fill = BLOCK_SIZE - left

        # Complete and compress a pending partial block first.
        if left and datalen >= fill:
            self._buffer += data[:fill]
            self._advance(BLOCK_SIZE * 8)
            self._compress(bytes(self._buffer))
            self._buffer.clear()
            offset = fill

        while datalen - offset >= BLOCK_SIZE:
            self._advance(BLOCK_SIZE * 8)
            self._compress(bytes(data[offset : offset + BLOCK_SIZE]))
            offset += BLOCK_SIZE

        if offset < datalen:
            self._buffer += data[offset:]

    write = update

    def _finalize(self) -> bytes:
        """Pad, compress the final block(s) and serialize the chain value.

        The counter is wound back by the size of every padding write so that
        the block holding the last message bits is compressed with the true
        message length.
        """
        buffered = len(self._buffer)
        total_bits = (self._t + (buffered << 3)) & MASK64
        msglen = total_bits.to_bytes(8, byteorder="big")

        one_marker = b"\x81" if self.digest_bits == 256 else b"\x80"
        marker = b"\x01" if self.digest_bits == 256 else b"\x00"

        if buffered == _SIZE_WITHOUT_LENGTH:
            # The 1 bit and the marker bit share a single byte.
            self._advance(-8)
            self.update(one_marker)
        else:
            if buffered < _SIZE_WITHOUT_LENGTH:
                if buffered == 0:
                    self._no_counter = True
                self._advance(-((_SIZE_WITHOUT_LENGTH - buffered) << 3))
                self.update(_PADDING[: _SIZE_WITHOUT_LENGTH - buffered])
            else:
                # No room for the length; pad out this block and use another.
                self._advance(-((BLOCK_SIZE - buffered) << 3))
                self.update(_PADDING[: BLOCK_SIZE - buffered])
                self._advance(-(_SIZE_WITHOUT_LENGTH << 3))
                self.update(_PADDING[1 : _SIZE_WITHOUT_LENGTH + 1])
                self._no_counter = True

            self.update(marker)
            self._advance(-8)

        self._advance(-64)
        self.update(msglen)

        out = b"".join(word.to_bytes(4, byteorder="big") for word in self._chain)
        return out[: self.digest_size]

    def digest(self) -> bytes:
        """Return the digest of the data fed so far without consuming it."""
        return self.copy()._finalize()

    sum = digest

    def hexdigest(self) -> str:
        return self.digest().hex()

    def __repr__(self) -> str:
        return f"<{self.name} HASH object @ {hex(id(self))}>"


def new(
    digest_bits: int = 256,
    salt: Optional[bytes] = None,
    data: bytes = b"",
) -> Blake256:
    """Create a new hashing object for BLAKE-256 or BLAKE-224."""
    return Blake256(data, digest_bits=digest_bits, salt=salt)


def new_salted(digest_bits: int, salt: bytes) -> Blake256:
    """Create a salted hashing object; `salt` must be exactly 16 bytes."""
    return Blake256(digest_bits=digest_bits, salt=salt)


def blake256(data: bytes, salt: Optional[bytes] = None) -> bytes:
    """Compute the BLAKE-256 digest of `data`."""
    return Blake256(data, digest_bits=256, salt=salt).digest()


def blake224(data: bytes, salt: Optional[bytes] = None) -> bytes:
    """Compute the BLAKE-224 digest of `data`."""
    return Blake256(data, digest_bits=224, salt=salt).digest()


def _salt_from_args(args: argparse.Namespace) -> Optional[bytes]:
    if args.salt is not None:
        return args.salt.encode("ascii")
    if args.salt_hex is not None:
        return bytes.fromhex(args.salt_hex)
    return None


def _hash_file(
    h: Blake256, filename: str, progress: Optional[int]
) -> None:
    """Stream `filename` into `h`, printing running digests if requested."""
    hashed = 0
    next_report = progress
    with open(filename, "rb") as f:
        while True:
            chunk = f.read(_CHUNK_SIZE if progress is None else min(_CHUNK_SIZE, progress))
            if not chunk:
                break
            h.update(chunk)
            hashed += len(chunk)
            if next_report is not None and hashed >= next_report:
                print(f"{hashed:>12} {h.hexdigest()}")
                next_report = hashed + progress


def _self_test(path: Optional[str]) -> int:
    from vectors import check_vectors, load_vectors

    vectors = load_vectors(path)
    failures = check_vectors(vectors)
    for vector, actual in failures:
        sys.stderr.write(
            f"FAIL {vector.label()}: expected {vector.digest}, got {actual}\n"
        )
    print(f"{len(vectors) - len(failures)}/{len(vectors)} vectors passed")
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Usage:
        python blake256.py "message"
        python blake256.py -f path/to/file
        python blake256.py --bits 224 --salt 1234567890123456 "message"
        python blake256.py --self-test

    Without `-f`, the single argument is interpreted as a UTF-8 string and
    hashed. The resulting hex digest is printed to stdout.
    """
    parser = argparse.ArgumentParser(
        prog="blake256",
        description="Compute BLAKE-256 / BLAKE-224 digests",
    )
    parser.add_argument("message", nargs="?", help="UTF-8 message to hash")
    parser.add_argument("-f", "--file", help="Hash the raw bytes of this file")
    parser.add_argument(
        "--bits",
        type=int,
        choices=[224, 256],
        default=256,
        help="Digest width in bits (default: 256)",
    )
    salt_group = parser.add_mutually_exclusive_group()
    salt_group.add_argument("--salt", help="16-character ASCII salt")
    salt_group.add_argument("--salt-hex", help="16-byte salt as 32 hex digits")
    parser.add_argument(
        "--progress",
        type=int,
        metavar="N",
        help="With -f, print the running digest every N bytes",
    )
    parser.add_argument(
        "--self-test",
        nargs="?",
        const="",
        metavar="PATH",
        help="Check known-answer vectors (built-in, or from a YAML file)",
    )
    args = parser.parse_args(argv)

    if args.self_test is not None:
        try:
            return _self_test(args.self_test or None)
        except (OSError, ValueError) as e:
            sys.stderr.write(f"Error loading vectors: {e}\n")
            return 1

    if (args.message is None) == (args.file is None):
        parser.print_usage(sys.stderr)
        sys.stderr.write("Give either a message or -f path/to/file\n")
        return 1

    if args.progress is not None and (args.file is None or args.progress <= 0):
        sys.stderr.write("--progress needs -f and a positive byte count\n")
        return 1

    try:
        h = new(args.bits, salt=_salt_from_args(args))
    except ValueError as e:
        # Also covers InvalidSaltLength and malformed --salt-hex.
        sys.stderr.write(f"Error: {e}\n")
        return 1

    if args.file is not None:
        try:
            _hash_file(h, args.file, args.progress)
        except OSError as e:
            sys.stderr.write(f"Error reading file '{args.file}': {e}\n")
            return 1
    else:
        h.update(args.message.encode("utf-8"))

    print(h.hexdigest())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
