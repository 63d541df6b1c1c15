"""Known-answer vectors for BLAKE-256 / BLAKE-224, stored as YAML.

Each vector is a mapping:

    bits: 256                 # or 224
    message: "BLAKE"          # UTF-8 text, or
    message_hex: "00"         # raw bytes as hex
    salt: "1234567890123456"  # optional, ASCII (or salt_hex)
    digest: "07663e00..."

The built-in set lives in `DEFAULT_VECTORS_YAML`; `load_vectors(path)` reads
the same format from a file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import yaml

from blake256 import new


DEFAULT_VECTORS_YAML = """\
- bits: 256
  message: ""
  digest: "716f6e863f744b9ac22c97ec7b76ea5f5908bc5b2f67c61510bfc4751384ea7a"
- bits: 256
  message: "BLAKE"
  digest: "07663e00cf96fbc136cf7b1ee099c95346ba3920893d18cc8851f22ee2e36aa6"
- bits: 256
  message: "The quick brown fox jumps over the lazy dog"
  digest: "7576698ee9cad30173080678e5965916adbb11cb5245d386bf1ffda1cb26c9d7"
- bits: 256
  message: "'BLAKE wins SHA-3! Hooray!!!' (I have time machine)"
  digest: "18a393b4e62b1887a2edf79a5c5a5464daf5bbb976f4007bea16a73e4c1e198e"
- bits: 256
  message: "Go"
  digest: "fd7282ecc105ef201bb94663fc413db1b7696414682090015f17e309b835f1c2"
- bits: 256
  message: "HELP! I'm trapped in hash!"
  digest: "1e75db2a709081f853c2229b65fd1558540aa5e7bd17b04b9a4b31989effa711"
- bits: 256
  message_hex: "00"
  digest: "0ce8d4ef4dd7cd8d62dfded9d4edb0a774ae6a41929a74da23109e8f11139c87"
- bits: 256
  message_hex: "000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000"
  digest: "d419bad32d504fb7d44d460c42c5593fe544fa4c135dec31e21bd9abdcc22d41"
- bits: 224
  message: ""
  digest: "7dc5313b1c04512a174bd6503b89607aecbee0903d40a8a569c94eed"
- bits: 224
  message: "BLAKE"
  digest: "cfb6848add73e1cb47994c4765df33b8f973702705a30a71fe4747a3"
- bits: 224
  message: "The quick brown fox jumps over the lazy dog"
  digest: "c8e92d7088ef87c1530aee2ad44dc720cc10589cc2ec58f95a15e51b"
- bits: 224
  message: "Go"
  digest: "dde9e442003c24495db607b17e07ec1f67396cc1907642a09a96594e"
- bits: 224
  message: "Buffalo buffalo Buffalo buffalo buffalo buffalo Buffalo buffalo"
  digest: "9f655b0a92d4155754fa35e055ce7c5e18eb56347081ea1e5158e751"
- bits: 256
  message: ""
  salt: "1234567890123456"
  digest: "561d6d0cfa3d31d5eedaf2d575f3942539b03522befc2a1196ba0e51af8992a8"
- bits: 256
  message: "It's so salty out there!"
  salt: "SALTsaltSaltSALT"
  digest: "88cc11889bbbee42095337fe2153c591971f94fbf8fe540d3c7e9f1700ab2d0c"
"""


@dataclass(frozen=True)
class KnownAnswer:
    bits: int
    message: bytes
    digest: str
    salt: Optional[bytes] = None

    def label(self) -> str:
        salted = ", salted" if self.salt is not None else ""
        return f"BLAKE-{self.bits} ({len(self.message)} bytes{salted})"

    def to_dict(self) -> dict:
        entry = {"bits": self.bits, "message_hex": self.message.hex()}
        if self.salt is not None:
            entry["salt_hex"] = self.salt.hex()
        entry["digest"] = self.digest
        return entry


def _parse_entry(idx: int, entry) -> KnownAnswer:
    """Convert one YAML mapping into a `KnownAnswer`."""
    if not isinstance(entry, dict):
        raise ValueError(f"vector {idx}: expected a mapping, got {type(entry).__name__}")

    bits = entry.get("bits", 256)
    if bits not in (224, 256):
        raise ValueError(f"vector {idx}: bits must be 224 or 256, got {bits!r}")

    if "message" in entry:
        message = str(entry["message"]).encode("utf-8")
    elif "message_hex" in entry:
        message = bytes.fromhex(str(entry["message_hex"]))
    else:
        raise ValueError(f"vector {idx}: needs 'message' or 'message_hex'")

    salt = None
    if "salt" in entry:
        salt = str(entry["salt"]).encode("ascii")
    elif "salt_hex" in entry:
        salt = bytes.fromhex(str(entry["salt_hex"]))

    digest = entry.get("digest")
    if not isinstance(digest, str):
        raise ValueError(f"vector {idx}: 'digest' must be a hex string")

    return KnownAnswer(bits=bits, message=message, digest=digest.lower(), salt=salt)


def parse_vectors(text: str) -> List[KnownAnswer]:
    """Parse a YAML document holding a list of vectors."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"invalid vector document: {e}") from e

    if document is None:
        return []
    if not isinstance(document, list):
        raise ValueError("vector document must be a list of mappings")

    return [_parse_entry(idx, entry) for idx, entry in enumerate(document)]


def load_vectors(path: Optional[str] = None) -> List[KnownAnswer]:
    """Load vectors from `path`, or the built-in set when `path` is None."""
    if path is None:
        return parse_vectors(DEFAULT_VECTORS_YAML)
    with open(path, "r", encoding="utf-8") as f:
        return parse_vectors(f.read())


def dump_vectors(vectors: List[KnownAnswer]) -> str:
    """Serialize vectors to YAML using hex fields."""
    return yaml.dump(
        [v.to_dict() for v in vectors], default_flow_style=False, sort_keys=False
    )


def check_vectors(vectors: List[KnownAnswer]) -> List[Tuple[KnownAnswer, str]]:
    """Hash every vector and return `(vector, actual_hex)` for each mismatch."""
    failures: List[Tuple[KnownAnswer, str]] = []
    for vector in vectors:
        h = new(vector.bits, salt=vector.salt)
        h.update(vector.message)
        actual = h.hexdigest()
        if actual != vector.digest:
            failures.append((vector, actual))
    return failures
