import pytest
import yaml

from blake256 import InvalidSaltLength
from vectors import (
    KnownAnswer,
    check_vectors,
    dump_vectors,
    load_vectors,
    parse_vectors,
)


def test_builtin_vectors_all_pass():
    vectors = load_vectors()
    assert len(vectors) == 15
    assert {v.bits for v in vectors} == {224, 256}
    assert check_vectors(vectors) == []


def test_builtin_vectors_include_salted_and_binary_messages():
    vectors = load_vectors()
    salted = [v for v in vectors if v.salt is not None]
    assert [v.salt for v in salted] == [b"1234567890123456", b"SALTsaltSaltSALT"]
    assert any(v.message == bytes(72) for v in vectors)


def test_check_vectors_reports_mismatch():
    bad = KnownAnswer(bits=256, message=b"BLAKE", digest="00" * 32)
    good = KnownAnswer(
        bits=224,
        message=b"",
        digest="7dc5313b1c04512a174bd6503b89607aecbee0903d40a8a569c94eed",
    )

    failures = check_vectors([good, bad])

    assert len(failures) == 1
    vector, actual = failures[0]
    assert vector is bad
    assert actual == "07663e00cf96fbc136cf7b1ee099c95346ba3920893d18cc8851f22ee2e36aa6"


def test_check_vectors_propagates_bad_salt():
    with pytest.raises(InvalidSaltLength):
        check_vectors([KnownAnswer(bits=256, message=b"", digest="", salt=b"short")])


def test_dump_then_load_from_file(tmp_path):
    vectors = load_vectors()
    path = tmp_path / "vectors.yaml"
    path.write_text(dump_vectors(vectors), encoding="utf-8")

    # Dumped documents always use the hex fields.
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert all("message_hex" in entry for entry in raw)

    assert load_vectors(str(path)) == vectors


def test_parse_vectors_accepts_uppercase_digest():
    text = """
- bits: 256
  message: "BLAKE"
  digest: "07663E00CF96FBC136CF7B1EE099C95346BA3920893D18CC8851F22EE2E36AA6"
"""
    vectors = parse_vectors(text)
    assert check_vectors(vectors) == []


def test_parse_empty_document():
    assert parse_vectors("") == []


@pytest.mark.parametrize(
    "text",
    [
        "bits: 256",
        "- just a string",
        "- {bits: 384, message: '', digest: '00'}",
        "- {bits: 256, digest: '00'}",
        "- {bits: 256, message: ''}",
        "- {bits: 256, message_hex: 'zz', digest: '00'}",
        "- [unclosed",
    ],
)
def test_parse_vectors_rejects_malformed_documents(text):
    with pytest.raises(ValueError):
        parse_vectors(text)


def test_cli_self_test_with_file(tmp_path, capsys):
    from blake256 import main

    path = tmp_path / "bad.yaml"
    path.write_text("- {bits: 256, message: 'BLAKE', digest: '00'}\n", encoding="utf-8")

    assert main(["--self-test", str(path)]) == 1
    captured = capsys.readouterr()
    assert "FAIL BLAKE-256 (5 bytes)" in captured.err
    assert "0/1 vectors passed" in captured.out
