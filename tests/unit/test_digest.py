"""Tests for digest values, URN encoding and file hashing."""

from pathlib import Path

import pytest

from kitab.digest import (
    EMPTY_DIGEST,
    DigestKind,
    RecordDigest,
    decode_urn,
    encode_urn,
    fingerprint_bytes,
    hash_file,
)
from kitab.errors import InvalidDigestLength, MalformedDigestUrn, UnsupportedDigestError

SHA512_EMPTY = (
    "cf83e1357eefb8bdf1542850d66d8007d620e4050b5715dc83f4a921d36ce9ce"
    "47d0d13c5d85f2b0ff8318d2877eec2f63b931bd47417a81a538327af927da3e"
)
SHA256_EMPTY = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
MD5_EMPTY = "d41d8cd98f00b204e9800998ecf8427e"

DEADBEEF = "deadbeef"


# ---------------------------------------------------------------------------
# decode_urn
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("urn", "kind"),
    [
        ("sha512:" + DEADBEEF * 16, DigestKind.SHA512),
        ("sha256:" + DEADBEEF * 8, DigestKind.SHA256),
        ("md5:" + DEADBEEF * 4, DigestKind.MD5),
        ("bzz:" + DEADBEEF * 8, DigestKind.BZZ),
    ],
)
def test_decode_known_schemes(urn: str, kind: DigestKind) -> None:
    """Each supported scheme decodes to its kind with the right byte length."""
    digest = decode_urn(urn)

    assert digest.kind == kind
    assert len(digest.value) == kind.size
    assert encode_urn(digest) == urn


@pytest.mark.unit
@pytest.mark.parametrize("kind", list(DigestKind), ids=lambda k: k.value)
def test_urn_round_trip(kind: DigestKind) -> None:
    """decode_urn(encode_urn(d)) == d for every algorithm."""
    digest = RecordDigest.from_bytes(bytes(range(kind.size)), kind)

    assert decode_urn(encode_urn(digest)) == digest


@pytest.mark.unit
def test_decode_empty_string_is_empty_digest() -> None:
    """An empty URN means no digest."""
    assert decode_urn("") == EMPTY_DIGEST
    assert decode_urn("").is_empty


@pytest.mark.unit
def test_decode_bare_separator_is_empty_digest() -> None:
    """An empty scheme with an empty digest part also means no digest."""
    assert decode_urn(":") == EMPTY_DIGEST
    assert decode_urn(" :\n").is_empty


@pytest.mark.unit
def test_decode_uppercase_hex_normalizes() -> None:
    """Hex is case-insensitive on input and lowercase on output."""
    digest = decode_urn("SHA256:" + DEADBEEF.upper() * 8)

    assert digest.kind == DigestKind.SHA256
    assert encode_urn(digest) == "sha256:" + DEADBEEF * 8


@pytest.mark.unit
@pytest.mark.parametrize(
    "urn",
    [
        "sha512:" + DEADBEEF,
        "sha256:" + DEADBEEF * 16,
        "md5:" + DEADBEEF * 8,
        "bzz:" + DEADBEEF,
    ],
)
def test_decode_wrong_length_rejected(urn: str) -> None:
    """A hex digest of the wrong length for its scheme is malformed."""
    with pytest.raises(MalformedDigestUrn, match="bytes"):
        decode_urn(urn)


@pytest.mark.unit
def test_decode_unknown_scheme_rejected() -> None:
    """Unknown schemes are reported as such."""
    with pytest.raises(MalformedDigestUrn, match="unknown digest scheme"):
        decode_urn("foo:" + DEADBEEF * 8)


@pytest.mark.unit
@pytest.mark.parametrize("urn", ["sha512", "sha512:"])
def test_decode_known_scheme_without_digest_rejected(urn: str) -> None:
    """A known scheme with nothing after it is malformed, not unknown."""
    with pytest.raises(MalformedDigestUrn, match="missing digest"):
        decode_urn(urn)


@pytest.mark.unit
def test_decode_bad_hex_rejected() -> None:
    """Non-hex characters raise MalformedDigestUrn instead of crashing."""
    with pytest.raises(MalformedDigestUrn, match="hex"):
        decode_urn("sha256:" + "zz" * 32)


@pytest.mark.unit
@pytest.mark.parametrize(
    "digest_hex",
    [
        " ".join(["de", "ad", "be", "ef"] * 4),
        DEADBEEF * 3 + "deadbe ef",
        DEADBEEF * 4 + "0",
    ],
)
def test_decode_non_contiguous_hex_rejected(digest_hex: str) -> None:
    """Whitespace inside the digest or an odd digit count is not hex."""
    with pytest.raises(MalformedDigestUrn, match="hex"):
        decode_urn("md5:" + digest_hex)


@pytest.mark.unit
def test_malformed_urn_is_value_error() -> None:
    """MalformedDigestUrn can be caught as a ValueError."""
    with pytest.raises(ValueError):
        decode_urn("md5:00")


# ---------------------------------------------------------------------------
# RecordDigest
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_from_bytes_defaults_to_sha512() -> None:
    """The default algorithm for raw bytes is sha512."""
    digest = RecordDigest.from_bytes(b"\x2a" * 64)

    assert digest.kind == DigestKind.SHA512
    assert digest.hex == "2a" * 64


@pytest.mark.unit
@pytest.mark.parametrize("size", [0, 16, 32, 65])
def test_from_bytes_rejects_wrong_length(size: int) -> None:
    """Lengths other than 64 are rejected for sha512."""
    with pytest.raises(InvalidDigestLength) as exc_info:
        RecordDigest.from_bytes(b"\x00" * size)

    assert exc_info.value.expected == 64
    assert exc_info.value.actual == size


@pytest.mark.unit
def test_constructor_validates_length() -> None:
    """Direct construction validates the length too."""
    with pytest.raises(InvalidDigestLength):
        RecordDigest(DigestKind.MD5, b"\x00" * 32)


@pytest.mark.unit
def test_empty_with_algorithm() -> None:
    """A kind without bytes is an empty placeholder that encodes to ''."""
    digest = RecordDigest.empty(DigestKind.SHA256)

    assert digest.is_empty
    assert digest.kind == DigestKind.SHA256
    assert encode_urn(digest) == ""
    assert fingerprint_bytes(digest) == b""
    assert digest != EMPTY_DIGEST


@pytest.mark.unit
def test_fingerprint_bytes_returns_raw_value() -> None:
    """fingerprint_bytes exposes the raw digest."""
    digest = RecordDigest.from_bytes(b"\x01" * 16, DigestKind.MD5)

    assert fingerprint_bytes(digest) == b"\x01" * 16
    assert fingerprint_bytes(EMPTY_DIGEST) == b""


@pytest.mark.unit
def test_digests_are_hashable_values() -> None:
    """Equal digests compare and hash equal."""
    a = RecordDigest.from_bytes(b"\x01" * 32, DigestKind.SHA256)
    b = RecordDigest.from_bytes(b"\x01" * 32, DigestKind.SHA256)
    c = RecordDigest.from_bytes(b"\x01" * 32, DigestKind.BZZ)

    assert a == b
    assert len({a, b, c}) == 2


# ---------------------------------------------------------------------------
# hash_file
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (DigestKind.SHA512, SHA512_EMPTY),
        (DigestKind.SHA256, SHA256_EMPTY),
        (DigestKind.MD5, MD5_EMPTY),
    ],
)
def test_hash_empty_file(tmp_path: Path, kind: DigestKind, expected: str) -> None:
    """Hashing zero bytes yields the well-known empty digest."""
    path = tmp_path / "empty"
    path.write_bytes(b"")

    digest = hash_file(path, kind)

    assert digest.kind == kind
    assert digest.hex == expected


@pytest.mark.unit
def test_hash_file_deterministic(tmp_path: Path) -> None:
    """Hashing the same content twice yields the same digest."""
    path = tmp_path / "data.bin"
    path.write_bytes(b"kitab" * 10_000)

    assert hash_file(path) == hash_file(path)


@pytest.mark.unit
def test_hash_file_spans_many_blocks(tmp_path: Path) -> None:
    """Content larger than one block hashes like the whole content."""
    import hashlib

    content = bytes(range(256)) * 1024
    path = tmp_path / "large.bin"
    path.write_bytes(content)

    assert hash_file(path, DigestKind.SHA256).hex == hashlib.sha256(content).hexdigest()


@pytest.mark.unit
def test_hash_file_bzz_unsupported(tmp_path: Path) -> None:
    """Swarm hashes are not computed locally."""
    path = tmp_path / "x"
    path.write_bytes(b"x")

    with pytest.raises(UnsupportedDigestError):
        hash_file(path, DigestKind.BZZ)


@pytest.mark.unit
def test_hash_file_missing(tmp_path: Path) -> None:
    """A missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        hash_file(tmp_path / "missing")
