"""Digest values and their canonical URN encoding.

A :class:`RecordDigest` is the identity of a file's content. It is used as the
store key (lowercase hex of the raw bytes) and as the join key between
metadata produced by independent tools (``"<scheme>:<hex>"`` URN form).

Supported schemes and byte lengths:

- ``sha512`` -> 64 bytes
- ``sha256`` -> 32 bytes
- ``md5`` -> 16 bytes
- ``bzz`` -> 32 bytes (Swarm content address, not computed locally)
"""

import hashlib
import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from kitab.errors import InvalidDigestLength, MalformedDigestUrn, UnsupportedDigestError

__all__ = [
    "DigestKind",
    "RecordDigest",
    "EMPTY_DIGEST",
    "DEFAULT_BLOCK_SIZE",
    "decode_urn",
    "encode_urn",
    "fingerprint_bytes",
    "hash_file",
]

_HEX_PATTERN = re.compile(r"[0-9a-fA-F]+")

DEFAULT_BLOCK_SIZE = 8192


class DigestKind(str, Enum):
    """Digest algorithms understood by kitab."""

    SHA512 = "sha512"
    SHA256 = "sha256"
    MD5 = "md5"
    BZZ = "bzz"

    @property
    def size(self) -> int:
        """Fixed output size of the algorithm in bytes."""
        return _DIGEST_SIZES[self]

    @classmethod
    def from_scheme(cls, scheme: str) -> "DigestKind":
        """Look up a kind by its URN scheme tag.

        Raises
        ------
        MalformedDigestUrn
            If the scheme is not one of the supported tags.
        """
        try:
            return cls(scheme.lower())
        except ValueError:
            raise MalformedDigestUrn(f"unknown digest scheme {scheme!r}") from None


_DIGEST_SIZES: dict[DigestKind, int] = {
    DigestKind.SHA512: 64,
    DigestKind.SHA256: 32,
    DigestKind.MD5: 16,
    DigestKind.BZZ: 32,
}

# Algorithms with a local streaming implementation
_HASHLIB_NAMES: dict[DigestKind, str] = {
    DigestKind.SHA512: "sha512",
    DigestKind.SHA256: "sha256",
    DigestKind.MD5: "md5",
}


@dataclass(frozen=True)
class RecordDigest:
    """Tagged digest value.

    ``kind=None`` with no bytes is the *empty* digest (not yet known).
    A kind with no bytes is an empty placeholder for that algorithm.
    Otherwise ``value`` is exactly ``kind.size`` bytes long.

    Attributes
    ----------
    kind : DigestKind | None
        Algorithm the bytes were produced with.
    value : bytes
        Raw digest bytes.
    """

    kind: DigestKind | None = None
    value: bytes = b""

    def __post_init__(self) -> None:
        if self.kind is None:
            if self.value:
                raise MalformedDigestUrn("digest bytes given without an algorithm")
            return
        if self.value and len(self.value) != self.kind.size:
            raise InvalidDigestLength(self.kind.value, self.kind.size, len(self.value))

    @classmethod
    def from_bytes(cls, data: bytes, kind: DigestKind = DigestKind.SHA512) -> "RecordDigest":
        """Build a digest, requiring ``data`` to be exactly ``kind.size`` bytes.

        Raises
        ------
        InvalidDigestLength
            If the length does not match (including zero length).
        """
        if len(data) != kind.size:
            raise InvalidDigestLength(kind.value, kind.size, len(data))
        return cls(kind, bytes(data))

    @classmethod
    def empty(cls, kind: DigestKind | None = None) -> "RecordDigest":
        """Return a placeholder digest, optionally tagged with an algorithm."""
        return cls(kind, b"")

    @property
    def is_empty(self) -> bool:
        return not self.value

    @property
    def hex(self) -> str:
        """Lowercase hex of the raw bytes, empty string for empty digests."""
        return self.value.hex()

    def urn(self) -> str:
        return encode_urn(self)

    def __str__(self) -> str:
        return encode_urn(self)


EMPTY_DIGEST = RecordDigest()


def decode_urn(text: str) -> RecordDigest:
    """Decode a ``"<scheme>:<hex>"`` digest URN.

    Parameters
    ----------
    text : str
        URN text. An empty string or a bare ``":"`` decodes to the empty
        digest.

    Returns
    -------
    RecordDigest
        Decoded digest.

    Raises
    ------
    MalformedDigestUrn
        On an unknown scheme, a known scheme with no digest part, invalid hex
        or a byte length that does not match the scheme.
    """
    text = text.strip()
    if not text:
        return EMPTY_DIGEST

    scheme, sep, digest_hex = text.partition(":")
    if sep and not scheme and not digest_hex:
        return EMPTY_DIGEST
    kind = DigestKind.from_scheme(scheme)

    if not sep or not digest_hex:
        raise MalformedDigestUrn(f"missing digest after scheme {kind.value!r}", source=text)

    if not _HEX_PATTERN.fullmatch(digest_hex) or len(digest_hex) % 2:
        raise MalformedDigestUrn("digest is not valid hex", source=text)
    value = bytes.fromhex(digest_hex)

    if len(value) != kind.size:
        raise MalformedDigestUrn(
            f"{kind.value} digest must be {kind.size} bytes, got {len(value)}",
            source=text,
        )

    return RecordDigest(kind, value)


def encode_urn(digest: RecordDigest) -> str:
    """Encode a digest as ``"<scheme>:<lowercase-hex>"``; empty digests give ``""``."""
    if digest.kind is None or digest.is_empty:
        return ""
    return f"{digest.kind.value}:{digest.hex}"


def fingerprint_bytes(digest: RecordDigest) -> bytes:
    """Return the raw digest bytes (empty for placeholders)."""
    return digest.value


def _block_size(path: Path) -> int:
    try:
        size = os.stat(path).st_blksize
    except (OSError, AttributeError):
        return DEFAULT_BLOCK_SIZE
    return size or DEFAULT_BLOCK_SIZE


def hash_file(path: str | Path, kind: DigestKind = DigestKind.SHA512) -> RecordDigest:
    """Hash a file's content with the requested algorithm.

    The file is read in chunks of the filesystem's preferred I/O block size,
    so memory use does not grow with file size.

    Parameters
    ----------
    path : str | Path
        File to hash.
    kind : DigestKind, optional
        Algorithm to use, by default ``sha512``.

    Returns
    -------
    RecordDigest
        Finalized digest.

    Raises
    ------
    UnsupportedDigestError
        If the algorithm has no local implementation (``bzz``).
    OSError
        If the file cannot be read.
    """
    name = _HASHLIB_NAMES.get(kind)
    if name is None:
        raise UnsupportedDigestError(f"cannot compute {kind.value} digests locally")

    path = Path(path)
    block_size = _block_size(path)
    h = hashlib.new(name)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(block_size), b""):
            h.update(chunk)

    return RecordDigest(kind, h.digest())
