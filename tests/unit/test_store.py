"""Tests for the filesystem record store."""

from collections.abc import Callable
from pathlib import Path

import pytest

from kitab.errors import ValidationFailed
from kitab.models import MetadataRecord
from kitab.rdf import loads
from kitab.store import FileStore


@pytest.mark.unit
def test_write_creates_entry_named_by_hex(
    store: FileStore, make_record: Callable[..., MetadataRecord]
) -> None:
    """Entries are named by the lowercase hex of the digest."""
    record = make_record()

    entry = store.write(record)

    assert entry == store.path / ("2a" * 64)
    assert entry.is_file()
    assert loads(entry.read_text(encoding="utf-8")) == record


@pytest.mark.unit
def test_lookup_returns_serialized_text(
    store: FileStore, make_record: Callable[..., MetadataRecord]
) -> None:
    """lookup() returns the stored Turtle document."""
    record = make_record()
    store.write(record)

    text = store.lookup(record.fingerprint_hex())

    assert text is not None
    assert "URN:" + record.urn() in text


@pytest.mark.unit
def test_lookup_missing_returns_none(store: FileStore) -> None:
    """A key that was never written is absent, even before the store exists."""
    assert store.lookup("ab" * 64) is None
    assert store.read("ab" * 64) is None
    assert ("ab" * 64) not in store


@pytest.mark.unit
def test_last_writer_wins(store: FileStore, make_record: Callable[..., MetadataRecord]) -> None:
    """Writing an existing key replaces the previous record."""
    store.write(make_record(title="First"))
    store.write(make_record(title="Second"))

    assert store.read("2a" * 64).title == "Second"
    assert len(list(store.path.iterdir())) == 1


@pytest.mark.unit
def test_uppercase_key_is_normalized(
    store: FileStore, make_record: Callable[..., MetadataRecord]
) -> None:
    """Keys are case-insensitive on lookup."""
    store.write(make_record())

    assert store.read("2A" * 64) is not None
    assert ("2A" * 64) in store


@pytest.mark.unit
@pytest.mark.parametrize("key", ["", "xyz", "../etc/passwd", "sha512:00"])
def test_non_hex_key_rejected(store: FileStore, key: str) -> None:
    """Keys that are not hex cannot address the store."""
    with pytest.raises(ValueError):
        store.path_for(key)


@pytest.mark.unit
def test_write_without_digest_rejected(store: FileStore) -> None:
    """A record without a digest has no key."""
    with pytest.raises(ValidationFailed):
        store.write(MetadataRecord(title="T", author="A"))


@pytest.mark.unit
def test_non_string_membership(store: FileStore) -> None:
    """Only strings can be store keys."""
    assert 42 not in store


@pytest.mark.unit
def test_store_accepts_str_path(tmp_path: Path) -> None:
    """The store directory can be given as a string."""
    store = FileStore(str(tmp_path / "idx"))

    assert store.path == tmp_path / "idx"
    assert "idx" in repr(store)
