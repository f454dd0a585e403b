"""Apply stored metadata back onto files.

A file is hashed with each configured algorithm in turn; the first digest
found in the store supplies the record, which is then written to the file as
extended attributes.
"""

from collections.abc import Iterable, Iterator
from pathlib import Path

from kitab.attributes import AttributeWriter, record_attributes, write_attributes
from kitab.audit import EventSink, NullSink
from kitab.config import DEFAULT_DIGEST_KINDS
from kitab.digest import DigestKind, RecordDigest, hash_file
from kitab.models import MetadataRecord
from kitab.store import FileStore

__all__ = ["candidate_digests", "match_file", "apply_file"]


def candidate_digests(
    path: Path, kinds: Iterable[DigestKind] = DEFAULT_DIGEST_KINDS
) -> Iterator[RecordDigest]:
    """Hash a file once per algorithm, in the given order, as the digests are consumed."""
    for kind in kinds:
        yield hash_file(path, kind)


def match_file(
    path: str | Path,
    store: FileStore,
    kinds: Iterable[DigestKind] = DEFAULT_DIGEST_KINDS,
) -> MetadataRecord | None:
    """Return the stored record matching the file's content, or None."""
    path = Path(path)
    for digest in candidate_digests(path, kinds):
        record = store.read(digest.hex)
        if record is not None:
            return record
    return None


def apply_file(
    path: str | Path,
    store: FileStore,
    kinds: Iterable[DigestKind] = DEFAULT_DIGEST_KINDS,
    *,
    attribute_writer: AttributeWriter = write_attributes,
    sink: EventSink | None = None,
) -> MetadataRecord | None:
    """Write the stored metadata of a file onto it as attributes.

    Parameters
    ----------
    path : str | Path
        File to look up.
    store : FileStore
        Record store.
    kinds : Iterable[DigestKind], optional
        Algorithms to try, in order.
    attribute_writer : AttributeWriter, optional
        Extended attribute backend.
    sink : EventSink | None, optional
        Receiver of diagnostic events.

    Returns
    -------
    MetadataRecord | None
        The applied record, or None when the store has no match.
    """
    sink = sink or NullSink()
    path = Path(path)

    record = match_file(path, store, kinds)
    if record is None:
        sink.event("apply_miss", {}, "INFO", str(path))
        return None

    attribute_writer(path, record_attributes(record))
    sink.event("apply_hit", {"urn": record.urn(), "title": record.title}, "INFO", str(path))
    return record
