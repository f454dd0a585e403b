"""Import reconciliation for a single file.

Strategies are tried in order (extended attributes, serialized records,
bibliography); the first one that produces records wins. All records are
validated before any of them reaches the store, so a file is either imported
completely or not at all.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from kitab.attributes import AttributeReader, read_attributes
from kitab.audit import EventSink, NullSink
from kitab.digest import RecordDigest
from kitab.errors import DigestConflict, UnparseableSource, ValidationFailed
from kitab.importer.strategies import (
    STRATEGIES,
    ExtractionContext,
    MimeGuesser,
    Strategy,
    guess_media_type,
)
from kitab.models import MetadataRecord
from kitab.store import FileStore

__all__ = ["ImportResult", "extract_records", "import_file"]


@dataclass(frozen=True)
class ImportResult:
    """Outcome of importing one file.

    Attributes
    ----------
    path : Path
        Imported file.
    strategy : str
        Name of the strategy that produced the records.
    records : tuple[MetadataRecord, ...]
        Records handed to the store.
    written : tuple[Path, ...]
        Store entries written, one per record.
    """

    path: Path
    strategy: str
    records: tuple[MetadataRecord, ...]
    written: tuple[Path, ...] = ()


def _check_records(path: Path, records: list[MetadataRecord]) -> None:
    seen: set[str] = set()
    for record in records:
        if not record.validate():
            raise ValidationFailed(f"{path}: record {record.urn() or '?'} is missing title or author")
        key = record.fingerprint_hex()
        if key in seen:
            raise DigestConflict(f"{path}: more than one record for digest {record.urn()}")
        seen.add(key)


def extract_records(
    ctx: ExtractionContext,
    sink: EventSink,
    strategies: Iterable[tuple[str, Strategy]] = STRATEGIES,
) -> tuple[str, list[MetadataRecord]]:
    """Run strategies in order and return the first successful result.

    Returns
    -------
    tuple[str, list[MetadataRecord]]
        Strategy name and its records.

    Raises
    ------
    UnparseableSource
        If no strategy applies to the file.
    """
    path = str(ctx.path)
    for name, strategy in strategies:
        try:
            records = strategy(ctx)
        except UnparseableSource as e:
            sink.event("strategy_failed", {"strategy": name, "detail": e.detail}, "DEBUG", path)
            continue

        if records is None:
            sink.event("strategy_skipped", {"strategy": name}, "DEBUG", path)
            continue

        sink.event("strategy_matched", {"strategy": name, "records": len(records)}, "INFO", path)
        return name, records

    raise UnparseableSource("no import strategy applies", source=path)


def import_file(
    path: str | Path,
    digests: Iterable[RecordDigest] = (),
    *,
    store: FileStore,
    sink: EventSink | None = None,
    attribute_reader: AttributeReader = read_attributes,
    mime_guesser: MimeGuesser = guess_media_type,
) -> ImportResult:
    """Import the metadata found in one file into the store.

    Parameters
    ----------
    path : str | Path
        File to import.
    digests : Iterable[RecordDigest], optional
        Operator-supplied digests for bibliography imports.
    store : FileStore
        Destination store.
    sink : EventSink | None, optional
        Receiver of diagnostic events.
    attribute_reader : AttributeReader, optional
        Extended attribute backend.
    mime_guesser : MimeGuesser, optional
        Media type fallback for attribute imports.

    Returns
    -------
    ImportResult
        Strategy used, records and written store entries.

    Raises
    ------
    UnparseableSource
        If no strategy applies.
    ValidationFailed
        If any produced record lacks title or author; nothing is stored.
    DigestConflict
        If the file yields contradicting or duplicate digests.
    NoDigestAvailable, AmbiguousExplicitDigest, MalformedDigestUrn
        From the bibliography strategy.
    """
    sink = sink or NullSink()
    ctx = ExtractionContext(
        path=Path(path),
        digests=tuple(digests),
        attribute_reader=attribute_reader,
        mime_guesser=mime_guesser,
    )

    strategy, records = extract_records(ctx, sink)
    _check_records(ctx.path, records)

    written = []
    for record in records:
        entry = store.write(record)
        sink.event(
            "record_written",
            {"urn": record.urn(), "title": record.title, "entry": str(entry)},
            "INFO",
            str(ctx.path),
        )
        written.append(entry)

    return ImportResult(ctx.path, strategy, tuple(records), tuple(written))
