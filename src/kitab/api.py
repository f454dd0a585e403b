"""Public API for importing and applying metadata over files and folders.

A failure while handling one file is recorded in that file's result and the
batch continues with the next file.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from kitab.apply import apply_file
from kitab.attributes import AttributeReader, AttributeWriter, read_attributes, write_attributes
from kitab.audit import EventSink, NullSink
from kitab.config import DEFAULT_DIGEST_KINDS
from kitab.digest import DigestKind, RecordDigest
from kitab.errors import AmbiguousExplicitDigest, KitabError
from kitab.importer import import_file
from kitab.store import FileStore

__all__ = [
    "FileImportResult",
    "ImportReport",
    "FileApplyResult",
    "ApplyReport",
    "iter_files",
    "import_path",
    "apply_path",
]


@dataclass(frozen=True)
class FileImportResult:
    """Immutable result of importing a single file.

    Attributes
    ----------
    filepath : str
        Full path to the file.
    strategy : str | None
        Strategy that produced the records, None on failure.
    urns : tuple[str, ...]
        Digest URNs of the stored records.
    error : str | None
        Error message if the import failed.
    error_type : str | None
        Exception class name if the import failed.
    """

    filepath: str
    strategy: str | None = None
    urns: tuple[str, ...] = ()
    error: str | None = None
    error_type: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ImportReport:
    """Summary of a batch import.

    Attributes
    ----------
    total_files : int
        Files processed.
    total_records : int
        Records written to the store.
    total_errors : int
        Files whose import failed.
    file_results : tuple[FileImportResult, ...]
        Per-file results.
    """

    total_files: int
    total_records: int
    total_errors: int
    file_results: tuple[FileImportResult, ...]


@dataclass(frozen=True)
class FileApplyResult:
    """Immutable result of applying stored metadata to a single file."""

    filepath: str
    urn: str | None = None
    error: str | None = None

    @property
    def matched(self) -> bool:
        return self.urn is not None


@dataclass(frozen=True)
class ApplyReport:
    """Summary of a batch apply."""

    total_files: int
    total_matched: int
    total_errors: int
    file_results: tuple[FileApplyResult, ...]


def iter_files(path: Path, recursive: bool = False) -> list[Path]:
    """List the files to process for a file or folder argument, sorted.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    """
    if path.is_file():
        return [path]
    if not path.is_dir():
        raise FileNotFoundError(f"File not found: {path}")

    candidates = path.rglob("*") if recursive else path.glob("*")
    return sorted(p for p in candidates if p.is_file())


def import_path(
    path: str | Path,
    store: FileStore,
    digests: Sequence[RecordDigest] = (),
    *,
    recursive: bool = False,
    sink: EventSink | None = None,
    attribute_reader: AttributeReader = read_attributes,
) -> ImportReport:
    """Import every file under ``path`` into the store.

    Parameters
    ----------
    path : str | Path
        File or folder.
    store : FileStore
        Destination store.
    digests : Sequence[RecordDigest], optional
        Explicit digests; only accepted for a single file.
    recursive : bool, optional
        Search subdirectories of a folder, by default False.
    sink : EventSink | None, optional
        Receiver of diagnostic events.
    attribute_reader : AttributeReader, optional
        Extended attribute backend.

    Returns
    -------
    ImportReport
        Per-file results and totals.

    Raises
    ------
    AmbiguousExplicitDigest
        If explicit digests are given for more than one file.
    FileNotFoundError
        If ``path`` does not exist.
    """
    sink = sink or NullSink()
    files = iter_files(Path(path), recursive)

    if digests and len(files) > 1:
        raise AmbiguousExplicitDigest(
            f"explicit digests cannot be applied to {len(files)} files under {path}"
        )

    results: list[FileImportResult] = []
    for file_path in files:
        try:
            result = import_file(
                file_path,
                digests,
                store=store,
                sink=sink,
                attribute_reader=attribute_reader,
            )
        except (KitabError, OSError) as e:
            sink.event(
                "import_failed",
                {"exception_class": type(e).__name__, "message": str(e)},
                "ERROR",
                str(file_path),
            )
            results.append(
                FileImportResult(str(file_path), error=str(e), error_type=type(e).__name__)
            )
            continue

        results.append(
            FileImportResult(
                str(file_path),
                strategy=result.strategy,
                urns=tuple(r.urn() for r in result.records),
            )
        )

    return ImportReport(
        total_files=len(results),
        total_records=sum(len(r.urns) for r in results),
        total_errors=sum(1 for r in results if not r.ok),
        file_results=tuple(results),
    )


def apply_path(
    path: str | Path,
    store: FileStore,
    kinds: Iterable[DigestKind] = DEFAULT_DIGEST_KINDS,
    *,
    recursive: bool = False,
    sink: EventSink | None = None,
    attribute_writer: AttributeWriter = write_attributes,
) -> ApplyReport:
    """Apply stored metadata to every file under ``path``.

    Returns
    -------
    ApplyReport
        Per-file results and totals.
    """
    sink = sink or NullSink()
    kinds = tuple(kinds)

    results: list[FileApplyResult] = []
    for file_path in iter_files(Path(path), recursive):
        try:
            record = apply_file(
                file_path, store, kinds, attribute_writer=attribute_writer, sink=sink
            )
        except (KitabError, OSError) as e:
            sink.event(
                "apply_failed",
                {"exception_class": type(e).__name__, "message": str(e)},
                "ERROR",
                str(file_path),
            )
            results.append(FileApplyResult(str(file_path), error=str(e)))
            continue

        results.append(FileApplyResult(str(file_path), urn=record.urn() if record else None))

    return ApplyReport(
        total_files=len(results),
        total_matched=sum(1 for r in results if r.matched),
        total_errors=sum(1 for r in results if r.error is not None),
        file_results=tuple(results),
    )
