"""Metadata extraction strategies.

Each strategy looks at one file and either

- returns the records it extracted,
- returns None when it does not apply to the file, or
- raises :class:`~kitab.errors.UnparseableSource` when the file is not in the
  format it reads.

In both of the latter cases the reconciler moves on to the next strategy. Any
other exception is fatal for the file.
"""

import mimetypes
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from kitab import rdf
from kitab.attributes import (
    ATTR_CREATOR,
    ATTR_LANGUAGE,
    ATTR_MEDIA_TYPE,
    ATTR_SUBJECT,
    ATTR_TITLE,
    ATTR_TYPE,
    REQUIRED_KEYS,
    AttributeReader,
    read_attributes,
)
from kitab.digest import DigestKind, RecordDigest, decode_urn, hash_file
from kitab.errors import AmbiguousExplicitDigest, NoDigestAvailable, UnparseableSource
from kitab.models import MetadataRecord, WorkType
from kitab.parse import BibEntry, decode_text, looks_like_bibtex, parse_bibtex

__all__ = [
    "ExtractionContext",
    "Strategy",
    "STRATEGIES",
    "extract_attributes",
    "extract_serialized",
    "extract_bibliography",
    "entry_digests",
    "entry_record",
    "guess_media_type",
]

MimeGuesser = Callable[[Path], str | None]

_NOTE_DIGEST_RE = re.compile(r"\b(?:sha512|sha256|md5|bzz):[0-9A-Za-z]*", re.IGNORECASE)


def guess_media_type(path: Path) -> str | None:
    """Guess a MIME type from the file name."""
    media_type, _ = mimetypes.guess_type(path.name)
    return media_type


@dataclass(frozen=True)
class ExtractionContext:
    """Inputs shared by all strategies for one file.

    Attributes
    ----------
    path : Path
        File being imported.
    digests : tuple[RecordDigest, ...]
        Digests supplied by the operator.
    attribute_reader : AttributeReader
        Reads the file's metadata attributes.
    mime_guesser : MimeGuesser
        Fallback media type lookup.
    """

    path: Path
    digests: tuple[RecordDigest, ...] = ()
    attribute_reader: AttributeReader = field(default=read_attributes)
    mime_guesser: MimeGuesser = field(default=guess_media_type)

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


Strategy = Callable[[ExtractionContext], list[MetadataRecord] | None]


# ---------------------------------------------------------------------------
# Extended attributes
# ---------------------------------------------------------------------------


def extract_attributes(ctx: ExtractionContext) -> list[MetadataRecord] | None:
    """Build one record from the file's ``user.dcterms:*`` attributes.

    Not applicable when neither title nor creator is set. The digest is the
    sha512 of the file content; operator-supplied digests are not used.
    """
    attrs = ctx.attribute_reader(ctx.path)
    if not any(key in attrs for key in REQUIRED_KEYS):
        return None

    record = MetadataRecord.empty()
    record.set_title(attrs.get(ATTR_TITLE, ""))
    record.set_author(attrs.get(ATTR_CREATOR, ""))
    record.set_work_type(attrs.get(ATTR_TYPE, WorkType.UNKNOWN))
    if ATTR_SUBJECT in attrs:
        record.set_subject(attrs[ATTR_SUBJECT])
    if ATTR_LANGUAGE in attrs:
        record.set_language(attrs[ATTR_LANGUAGE])

    media_type = attrs.get(ATTR_MEDIA_TYPE) or ctx.mime_guesser(ctx.path)
    if media_type:
        record.set_media_type(media_type)

    record.set_local_name(ctx.path.name)
    record.set_digest(hash_file(ctx.path, DigestKind.SHA512))
    return [record]


# ---------------------------------------------------------------------------
# Serialized records
# ---------------------------------------------------------------------------


def extract_serialized(ctx: ExtractionContext) -> list[MetadataRecord]:
    """Read the file as a batch of serialized records."""
    with ctx.path.open("rb") as f:
        return rdf.load_all(f)


# ---------------------------------------------------------------------------
# Bibliography
# ---------------------------------------------------------------------------


def entry_digests(entry: BibEntry, explicit: Sequence[RecordDigest] = ()) -> list[RecordDigest]:
    """Digests a bibliography entry should be stored under.

    The digest URN found in the entry's ``note`` field comes first, followed
    by the explicit digests; duplicates are dropped.

    Raises
    ------
    MalformedDigestUrn
        If the note names a digest scheme but the digest is invalid.
    """
    found: list[RecordDigest] = []
    note = entry.note
    if note:
        match = _NOTE_DIGEST_RE.search(note)
        if match:
            found.append(decode_urn(match.group(0)))
    found.extend(explicit)
    return list(dict.fromkeys(d for d in found if not d.is_empty))


def entry_record(entry: BibEntry) -> MetadataRecord:
    """Map a bibliography entry onto a record without digest."""
    record = MetadataRecord.empty()
    record.set_title(entry.title or "")
    record.set_author(", ".join(entry.authors))
    record.set_work_type(entry.entry_type)
    if entry.keywords:
        record.set_subject(entry.keywords)
    if entry.language:
        record.set_language(entry.language)
    return record


def extract_bibliography(ctx: ExtractionContext) -> list[MetadataRecord]:
    """Read the file as a BibTeX/BibLaTeX bibliography.

    Every entry yields one record per digest from :func:`entry_digests`.

    Raises
    ------
    UnparseableSource
        If the file is not a bibliography or has unreadable entries.
    AmbiguousExplicitDigest
        If explicit digests were supplied and there is more than one entry.
    NoDigestAvailable
        If an entry has no digest to be stored under.
    """
    text = decode_text(ctx.read_bytes())
    if not looks_like_bibtex(text):
        raise UnparseableSource("not a bibliography", source=str(ctx.path))

    entries, _, errors = parse_bibtex(text.split("\n"))
    if errors:
        raise UnparseableSource("; ".join(errors), source=str(ctx.path))
    if not entries:
        raise UnparseableSource("bibliography has no entries", source=str(ctx.path))

    if ctx.digests and len(entries) > 1:
        raise AmbiguousExplicitDigest(
            f"{len(ctx.digests)} explicit digest(s) given for {len(entries)} entries in {ctx.path}"
        )

    records: list[MetadataRecord] = []
    for entry in entries:
        digests = entry_digests(entry, ctx.digests)
        if not digests:
            raise NoDigestAvailable(f"entry {entry.citekey!r} has no digest in its note field")

        base = entry_record(entry)
        records.extend(base.copy_with_digest(d) for d in digests)
    return records


STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("xattr", extract_attributes),
    ("rdf", extract_serialized),
    ("biblatex", extract_bibliography),
)
