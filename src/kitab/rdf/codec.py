"""Serialized record codec.

Records are written as Turtle with one subject per record, the subject being
``URN:<digest-urn>``. Reading accepts a stream of triples that may describe
several subjects; consecutive triples sharing a subject are grouped into one
record and a change of subject starts the next record.
"""

import functools
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import IO

import rdflib

from kitab.digest import RecordDigest, decode_urn
from kitab.errors import DigestConflict, UnparseableSource, ValidationFailed
from kitab.models import MetadataRecord
from kitab.rdf.vocabulary import (
    CREATOR,
    DCTERMS,
    LANGUAGE,
    MEDIA_TYPE,
    SUBJECT,
    TITLE,
    TYPE,
    URN_PREFIX,
    Triple,
    setter_for,
)

__all__ = [
    "record_triples",
    "dumps",
    "dumps_all",
    "write",
    "read_all",
    "read",
    "loads_all",
    "loads",
    "load_all",
    "parse_triples",
    "subject_digest",
]

TURTLE = "turtle"


# ---------------------------------------------------------------------------
# Serialize
# ---------------------------------------------------------------------------


def record_triples(record: MetadataRecord) -> list[Triple]:
    """Return the statements describing ``record`` in fixed predicate order.

    Title, creator and type are always present; subject, media type and
    language only when set.

    Raises
    ------
    ValidationFailed
        If the record has no digest to use as subject.
    """
    if not record.has_digest:
        raise ValidationFailed(f"cannot serialize record without digest: {record.title!r}")

    subject = URN_PREFIX + record.urn()
    triples = [
        Triple(subject, TITLE.iri, record.title),
        Triple(subject, CREATOR.iri, record.author),
        Triple(subject, TYPE.iri, record.work_type_name),
    ]
    if record.subject is not None:
        triples.append(Triple(subject, SUBJECT.iri, record.subject))
    if record.media_type is not None:
        triples.append(Triple(subject, MEDIA_TYPE.iri, record.media_type))
    if record.language is not None:
        triples.append(Triple(subject, LANGUAGE.iri, record.language))
    return triples


def _graph(records: Iterable[MetadataRecord]) -> rdflib.Graph:
    graph = rdflib.Graph()
    graph.bind("dcterms", rdflib.Namespace(DCTERMS))
    for record in records:
        for t in record_triples(record):
            graph.add((rdflib.URIRef(t.subject), rdflib.URIRef(t.predicate), rdflib.Literal(t.object)))
    return graph


def dumps(record: MetadataRecord) -> str:
    """Serialize one record to Turtle text."""
    return _graph([record]).serialize(format=TURTLE)


def dumps_all(records: Iterable[MetadataRecord]) -> str:
    """Serialize a batch of records to one Turtle document."""
    return _graph(records).serialize(format=TURTLE)


def write(record: MetadataRecord, stream: IO[str]) -> int:
    """Write one record as Turtle to a text stream.

    Returns
    -------
    int
        Number of characters written.
    """
    return stream.write(dumps(record))


# ---------------------------------------------------------------------------
# Deserialize
# ---------------------------------------------------------------------------


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def subject_digest(subject: str) -> RecordDigest:
    """Decode the digest named by a ``URN:<scheme>:<hex>`` subject.

    Raises
    ------
    MalformedDigestUrn
        If the digest part cannot be decoded.
    """
    subject = subject.strip()
    if subject[: len(URN_PREFIX)].upper() == URN_PREFIX:
        subject = subject[len(URN_PREFIX) :]
    return decode_urn(subject)


@dataclass
class _FoldState:
    """Records closed so far, the record being filled and whether it has adopted a subject."""

    closed: list[MetadataRecord] = field(default_factory=list)
    current: MetadataRecord = field(default_factory=MetadataRecord.empty)
    adopted: bool = False

    def records(self) -> list[MetadataRecord]:
        return [*self.closed, self.current]


def _check_new_subject(state: _FoldState, digest: RecordDigest) -> None:
    for prior in state.records():
        if prior.digest == digest:
            raise DigestConflict(
                f"subject {digest.urn()} reappears after another subject; "
                "statements for one subject must be contiguous"
            )
        if prior.digest.value == digest.value:
            raise DigestConflict(
                f"digest {digest.hex} is named as both {prior.digest.kind.value} "
                f"and {digest.kind.value}"
            )


def _step(state: _FoldState, triple: Triple, *, single: bool) -> _FoldState:
    digest = subject_digest(triple.subject)

    if not state.adopted:
        state.current.set_digest(digest)
        state.adopted = True
    elif digest != state.current.digest:
        if single:
            raise DigestConflict(
                f"expected a single subject {state.current.urn()}, found {digest.urn() or 'URN:'}"
            )
        _check_new_subject(state, digest)
        state = _FoldState([*state.closed, state.current], MetadataRecord.empty(), adopted=True)
        state.current.set_digest(digest)

    setter = setter_for(triple.predicate)
    if setter is not None:
        setter(state.current, _strip_quotes(triple.object))
    return state


def _finish(state: _FoldState) -> list[MetadataRecord]:
    records = state.records()
    if not records[0].has_digest:
        raise UnparseableSource("no record data found")

    for record in records:
        if not record.has_digest:
            raise UnparseableSource("statements without a subject digest")
        if not record.validate():
            raise ValidationFailed(f"record {record.urn()} is missing title or author")
    return records


def read_all(triples: Iterable[Triple]) -> list[MetadataRecord]:
    """Group a triple stream into records.

    A change of subject digest closes the current record and opens a new one.
    Predicates outside the vocabulary are ignored.

    Parameters
    ----------
    triples : Iterable[Triple]
        Statements, grouped by subject.

    Returns
    -------
    list[MetadataRecord]
        One record per subject, in order of first appearance.

    Raises
    ------
    MalformedDigestUrn
        If any subject does not name a valid digest.
    DigestConflict
        If a subject reappears after another subject, or the same digest bytes
        are named under two algorithms.
    UnparseableSource
        If the stream holds no statement with a digest.
    ValidationFailed
        If any record lacks a title or author.
    """
    step = functools.partial(_step, single=False)
    return _finish(functools.reduce(step, triples, _FoldState()))


def read(triples: Iterable[Triple]) -> MetadataRecord:
    """Read exactly one record; a second subject raises :class:`DigestConflict`."""
    step = functools.partial(_step, single=True)
    return _finish(functools.reduce(step, triples, _FoldState()))[0]


def parse_triples(text: str) -> Iterator[Triple]:
    """Parse Turtle text into a subject-contiguous triple stream.

    Raises
    ------
    UnparseableSource
        If the text is not valid Turtle.
    """
    graph = rdflib.Graph()
    try:
        graph.parse(data=text, format=TURTLE)
    except Exception as e:
        raise UnparseableSource(f"not a serialized record: {e}") from e

    return _replay(graph)


def _replay(graph: rdflib.Graph) -> Iterator[Triple]:
    for s in sorted(set(graph.subjects()), key=str):
        for p, o in sorted(graph.predicate_objects(s), key=lambda po: (str(po[0]), str(po[1]))):
            yield Triple(str(s), str(p), str(o))


def loads_all(text: str) -> list[MetadataRecord]:
    """Parse Turtle text holding one or more records."""
    return read_all(parse_triples(text))


def loads(text: str) -> MetadataRecord:
    """Parse Turtle text holding exactly one record."""
    return read(parse_triples(text))


def load_all(stream: IO[bytes]) -> list[MetadataRecord]:
    """Read records from a binary stream of UTF-8 Turtle.

    Raises
    ------
    UnparseableSource
        If the content is not UTF-8 text or not valid Turtle.
    """
    try:
        text = stream.read().decode("utf-8")
    except UnicodeDecodeError as e:
        raise UnparseableSource("content is not UTF-8 text") from e
    return loads_all(text)

