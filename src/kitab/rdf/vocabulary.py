"""Fixed predicate vocabulary of serialized records.

Predicates are written as Dublin Core terms IRIs. On read, a predicate is
matched by its local name (the part after the last ``/`` or ``#``), so full
IRIs under either ``http`` or ``https`` and bare short names are accepted.
"""

from collections.abc import Callable
from typing import NamedTuple

from kitab.models import MetadataRecord

__all__ = [
    "DCTERMS",
    "URN_PREFIX",
    "Triple",
    "Term",
    "TERMS",
    "local_name",
    "setter_for",
]

DCTERMS = "https://purl.org/dc/terms/"

URN_PREFIX = "URN:"


class Triple(NamedTuple):
    """One statement of a serialized record."""

    subject: str
    predicate: str
    object: str


class Term(NamedTuple):
    """A vocabulary term: IRI written on output, names accepted on input."""

    name: str
    aliases: tuple[str, ...]

    @property
    def iri(self) -> str:
        return DCTERMS + self.name


TITLE = Term("title", ())
CREATOR = Term("creator", ("author",))
TYPE = Term("type", ())
SUBJECT = Term("subject", ("keywords",))
MEDIA_TYPE = Term("MediaType", ("format",))
LANGUAGE = Term("language", ())

# Output order of statements
TERMS: tuple[Term, ...] = (TITLE, CREATOR, TYPE, SUBJECT, MEDIA_TYPE, LANGUAGE)

Setter = Callable[[MetadataRecord, str], None]

_SETTERS: dict[Term, Setter] = {
    TITLE: MetadataRecord.set_title,
    CREATOR: MetadataRecord.set_author,
    TYPE: MetadataRecord.set_work_type,
    SUBJECT: MetadataRecord.set_subject,
    MEDIA_TYPE: MetadataRecord.set_media_type,
    LANGUAGE: MetadataRecord.set_language,
}

_DISPATCH: dict[str, Setter] = {}
for _term, _setter in _SETTERS.items():
    for _name in (_term.name, *_term.aliases):
        _DISPATCH[_name.lower()] = _setter


def local_name(predicate: str) -> str:
    """Return the part of an IRI after the last ``/`` or ``#``."""
    cut = max(predicate.rfind("/"), predicate.rfind("#"))
    return predicate[cut + 1 :]


def setter_for(predicate: str) -> Setter | None:
    """Look up the record setter for a predicate IRI or short name.

    Returns None for predicates outside the vocabulary.
    """
    return _DISPATCH.get(local_name(predicate).lower())
