"""Triple serialization of metadata records.

Main entry points:
- dumps / write: record to Turtle text
- loads_all / load_all: Turtle text to one or more records
- read_all / read: triple stream to records
"""

from kitab.rdf.codec import (
    dumps,
    dumps_all,
    load_all,
    loads,
    loads_all,
    parse_triples,
    read,
    read_all,
    record_triples,
    subject_digest,
    write,
)
from kitab.rdf.vocabulary import DCTERMS, TERMS, URN_PREFIX, Triple

__all__ = [
    "DCTERMS",
    "TERMS",
    "URN_PREFIX",
    "Triple",
    "dumps",
    "dumps_all",
    "load_all",
    "loads",
    "loads_all",
    "parse_triples",
    "read",
    "read_all",
    "record_triples",
    "subject_digest",
    "write",
]
