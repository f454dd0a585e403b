"""Filesystem extended attribute adapter.

Metadata is exchanged with files through a fixed set of ``user.dcterms:*``
attributes. Reading and writing a single attribute is delegated to
``os.getxattr`` / ``os.setxattr`` (Linux); callers that need another backend
pass their own reader or writer callables.
"""

import errno
import os
from collections.abc import Callable, Mapping
from pathlib import Path

from kitab.errors import InvalidFieldValue
from kitab.models import MetadataRecord

__all__ = [
    "ATTR_TITLE",
    "ATTR_CREATOR",
    "ATTR_SUBJECT",
    "ATTR_LANGUAGE",
    "ATTR_TYPE",
    "ATTR_MEDIA_TYPE",
    "ATTRIBUTE_KEYS",
    "REQUIRED_KEYS",
    "AttributeReader",
    "AttributeWriter",
    "read_attributes",
    "write_attributes",
    "record_attributes",
]

ATTR_TITLE = "user.dcterms:title"
ATTR_CREATOR = "user.dcterms:creator"
ATTR_SUBJECT = "user.dcterms:subject"
ATTR_LANGUAGE = "user.dcterms:language"
ATTR_TYPE = "user.dcterms:type"
ATTR_MEDIA_TYPE = "user.dcterms:MediaType"

ATTRIBUTE_KEYS: tuple[str, ...] = (
    ATTR_TITLE,
    ATTR_CREATOR,
    ATTR_SUBJECT,
    ATTR_LANGUAGE,
    ATTR_TYPE,
    ATTR_MEDIA_TYPE,
)

# Without either of these an attribute import does not apply
REQUIRED_KEYS: tuple[str, ...] = (ATTR_TITLE, ATTR_CREATOR)

AttributeReader = Callable[[Path], Mapping[str, str]]
AttributeWriter = Callable[[Path, Mapping[str, str]], None]

# Absent attribute, or a filesystem without user attributes
_MISSING_ERRNOS = frozenset(
    code
    for code in (
        getattr(errno, "ENODATA", None),
        getattr(errno, "ENOATTR", None),
        errno.ENOTSUP,
        errno.EOPNOTSUPP,
    )
    if code
)


def _get(path: Path, key: str) -> str | None:
    try:
        value = os.getxattr(path, key)
    except OSError as e:
        if e.errno in _MISSING_ERRNOS:
            return None
        raise
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidFieldValue(key, value.decode("utf-8", errors="replace")) from e


def read_attributes(path: Path) -> dict[str, str]:
    """Read the metadata attributes present on a file.

    Parameters
    ----------
    path : Path
        File to read from.

    Returns
    -------
    dict[str, str]
        Values of the attributes in :data:`ATTRIBUTE_KEYS` that are set.

    Raises
    ------
    OSError
        On failures other than an attribute being absent.
    InvalidFieldValue
        If an attribute value is not UTF-8.
    """
    attrs: dict[str, str] = {}
    for key in ATTRIBUTE_KEYS:
        value = _get(path, key)
        if value is not None:
            attrs[key] = value
    return attrs


def record_attributes(record: MetadataRecord) -> dict[str, str]:
    """Project a record onto attribute keys, omitting unset optional fields."""
    attrs = {
        ATTR_TITLE: record.title,
        ATTR_CREATOR: record.author,
        ATTR_TYPE: record.work_type_name,
    }
    if record.subject is not None:
        attrs[ATTR_SUBJECT] = record.subject
    if record.language is not None:
        attrs[ATTR_LANGUAGE] = record.language
    if record.media_type is not None:
        attrs[ATTR_MEDIA_TYPE] = record.media_type
    return attrs


def write_attributes(path: Path, attrs: Mapping[str, str]) -> None:
    """Set each attribute on the file, overwriting existing values."""
    for key, value in attrs.items():
        os.setxattr(path, key, value.encode("utf-8"))
