"""Metadata record model.

A :class:`MetadataRecord` holds the descriptive metadata of one file together
with the digest of the file's content. Importers populate records field by
field; the store persists them once :meth:`MetadataRecord.validate` passes.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from kitab.digest import EMPTY_DIGEST, DigestKind, RecordDigest
from kitab.errors import DigestImmutableError, InvalidFieldValue
from kitab.models.types import PublishDate, WorkType, parse_work_type, work_type_name

__all__ = ["MetadataRecord"]

# BCP 47 shape: primary subtag, then alphanumeric subtags
_LANGUAGE_RE = re.compile(r"^[A-Za-z]{2,8}(?:-[A-Za-z0-9]{1,8})*$")

# RFC 6838 restricted-name on both sides, optional parameters
_MIME_TOKEN = r"[A-Za-z0-9][A-Za-z0-9!#$&^_.+-]{0,126}"
_MEDIA_TYPE_RE = re.compile(rf"^{_MIME_TOKEN}/{_MIME_TOKEN}(?:\s*;.*)?$")


@dataclass
class MetadataRecord:
    """Descriptive metadata bound to one content digest.

    Attributes
    ----------
    title : str
        Work title. Required for validity.
    author : str
        Comma-separated author names. Required for validity.
    work_type : WorkType | str
        Bibliographic type; unknown types are kept as plain strings.
    digest : RecordDigest
        Content digest. Once set to a non-empty value it cannot change.
    subject : str | None
        Comma-joined keywords.
    media_type : str | None
        MIME type of the file.
    language : str | None
        Language tag.
    local_name : str | None
        Filename the record was harvested from (informational).
    publish_date : PublishDate | None
        Publication date (informational).
    """

    title: str = ""
    author: str = ""
    work_type: WorkType | str = WorkType.UNKNOWN
    digest: RecordDigest = EMPTY_DIGEST
    subject: str | None = None
    media_type: str | None = None
    language: str | None = None
    local_name: str | None = field(default=None, compare=False)
    publish_date: PublishDate | None = field(default=None, compare=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "digest" and "digest" in self.__dict__:
            current: RecordDigest = self.__dict__["digest"]
            if not current.is_empty and value != current:
                raise DigestImmutableError(
                    f"record digest already set to {current.urn()}, refusing {value}"
                )
        super().__setattr__(name, value)

    @classmethod
    def create(
        cls,
        title: str,
        author: str,
        work_type: "WorkType | str",
        digest: bytes,
        kind: DigestKind = DigestKind.SHA512,
        local_name: str | None = None,
    ) -> "MetadataRecord":
        """Create a record from raw digest bytes.

        Parameters
        ----------
        title : str
            Work title.
        author : str
            Author names.
        work_type : WorkType | str
            Bibliographic type.
        digest : bytes
            Raw digest bytes, validated against ``kind``.
        kind : DigestKind, optional
            Expected algorithm, by default ``sha512``.
        local_name : str | None, optional
            Originating filename.

        Raises
        ------
        InvalidDigestLength
            If ``digest`` is not exactly ``kind.size`` bytes.
        """
        return cls(
            title=title,
            author=author,
            work_type=parse_work_type(work_type),
            digest=RecordDigest.from_bytes(digest, kind),
            local_name=local_name,
        )

    @classmethod
    def empty(cls) -> "MetadataRecord":
        """Create a record with empty fields for incremental population."""
        return cls()

    def copy_with_digest(self, digest: RecordDigest) -> "MetadataRecord":
        """Return a copy of this record bound to another digest."""
        return MetadataRecord(
            title=self.title,
            author=self.author,
            work_type=self.work_type,
            digest=digest,
            subject=self.subject,
            media_type=self.media_type,
            language=self.language,
            local_name=self.local_name,
            publish_date=self.publish_date,
        )

    # -- setters used by importers and the triple reader --

    def set_title(self, value: str) -> None:
        self.title = value.strip()

    def set_author(self, value: str) -> None:
        self.author = value.strip()

    def set_work_type(self, value: "WorkType | str") -> None:
        self.work_type = parse_work_type(value)

    def set_subject(self, value: str) -> None:
        value = value.strip()
        self.subject = value or None

    def set_media_type(self, value: str) -> None:
        """Set the MIME type.

        Raises
        ------
        InvalidFieldValue
            If ``value`` is not shaped like ``type/subtype``.
        """
        value = value.strip()
        if not _MEDIA_TYPE_RE.match(value):
            raise InvalidFieldValue("media type", value)
        self.media_type = value

    def set_language(self, value: str) -> None:
        """Set the language tag.

        Raises
        ------
        InvalidFieldValue
            If ``value`` is not shaped like a BCP 47 tag.
        """
        value = value.strip()
        if not _LANGUAGE_RE.match(value):
            raise InvalidFieldValue("language", value)
        self.language = value

    def set_local_name(self, value: str) -> None:
        self.local_name = value

    def set_publish_date(self, day: int, month: int, year: int) -> None:
        self.publish_date = PublishDate(day, month, year)

    def set_digest(self, digest: RecordDigest) -> None:
        """Bind the record to a digest.

        Raises
        ------
        DigestImmutableError
            If a different non-empty digest is already set.
        """
        self.digest = digest

    # -- projections --

    @property
    def has_digest(self) -> bool:
        return not self.digest.is_empty

    @property
    def work_type_name(self) -> str:
        return work_type_name(self.work_type)

    def validate(self) -> bool:
        """Return True if both title and author are non-empty."""
        return bool(self.title) and bool(self.author)

    def urn(self) -> str:
        """Digest URN, e.g. ``"sha512:ab12..."``."""
        return self.digest.urn()

    def fingerprint_hex(self) -> str:
        """Lowercase hex of the digest bytes (the store key)."""
        return self.digest.hex

    def __str__(self) -> str:
        return f"{self.title} by {self.author} ({self.urn() or 'no digest'})"
