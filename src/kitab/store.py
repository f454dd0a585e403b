"""Filesystem store of serialized records.

One file per digest, named by the lowercase hex of the digest bytes and
holding the Turtle serialization of exactly one record. Writing an existing
key replaces the previous value.
"""

import re
from pathlib import Path

from kitab import rdf
from kitab.errors import ValidationFailed
from kitab.models import MetadataRecord

__all__ = ["FileStore"]

_HEX_RE = re.compile(r"^[0-9a-f]+$")


class FileStore:
    """Digest-keyed record store rooted at a directory.

    Attributes
    ----------
    path : Path
        Store directory. Created on first write.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"FileStore({str(self.path)!r})"

    def path_for(self, hex_key: str) -> Path:
        """Return the file path for a hex key.

        Raises
        ------
        ValueError
            If the key is empty or not hexadecimal.
        """
        key = hex_key.strip().lower()
        if not _HEX_RE.match(key):
            raise ValueError(f"store key must be hex, got {hex_key!r}")
        return self.path / key

    def write(self, record: MetadataRecord) -> Path:
        """Persist a record under its digest, replacing any previous value.

        Parameters
        ----------
        record : MetadataRecord
            Record with a non-empty digest.

        Returns
        -------
        Path
            Path of the written entry.

        Raises
        ------
        ValidationFailed
            If the record has no digest.
        OSError
            If the entry cannot be written.
        """
        if not record.has_digest:
            raise ValidationFailed(f"cannot store record without digest: {record.title!r}")

        entry = self.path_for(record.fingerprint_hex())
        self.path.mkdir(parents=True, exist_ok=True)
        entry.write_text(rdf.dumps(record), encoding="utf-8")
        return entry

    def lookup(self, hex_key: str) -> str | None:
        """Return the serialized record stored under ``hex_key``, or None."""
        entry = self.path_for(hex_key)
        try:
            return entry.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def read(self, hex_key: str) -> MetadataRecord | None:
        """Return the record stored under ``hex_key``, or None."""
        text = self.lookup(hex_key)
        if text is None:
            return None
        return rdf.loads(text)

    def __contains__(self, hex_key: object) -> bool:
        if not isinstance(hex_key, str):
            return False
        return self.path_for(hex_key).is_file()
