"""Content-addressed bibliographic metadata for local files.

This package provides:
- Digests (kitab.digest): digest values, URN encoding, file hashing
- Data models (kitab.models): metadata records
- Serialization (kitab.rdf): triple records and batch reconciliation
- Parsing (kitab.parse): BibTeX bibliographies
- Import (kitab.importer): per-file extraction strategies
- Store (kitab.store): digest-keyed record store
- Apply (kitab.apply): write stored metadata onto files
- Audit (kitab.audit): diagnostic event sinks
- CLI (kitab.cli): command-line interface
- Public API (kitab.api): batch import and apply
"""

__version__ = "0.3.0"
__license__ = "GPL-3.0-or-later"

from kitab.api import apply_path, import_path, iter_files
from kitab.digest import DigestKind, RecordDigest, decode_urn, encode_urn, hash_file
from kitab.errors import KitabError, ParseError
from kitab.importer import import_file
from kitab.models import MetadataRecord, WorkType
from kitab.store import FileStore

__all__ = [
    "__version__",
    "__license__",
    "DigestKind",
    "FileStore",
    "KitabError",
    "MetadataRecord",
    "ParseError",
    "RecordDigest",
    "WorkType",
    "apply_path",
    "decode_urn",
    "encode_urn",
    "hash_file",
    "import_file",
    "import_path",
    "iter_files",
]
