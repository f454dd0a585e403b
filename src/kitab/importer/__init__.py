"""Import reconciliation.

Main entry points:
- import_file: extract records from one file and write them to the store
- STRATEGIES: ordered extraction strategies (xattr, rdf, biblatex)
"""

from kitab.importer.reconciler import ImportResult, extract_records, import_file
from kitab.importer.strategies import (
    STRATEGIES,
    ExtractionContext,
    entry_digests,
    entry_record,
    extract_attributes,
    extract_bibliography,
    extract_serialized,
    guess_media_type,
)

__all__ = [
    "STRATEGIES",
    "ExtractionContext",
    "ImportResult",
    "entry_digests",
    "entry_record",
    "extract_attributes",
    "extract_bibliography",
    "extract_records",
    "extract_serialized",
    "guess_media_type",
    "import_file",
]
