"""Shared data types for kitab.

Digest types live in :mod:`kitab.digest`; this package holds the metadata
record and its vocabulary.
"""

from kitab.models.record import MetadataRecord
from kitab.models.types import PublishDate, WorkType, parse_work_type, work_type_name

__all__ = [
    "MetadataRecord",
    "PublishDate",
    "WorkType",
    "parse_work_type",
    "work_type_name",
]
