"""Diagnostic event subsystem for kitab.

Main Components
---------------
- EventSink: protocol injected into the import and apply flows
- AuditLogger: JSONL event logger
- NullSink / MemorySink: discarding and collecting sinks
"""

from kitab.audit.helpers import generate_run_id, get_iso_timestamp
from kitab.audit.logger import AuditLogger, EventSink, MemorySink, NullSink
from kitab.audit.models import LogEvent

__all__ = [
    "AuditLogger",
    "EventSink",
    "LogEvent",
    "MemorySink",
    "NullSink",
    "generate_run_id",
    "get_iso_timestamp",
]
