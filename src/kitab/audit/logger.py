"""Diagnostic event sinks.

Core components never log through a process-wide logger. They receive an
:class:`EventSink` and report what they did to it. :class:`AuditLogger` keeps
events as append-only JSONL; :class:`NullSink` discards them and
:class:`MemorySink` collects them in a list.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Protocol

from kitab.audit.helpers import generate_run_id, get_iso_timestamp
from kitab.audit.models import LEVELS, LogEvent

__all__ = ["EventSink", "NullSink", "MemorySink", "AuditLogger"]


class EventSink(Protocol):
    """Receiver of diagnostic events."""

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        path: str | None = None,
    ) -> None: ...


class NullSink:
    """Sink that drops every event."""

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        path: str | None = None,
    ) -> None:
        return None


class MemorySink:
    """Sink that keeps events in memory, in order of arrival."""

    def __init__(self, run_id: str = "memory") -> None:
        self.run_id = run_id
        self.events: list[LogEvent] = []

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        path: str | None = None,
    ) -> None:
        self.events.append(
            LogEvent(get_iso_timestamp(), self.run_id, level, event_type, data or {}, path)
        )

    def of_type(self, event_type: str) -> list[LogEvent]:
        return [e for e in self.events if e.event == event_type]


class AuditLogger:
    """JSONL event logger with persistent file handle.

    Writes one JSON object per line. Events are append-only and flushed after
    each write.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    """

    def __init__(self, log_path: Path, run_id: str | None = None) -> None:
        """Initialize logger and open the file handle.

        Parameters
        ----------
        log_path : Path
            Path to JSONL log file; parent directories are created.
        run_id : str | None, optional
            Run identifier, generated when not given.
        """
        self.run_id = run_id or generate_run_id()
        self.log_path = Path(log_path)

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        path: str | None = None,
    ) -> None:
        """Write structured event to log.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "record_written").
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        path : str | None, optional
            File the event refers to.

        Raises
        ------
        ValueError
            If ``level`` is not a known level.
        """
        if level not in LEVELS:
            raise ValueError(f"unknown log level {level!r}")

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data or {},
            path=path,
        )
        json.dump(asdict(log_event), self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()
