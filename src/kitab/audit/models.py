"""Data model for diagnostic events."""

from dataclasses import dataclass
from typing import Any

__all__ = ["LogEvent", "LEVELS"]

LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


@dataclass
class LogEvent:
    """Structured diagnostic event.

    Attributes
    ----------
    ts : str
        ISO8601 timestamp with microseconds (UTC).
    run_id : str
        Identifier of the command run that produced the event.
    level : str
        Log level ("DEBUG", "INFO", "WARN", "ERROR").
    event : str
        Event type identifier.
    data : dict[str, Any]
        Event-specific data payload.
    path : str | None
        File the event refers to, if any.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any]
    path: str | None = None
