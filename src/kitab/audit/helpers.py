"""Helper utilities for diagnostic events."""

import secrets
from datetime import UTC, datetime

__all__ = ["generate_run_id", "get_iso_timestamp"]


def get_iso_timestamp() -> str:
    """Current UTC time as ISO8601 with microseconds and a ``Z`` suffix."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def generate_run_id() -> str:
    """Generate unique run identifier.

    Returns
    -------
    str
        Run ID in format: ISO8601_timestamp__random_suffix.
    """
    return f"{get_iso_timestamp()}__{secrets.token_hex(4)}"
