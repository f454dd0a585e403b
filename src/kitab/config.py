"""Runtime configuration."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from kitab.digest import DigestKind

__all__ = ["KitabConfig", "default_store_dir", "parse_digest_kinds"]

ENV_STORE_DIR = "KITAB_STORE_DIR"
ENV_DIGESTS = "KITAB_DIGESTS"

DEFAULT_DIGEST_KINDS: tuple[DigestKind, ...] = (
    DigestKind.SHA512,
    DigestKind.SHA256,
    DigestKind.MD5,
)


def default_store_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return ``$XDG_DATA_HOME/kitab/idx``, falling back to ``~/.local/share``."""
    environ = os.environ if environ is None else environ
    data_home = environ.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / "kitab" / "idx"


def parse_digest_kinds(value: str) -> tuple[DigestKind, ...]:
    """Parse a comma-separated list of digest schemes.

    Raises
    ------
    MalformedDigestUrn
        If a scheme is unknown.
    """
    kinds = [DigestKind.from_scheme(v.strip()) for v in value.split(",") if v.strip()]
    return tuple(dict.fromkeys(kinds))


@dataclass
class KitabConfig:
    """Configuration shared by the CLI and the batch API.

    Attributes
    ----------
    store_dir : Path
        Directory of the record store.
    digest_kinds : tuple[DigestKind, ...]
        Algorithms tried, in order, when matching files against the store.
    recursive : bool
        Descend into subdirectories when given a folder.
    """

    store_dir: Path = field(default_factory=default_store_dir)
    digest_kinds: tuple[DigestKind, ...] = DEFAULT_DIGEST_KINDS
    recursive: bool = False

    def __post_init__(self) -> None:
        """Normalize types and validate."""
        self.store_dir = Path(self.store_dir).expanduser()
        self.digest_kinds = tuple(DigestKind(k) for k in self.digest_kinds)

        if not self.digest_kinds:
            raise ValueError("digest_kinds must not be empty")
        if DigestKind.BZZ in self.digest_kinds:
            raise ValueError("bzz digests cannot be computed locally")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "KitabConfig":
        """Build configuration from environment variables.

        ``KITAB_STORE_DIR`` sets the store directory and ``KITAB_DIGESTS`` the
        comma-separated digest schemes. Keyword overrides that are not None
        take precedence.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {"store_dir": default_store_dir(environ)}

        if environ.get(ENV_STORE_DIR):
            values["store_dir"] = Path(environ[ENV_STORE_DIR])
        if environ.get(ENV_DIGESTS):
            values["digest_kinds"] = parse_digest_kinds(environ[ENV_DIGESTS])

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "store_dir": str(self.store_dir),
            "digest_kinds": [k.value for k in self.digest_kinds],
            "recursive": self.recursive,
        }
