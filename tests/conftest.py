"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from kitab.digest import DigestKind, RecordDigest  # noqa: E402
from kitab.models import MetadataRecord, WorkType  # noqa: E402
from kitab.store import FileStore  # noqa: E402


def digest_of(fill: int, kind: DigestKind = DigestKind.SHA512) -> RecordDigest:
    """Digest whose bytes all equal ``fill``."""
    return RecordDigest.from_bytes(bytes([fill]) * kind.size, kind)


class FakeAttributes:
    """In-memory extended attribute backend keyed by path."""

    def __init__(self) -> None:
        self.values: dict[Path, dict[str, str]] = {}

    def set(self, path: Path, attrs: Mapping[str, str]) -> None:
        self.values.setdefault(Path(path), {}).update(attrs)

    def read(self, path: Path) -> dict[str, str]:
        return dict(self.values.get(Path(path), {}))

    def write(self, path: Path, attrs: Mapping[str, str]) -> None:
        self.set(path, attrs)


@pytest.fixture
def make_record() -> Callable[..., MetadataRecord]:
    """Factory for valid records with minimal boilerplate."""

    def _factory(
        title: str = "Bitcoin: A Peer-to-Peer Electronic Cash System",
        author: str = "Satoshi Nakamoto",
        *,
        fill: int = 0x2A,
        kind: DigestKind = DigestKind.SHA512,
        work_type: WorkType | str = WorkType.ARTICLE,
        subject: str | None = None,
        media_type: str | None = None,
        language: str | None = None,
    ) -> MetadataRecord:
        record = MetadataRecord(
            title=title,
            author=author,
            work_type=work_type,
            digest=digest_of(fill, kind),
        )
        if subject is not None:
            record.set_subject(subject)
        if media_type is not None:
            record.set_media_type(media_type)
        if language is not None:
            record.set_language(language)
        return record

    return _factory


@pytest.fixture
def make_digest() -> Callable[..., RecordDigest]:
    """Factory for digests filled with a single repeated byte."""
    return digest_of


@pytest.fixture
def store(tmp_path: Path) -> FileStore:
    """Empty store in a temporary directory."""
    return FileStore(tmp_path / "idx")


@pytest.fixture
def fake_attributes() -> FakeAttributes:
    """In-memory attribute backend."""
    return FakeAttributes()
