"""Work type vocabulary and small value types."""

from dataclasses import dataclass
from enum import Enum

__all__ = ["WorkType", "PublishDate", "parse_work_type", "work_type_name"]


class WorkType(str, Enum):
    """Bibliographic work types (BibLaTeX entry types plus ``unknown``)."""

    UNKNOWN = "unknown"
    ARTICLE = "article"
    BOOK = "book"
    BOOKLET = "booklet"
    INBOOK = "inbook"
    INCOLLECTION = "incollection"
    INPROCEEDINGS = "inproceedings"
    MANUAL = "manual"
    MISC = "misc"
    ONLINE = "online"
    PROCEEDINGS = "proceedings"
    REPORT = "report"
    TECHREPORT = "techreport"
    THESIS = "thesis"
    PHDTHESIS = "phdthesis"
    MASTERSTHESIS = "mastersthesis"
    UNPUBLISHED = "unpublished"
    WHITEPAPER = "whitepaper"


def parse_work_type(value: "str | WorkType | None") -> "WorkType | str":
    """Map a type name to a :class:`WorkType`.

    Unknown names are kept as lowercase strings so that types outside the
    vocabulary survive a round trip.

    Parameters
    ----------
    value : str | WorkType | None
        Type name, e.g. ``"Article"`` or ``"book"``.

    Returns
    -------
    WorkType | str
        Enum member, or the normalized name when not in the vocabulary.
    """
    if value is None:
        return WorkType.UNKNOWN
    if isinstance(value, WorkType):
        return value

    name = value.strip().lower()
    if not name:
        return WorkType.UNKNOWN
    try:
        return WorkType(name)
    except ValueError:
        return name


def work_type_name(value: "WorkType | str") -> str:
    """Text form of a work type as written to serialized records."""
    if isinstance(value, WorkType):
        return value.value
    return value


@dataclass(frozen=True)
class PublishDate:
    """Calendar publish date; zero means unknown for any component."""

    day: int = 0
    month: int = 0
    year: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.day <= 31:
            raise ValueError(f"day out of range: {self.day}")
        if not 0 <= self.month <= 12:
            raise ValueError(f"month out of range: {self.month}")
        if self.year < 0:
            raise ValueError(f"year out of range: {self.year}")
