"""Exception hierarchy for kitab.

Every failure mode that concerns operator- or file-supplied input is modeled
as a typed exception. Only :class:`UnparseableSource` is recovered inside the
import pipeline (the next extraction strategy is tried); all other kinds abort
the import of the file they were raised for.
"""

__all__ = [
    "KitabError",
    "ParseError",
    "MalformedDigestUrn",
    "UnparseableSource",
    "InvalidDigestLength",
    "InvalidFieldValue",
    "UnsupportedDigestError",
    "ValidationFailed",
    "DigestConflict",
    "NoDigestAvailable",
    "AmbiguousExplicitDigest",
    "DigestImmutableError",
]


class KitabError(Exception):
    """Base class for all kitab errors."""


class ParseError(KitabError):
    """Raised when text supplied by a file or an operator cannot be parsed.

    Parameters
    ----------
    detail : str
        Human-readable description of what was wrong.
    source : str | None, optional
        File or value the error refers to.
    """

    def __init__(self, detail: str, source: str | None = None) -> None:
        super().__init__(detail if source is None else f"{source}: {detail}")
        self.detail = detail
        self.source = source


class MalformedDigestUrn(ParseError, ValueError):
    """Digest URN with bad hex, wrong length or unknown scheme."""


class UnparseableSource(ParseError):
    """Input is not valid in the format that was attempted."""


class InvalidDigestLength(KitabError, ValueError):
    """Digest bytes do not match the fixed output size of their algorithm."""

    def __init__(self, kind: str, expected: int, actual: int) -> None:
        super().__init__(f"{kind} digest must be {expected} bytes, got {actual}")
        self.kind = kind
        self.expected = expected
        self.actual = actual


class InvalidFieldValue(KitabError, ValueError):
    """A metadata field value has an invalid format."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"invalid {field}: {value!r}")
        self.field = field
        self.value = value


class UnsupportedDigestError(KitabError, ValueError):
    """The requested algorithm cannot be computed locally."""


class ValidationFailed(KitabError):
    """A record is missing required fields."""


class DigestConflict(KitabError):
    """Statements disagree about the identity of a digest."""


class NoDigestAvailable(KitabError):
    """A bibliographic entry has neither an embedded nor a supplied digest."""


class AmbiguousExplicitDigest(KitabError):
    """Explicit digests were supplied for a source holding several entries."""


class DigestImmutableError(KitabError, RuntimeError):
    """Attempt to replace the digest of a record that already has one."""
