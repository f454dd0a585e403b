"""Text decoding helpers shared by source parsers."""

import re

__all__ = ["decode_text", "detect_encoding", "normalize_line_endings", "looks_like_bibtex"]

_BIBTEX_ENTRY_RE = re.compile(r"^\s*@\w+\s*\{", re.MULTILINE)


def detect_encoding(file_bytes: bytes) -> str:
    """Detect encoding of file bytes.

    Parameters
    ----------
    file_bytes : bytes
        Complete file content.

    Returns
    -------
    str
        ``utf-8-sig`` when a BOM is present, ``utf-8`` when the bytes decode
        cleanly, ``latin-1`` otherwise.
    """
    if file_bytes.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"

    try:
        file_bytes.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    return "latin-1"


def normalize_line_endings(content: str) -> str:
    """Normalize CRLF and CR line endings to LF."""
    content = content.replace("\r\n", "\n")
    return content.replace("\r", "\n")


def decode_text(file_bytes: bytes) -> str:
    """Decode file bytes to text with normalized line endings."""
    return normalize_line_endings(file_bytes.decode(detect_encoding(file_bytes)))


def looks_like_bibtex(text: str) -> bool:
    """Return True if the text contains at least one ``@type{`` entry start."""
    return _BIBTEX_ENTRY_RE.search(text) is not None
