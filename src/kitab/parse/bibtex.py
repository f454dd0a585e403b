"""BibTeX / BibLaTeX reader.

Entries: @<entrytype>{citekey, field = {value}, ...}
Special entries (@STRING, @PREAMBLE, @COMMENT) are skipped.
Reference: http://www.bibtex.org/Format/
"""

import re
from dataclasses import dataclass, field
from typing import NamedTuple

__all__ = ["BibEntry", "BibParseResult", "parse_bibtex", "split_authors"]

ENTRY_START_PATTERN = re.compile(r"^@(\w+)\s*\{\s*([^,}]*),?(.*)$", re.IGNORECASE)

_SPECIAL_ENTRIES = frozenset({"string", "preamble", "comment"})

_AUTHOR_SEPARATOR = re.compile(r"\s+and\s+", re.IGNORECASE)


@dataclass(frozen=True)
class BibEntry:
    """One parsed bibliography entry.

    Attributes
    ----------
    entry_type : str
        Lowercase entry type (``article``, ``book``...).
    citekey : str
        Citation key.
    fields : dict[str, str]
        Field values by lowercase field name; a repeated field keeps its
        first value.
    line : int
        0-based line where the entry starts.
    """

    entry_type: str
    citekey: str
    fields: dict[str, str] = field(default_factory=dict)
    line: int = 0

    def get(self, name: str) -> str | None:
        """Return a field value with TeX grouping braces removed, or None."""
        value = self.fields.get(name.lower())
        if value is None:
            return None
        value = " ".join(value.replace("{", "").replace("}", "").split())
        return value or None

    @property
    def title(self) -> str | None:
        return self.get("title")

    @property
    def authors(self) -> list[str]:
        """Author names as ``"Given Family"`` strings."""
        return split_authors(self.get("author") or "")

    @property
    def keywords(self) -> str | None:
        return self.get("keywords")

    @property
    def language(self) -> str | None:
        return self.get("language")

    @property
    def note(self) -> str | None:
        return self.get("note")


class BibParseResult(NamedTuple):
    """Result of parsing a bibliography.

    Supports tuple unpacking: ``entries, warnings, errors = parse_bibtex(...)``.
    """

    entries: list[BibEntry]
    warnings: list[str]
    errors: list[str]


def split_authors(value: str) -> list[str]:
    """Split a BibTeX author list into ``"Given Family"`` names.

    ``"Nakamoto, Satoshi and Doe, Jane"`` gives
    ``["Satoshi Nakamoto", "Jane Doe"]``; names already written as
    ``"Given Family"`` are kept as they are.
    """
    names = []
    for part in _AUTHOR_SEPARATOR.split(value.strip()):
        part = part.strip()
        if not part:
            continue
        if "," in part:
            family, given = part.split(",", 1)
            part = f"{given.strip()} {family.strip()}".strip()
        names.append(part)
    return names


def parse_bibtex(lines: list[str]) -> BibParseResult:
    """Parse BibTeX text lines into entries.

    Parameters
    ----------
    lines : list[str]
        Decoded lines with normalized line endings.

    Returns
    -------
    BibParseResult
        Entries, warnings, and errors.
    """
    warnings: list[str] = []
    errors: list[str] = []
    entries: list[BibEntry] = []

    i = 0
    while i < len(lines):
        line = lines[i].strip()

        if not line.startswith("@"):
            i += 1
            continue

        match = ENTRY_START_PATTERN.match(line)
        if not match:
            warnings.append(f"Line {i}: Malformed entry start: {line[:50]}")
            i += 1
            continue

        entry_type, citekey, rest = match.groups()
        entry_type = entry_type.lower()

        closing_line = _find_closing_brace(lines, i)
        if closing_line == -1:
            errors.append(f"Line {i}: Unclosed entry @{entry_type}{{{citekey.strip()}}}")
            i += 1
            continue

        if entry_type in _SPECIAL_ENTRIES:
            warnings.append(f"Line {i}: Skipping @{entry_type.upper()} entry")
            i = closing_line + 1
            continue

        fields: dict[str, str] = {}
        # Fields may start on the entry line itself
        for name, value in _parse_fields([rest, *lines[i + 1 : closing_line + 1]]):
            fields.setdefault(name, value)

        entries.append(BibEntry(entry_type, citekey.strip(), fields, i))
        i = closing_line + 1

    return BibParseResult(entries, warnings, errors)


def _find_closing_brace(lines: list[str], start_line: int) -> int:
    brace_depth = 0
    in_quotes = False
    escape_next = False

    for i in range(start_line, len(lines)):
        for char in lines[i]:
            if escape_next:
                escape_next = False
                continue

            if char == "\\":
                escape_next = True
                continue

            if char == '"':
                in_quotes = not in_quotes
            elif not in_quotes:
                if char == "{":
                    brace_depth += 1
                elif char == "}":
                    brace_depth -= 1
                    if brace_depth == 0:
                        return i

    return -1


def _parse_fields(field_lines: list[str]) -> list[tuple[str, str]]:
    fields: list[tuple[str, str]] = []
    content = "\n".join(field_lines)

    i = 0
    while i < len(content):
        while i < len(content) and content[i].isspace():
            i += 1
        if i >= len(content):
            break

        field_match = re.match(r"(\w+)\s*=\s*", content[i:])
        if not field_match:
            i += 1
            continue

        name = field_match.group(1).lower()
        i += field_match.end()

        if i >= len(content):
            break

        if content[i] == "{":
            value, i = _parse_braced_value(content, i)
        elif content[i] == '"':
            value, i = _parse_quoted_value(content, i)
        else:
            value, i = _parse_bare_value(content, i)

        while i < len(content) and content[i] in " \t\n":
            i += 1
        if i < len(content) and content[i] == ",":
            i += 1

        fields.append((name, value.strip()))

    return fields


def _parse_braced_value(content: str, start: int) -> tuple[str, int]:
    depth = 0
    chars: list[str] = []

    for i in range(start, len(content)):
        char = content[i]
        if char == "{":
            depth += 1
            if depth > 1:
                chars.append(char)
        elif char == "}":
            depth -= 1
            if depth == 0:
                return "".join(chars), i + 1
            chars.append(char)
        else:
            chars.append(char)

    return "".join(chars), len(content)


def _parse_quoted_value(content: str, start: int) -> tuple[str, int]:
    chars: list[str] = []
    escape_next = False

    for i in range(start + 1, len(content)):
        char = content[i]
        if escape_next:
            chars.append(char)
            escape_next = False
        elif char == "\\":
            escape_next = True
        elif char == '"':
            return "".join(chars), i + 1
        else:
            chars.append(char)

    return "".join(chars), len(content)


def _parse_bare_value(content: str, start: int) -> tuple[str, int]:
    i = start
    while i < len(content) and content[i] not in ",\n}#":
        i += 1
    return content[start:i].strip(), i
