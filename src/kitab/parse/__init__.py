"""Bibliography parsing.

Main entry points:
- parse_bibtex: BibTeX/BibLaTeX lines to BibEntry objects
- decode_text: file bytes to normalized text
"""

from kitab.parse.base import decode_text, looks_like_bibtex
from kitab.parse.bibtex import BibEntry, BibParseResult, parse_bibtex, split_authors

__all__ = [
    "BibEntry",
    "BibParseResult",
    "decode_text",
    "looks_like_bibtex",
    "parse_bibtex",
    "split_authors",
]
