"""Text composition and export file naming.

Pure functions; nothing here depends on session state.
"""

from __future__ import annotations

import re
from typing import Iterable, NamedTuple

DEFAULT_SEPARATOR = "\n\n"
FALLBACK_SLUG = "ad"
MAX_SLUG_LENGTH = 40

_WHITESPACE = re.compile(r"\s+")
_INVALID_FILENAME_CHARS = re.compile(r"[^a-z0-9 \-_.]")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class ComposedPart(NamedTuple):
    """One selected candidate paired with its owning slot."""

    name: str
    text: str
    slot_id: str = ""


def compose(
    parts: Iterable[ComposedPart],
    include_headings: bool = False,
    separator: str = DEFAULT_SEPARATOR,
) -> str:
    """Join parts into the final ad text.

    Each part renders as its text, or ``"{name}\\n{text}"`` with headings.
    The joined text is stripped and gets exactly one trailing newline, so an
    empty ``parts`` yields ``"\\n"``. An empty separator falls back to the
    default blank line.
    """
    chunks = [f"{p.name}\n{p.text}" if include_headings else p.text for p in parts]
    return (separator or DEFAULT_SEPARATOR).join(chunks).strip() + "\n"


def normalize_file_name(text: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Turn free text into a file-name-safe slug.

    Lowercase, collapse whitespace, trim, map disallowed characters to spaces,
    truncate, then join words with hyphens. Empty results become ``"ad"``.

    Example:
        >>> normalize_file_name("  Hello*/World  ")
        'hello-world'
    """
    clean = _WHITESPACE.sub(" ", text.lower()).strip()
    clean = _INVALID_FILENAME_CHARS.sub(" ", clean)
    clean = clean[:max_length]
    clean = _WHITESPACE.sub("-", clean)
    return clean or FALLBACK_SLUG


def first_line(text: str) -> str:
    """First non-blank line of ``text``, or ``"ad"`` if every line is blank."""
    for line in _LINE_BREAK.split(text):
        if line.strip():
            return line
    return FALLBACK_SLUG


def entry_name(ordinal: int, total: int, text: str, ext: str = "txt") -> str:
    """Export file name for one ad.

    Args:
        ordinal: Number printed in the name (1-based in exports).
        total: Size of the combination space; sets the zero-padding width.
        text: Effective ad text; its first non-blank line becomes the slug.
        ext: File extension without the dot.
    """
    width = len(str(total))
    slug = normalize_file_name(first_line(text))
    return f"{ordinal:0{width}d}_{slug}.{ext}"


__all__ = [
    "ComposedPart",
    "DEFAULT_SEPARATOR",
    "compose",
    "entry_name",
    "first_line",
    "normalize_file_name",
]
