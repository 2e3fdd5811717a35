"""
Classification and normalization of ignore-file lines.

Every line ends up somewhere: blanks and comments are skipped, literal paths
become classic or exception entries, and anything with wildcards (or that
cannot be read as a path) is kept verbatim as a generic entry.
"""

from __future__ import annotations
from typing import Iterable, List, Optional, Tuple

from ignoretree.models import PatternEntry, PatternKind, PatternLine

WILDCARDS = ("*", "?", "[")
COMMENT = "#"
NEGATION = "!"

# characters a scanned name may not carry if it is to be written back as a literal pattern
UNSAFE_NAME_CHARS = ("\\", "*", "?", "[", "\x00", "\n", "\r")


def _has_wildcard(text: str) -> bool:
    return any(ch in text for ch in WILDCARDS)


def normalize_path(text: str) -> Tuple[str, ...]:
    """Canonicalize pattern path text into anchored segments.

    ``src``, ``/src``, ``./src`` and ``src/`` all map to ``("src",)``.
    """
    text = text.replace("\\", "/")
    if text.startswith("./"):
        text = text[2:]
    elif text.startswith("/"):
        text = text[1:]
    return tuple(seg for seg in text.split("/") if seg and seg != ".")


def classify_line(line: str) -> Optional[PatternEntry]:
    """Return the PatternEntry for a raw line, or None for blanks and comments."""
    text = line.rstrip("\r\n")
    stripped = text.strip()
    if not stripped or stripped.startswith(COMMENT):
        return None

    negated = stripped.startswith(NEGATION)
    body = stripped[1:] if negated else stripped
    kind = PatternKind.EXCEPTION if negated else PatternKind.CLASSIC

    # `dir/*` ignores everything directly inside a literal directory; `/*` is the root form
    contents_only = False
    head, sep, tail = body.rpartition("/")
    if sep and tail == "*" and not _has_wildcard(head):
        contents_only = True
        body = head

    if _has_wildcard(body):
        return PatternEntry(kind=PatternKind.GENERIC, raw=text)

    segments = normalize_path(body)
    if not segments and not contents_only:
        # "/", "!" and friends: keep the line, never drop it
        return PatternEntry(kind=PatternKind.GENERIC, raw=text)
    return PatternEntry(kind=kind, segments=segments, contents_only=contents_only, raw=text)


def parse_lines(lines: Iterable[str]) -> List[PatternLine]:
    return [PatternLine(text=line.rstrip("\r\n"), entry=classify_line(line)) for line in lines]


def format_entry(entry: PatternEntry) -> str:
    """Render an entry in the canonical anchored form (always a leading '/')."""
    if entry.kind == PatternKind.GENERIC:
        return entry.raw
    path = "/" + "/".join(entry.segments)
    if entry.contents_only:
        path = path.rstrip("/") + "/*"
    if entry.kind == PatternKind.EXCEPTION:
        return NEGATION + path
    return path


def split_scanned_path(rel_path: str) -> Optional[Tuple[str, ...]]:
    """Split a scanned, root-relative posix path into segments.

    Returns None when the path cannot take part in the tree: empty, '.' or '..'
    segments, or names that would not survive a trip through the ignore file.
    """
    if not rel_path:
        return None
    parts = tuple(rel_path.split("/"))
    for name in parts:
        if name in ("", ".", ".."):
            return None
        if name != name.strip():
            return None
        if any(ch in name for ch in UNSAFE_NAME_CHARS):
            return None
    return parts
