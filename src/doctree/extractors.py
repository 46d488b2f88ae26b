"""Docblock text extractors: description and @-annotations."""

from __future__ import annotations

import re

_OPEN_RE = re.compile(r"^\s*/\*\*")
_CLOSE_RE = re.compile(r"\*/\s*$")
_CONTINUATION_RE = re.compile(r"^\s*\*\s?", re.MULTILINE)
_WHITESPACE_RE = re.compile(r"\s+")


def clean_docblock(raw: str) -> str:
    """Strip the comment delimiters and leading ``*`` markers from a docblock."""
    text = _OPEN_RE.sub("", raw, count=1)
    text = _CLOSE_RE.sub("", text, count=1)
    return _CONTINUATION_RE.sub("", text)


def docblock_description(cleaned: str) -> str:
    """Return the free text preceding the first ``@tag`` line.

    Non-empty lines up to the first line starting with ``@`` are joined with
    single spaces; the result is whitespace-collapsed and trimmed.
    """
    desc_lines = []
    for line in cleaned.split("\n"):
        line = line.strip()
        if not line:
            continue
        if line.startswith("@"):
            break
        desc_lines.append(line)
    return _WHITESPACE_RE.sub(" ", " ".join(desc_lines)).strip()


def _strip_comment_markers(line: str) -> str:
    line = line.strip()
    if line.startswith("/**"):
        line = line[3:].lstrip()
    if line.endswith("*/"):
        line = line[:-2].rstrip()
    return re.sub(r"^\* ?", "", line)


def parse_annotations(raw: str) -> list[str]:
    """Extract ``@tag ...`` fragments from a raw docblock.

    Each fragment runs from an ``@`` up to the next ``@`` on the same line.
    Any ``@`` splits, so text like ``user@example.com`` yields a spurious
    ``@example.com`` fragment.

    Args:
        raw: The docblock as it appears in source, delimiters included.

    Returns:
        Fragments in source order.
    """
    annotations = []
    for line in raw.split("\n"):
        line = _strip_comment_markers(line)
        idx = line.find("@")
        if idx == -1:
            continue
        rest = line[idx:]
        while True:
            next_at = rest.find("@", 1)
            if next_at == -1:
                annotations.append(rest.strip())
                break
            annotations.append(rest[:next_at].strip())
            rest = rest[next_at:]
    return [a for a in annotations if a and a.startswith("@")]
