"""Line-oriented docblock scanner.

Pairs ``/** ... */`` comment blocks with the declaration on the next
substantive line, classifies that declaration with an ordered rule list
(first match wins), and scans class bodies for documented methods.

This is not a parser: declarations are recognised by regular expressions
on a single line, and class bodies are delimited by counting braces.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .config import IncludeFlags
from .extractors import clean_docblock, docblock_description, parse_annotations
from .models import ClassBoundary, ClassEntry, DocEntry, SymbolTable


class ScanState(Enum):
    """Docblock capture state."""

    IDLE = "idle"  # No docblock waiting
    CAPTURING = "capturing"  # Inside a multi-line /** ... */
    PENDING = "pending"  # Complete docblock waiting for its declaration


class DeclKind(Enum):
    """What a matched declaration line produces."""

    FUNCTION = "function"
    CLASS = "class"
    CONSTANT = "constant"
    HOOK = "hook"
    SUPPRESS = "suppress"  # Drop the docblock without emitting anything


@dataclass(frozen=True)
class DeclarationRule:
    """A declaration pattern; group 1 (when present) captures the name."""

    name: str
    pattern: re.Pattern[str]
    kind: DeclKind


def _rule(name: str, pattern: str, kind: DeclKind) -> DeclarationRule:
    return DeclarationRule(name, re.compile(pattern), kind)


# Order matters: overlapping patterns resolve by position, not specificity.
# "const f = () => ..." is a constant; only let/var arrows reach arrow_function.
DECLARATION_RULES: tuple[DeclarationRule, ...] = (
    _rule("function", r"function\s+(\w+)\s*\(", DeclKind.FUNCTION),
    _rule(
        "class",
        r"\b(?:abstract\s+)?(?:class|interface|trait)\s+(\w+)",
        DeclKind.CLASS,
    ),
    _rule("constant", r"\bconst\s+(\w+)\s*=", DeclKind.CONSTANT),
    _rule("define", r"\bdefine\s*\(\s*[\"'](\w+)[\"']", DeclKind.CONSTANT),
    _rule("hook", r"\bon\(\s*[\"'`](\w+)[\"'`]\s*[,)]", DeclKind.HOOK),
    _rule(
        "filter_action",
        r"\badd_(?:filter|action)\s*\(\s*[\"'][^\"']+[\"']\s*,\s*[\"'](\w+)[\"']",
        DeclKind.SUPPRESS,
    ),
    _rule(
        "arrow_function",
        r"\b(?:const|let|var)\s+(\w+)\s*=\s*\(?.*\)?\s*=>",
        DeclKind.FUNCTION,
    ),
    _rule("function_expression", r"=\s*function\s*\(", DeclKind.SUPPRESS),
)

METHOD_RULE = _rule(
    "method",
    r"(?:public\s+|private\s+|protected\s+)?(?:static\s+)?function\s+(\w+)\s*\(",
    DeclKind.FUNCTION,
)

_INLINE_RE = re.compile(r"(/\*\*.*?\*/)\s*(.*)")
_BLOCK_OPEN_RE = re.compile(r"^\s*/\*\*")
_BLOCK_CLOSE_RE = re.compile(r"\*/\s*$")
_SKIP_RE = re.compile(r"^\s*$|^\s*//|^\s*\*")


def classify(line: str) -> tuple[DeclarationRule, re.Match[str]] | None:
    """Return the first rule matching a declaration line, with its match."""
    for rule in DECLARATION_RULES:
        match = rule.pattern.search(line)
        if match:
            return rule, match
    return None


class DocblockCapture:
    """Collects block-form docblocks one line at a time.

    ``feed`` consumes lines belonging to a docblock. Once the closing
    ``*/`` is seen the text becomes pending until ``take`` is called.
    Opening a new docblock replaces any pending one.
    """

    def __init__(self):
        self.state = ScanState.IDLE
        self._buffer: list[str] = []
        self._pending: str | None = None

    def feed(self, line: str) -> bool:
        """Consume ``line`` if it is part of a docblock; return whether it was."""
        opened = _BLOCK_OPEN_RE.match(line)
        if opened:
            self._buffer = [line]
            if _BLOCK_CLOSE_RE.search(line, opened.end()):
                self._finish()
            else:
                self.state = ScanState.CAPTURING
            return True
        if self.state is ScanState.CAPTURING:
            self._buffer.append(line)
            if _BLOCK_CLOSE_RE.search(line):
                self._finish()
            return True
        return False

    def _finish(self):
        self._pending = "\n".join(self._buffer) + "\n"
        self._buffer = []
        self.state = ScanState.PENDING

    def take(self) -> str | None:
        """Return the pending docblock, if any, and go back to idle."""
        pending = self._pending
        self._pending = None
        if self.state is ScanState.PENDING:
            self.state = ScanState.IDLE
        return pending


def is_skippable(line: str) -> bool:
    """Blank lines, line comments and stray ``*`` lines never resolve a docblock."""
    return bool(_SKIP_RE.match(line))


def _entry(raw: str, name: str) -> DocEntry:
    return DocEntry(
        name=name,
        doc=docblock_description(clean_docblock(raw)),
        annotations=parse_annotations(raw),
    )


def find_class_boundary(
    lines: list[str], index: int, column: int = 0
) -> ClassBoundary | None:
    """Locate the brace-delimited body of the class declared at ``index``.

    Starts at the first line at or after ``index`` containing ``{`` and
    counts every brace until the depth returns to zero. On line ``index``
    only text from ``column`` on is considered, so braces inside an inline
    docblock before the declaration are not counted.

    Returns:
        The boundary, or None if there is no opening brace or the braces
        never balance.
    """

    def text(j: int) -> str:
        return lines[j][column:] if j == index else lines[j]

    start = next((j for j in range(index, len(lines)) if "{" in text(j)), None)
    if start is None:
        return None

    depth = 0
    for j in range(start, len(lines)):
        depth += text(j).count("{") - text(j).count("}")
        if depth == 0:
            return ClassBoundary(start=start, end=j)
        if depth < 0:
            return None
    return None


def scan_class_methods(lines: list[str], boundary: ClassBoundary) -> list[DocEntry]:
    """Find documented methods strictly between the boundary lines."""
    methods = []
    capture = DocblockCapture()
    for line in lines[boundary.start + 1 : boundary.end]:
        if capture.feed(line) or is_skippable(line):
            continue
        raw = capture.take()
        if raw is None:
            continue
        match = METHOD_RULE.pattern.search(line)
        if match:
            methods.append(_entry(raw, match.group(1)))
    return methods


class _FileScan:
    """State for scanning one file. Nothing is shared between files."""

    def __init__(self, content: str):
        self.lines = content.split("\n")
        self.table = SymbolTable()
        self.file_docs: list[str] = []
        self.boundaries: dict[str, ClassBoundary] = {}

    def resolve(self, raw: str, decl: str, index: int, column: int = 0):
        """Attach ``raw`` to the declaration at ``column`` of line ``index``."""
        found = classify(decl)
        if found is None:
            self.add_file_doc(raw)
            return

        rule, match = found
        if rule.kind is DeclKind.SUPPRESS:
            return

        entry = _entry(raw, match.group(1))
        if rule.kind is DeclKind.FUNCTION:
            self.table.functions.append(entry)
        elif rule.kind is DeclKind.CONSTANT:
            self.table.constants.append(entry)
        elif rule.kind is DeclKind.HOOK:
            self.table.hooks.append(entry)
        elif rule.kind is DeclKind.CLASS:
            boundary = find_class_boundary(self.lines, index, column)
            if boundary is not None:
                self.boundaries[entry.name] = boundary
            self.table.classes.append(
                ClassEntry(
                    name=entry.name, doc=entry.doc, annotations=entry.annotations
                )
            )

    def add_file_doc(self, raw: str):
        description = docblock_description(clean_docblock(raw))
        if description:
            self.file_docs.append(description)

    def run(self) -> None:
        capture = DocblockCapture()
        for i, line in enumerate(self.lines):
            if capture.state is not ScanState.CAPTURING:
                inline = _INLINE_RE.search(line)
                if inline and inline.group(2):
                    self.resolve(inline.group(1), inline.group(2), i, inline.start(2))
                    continue

            if capture.feed(line) or is_skippable(line):
                continue

            raw = capture.take()
            if raw is not None:
                self.resolve(raw, line, i)

        # A docblock with no declaration after it documents the file
        raw = capture.take()
        if raw is not None:
            self.add_file_doc(raw)


def _dedupe(functions: list[DocEntry]) -> list[DocEntry]:
    seen: set[str] = set()
    unique = []
    for fn in functions:
        if fn.name not in seen:
            seen.add(fn.name)
            unique.append(fn)
    return unique


def extract_docblocks(content: str, include: IncludeFlags | None = None) -> SymbolTable:
    """Extract documented declarations from one file's text.

    Args:
        content: Full file contents.
        include: Inclusion flags. Class methods are scanned only when both
            ``classes`` and ``methods`` are enabled (the default).

    Returns:
        SymbolTable with classes, functions (deduplicated by name, first
        occurrence wins), constants, hooks and the file-level description.
    """
    include = include or IncludeFlags()
    scan = _FileScan(content)
    scan.run()

    table = scan.table
    if include.classes and include.methods:
        for cls in table.classes:
            boundary = scan.boundaries.get(cls.name)
            if boundary is not None:
                cls.methods = scan_class_methods(scan.lines, boundary)

    table.functions = _dedupe(table.functions)
    table.file_doc = "\n\n".join(scan.file_docs)
    return table
