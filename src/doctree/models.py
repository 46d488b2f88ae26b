"""Data models for docblock extraction."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DocEntry:
    """A documented function, constant, hook or method."""

    name: str
    doc: str  # Description, whitespace-collapsed, may be empty
    annotations: list[str] = field(default_factory=list)  # Raw "@tag ..." fragments


@dataclass
class ClassEntry:
    """A documented class, interface or trait."""

    name: str
    doc: str
    annotations: list[str] = field(default_factory=list)
    methods: list[DocEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ClassBoundary:
    """Line indexes of a class body's opening and matching closing brace."""

    start: int
    end: int


@dataclass
class SymbolTable:
    """Everything extracted from a single file."""

    classes: list[ClassEntry] = field(default_factory=list)
    functions: list[DocEntry] = field(default_factory=list)
    constants: list[DocEntry] = field(default_factory=list)
    hooks: list[DocEntry] = field(default_factory=list)
    file_doc: str = ""


@dataclass
class FileDocs:
    """A scanned file, keyed by its display path."""

    path: str  # Relative to the source root, "/" separated
    symbols: SymbolTable
