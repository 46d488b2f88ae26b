"""doctree - Markdown documentation from source docblocks."""

from .config import DocTreeConfig, IncludeFlags, Labels
from .errors import ConfigError, DocTreeError, OutputWriteError
from .generators import generate_markdown, github_slug
from .models import ClassBoundary, ClassEntry, DocEntry, FileDocs, SymbolTable
from .scanner import extract_docblocks
from .walker import walk

__version__ = "1.0.1"

__all__ = [
    "ClassBoundary",
    "ClassEntry",
    "ConfigError",
    "DocEntry",
    "DocTreeConfig",
    "DocTreeError",
    "FileDocs",
    "IncludeFlags",
    "Labels",
    "OutputWriteError",
    "SymbolTable",
    "extract_docblocks",
    "generate_markdown",
    "github_slug",
    "walk",
]
