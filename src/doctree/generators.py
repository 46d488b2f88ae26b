"""Markdown output for scanned files."""

from __future__ import annotations

import re
import unicodedata

from .config import IncludeFlags, Labels
from .models import DocEntry, FileDocs, SymbolTable


def github_slug(text: str) -> str:
    """Convert a heading to the anchor GitHub generates for it."""
    text = text.replace("\\", "/").lower()
    # Drop diacritics: "ż" -> "z"
    text = unicodedata.normalize("NFD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = re.sub(r"[^a-z0-9 _-]", "", text)
    return text.replace(" ", "-")


def has_content(symbols: SymbolTable, include: IncludeFlags) -> bool:
    """Whether a file yields anything worth a section."""
    return bool(
        (include.classes and symbols.classes)
        or (include.functions and symbols.functions)
        or (include.constants and symbols.constants)
        or (include.hooks and symbols.hooks)
        or symbols.file_doc
    )


def _annotation_lines(entry: DocEntry, indent: str, show: bool) -> list[str]:
    if not show:
        return []
    return [f"{indent}- _{ann}_" for ann in entry.annotations]


def _entry_group(
    title: str, entries: list[DocEntry], call: bool, show_annotations: bool
) -> list[str]:
    lines = ["", f"**{title}:**"]
    for entry in entries:
        name = f"{entry.name}()" if call else entry.name
        lines.append(f"- `{name}` – {entry.doc}")
        lines.extend(_annotation_lines(entry, "  ", show_annotations))
    return lines


def generate_file_section(
    doc: FileDocs,
    include: IncludeFlags,
    labels: Labels,
    show_annotations: bool = False,
) -> str:
    """Render the ``### path`` section for one file.

    Order is fixed: file description, classes with their methods,
    functions, constants, hooks.
    """
    symbols = doc.symbols
    lines = [f"### {doc.path}", ""]

    if symbols.file_doc:
        lines.extend([symbols.file_doc, ""])

    if include.classes:
        for cls in symbols.classes:
            lines.append(f"- **{labels.class_title} `{cls.name}`** – {cls.doc}")
            lines.extend(_annotation_lines(cls, "  ", show_annotations))

            if include.methods:
                for method in cls.methods:
                    lines.append(f"  - `{method.name}()` – {method.doc}")
                    lines.extend(_annotation_lines(method, "    ", show_annotations))

    if include.functions and symbols.functions:
        lines.extend(
            _entry_group(
                labels.functions_title, symbols.functions, True, show_annotations
            )
        )

    if include.constants and symbols.constants:
        lines.extend(
            _entry_group(
                labels.constants_title, symbols.constants, False, show_annotations
            )
        )

    if include.hooks and symbols.hooks:
        lines.extend(
            _entry_group(labels.hooks_title, symbols.hooks, True, show_annotations)
        )

    return "\n".join(lines) + "\n"


def generate_markdown(
    docs: list[FileDocs],
    include: IncludeFlags | None = None,
    labels: Labels | None = None,
    show_annotations: bool = False,
) -> str:
    """Generate the full document.

    Args:
        docs: Scanned files in output order.
        include: Inclusion flags; defaults enable everything.
        labels: Display strings; defaults to the English labels.
        show_annotations: Render @-annotations under their owners.

    Returns:
        Markdown text: title, optional table of contents, then one section
        per file that has content.
    """
    include = include or IncludeFlags()
    labels = labels or Labels()

    toc = []
    sections = []
    for doc in docs:
        if not has_content(doc.symbols, include):
            continue
        if include.toc:
            toc.append(f"- [{doc.path}](#{github_slug(doc.path)})")
        sections.append(generate_file_section(doc, include, labels, show_annotations))

    output = f"# {labels.doc_title}\n\n"
    if include.toc and toc:
        output += f"## {labels.toc_title}\n\n" + "\n".join(toc) + "\n\n"
    output += "\n".join(sections)
    return output
