"""Documentation generator entry point.

Generates a single Markdown file summarising the documented classes,
methods, functions, constants and hooks found under a source directory:

    doctree src docs/structure.md --show-annotations
    doctree --src-dir=src --ignore=vendor,dist --include constants=false
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from .config import DocTreeConfig
from .errors import ConfigError, OutputWriteError
from .generators import generate_markdown
from .models import FileDocs
from .scanner import extract_docblocks
from .walker import walk

log = logging.getLogger(__name__)

def _display_path(path: Path, root: Path) -> str:
    """Path relative to the source root, always "/" separated."""
    try:
        rel = os.path.relpath(path, root)
    except ValueError:
        rel = str(path)
    return rel.replace("\\", "/")


def build_docs(config: DocTreeConfig) -> str:
    """Scan ``config.src_dir`` and return the rendered document."""
    root = Path(config.src_dir)
    # Whole-path string order: "a.js" before "a/x.js"
    files = sorted(
        walk(root, config.extensions, config.exclude_extensions, config.ignore),
        key=lambda p: _display_path(p, root),
    )
    log.debug("Found %d files under %s", len(files), root)

    docs: list[FileDocs] = []
    for path in files:
        rel_path = _display_path(path, root)
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            log.warning("Skipping unreadable file: %s (%s)", rel_path, e)
            continue

        symbols = extract_docblocks(content, config.include)
        log.debug(
            "%s: %d classes, %d functions, %d constants, %d hooks",
            rel_path,
            len(symbols.classes),
            len(symbols.functions),
            len(symbols.constants),
            len(symbols.hooks),
        )
        docs.append(FileDocs(path=rel_path, symbols=symbols))

    return generate_markdown(
        docs, config.include, config.labels, config.show_annotations
    )


def write_output(text: str, output_file: str | Path) -> Path:
    """Write the document as UTF-8, creating parent directories.

    Raises:
        OutputWriteError: If the directory or file cannot be written.
    """
    path = Path(output_file)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(
            f"Error writing file: {path}: {e}", path=str(path)
        ) from e
    return path


def run(config: DocTreeConfig) -> bool:
    """Generate and write the documentation.

    Failures are logged, never raised.

    Returns:
        True if the file was written.
    """
    try:
        text = build_docs(config)
        path = write_output(text, config.output_file)
    except OutputWriteError as e:
        log.error("%s", e)
        return False
    except Exception:
        log.exception("Unexpected error during documentation generation")
        return False

    print(f"Documentation generated at: {path}")
    return True


def _parse_pairs(values: tuple[str, ...], option: str) -> dict[str, str]:
    pairs = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(
                f"expected KEY=VALUE, got {item!r}", param_hint=option
            )
        pairs[key.strip()] = value
    return pairs


def _parse_bool(value: str) -> bool:
    """A bare ``KEY=`` switches the flag on."""
    if not value.strip():
        return True
    return click.BOOL.convert(value, None, click.get_current_context())


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("src_dir_arg", metavar="[SRC_DIR]", required=False)
@click.argument("output_file_arg", metavar="[OUTPUT_FILE]", required=False)
@click.option("--src-dir", help="Source directory to analyze (default: src).")
@click.option("--output-file", help="Output file (default: docs/structure.md).")
@click.option("--extensions", help="File extensions to analyze, comma-separated.")
@click.option("--exclude-extensions", help="Extensions to exclude, comma-separated.")
@click.option("--ignore", help="Extra directories/files to ignore, comma-separated.")
@click.option(
    "--include",
    "include_pairs",
    multiple=True,
    metavar="KEY=BOOL",
    help="Toggle toc, classes, methods, functions, constants or hooks.",
)
@click.option(
    "--label",
    "label_pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Override a label, e.g. docTitle='My API'.",
)
@click.option(
    "--show-annotations",
    "--annotations",
    "show_annotations",
    is_flag=True,
    help="Show @-annotations from docblocks.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(
    src_dir_arg,
    output_file_arg,
    src_dir,
    output_file,
    extensions,
    exclude_extensions,
    ignore,
    include_pairs,
    label_pairs,
    show_annotations,
    verbose,
):
    """Code documentation generator with annotations."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    include = {
        key: _parse_bool(value)
        for key, value in _parse_pairs(include_pairs, "--include").items()
    }
    labels = _parse_pairs(label_pairs, "--label")

    try:
        config = DocTreeConfig.from_options(
            {
                "srcDir": src_dir or src_dir_arg,
                "outputFile": output_file or output_file_arg,
                "extensions": extensions,
                "excludeExtensions": exclude_extensions,
                "ignore": ignore,
                "include": include,
                "labels": labels,
                "showAnnotations": show_annotations,
            }
        )
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    run(config)


if __name__ == "__main__":
    main()
