"""Run configuration.

Defaults are module-level constants. A run builds one frozen
``DocTreeConfig`` from caller options; overrides replace defaults key by
key, except ``ignore`` which is unioned with ``DEFAULT_IGNORE``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

from .errors import ConfigError

DEFAULT_SRC_DIR = "src"
DEFAULT_OUTPUT_FILE = "docs/structure.md"
DEFAULT_EXTENSIONS = (".js", ".php")

# Build, VCS and package artifacts that never hold documented sources
DEFAULT_IGNORE = (
    "doctree-cli.js",
    "vite-doctree.js",
    "tailwind.config.js",
    "node_modules",
    ".git",
    "dist",
    "build",
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "README.md",
    "LICENSE",
    "webpack.config.js",
    ".env",
    ".env.local",
    "tests",
    "test",
    "__tests__",
    "coverage",
    ".vscode",
    ".idea",
)


def _snake_case(key: str) -> str:
    """Convert an external camelCase option name to its field name."""
    out = []
    for ch in key:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


@dataclass(frozen=True)
class IncludeFlags:
    """Per-category switches for what the report renders."""

    toc: bool = True
    classes: bool = True
    methods: bool = True
    functions: bool = True
    constants: bool = True
    hooks: bool = True


@dataclass(frozen=True)
class Labels:
    """Display strings used by the report."""

    toc_title: str = "Table of Contents"
    doc_title: str = "Project Documentation"
    class_title: str = "Class"
    functions_title: str = "Global Functions"
    constants_title: str = "Constants"
    hooks_title: str = "Hooks / Events"


def _as_bool(value: Any, option: str) -> bool:
    """Accept a bool, or the strings "true", "false" and "" (on)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false", ""):
        return value.strip().lower() != "false"
    raise ConfigError(f"Option {option} must be true or false, got {value!r}")


def _as_label(value: Any, option: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"Label {option} must be a string, got {value!r}")
    return value


def _merge(default, overrides: Mapping[str, Any] | None, what: str, convert):
    """Apply camelCase or snake_case overrides to a frozen dataclass."""
    if not overrides:
        return default
    known = {f.name for f in fields(default)}
    changes = {}
    for key, value in overrides.items():
        name = _snake_case(key)
        if name not in known:
            raise ConfigError(f"Unknown {what} option: {key}")
        changes[name] = convert(value, key)
    return replace(default, **changes)


def _as_tuple(value: Any, option: str) -> tuple[str, ...]:
    """Accept a comma-separated string or any iterable of strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    try:
        return tuple(str(v) for v in value)
    except TypeError as e:
        raise ConfigError(f"Option {option} must be a list of strings") from e


@dataclass(frozen=True)
class DocTreeConfig:
    """Immutable configuration for one documentation run."""

    src_dir: str = DEFAULT_SRC_DIR
    output_file: str = DEFAULT_OUTPUT_FILE
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    exclude_extensions: tuple[str, ...] = ()
    ignore: tuple[str, ...] = DEFAULT_IGNORE
    include: IncludeFlags = field(default_factory=IncludeFlags)
    labels: Labels = field(default_factory=Labels)
    show_annotations: bool = False

    def __post_init__(self):
        if self.src_dir == ".":
            object.__setattr__(self, "src_dir", os.getcwd())

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> DocTreeConfig:
        """Build a config from caller options.

        Args:
            options: Option mapping using the external names (``srcDir``,
                ``outputFile``, ``excludeExtensions``, ``showAnnotations``,
                ``include``, ``labels``) or their snake_case spellings.
                ``None`` values are treated as absent.

        Returns:
            A frozen DocTreeConfig.

        Raises:
            ConfigError: On unknown option keys or values of the wrong type.
        """
        opts = {
            _snake_case(k): v for k, v in (options or {}).items() if v is not None
        }
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(opts) - known)
        if unknown:
            raise ConfigError(f"Unknown option: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        if "src_dir" in opts:
            kwargs["src_dir"] = str(opts["src_dir"])
        if "output_file" in opts:
            kwargs["output_file"] = str(opts["output_file"])
        if "extensions" in opts:
            kwargs["extensions"] = _as_tuple(opts["extensions"], "extensions")
        if "exclude_extensions" in opts:
            kwargs["exclude_extensions"] = _as_tuple(
                opts["exclude_extensions"], "excludeExtensions"
            )

        ignore = list(DEFAULT_IGNORE)
        for entry in _as_tuple(opts.get("ignore"), "ignore"):
            if entry not in ignore:
                ignore.append(entry)
        kwargs["ignore"] = tuple(ignore)

        kwargs["include"] = _merge(
            IncludeFlags(), opts.get("include"), "include", _as_bool
        )
        kwargs["labels"] = _merge(Labels(), opts.get("labels"), "labels", _as_label)
        kwargs["show_annotations"] = _as_bool(
            opts.get("show_annotations", False), "showAnnotations"
        )

        return cls(**kwargs)
