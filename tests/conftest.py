"""Shared pytest fixtures for doctree tests."""

from pathlib import Path

import pytest


@pytest.fixture
def write_tree(tmp_path: Path):
    """Create files under tmp_path from a {relative_path: content} mapping."""

    def _write(files: dict[str, str], root: Path = tmp_path) -> Path:
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _write
