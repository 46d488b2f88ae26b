"""End-to-end tests for the run driver and command line."""

import logging
from pathlib import Path
from textwrap import dedent

from click.testing import CliRunner

from doctree.cli import build_docs, main, run, write_output
from doctree.config import DocTreeConfig
from doctree.errors import OutputWriteError

FOO_JS = dedent(
    """\
    /**
     * Adds two numbers.
     * @param a
     */
    function add(a, b) { return a + b; }
    """
)


def _config(tmp_path: Path, **options) -> DocTreeConfig:
    return DocTreeConfig.from_options(
        {
            "srcDir": str(tmp_path / "src"),
            "outputFile": str(tmp_path / "docs" / "structure.md"),
            **options,
        }
    )


class TestRun:
    def test_end_to_end(self, write_tree, tmp_path, capsys):
        write_tree({"src/foo.js": FOO_JS})
        assert run(_config(tmp_path)) is True

        output = (tmp_path / "docs" / "structure.md").read_text(encoding="utf-8")
        assert output.startswith("# Project Documentation\n")
        assert "- [foo.js](#foojs)" in output
        assert "### foo.js" in output
        assert "**Global Functions:**\n- `add()` – Adds two numbers.\n" in output
        assert "Documentation generated at:" in capsys.readouterr().out

    def test_sorted_relative_paths(self, write_tree, tmp_path):
        write_tree(
            {
                "src/zeta.js": "/** Z. */\nfunction z() {}\n",
                "src/lib/alpha.php": "<?php\n/** A. */\nfunction a() {}\n",
                "src/node_modules/dep/index.js": "/** Dep. */\nfunction dep() {}\n",
            }
        )
        output = build_docs(_config(tmp_path))
        assert output.index("### lib/alpha.php") < output.index("### zeta.js")
        assert "dep()" not in output

    def test_file_sorts_before_same_named_directory(self, write_tree, tmp_path):
        write_tree(
            {
                "src/a/x.js": "/** X. */\nfunction x() {}\n",
                "src/a.js": "/** A. */\nfunction a() {}\n",
                "src/a-b.js": "/** AB. */\nfunction ab() {}\n",
            }
        )
        output = build_docs(_config(tmp_path))
        headings = [line for line in output.split("\n") if line.startswith("### ")]
        assert headings == ["### a-b.js", "### a.js", "### a/x.js"]

    def test_file_without_docblocks_has_no_section(self, write_tree, tmp_path):
        write_tree({"src/plain.js": "function x() {}\n", "src/foo.js": FOO_JS})
        output = build_docs(_config(tmp_path))
        assert "plain.js" not in output

    def test_unreadable_file_warns_and_continues(
        self, write_tree, tmp_path, monkeypatch, caplog
    ):
        write_tree({"src/bad.js": FOO_JS, "src/foo.js": FOO_JS})
        original = Path.read_text

        def flaky(self, *args, **kwargs):
            if self.name == "bad.js":
                raise PermissionError("denied")
            return original(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", flaky)
        with caplog.at_level(logging.WARNING, logger="doctree.cli"):
            output = build_docs(_config(tmp_path))

        assert "### foo.js" in output
        assert "### bad.js" not in output
        assert "Skipping unreadable file: bad.js" in caplog.text

    def test_write_failure_is_reported(self, write_tree, tmp_path, caplog):
        write_tree({"src/foo.js": FOO_JS, "blocker": "not a directory"})
        config = _config(tmp_path, outputFile=str(tmp_path / "blocker" / "out.md"))
        with caplog.at_level(logging.ERROR, logger="doctree.cli"):
            assert run(config) is False
        assert "Error writing file" in caplog.text

    def test_unexpected_error_is_caught(
        self, write_tree, tmp_path, monkeypatch, caplog
    ):
        write_tree({"src/foo.js": FOO_JS})

        def boom(*args, **kwargs):
            raise RuntimeError("scanner exploded")

        monkeypatch.setattr("doctree.cli.extract_docblocks", boom)
        with caplog.at_level(logging.ERROR, logger="doctree.cli"):
            assert run(_config(tmp_path)) is False
        assert "Unexpected error" in caplog.text
        assert not (tmp_path / "docs" / "structure.md").exists()


def test_write_output_creates_parents(tmp_path):
    path = write_output("# Doc\n", tmp_path / "a" / "b" / "out.md")
    assert path.read_text(encoding="utf-8") == "# Doc\n"


def test_write_output_error(tmp_path):
    (tmp_path / "file").write_text("x")
    try:
        write_output("# Doc\n", tmp_path / "file" / "out.md")
    except OutputWriteError as e:
        assert e.path == str(tmp_path / "file" / "out.md")
    else:
        raise AssertionError("expected OutputWriteError")


class TestCommandLine:
    def test_positional_arguments(self, write_tree, tmp_path):
        write_tree({"src/foo.js": FOO_JS})
        out = tmp_path / "out" / "doc.md"
        result = CliRunner().invoke(
            main, [str(tmp_path / "src"), str(out), "--show-annotations"]
        )
        assert result.exit_code == 0, result.output
        assert "Documentation generated at:" in result.output
        text = out.read_text(encoding="utf-8")
        assert "- `add()` – Adds two numbers.\n  - _@param a_\n" in text

    def test_options(self, write_tree, tmp_path):
        write_tree({"src/foo.js": FOO_JS})
        out = tmp_path / "doc.md"
        result = CliRunner().invoke(
            main,
            [
                "--src-dir",
                str(tmp_path / "src"),
                "--output-file",
                str(out),
                "--include",
                "toc=false",
                "--label",
                "docTitle=My API",
                "--annotations",
            ],
        )
        assert result.exit_code == 0, result.output
        text = out.read_text(encoding="utf-8")
        assert text.startswith("# My API\n\n### foo.js\n")
        assert "_@param a_" in text

    def test_extension_filters(self, write_tree, tmp_path):
        write_tree({"src/foo.ts": FOO_JS, "src/foo.spec.ts": FOO_JS})
        out = tmp_path / "doc.md"
        result = CliRunner().invoke(
            main,
            [
                str(tmp_path / "src"),
                str(out),
                "--extensions=.ts",
                "--exclude-extensions=.spec.ts",
            ],
        )
        assert result.exit_code == 0, result.output
        text = out.read_text(encoding="utf-8")
        assert "### foo.ts" in text
        assert "foo.spec.ts" not in text

    def test_click_boolean_spellings(self, write_tree, tmp_path):
        write_tree({"src/foo.js": FOO_JS})
        out = tmp_path / "doc.md"
        result = CliRunner().invoke(
            main,
            [
                str(tmp_path / "src"),
                str(out),
                "--include",
                "toc=no",
                "--include",
                "hooks=1",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Table of Contents" not in out.read_text(encoding="utf-8")

    def test_unknown_include_key(self, tmp_path):
        result = CliRunner().invoke(main, [str(tmp_path), "--include", "enums=true"])
        assert result.exit_code == 2

    def test_bad_boolean(self, tmp_path):
        result = CliRunner().invoke(main, [str(tmp_path), "--include", "toc=maybe"])
        assert result.exit_code == 2

    def test_malformed_label(self, tmp_path):
        result = CliRunner().invoke(main, [str(tmp_path), "--label", "docTitle"])
        assert result.exit_code == 2

    def test_write_failure_still_exits_zero(self, write_tree, tmp_path):
        write_tree({"src/foo.js": FOO_JS, "blocker": "x"})
        result = CliRunner().invoke(
            main, [str(tmp_path / "src"), str(tmp_path / "blocker" / "doc.md")]
        )
        assert result.exit_code == 0
