"""Tests for the command line interface."""

import json
import tempfile
from pathlib import Path

from cli import main, make_module_filter


def _touch(root: Path, rel: str, content: str = "") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _make_project(root: Path) -> None:
    _touch(root, "src/index.js", 'import "react";\nimport "./util";\n')
    _touch(root, "src/util.js", 'import "lodash/get";\n')


class TestGraphCommand:
    """Tests for building and printing a graph."""

    def test_ascii_output(self, capsys):
        """Test the default tree output."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _make_project(root)

            code = main([str(root / "src/index.js"), "--relative-to", str(root)])

            out = capsys.readouterr().out
            assert code == 0
            assert out.splitlines() == [
                "src/index.js",
                "├── src/util.js",
                "│   └── lodash [MODULE]",
                "└── react [MODULE]",
            ]

    def test_json_output_file(self):
        """Test JSON written to a file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _make_project(root)
            output = root / "graph.json"

            code = main([
                str(root / "src/index.js"),
                "-f", "json",
                "-o", str(output),
                "--relative-to", str(root),
            ])

            data = json.loads(output.read_text(encoding="utf-8"))
            assert code == 0
            assert list(data["files"]) == ["src/index.js", "src/util.js"]
            assert data["modules"] == ["react", "lodash"]

    def test_max_depth(self, capsys):
        """Test limiting the walk to the entry."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _make_project(root)

            code = main([
                str(root / "src/index.js"),
                "-f", "json",
                "--max-depth", "1",
                "--relative-to", str(root),
            ])

            data = json.loads(capsys.readouterr().out)
            assert code == 0
            assert list(data["files"]) == ["src/index.js"]

    def test_exclude_module(self, capsys):
        """Test dropping imports of an external module."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _make_project(root)

            code = main([
                str(root / "src/index.js"),
                "-f", "json",
                "--exclude-module", "react",
                "--relative-to", str(root),
            ])

            data = json.loads(capsys.readouterr().out)
            assert code == 0
            assert data["modules"] == ["lodash"]

    def test_unresolved_reference(self, capsys):
        """Test that a missing file is reported with exit code 1."""
        with tempfile.TemporaryDirectory() as tmpdir:
            entry = _touch(Path(tmpdir), "index.js", 'import "./missing";\n')

            code = main([str(entry)])

            err = capsys.readouterr().err
            assert code == 1
            assert "Cannot resolve './missing'" in err

    def test_invalid_depth(self, capsys):
        """Test that a depth of zero is an error."""
        with tempfile.TemporaryDirectory() as tmpdir:
            entry = _touch(Path(tmpdir), "index.js")

            assert main([str(entry), "--max-depth", "0"]) == 1
            assert "max_depth" in capsys.readouterr().err


class TestScanCommand:
    """Tests for --scan mode."""

    def test_scan(self, capsys):
        """Test raw specifiers per file as JSON."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _make_project(root)

            code = main([str(root), "--scan", "--include", "src/util.js"])

            assert code == 0
            assert json.loads(capsys.readouterr().out) == {"src/util.js": ["lodash/get"]}

    def test_scan_requires_directory(self, capsys):
        """Test that --scan rejects files."""
        with tempfile.TemporaryDirectory() as tmpdir:
            entry = _touch(Path(tmpdir), "index.js")

            assert main([str(entry), "--scan"]) == 1
            assert "is not a directory" in capsys.readouterr().err


class TestModuleFilter:
    """Tests for the module filter helper."""

    def test_filter(self):
        """Test which specifiers the filter keeps."""
        keep = make_module_filter({"react", "@scope/ui"})
        parent = Path("/repo/index.js")

        assert not keep("react", parent)
        assert not keep("react/dom", parent)
        assert not keep("~react", parent)
        assert not keep("@scope/ui/button", parent)
        assert keep("./react", parent)
        assert keep("lodash", parent)

    def test_style_bare_import_is_a_file(self):
        """Test that a bare style sheet import is kept as a local file."""
        keep = make_module_filter({"base", "normalize.css"})
        parent = Path("/repo/styles/main.scss")

        assert keep("base", parent)
        assert keep("./base", parent)
        assert not keep("~normalize.css", parent)

    def test_single_alias_marker(self):
        """Test that only one leading "~" is removed before matching."""
        keep = make_module_filter({"react"})

        assert keep("~~react", Path("/repo/index.js"))

    def test_exclude_module_keeps_style_partial(self, capsys):
        """Test excluding a module named like a local partial."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            entry = _touch(root, "main.scss", '@import "base";\n@import "~base";\n')
            _touch(root, "_base.scss")

            code = main([
                str(entry),
                "-f", "json",
                "--exclude-module", "base",
                "--relative-to", str(root),
            ])

            data = json.loads(capsys.readouterr().out)
            assert code == 0
            assert list(data["files"]) == ["main.scss", "_base.scss"]
            assert data["modules"] == []
