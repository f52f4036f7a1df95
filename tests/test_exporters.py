"""Tests for exporters."""

import json
import tempfile
from pathlib import Path

from analyzer.builder import build_graph
from analyzer.dialects import Dialect
from graph.model import DependencyGraph, DependencyInfo, FileRecord
from exporters.ascii_exporter import to_ascii
from exporters.json_exporter import scan_to_json, to_json


ROOT = Path("/repo")


def _sample_graph() -> DependencyGraph:
    """index.js -> lib/a.js -> index.js (cycle), index.js -> react."""
    index = ROOT / "index.js"
    a = ROOT / "lib" / "a.js"

    index_record = FileRecord(index)
    index_record.add_dependency(
        DependencyInfo(parent=index, dialect=Dialect.SCRIPT, raw="./lib/a", name="./lib/a", file=a)
    )
    index_record.add_dependency(
        DependencyInfo(parent=index, dialect=Dialect.SCRIPT, raw="~react", name="react", module="react")
    )

    a_record = FileRecord(a)
    a_record.add_dependency(
        DependencyInfo(parent=a, dialect=Dialect.SCRIPT, raw="../index", name="../index", file=index)
    )

    graph = DependencyGraph()
    graph.add_record(index_record)
    graph.add_record(a_record)
    return graph


class TestJSONExporter:
    """Tests for JSON exporter."""

    def test_empty_graph(self):
        """Test exporting empty graph."""
        data = json.loads(to_json(DependencyGraph(), ROOT))

        assert data == {"files": {}, "modules": []}

    def test_files_and_dependencies(self):
        """Test relative paths, order and dependency entries."""
        data = json.loads(to_json(_sample_graph(), ROOT))

        assert list(data["files"]) == ["index.js", "lib/a.js"]
        assert data["modules"] == ["react"]

        index = data["files"]["index.js"]
        assert index["modules"] == ["react"]
        assert index["relatives"] == ["lib/a.js"]
        assert index["dependencies"] == [
            {"raw": "./lib/a", "name": "./lib/a", "file": "lib/a.js"},
            {"raw": "~react", "name": "react", "module": "react"},
        ]

    def test_base_path(self):
        """Test display relative to another base."""
        data = json.loads(to_json(_sample_graph(), ROOT, base=ROOT / "lib"))

        assert list(data["files"]) == ["index.js", "a.js"]

    def test_scan_to_json(self):
        """Test the scan mapping output."""
        data = json.loads(scan_to_json({"b.js": ["x"], "a.js": ["./b"]}))

        assert data == {"a.js": ["./b"], "b.js": ["x"]}


class TestASCIIExporter:
    """Tests for ASCII exporter."""

    def test_empty_graph(self):
        """Test exporting empty graph."""
        assert to_ascii(DependencyGraph(), ROOT) == ""

    def test_cycle_tree(self):
        """Test a cyclic graph rendered from the first file."""
        output = to_ascii(_sample_graph(), ROOT)

        assert output.split("\n") == [
            "index.js",
            "├── lib/a.js",
            "│   └── index.js [*]",
            "└── react [MODULE]",
        ]

    def test_ascii_style_without_modules(self):
        """Test pure ASCII characters and hidden modules."""
        output = to_ascii(_sample_graph(), ROOT, style="ascii", include_modules=False)

        assert output.split("\n") == [
            "index.js",
            "\\-- lib/a.js",
            "    \\-- index.js [*]",
        ]

    def test_multiple_roots(self):
        """Test that separate entries produce separate trees."""
        graph = DependencyGraph()
        graph.add_record(FileRecord(ROOT / "a.js"))
        graph.add_record(FileRecord(ROOT / "b.scss"))

        assert to_ascii(graph, ROOT) == "a.js\n\nb.scss"

    def test_cyclic_entry_beside_root(self):
        """Test that an entry on a cycle still starts its own tree."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "a.js").write_text('import "./b";\n', encoding="utf-8")
            (root / "b.js").write_text('import "./a";\n', encoding="utf-8")
            (root / "c.js").write_text('import "pkg";\n', encoding="utf-8")

            graph = build_graph([root / "a.js", root / "c.js"])

            assert to_ascii(graph, root).split("\n") == [
                "a.js",
                "└── b.js",
                "    └── a.js [*]",
                "",
                "c.js",
                "└── pkg [MODULE]",
            ]

    def test_entries_before_roots(self):
        """Test that recorded entries replace the inferred roots."""
        graph = _sample_graph()
        graph.add_entry(ROOT / "lib" / "a.js")

        assert to_ascii(graph, ROOT, include_modules=False).split("\n") == [
            "lib/a.js",
            "└── index.js",
            "    └── lib/a.js [*]",
        ]
