"""JSON exporter for dependency graphs (machine-friendly format)."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from graph.model import DependencyGraph, DependencyInfo


def to_json(
    graph: DependencyGraph,
    root: Path,
    base: Optional[Path] = None,
    indent: int = 2,
) -> str:
    """
    Convert a dependency graph to JSON format.

    Files keep the traversal's first-visit order.

    Args:
        graph: The dependency graph to export.
        root: Project root for relative paths.
        base: Optional base path for relative path display.
        indent: JSON indentation level.

    Returns:
        JSON string representation of the graph.
    """
    if base is None:
        base = root

    files: Dict[str, Any] = {}
    for path, record in graph.items():
        files[_get_path_str(path, base, root)] = {
            "modules": list(record.modules),
            "relatives": [_get_path_str(p, base, root) for p in record.relatives],
            "dependencies": [
                _dependency_dict(info, base, root) for info in record.dependencies
            ],
        }

    data: Dict[str, Any] = {
        "files": files,
        "modules": graph.modules,
    }

    return json.dumps(data, indent=indent)


def _dependency_dict(info: DependencyInfo, base: Path, root: Path) -> Dict[str, str]:
    entry = {"raw": info.raw, "name": info.name}
    if info.module is not None:
        entry["module"] = info.module
    else:
        entry["file"] = _get_path_str(info.file, base, root)
    return entry


def scan_to_json(parsed: Dict[str, List[str]], indent: int = 2) -> str:
    """Convert a directory scan result to JSON, keys sorted."""
    return json.dumps(parsed, indent=indent, sort_keys=True)


def _get_path_str(path: Path, base: Path, root: Path) -> str:
    """Get the string representation of a path."""
    try:
        rel_path = path.relative_to(base)
        return str(rel_path).replace("\\", "/")
    except ValueError:
        try:
            rel_path = path.relative_to(root)
            return str(rel_path).replace("\\", "/")
        except ValueError:
            return str(path).replace("\\", "/")
