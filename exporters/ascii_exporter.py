"""ASCII tree-style exporter for dependency graphs."""

from pathlib import Path
from typing import List, Optional, Set, Tuple

from graph.model import DependencyGraph


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "


def to_ascii(
    graph: DependencyGraph,
    root: Path,
    base: Optional[Path] = None,
    style: str = "tree",
    include_modules: bool = True,
) -> str:
    """
    Convert a dependency graph to ASCII tree representation.

    Each entry file of the traversal starts a tree; graphs without
    recorded entries start from the files nobody else imports. Relative
    files nest under their importer; files beyond the depth limit appear
    as leaves.

    Args:
        graph: The dependency graph to export.
        root: Project root for relative paths.
        base: Optional base path for relative path display.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).
        include_modules: If True, show external modules as leaves.

    Returns:
        ASCII tree string.
    """
    if base is None:
        base = root

    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    # Entries may sit on a cycle, so they are not always roots
    root_nodes = graph.entries or graph.get_roots()

    # Hand-built graphs made only of cycles; start from the first visited file
    if not root_nodes and len(graph):
        root_nodes = [next(iter(graph))]

    lines: List[str] = []

    for i, root_node in enumerate(root_nodes):
        _render_node(
            graph=graph,
            node=root_node,
            base=base,
            root=root,
            prefix="",
            is_last=True,
            chars=chars,
            visited=set(),
            lines=lines,
            is_root=True,
            include_modules=include_modules,
        )

        if i < len(root_nodes) - 1:
            lines.append("")

    return "\n".join(lines)


def _render_node(
    graph: DependencyGraph,
    node: Path,
    base: Path,
    root: Path,
    prefix: str,
    is_last: bool,
    chars: Tuple[str, str, str, str],
    visited: Set[Path],
    lines: List[str],
    is_root: bool = False,
    include_modules: bool = True,
) -> None:
    """
    Recursively render a file and what it imports.

    Args:
        graph: The dependency graph.
        node: Current file to render.
        base: Base path for display.
        root: Project root.
        prefix: Current line prefix for indentation.
        is_last: Whether this is the last child of its parent.
        chars: Character set (branch, last, vertical, space).
        visited: Files on the current branch (to detect cycles).
        lines: Output lines list (modified in place).
        is_root: Whether this is a root-level node.
        include_modules: If True, show external modules.
    """
    branch, last, vertical, space = chars

    display_path = _get_display_path(node, base, root)

    is_cycle = node in visited
    cycle_marker = " [*]" if is_cycle else ""

    if is_root:
        lines.append(f"{display_path}{cycle_marker}")
    else:
        connector = last if is_last else branch
        lines.append(f"{prefix}{connector}{display_path}{cycle_marker}")

    if is_cycle:
        return

    visited.add(node)

    children = graph.get_targets(node)
    modules: List[str] = []
    if include_modules:
        record = graph.get(node)
        modules = list(record.modules) if record else []

    total_items = len(children) + len(modules)
    new_prefix = "" if is_root else prefix + (space if is_last else vertical)

    for index, child in enumerate(children, start=1):
        _render_node(
            graph=graph,
            node=child,
            base=base,
            root=root,
            prefix=new_prefix,
            is_last=(index == total_items),
            chars=chars,
            visited=visited,
            lines=lines,
            is_root=False,
            include_modules=include_modules,
        )

    for index, module in enumerate(modules, start=len(children) + 1):
        connector = last if index == total_items else branch
        lines.append(f"{new_prefix}{connector}{module} [MODULE]")

    # Allow the same file under other branches, still catching cycles
    visited.discard(node)


def _get_display_path(node: Path, base: Path, root: Path) -> str:
    """Get the display path for a node."""
    try:
        rel_path = node.relative_to(base)
        return str(rel_path).replace("\\", "/")
    except ValueError:
        try:
            rel_path = node.relative_to(root)
            return str(rel_path).replace("\\", "/")
        except ValueError:
            return str(node).replace("\\", "/")
