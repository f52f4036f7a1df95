#!/usr/bin/env python3
"""
frontdeps CLI

A tool for resolving the import graph of front-end source files
(JavaScript, TypeScript, CSS, SCSS, Sass, Less) and printing it.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Set

from analyzer.builder import GraphBuilder
from analyzer.discovery import scan_directory
from analyzer.errors import FrontdepsError
from analyzer.resolver import Resolver, is_relative, module_name
from exporters import scan_to_json, to_ascii, to_json


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="frontdeps",
        description="Resolve the dependency graph of front-end source files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  frontdeps src/index.js                    # Dependency tree of one entry
  frontdeps src/a.js src/b.scss -f json     # Shared graph of two entries, JSON
  frontdeps src/index.js --max-depth 2      # Entry and its direct imports only
  frontdeps src/index.js --exclude-module react react-dom
  frontdeps src --scan --include "js/**"    # Raw imports of every file, no resolution
        """,
    )

    parser.add_argument(
        "entries",
        nargs="+",
        help="Entry files (or, with --scan, a single directory)",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parser.add_argument(
        "-f", "--format",
        choices=["ascii", "json"],
        default="ascii",
        help="Output format (default: ascii)",
    )

    parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="ASCII output style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )

    parser.add_argument(
        "--hide-modules",
        action="store_true",
        help="Do not list external modules in ASCII output",
    )

    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Number of levels to visit, entries being level 1 (default: unlimited)",
    )

    parser.add_argument(
        "--exclude-module",
        nargs="+",
        default=None,
        help="External modules whose imports are ignored",
    )

    parser.add_argument(
        "--relative-to",
        type=str,
        default=None,
        help="Base path for relative path display (default: current directory)",
    )

    parser.add_argument(
        "--scan",
        action="store_true",
        help="List raw imports of every file under a directory without resolving them",
    )

    parser.add_argument(
        "--include",
        nargs="+",
        default=None,
        help="Gitignore-style patterns selecting files in --scan mode",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log each parsed file and resolved import to stderr",
    )

    return parser.parse_args(args)


def make_module_filter(excluded: Set[str], resolver: Optional[Resolver] = None):
    """
    Build a filter that drops imports of the given external modules.

    Specifiers are normalized with the importing file's dialect first, so
    a bare style sheet import like "base" stays a same-directory file.
    """
    resolver = resolver or Resolver()

    def _filter(raw: str, parent: Path) -> bool:
        name = resolver.default_normalizer(raw, parent)
        if is_relative(name):
            return True
        return module_name(name) not in excluded

    return _filter


def _run_scan(parsed) -> str:
    if len(parsed.entries) != 1:
        raise ValueError("--scan takes exactly one directory")
    root = Path(parsed.entries[0])
    if not root.is_dir():
        raise NotADirectoryError(f"'{parsed.entries[0]}' is not a directory")
    return scan_to_json(scan_directory(root, include=parsed.include))


def _run_graph(parsed) -> str:
    base = Path(os.path.abspath(parsed.relative_to or os.getcwd()))

    builder = GraphBuilder()

    filter_fn = None
    if parsed.exclude_module:
        filter_fn = make_module_filter(set(parsed.exclude_module), builder.resolver)

    graph = builder.build(parsed.entries, filter_fn=filter_fn, max_depth=parsed.max_depth)

    if parsed.format == "json":
        return to_json(graph=graph, root=base)
    return to_ascii(
        graph=graph,
        root=base,
        style=parsed.ascii_style,
        include_modules=not parsed.hide_modules,
    )


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    try:
        if parsed.scan:
            output = _run_scan(parsed)
        else:
            output = _run_graph(parsed)
    except (FrontdepsError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
