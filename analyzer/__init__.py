"""Analyzer module for dependency extraction, resolution and graph traversal."""

from .dialects import Dialect, DialectSpec, DialectTable, DEFAULT_DIALECTS, classify
from .errors import FrontdepsError, ResolveError
from .extractors import parse_script, parse_style, default_registry
from .resolver import Resolver, module_name
from .builder import BuildOutcome, Entry, GraphBuilder, build_graph
from .discovery import iter_files, parse_file, parse_path, scan_directory

__all__ = [
    "Dialect",
    "DialectSpec",
    "DialectTable",
    "DEFAULT_DIALECTS",
    "classify",
    "FrontdepsError",
    "ResolveError",
    "parse_script",
    "parse_style",
    "default_registry",
    "Resolver",
    "module_name",
    "BuildOutcome",
    "Entry",
    "GraphBuilder",
    "build_graph",
    "iter_files",
    "parse_file",
    "parse_path",
    "scan_directory",
]
