"""Graph builder that walks dependencies outward from entry files."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from graph.model import DependencyGraph, FileRecord
from .dialects import DEFAULT_DIALECTS, DialectTable
from .errors import ResolveError
from .extractors import ExtractorRegistry, default_registry
from .resolver import ResolveHook, Resolver

logger = logging.getLogger(__name__)

FilterHook = Callable[[str, Path], bool]


@dataclass(frozen=True)
class Entry:
    """
    A traversal starting point.

    When ``content`` is given it is analyzed instead of the file on disk,
    which lets callers inspect unsaved buffers.
    """

    path: Path
    content: Optional[str] = None


EntryLike = Union[str, Path, Entry, Tuple[str, str], Mapping[str, str]]


def _coerce_entry(entry: EntryLike) -> Entry:
    if isinstance(entry, Entry):
        path, content = entry.path, entry.content
    elif isinstance(entry, tuple):
        path, content = entry
    elif isinstance(entry, Mapping):
        path, content = entry["path"], entry.get("content")
    else:
        path, content = entry, None
    return Entry(path=Path(os.path.abspath(str(path))), content=content)


def _coerce_entries(entries: Union[EntryLike, Iterable[EntryLike]]) -> List[Entry]:
    """Accept one entry or a list of entries. A tuple is one (path, content) entry."""
    if isinstance(entries, (str, Path, Entry, tuple, Mapping)):
        return [_coerce_entry(entries)]
    return [_coerce_entry(entry) for entry in entries]


@dataclass
class _Frame:
    """One file being processed: its record, pending specifiers and depth budget."""

    record: FileRecord
    specifiers: Iterator[str]
    depth: Optional[int]


@dataclass(frozen=True)
class BuildOutcome:
    """Result of a traversal: either a complete graph or the error that stopped it."""

    graph: Optional[DependencyGraph] = None
    error: Optional[ResolveError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> DependencyGraph:
        """Return the graph, raising the stored error if the build failed."""
        if self.error is not None:
            raise self.error
        return self.graph


class GraphBuilder:
    """
    Depth-first, memoized dependency walker.

    Args:
        dialects: Dialect rules used for classification and resolution.
        registry: Extractor per dialect. Dialects without an extractor are
            treated as having nothing to analyze.
    """

    def __init__(
        self,
        dialects: Optional[DialectTable] = None,
        registry: Optional[ExtractorRegistry] = None,
    ):
        self.dialects = dialects or DEFAULT_DIALECTS
        self.registry = default_registry() if registry is None else registry
        self.resolver = Resolver(self.dialects)

    def extract(self, path: Path, content: Optional[str] = None) -> List[str]:
        """
        Get the raw specifiers of a file.

        The file is only read when it is analyzable and ``content`` is None.
        """
        dialect = self.dialects.classify(path)
        extractor = self.registry.get(dialect) if dialect is not None else None
        if extractor is None:
            logger.debug("skip unanalyzable file: %s", path)
            return []

        if content is None:
            logger.debug("parse file: %s", path)
            content = path.read_text(encoding="utf-8")
        return list(extractor(content))

    def _open(
        self,
        path: Path,
        content: Optional[str],
        depth: Optional[int],
        graph: DependencyGraph,
        filter_fn: Optional[FilterHook],
    ) -> Optional[_Frame]:
        """Create the record for a file on first visit, or None if it is skipped."""
        if depth is not None and depth <= 0:
            return None
        if path in graph:
            return None

        record = FileRecord(path)
        graph.add_record(record)

        specifiers = self.extract(path, content)
        if filter_fn is not None:
            specifiers = [s for s in specifiers if filter_fn(s, path)]

        return _Frame(record=record, specifiers=iter(specifiers), depth=depth)

    def _walk(
        self,
        entry: Entry,
        graph: DependencyGraph,
        filter_fn: Optional[FilterHook],
        resolve_fn: Optional[ResolveHook],
        max_depth: Optional[int],
    ) -> None:
        root = self._open(entry.path, entry.content, max_depth, graph, filter_fn)
        if root is None:
            return

        # Top of the stack is the file currently being processed; a new
        # relative file is opened and finished before its parent resumes.
        stack = [root]
        while stack:
            frame = stack[-1]
            raw = next(frame.specifiers, None)
            if raw is None:
                stack.pop()
                continue

            info = self.resolver.dependency(raw, frame.record.path, resolve_fn)
            if not frame.record.add_dependency(info):
                continue

            depth = None if frame.depth is None else frame.depth - 1
            child = self._open(info.file, None, depth, graph, filter_fn)
            if child is not None:
                stack.append(child)

    def build(
        self,
        entries: Union[EntryLike, Iterable[EntryLike]],
        filter_fn: Optional[FilterHook] = None,
        resolve_fn: Optional[ResolveHook] = None,
        max_depth: Optional[int] = None,
    ) -> DependencyGraph:
        """
        Build the dependency graph reachable from the entries.

        Args:
            entries: A path, an Entry, a (path, content) tuple, a
                {"path", "content"} mapping, or a list of those.
            filter_fn: ``(raw, parent) -> bool``; specifiers it rejects are
                dropped before normalization and never resolved.
            resolve_fn: ``(raw, parent, default_normalize) -> name`` hook
                replacing the default normalization.
            max_depth: Number of levels to visit, the entries being level 1.
                None means unlimited.

        Returns:
            DependencyGraph keyed by absolute path in first-visit order.

        Raises:
            ResolveError: On the first relative specifier that matches no
                file. No partial graph is returned.
            ValueError: If max_depth is less than 1.
        """
        if max_depth is not None and max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")

        graph = DependencyGraph()
        for entry in _coerce_entries(entries):
            graph.add_entry(entry.path)
            self._walk(entry, graph, filter_fn, resolve_fn, max_depth)

        logger.debug("built %r", graph)
        return graph

    def try_build(
        self,
        entries: Union[EntryLike, Iterable[EntryLike]],
        filter_fn: Optional[FilterHook] = None,
        resolve_fn: Optional[ResolveHook] = None,
        max_depth: Optional[int] = None,
    ) -> BuildOutcome:
        """Like build, but report an unresolved specifier in the outcome instead of raising."""
        try:
            graph = self.build(entries, filter_fn, resolve_fn, max_depth)
        except ResolveError as e:
            return BuildOutcome(error=e)
        return BuildOutcome(graph=graph)


def build_graph(
    entries: Union[EntryLike, Iterable[EntryLike]],
    filter_fn: Optional[FilterHook] = None,
    resolve_fn: Optional[ResolveHook] = None,
    max_depth: Optional[int] = None,
    dialects: Optional[DialectTable] = None,
    registry: Optional[ExtractorRegistry] = None,
) -> DependencyGraph:
    """
    Build a dependency graph with a one-off GraphBuilder.

    See GraphBuilder.build for the arguments.
    """
    builder = GraphBuilder(dialects=dialects, registry=registry)
    return builder.build(entries, filter_fn=filter_fn, resolve_fn=resolve_fn, max_depth=max_depth)
