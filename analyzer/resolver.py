"""Specifier normalization, classification and on-disk resolution."""

import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Union

from graph.model import DependencyInfo
from .dialects import DEFAULT_DIALECTS, Dialect, DialectTable
from .errors import ResolveError

logger = logging.getLogger(__name__)

Normalizer = Callable[[str, Path], str]
ResolveHook = Callable[[str, Path, Normalizer], str]

ALIAS_MARKER = "~"
PARTIAL_PREFIX = "_"
SCOPE_MARKER = "@"


def module_name(name: str) -> str:
    """
    Get the package identity of an external module specifier.

    Args:
        name: A normalized, non-relative specifier.

    Returns:
        "@scope/pkg" for scoped names, otherwise the first path segment.
    """
    parts = name.split("/")
    if name.startswith(SCOPE_MARKER):
        return "/".join(parts[:2])
    return parts[0]


def is_relative(name: str) -> bool:
    return name.startswith(".")


def join_specifier(name: str, parent: Union[str, Path]) -> Path:
    """Join a relative specifier onto the parent's directory, collapsing "." and ".."."""
    parent_dir = os.path.dirname(os.path.abspath(str(parent)))
    return Path(os.path.normpath(os.path.join(parent_dir, name)))


class Resolver:
    """
    Turns raw specifiers into classified, disk-verified DependencyInfo records.

    The dialect rules come from a DialectTable so new dialects can be
    supported without changing the resolution steps.
    """

    def __init__(self, dialects: Optional[DialectTable] = None):
        self.dialects = dialects or DEFAULT_DIALECTS

    def _dialect_of(self, parent: Path) -> Dialect:
        dialect = self.dialects.classify(parent)
        if dialect is None:
            raise ValueError(f"{parent} is not an analyzable file")
        return dialect

    def normalize(self, raw: str, dialect: Dialect) -> str:
        """
        Apply the dialect's specifier rewriting rules.

        Style imports drop a leading "~" and otherwise treat bare names as
        files beside the importing file. Every dialect drops a leading "~".
        """
        name = raw
        spec = self.dialects.spec_for(dialect)

        if spec.bare_is_relative:
            if name.startswith(ALIAS_MARKER):
                name = name[len(ALIAS_MARKER):]
            elif not name.startswith((".", SCOPE_MARKER)):
                name = "./" + name

        if name.startswith(ALIAS_MARKER):
            name = name[len(ALIAS_MARKER):]

        return name

    def default_normalizer(self, raw: str, parent: Path) -> str:
        """Normalize using the dialect of ``parent``; handed to resolve hooks."""
        return self.normalize(raw, self._dialect_of(Path(parent)))

    def candidate_paths(self, name: str, parent: Union[str, Path]) -> List[Path]:
        """
        Build the ordered list of paths a relative specifier may refer to.

        Order: the joined path, its underscore partial (when the parent
        uses partials), each of those plus every candidate suffix (unless
        it already has an extension of the dialect), and finally directory
        index files when the dialect declares index names.

        Args:
            name: Normalized relative specifier.
            parent: The importing file.

        Returns:
            Candidate paths in the order they are tested.
        """
        parent = Path(parent)
        spec = self.dialects.spec_for(self._dialect_of(parent))
        joined = join_specifier(name, parent)

        bases = [joined]
        if spec.uses_partials(parent):
            bases.append(joined.with_name(PARTIAL_PREFIX + joined.name))

        candidates = list(bases)
        suffixes = spec.candidate_suffixes(parent)
        for base in bases:
            if spec.has_extension(base):
                continue
            for suffix in suffixes:
                candidates.append(base.with_name(base.name + suffix))

        for index_name in spec.index_names:
            for suffix in suffixes:
                candidates.append(joined / (index_name + suffix))

        return candidates

    def resolve_file(
        self,
        name: str,
        parent: Union[str, Path],
        specifier: Optional[str] = None,
    ) -> Path:
        """
        Resolve a relative specifier to the first existing candidate file.

        Args:
            name: Normalized relative specifier.
            parent: The importing file.
            specifier: The specifier as written, used in the error.

        Raises:
            ResolveError: If none of the candidates is an existing file.
        """
        for candidate in self.candidate_paths(name, parent):
            if candidate.is_file():
                return candidate
        raise ResolveError(specifier or name, Path(parent))

    def resolve(
        self,
        name: str,
        parent: Union[str, Path],
        raw: Optional[str] = None,
    ) -> DependencyInfo:
        """
        Classify a normalized specifier and resolve it if it is a file.

        Args:
            name: Normalized specifier.
            parent: The importing file.
            raw: The specifier as written, if it differs from ``name``.

        Returns:
            A DependencyInfo with either ``module`` or ``file`` set.

        Raises:
            ResolveError: If a relative specifier matches no file on disk.
        """
        parent = Path(os.path.abspath(str(parent)))
        dialect = self._dialect_of(parent)
        raw = name if raw is None else raw

        if not is_relative(name):
            module = module_name(name)
            logger.debug("resolve %s from %s: module %s", raw, parent, module)
            return DependencyInfo(parent=parent, dialect=dialect, raw=raw, name=name, module=module)

        file = self.resolve_file(name, parent, specifier=raw)
        logger.debug("resolve %s from %s: file %s", raw, parent, file)
        return DependencyInfo(parent=parent, dialect=dialect, raw=raw, name=name, file=file)

    def dependency(
        self,
        raw: str,
        parent: Union[str, Path],
        resolve_hook: Optional[ResolveHook] = None,
    ) -> DependencyInfo:
        """
        Normalize, classify and resolve a raw specifier.

        Args:
            raw: Specifier as written in ``parent``.
            parent: The importing file.
            resolve_hook: Optional ``(raw, parent, default_normalize)``
                callable returning the normalized name. It may delegate to
                ``default_normalize`` for the cases it does not handle.

        Returns:
            The classified DependencyInfo.

        Raises:
            ResolveError: If a relative specifier matches no file on disk.
        """
        parent = Path(os.path.abspath(str(parent)))
        if resolve_hook is not None:
            name = resolve_hook(raw, parent, self.default_normalizer)
        else:
            name = self.default_normalizer(raw, parent)
        return self.resolve(name, parent, raw=raw)
