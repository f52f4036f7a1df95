"""File discovery and extraction-only scanning of directory trees."""

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from pathspec import PathSpec

from .dialects import DEFAULT_DIALECTS, DialectTable
from .extractors import ExtractorRegistry, default_registry

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."


def is_hidden(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


def iter_files(root: Path) -> Iterator[Path]:
    """
    Iterate over the non-hidden files of a directory tree.

    Hidden files are skipped, and so is everything below a hidden
    directory.

    Args:
        root: Root directory to scan.

    Yields:
        Path objects for each file, directories in sorted order.
    """
    def _walk(current: Path) -> Iterator[Path]:
        for entry in sorted(current.iterdir()):
            if is_hidden(entry.name):
                continue
            if entry.is_dir():
                yield from _walk(entry)
            elif entry.is_file():
                yield entry

    yield from _walk(Path(root))


def compile_rules(include: Union[None, str, Iterable[str]]) -> Optional[PathSpec]:
    """
    Compile gitignore-style include patterns.

    Returns:
        The compiled spec, or None when there are no patterns (include all).
    """
    if include is None:
        return None
    if isinstance(include, str):
        include = [include]
    lines = list(include)
    if not lines:
        return None
    return PathSpec.from_lines("gitwildmatch", lines)


def get_relative_path(file_path: Path, root: Path) -> str:
    """Get the POSIX path of a file relative to root."""
    return file_path.relative_to(root).as_posix()


def parse_file(
    file_path: Path,
    registry: Optional[ExtractorRegistry] = None,
    dialects: Optional[DialectTable] = None,
) -> Optional[List[str]]:
    """
    Extract the raw specifiers of one file.

    Args:
        file_path: Path to the file to parse.
        registry: Extractor per dialect (default: built-in extractors).
        dialects: Dialect rules (default: built-in table).

    Returns:
        Raw specifiers in source order, or None if the file is not
        analyzable.
    """
    registry = default_registry() if registry is None else registry
    dialect = (dialects or DEFAULT_DIALECTS).classify(file_path)
    extractor = registry.get(dialect) if dialect is not None else None
    if extractor is None:
        return None

    logger.debug("parse file: file = %s", file_path)
    return list(extractor(Path(file_path).read_text(encoding="utf-8")))


def scan_directory(
    root: Path,
    include: Union[None, str, Iterable[str]] = None,
    registry: Optional[ExtractorRegistry] = None,
    dialects: Optional[DialectTable] = None,
) -> Dict[str, List[str]]:
    """
    Extract the raw specifiers of every matching file under a directory.

    No resolution or recursion happens here.

    Args:
        root: Directory to scan.
        include: Gitignore-style patterns matched against root-relative
            paths. None or empty includes every file.
        registry: Extractor per dialect.
        dialects: Dialect rules.

    Returns:
        Mapping from root-relative POSIX path to raw specifiers. Files that
        are not analyzable or have no dependencies are left out.
    """
    root = Path(root)
    rules = compile_rules(include)
    registry = default_registry() if registry is None else registry
    logger.debug("parse dir: root = %s", root)

    parsed: Dict[str, List[str]] = {}
    for file_path in iter_files(root):
        rel_path = get_relative_path(file_path, root)
        if rules is not None and not rules.match_file(rel_path):
            continue

        deps = parse_file(file_path, registry=registry, dialects=dialects)
        if deps:
            parsed[rel_path] = deps

    return parsed


def parse_path(
    path: Union[str, Path],
    include: Union[None, str, Iterable[str]] = None,
    registry: Optional[ExtractorRegistry] = None,
    dialects: Optional[DialectTable] = None,
) -> Union[None, List[str], Dict[str, List[str]]]:
    """
    Parse a directory with scan_directory, or a single file with parse_file.

    Raises:
        OSError: If the path does not exist or cannot be read.
    """
    path = Path(path)
    if path.is_dir():
        return scan_directory(path, include=include, registry=registry, dialects=dialects)
    if not path.exists():
        raise FileNotFoundError(f"No such file or directory: '{path}'")
    return parse_file(path, registry=registry, dialects=dialects)
