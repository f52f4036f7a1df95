"""Graph data model for storing resolved dependency relationships."""

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Set, Tuple

if TYPE_CHECKING:
    from analyzer.dialects import Dialect


@dataclass(frozen=True)
class DependencyInfo:
    """
    A single classified dependency of a source file.

    Exactly one of ``module`` and ``file`` is set: ``module`` holds the
    external package identity, ``file`` the resolved on-disk path.
    """

    parent: Path
    dialect: "Dialect"
    raw: str
    name: str
    module: Optional[str] = None
    file: Optional[Path] = None

    @property
    def is_module(self) -> bool:
        """Return True if this dependency names an external module."""
        return self.module is not None


class FileRecord:
    """
    Dependencies discovered in one file.

    ``dependencies`` keeps every classified dependency in source order,
    repeats included. ``modules`` and ``relatives`` are deduplicated views
    in first-seen order.
    """

    def __init__(self, path: Path):
        self.path = path
        self._dependencies: List[DependencyInfo] = []
        self._modules: List[str] = []
        self._relatives: List[Path] = []

    @property
    def dependencies(self) -> Tuple[DependencyInfo, ...]:
        return tuple(self._dependencies)

    @property
    def modules(self) -> Tuple[str, ...]:
        return tuple(self._modules)

    @property
    def relatives(self) -> Tuple[Path, ...]:
        return tuple(self._relatives)

    def add_dependency(self, info: DependencyInfo) -> bool:
        """
        Record a dependency.

        Args:
            info: The classified dependency.

        Returns:
            True if it introduced a relative file not seen before in this
            record, which is the signal to descend into that file.
        """
        self._dependencies.append(info)

        if info.module is not None:
            if info.module not in self._modules:
                self._modules.append(info.module)
            return False

        if info.file not in self._relatives:
            self._relatives.append(info.file)
            return True
        return False

    def __repr__(self) -> str:
        return (
            f"FileRecord(path={str(self.path)!r}, dependencies={len(self._dependencies)}, "
            f"modules={len(self._modules)}, relatives={len(self._relatives)})"
        )


class DependencyGraph:
    """
    Ordered mapping from absolute file path to its FileRecord.

    Iteration order is the depth-first, first-visit order of the traversal
    that produced the graph. The mapping is read-only to callers; only the
    traversal engine adds records.
    """

    def __init__(self):
        self._records: Dict[Path, FileRecord] = {}
        self._entries: List[Path] = []

    def add_record(self, record: FileRecord) -> None:
        """Register a freshly visited file. A path is only ever added once."""
        if record.path in self._records:
            raise ValueError(f"{record.path} is already in the graph")
        self._records[record.path] = record

    def add_entry(self, path: Path) -> None:
        """Remember a traversal starting point; repeats are ignored."""
        if path not in self._entries:
            self._entries.append(path)

    @property
    def records(self) -> Dict[Path, FileRecord]:
        """Return a copy of the path -> record mapping."""
        return dict(self._records)

    @property
    def entries(self) -> List[Path]:
        """Return the files the traversal started from, in call order."""
        return list(self._entries)

    @property
    def modules(self) -> List[str]:
        """Return every distinct external module, in discovery order."""
        seen: List[str] = []
        for record in self._records.values():
            for module in record.modules:
                if module not in seen:
                    seen.append(module)
        return seen

    def keys(self):
        return self._records.keys()

    def values(self):
        return self._records.values()

    def items(self):
        return self._records.items()

    def get(self, path: Path, default: Optional[FileRecord] = None) -> Optional[FileRecord]:
        return self._records.get(Path(path), default)

    def get_targets(self, source: Path) -> List[Path]:
        """Get the relative files the source file references."""
        record = self._records.get(source)
        return list(record.relatives) if record else []

    def get_sources(self, target: Path) -> Set[Path]:
        """Get all visited files that reference the target file."""
        return {
            path for path, record in self._records.items()
            if target in record.relatives
        }

    def get_roots(self) -> List[Path]:
        """
        Get visited files that no other visited file references.

        Entry files come out here unless another file imports them.
        """
        all_targets: Set[Path] = set()
        for record in self._records.values():
            all_targets.update(record.relatives)

        return [path for path in self._records if path not in all_targets]

    def iter_edges(self) -> Iterator[Tuple[Path, Path]]:
        """Iterate over all (source, relative target) pairs."""
        for source, record in self._records.items():
            for target in record.relatives:
                yield source, target

    def iter_modules(self) -> Iterator[Tuple[Path, str]]:
        """Iterate over all (source, module name) pairs."""
        for source, record in self._records.items():
            for module in record.modules:
                yield source, module

    def __getitem__(self, path: Path) -> FileRecord:
        return self._records[Path(path)]

    def __iter__(self) -> Iterator[Path]:
        return iter(self._records)

    def __len__(self) -> int:
        """Return the number of visited files."""
        return len(self._records)

    def __contains__(self, path) -> bool:
        return Path(path) in self._records

    def __repr__(self) -> str:
        edge_count = sum(len(r.relatives) for r in self._records.values())
        module_count = sum(len(r.modules) for r in self._records.values())
        return f"DependencyGraph(files={len(self._records)}, edges={edge_count}, modules={module_count})"
