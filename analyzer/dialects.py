"""Source dialects and the extension rules used to classify and resolve files."""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union


class Dialect(Enum):
    """Family of a source file: decides extraction grammar and resolution rules."""

    SCRIPT = "script"
    STYLE = "style"


@dataclass(frozen=True)
class DialectSpec:
    """
    Extension and naming rules for one dialect.

    Attributes:
        dialect: The dialect these rules apply to.
        extensions: Extensions classified as this dialect. A resolution
            candidate ending in one of them is never suffixed further.
        suffixes: Ordered extensions appended to extensionless candidates.
        partial_extensions: Parent extensions whose imports may name an
            underscore-prefixed partial file.
        prefer_parent_suffix: Try the parent's own extension before the
            other suffixes.
        bare_is_relative: Treat specifiers without a leading "." as files
            next to the importing file.
        index_names: Directory index basenames tried after every other
            candidate (e.g. "index"). Empty by default, so importing a
            directory fails unless a table opts in.
    """

    dialect: Dialect
    extensions: Tuple[str, ...]
    suffixes: Tuple[str, ...]
    partial_extensions: Tuple[str, ...] = ()
    prefer_parent_suffix: bool = False
    bare_is_relative: bool = False
    index_names: Tuple[str, ...] = ()

    def has_extension(self, path: Union[str, Path]) -> bool:
        """Check if the path already ends in one of this dialect's extensions."""
        return os.path.splitext(str(path))[1].lower() in self.extensions

    def uses_partials(self, parent: Union[str, Path]) -> bool:
        """Check if imports from ``parent`` may resolve to "_name" partials."""
        return os.path.splitext(str(parent))[1].lower() in self.partial_extensions

    def candidate_suffixes(self, parent: Union[str, Path]) -> Tuple[str, ...]:
        """
        Get the ordered suffixes to try for an import made from ``parent``.

        Args:
            parent: The importing file.

        Returns:
            Suffixes in the order they are tested.
        """
        if not self.prefer_parent_suffix:
            return self.suffixes

        own = os.path.splitext(str(parent))[1].lower()
        if own not in self.suffixes:
            return self.suffixes
        return (own,) + tuple(s for s in self.suffixes if s != own)


SCRIPT_SPEC = DialectSpec(
    dialect=Dialect.SCRIPT,
    extensions=(".js", ".jsx", ".es6", ".es5", ".es", ".mjs", ".cjs", ".ts", ".tsx"),
    suffixes=(".js", ".jsx", ".ts", ".tsx"),
)

STYLE_SPEC = DialectSpec(
    dialect=Dialect.STYLE,
    extensions=(".css", ".scss", ".sass", ".less"),
    suffixes=(".scss", ".sass", ".less", ".css"),
    partial_extensions=(".scss", ".sass"),
    prefer_parent_suffix=True,
    bare_is_relative=True,
)


class DialectTable:
    """Lookup from file extension to dialect rules."""

    def __init__(self, specs: Iterable[DialectSpec]):
        self._specs: Dict[Dialect, DialectSpec] = {}
        self._by_extension: Dict[str, Dialect] = {}

        for spec in specs:
            self._specs[spec.dialect] = spec
            for ext in spec.extensions:
                if ext in self._by_extension:
                    raise ValueError(
                        f"Extension {ext!r} is claimed by both "
                        f"{self._by_extension[ext].value} and {spec.dialect.value}"
                    )
                self._by_extension[ext] = spec.dialect

    def classify(self, path: Union[str, Path]) -> Optional[Dialect]:
        """
        Get the dialect of a file from its extension.

        Returns:
            The dialect, or None if the file is not analyzable.
        """
        return self._by_extension.get(os.path.splitext(str(path))[1].lower())

    def spec_for(self, dialect: Dialect) -> DialectSpec:
        return self._specs[dialect]

    def __contains__(self, dialect: Dialect) -> bool:
        return dialect in self._specs

    def __repr__(self) -> str:
        names = ", ".join(d.value for d in self._specs)
        return f"DialectTable({names})"


DEFAULT_DIALECTS = DialectTable([SCRIPT_SPEC, STYLE_SPEC])


def classify(path: Union[str, Path]) -> Optional[Dialect]:
    """Classify a file with the default dialect table."""
    return DEFAULT_DIALECTS.classify(path)
