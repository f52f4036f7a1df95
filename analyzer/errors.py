"""Exceptions raised while resolving dependency graphs."""

from pathlib import Path


class FrontdepsError(Exception):
    """Base class for dependency analysis errors."""


class ResolveError(FrontdepsError):
    """
    A relative specifier matched no file on disk.

    Attributes:
        specifier: The specifier as written in the importing file.
        parent: The importing file.
    """

    def __init__(self, specifier: str, parent: Path):
        self.specifier = specifier
        self.parent = parent
        super().__init__(f"Cannot resolve '{specifier}' from '{parent}'")

    def __reduce__(self):
        return (type(self), (self.specifier, self.parent))
