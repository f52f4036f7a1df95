"""Extractors that pull raw import specifiers out of source text."""

import json
import logging
import re
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Tuple

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from .dialects import Dialect

logger = logging.getLogger(__name__)

Extractor = Callable[[str], List[str]]
ExtractorRegistry = Dict[Dialect, Extractor]


# An @import rule followed by one or more quoted, comma-separated files
AT_IMPORT_RULE = re.compile(r"""@import\s+(((\s*,\s*)?(['"])([^'"]+?)\4)+)""", re.MULTILINE)
IMPORT_FILE_RULE = re.compile(r"""(['"])([^'"]+?)\1""")
COMMENT_START_RULE = re.compile(r"//|/\*")
COMMENT_END = {"//": "\n", "/*": "*/"}

# Call targets whose first string argument is a dependency
REQUIRE_NAME = "require"
RESOLVE_NAME = "resolve"

# Single-character JavaScript escapes; any other escaped character is itself
SIMPLE_ESCAPES = {"b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v"}
LINE_TERMINATORS = "\r\n\u2028\u2029"


def _add_unique(value: str, deps: List[str]) -> None:
    if value not in deps:
        deps.append(value)


@lru_cache(maxsize=None)
def _get_parser() -> Parser:
    """
    Get the shared tree-sitter parser.

    The TSX grammar is a superset that accepts plain JavaScript, JSX and
    TypeScript, so one parser serves every script extension.
    """
    return Parser(Language(tree_sitter_typescript.language_tsx()))


def _decode_escape(sequence: str) -> str:
    """Decode one JavaScript escape sequence such as ``\\n``, ``\\x41`` or ``\\u{1F600}``."""
    body = sequence[1:]
    if not body or body[0] in LINE_TERMINATORS:
        # Line continuation
        return ""
    if body[0] in "ux" and len(body) > 1:
        return chr(int(body[1:].strip("{}"), 16))
    if body[0] in "01234567":
        return chr(int(body, 8))
    return SIMPLE_ESCAPES.get(body, body)


def _string_value(node: Optional[Node]) -> Optional[str]:
    """Get the decoded contents of a string literal node, without its quotes."""
    if node is None or node.type != "string":
        return None

    parts: List[str] = []
    for child in node.named_children:
        text = child.text.decode("utf-8")
        if child.type == "escape_sequence":
            parts.append(_decode_escape(text))
        else:
            parts.append(text)
    return "".join(parts)


def _unescape_style(value: str) -> str:
    """
    Decode backslash escapes in a style sheet import.

    Escapes follow JSON string rules; a value that is not a valid JSON
    string body is returned as written.
    """
    if "\\" not in value:
        return value
    try:
        return json.loads('"' + value + '"')
    except ValueError:
        logger.debug("keep undecoded import: %s", value)
        return value


def _is_require_call(function: Node) -> bool:
    if function.type == "import":
        return True

    if function.type == "identifier":
        return function.text == REQUIRE_NAME.encode()

    if function.type == "member_expression":
        obj = function.child_by_field_name("object")
        prop = function.child_by_field_name("property")
        return (
            obj is not None and prop is not None
            and obj.type == "identifier" and obj.text == REQUIRE_NAME.encode()
            and prop.text == RESOLVE_NAME.encode()
        )

    return False


def _dependency_of(node: Node) -> Optional[str]:
    """
    Get the specifier a syntax node imports, if it is an import site.

    Handles import and export-from declarations, TypeScript
    ``import x = require("y")`` clauses, ``require()``,
    ``require.resolve()`` and dynamic ``import()`` calls.
    """
    if node.type in ("import_statement", "export_statement", "import_require_clause"):
        return _string_value(node.child_by_field_name("source"))

    if node.type == "call_expression":
        function = node.child_by_field_name("function")
        if function is None or not _is_require_call(function):
            return None
        arguments = node.child_by_field_name("arguments")
        if arguments is None or not arguments.named_children:
            return None
        return _string_value(arguments.named_children[0])

    return None


def parse_script(content: str) -> List[str]:
    """
    Extract dependencies from JavaScript, JSX or TypeScript source.

    Args:
        content: Source text.

    Returns:
        Specifiers in order of first occurrence, without duplicates.
    """
    tree = _get_parser().parse(content.encode("utf-8"))
    deps: List[str] = []

    # Pre-order walk, children pushed in reverse to keep source order
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        dep = _dependency_of(node)
        if dep is not None:
            logger.debug("parse import: %s", dep)
            _add_unique(dep, deps)
        stack.extend(reversed(node.children))

    return deps


def _find_comments(text: str) -> List[Tuple[int, float]]:
    """Get the [start, end) ranges of line and block comments."""
    ranges: List[Tuple[int, float]] = []
    pos = 0

    while True:
        match = COMMENT_START_RULE.search(text, pos)
        if match is None:
            break
        end = text.find(COMMENT_END[match.group(0)], match.end())
        if end < 0:
            ranges.append((match.start(), float("inf")))
            break
        ranges.append((match.start(), end))
        pos = end

    return ranges


def _in_comment(index: int, ranges: List[Tuple[int, float]]) -> bool:
    return any(start <= index < end for start, end in ranges)


def parse_style(content: str) -> List[str]:
    """
    Extract ``@import`` dependencies from CSS, SCSS, Sass or Less source.

    Imports that begin inside a comment are skipped.

    Args:
        content: Source text.

    Returns:
        Specifiers in order of first occurrence, without duplicates.
    """
    comments = _find_comments(content)
    deps: List[str] = []

    for match in AT_IMPORT_RULE.finditer(content):
        if _in_comment(match.start(), comments):
            logger.debug("skip comment for %s", match.group(0))
            continue

        for file_match in IMPORT_FILE_RULE.finditer(match.group(1)):
            _add_unique(_unescape_style(file_match.group(2)), deps)

    return deps


def default_registry() -> ExtractorRegistry:
    """Get a new registry holding the built-in extractor of each dialect."""
    return {
        Dialect.SCRIPT: parse_script,
        Dialect.STYLE: parse_style,
    }
