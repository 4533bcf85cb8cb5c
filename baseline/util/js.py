"""Syntax trees and static literal reading for JavaScript, TypeScript and JSX.

Sources are parsed with the tree-sitter TypeScript grammars (``tsx`` when JSX
is allowed, ``typescript`` otherwise). Nothing is evaluated: the helpers here
only read what is spelled out literally in the tree.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import math
import re
from typing import Any, Final

from tree_sitter import Language, Node, Parser, Tree
import tree_sitter_typescript

from ..exceptions import JsSyntaxError
from .text import ellipsize

TSX_LANGUAGE: Final = Language(tree_sitter_typescript.language_tsx())
TYPESCRIPT_LANGUAGE: Final = Language(tree_sitter_typescript.language_typescript())

MAX_CODE_POINT: Final = 0x10FFFF

_ESCAPE_RE = re.compile(
    r"\\(?:x([0-9a-fA-F]{2})|u\{([0-9a-fA-F]+)\}|u([0-9a-fA-F]{4})|(\r\n|[\n\r\u2028\u2029])|(.))",
    re.DOTALL,
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_INTEGER_FORMS = (
    (re.compile(r"0[xX]([0-9a-fA-F]+(?:_[0-9a-fA-F]+)*)n?"), 16),
    (re.compile(r"0[oO]([0-7]+(?:_[0-7]+)*)n?"), 8),
    (re.compile(r"0[bB]([01]+(?:_[01]+)*)n?"), 2),
    (re.compile(r"0([0-7]+)"), 8),
    (re.compile(r"(\d+(?:_\d+)*)n?"), 10),
)
_DECIMAL_RE = re.compile(
    r"(?:\d+(?:_\d+)*(?:\.(?:\d+(?:_\d+)*)?)?|\.\d+(?:_\d+)*)(?:[eE][+-]?\d+(?:_\d+)*)?"
)


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and its descendants in document (pre-)order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def named_children(node: Node | None) -> list[Node]:
    """Return the named children of ``node`` without comments."""
    if node is None:
        return []
    return [child for child in node.named_children if child.type != "comment"]


def unwrap(node: Node | None) -> Node | None:
    """Strip redundant parentheses around an expression."""
    while node is not None and node.type == "parenthesized_expression":
        inner = named_children(node)
        node = inner[0] if len(inner) == 1 else None
    return node


def number_value(raw: str) -> int | float | None:
    """Return the value of a numeric literal, or None when it is not one."""
    for pattern, base in _INTEGER_FORMS:
        match = pattern.fullmatch(raw)
        if match:
            return int(match.group(1).replace("_", ""), base)
    if _DECIMAL_RE.fullmatch(raw):
        return float(raw.replace("_", ""))
    return None


def _join_surrogates(text: str) -> str:
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


class Unsupported:
    """Marker for values that cannot be read without evaluating code."""

    def __repr__(self) -> str:
        return "UNSUPPORTED"


UNSUPPORTED = Unsupported()


@dataclass(frozen=True)
class TemplateLiteral:
    node: Node
    quasis: tuple[str, ...]
    substitutions: tuple[Node, ...]


class ParsedSource:
    """A syntax tree together with the UTF-8 bytes it was built from."""

    def __init__(self, data: bytes, tree: Tree) -> None:
        self.data = data
        self.tree = tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.data[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def position(self, node: Node) -> tuple[int, int]:
        """Return the 1-based line and 0-based character column of ``node``."""
        row, byte_column = node.start_point[0], node.start_point[1]
        line_start = node.start_byte - byte_column
        column = len(self.data[line_start : node.start_byte].decode("utf-8", errors="replace"))
        return row + 1, column

    def error(self, message: str, node: Node) -> JsSyntaxError:
        line, column = self.position(node)
        return JsSyntaxError(message, line, column)

    def find_all(self, *types: str) -> list[Node]:
        return [node for node in walk(self.root) if node.type in types]

    def syntax_error(self) -> JsSyntaxError | None:
        """Describe the first ERROR or MISSING node, or None for a clean tree."""
        if not self.root.has_error:
            return None
        for node in walk(self.root):
            if node.is_missing:
                return self.error(f"Missing '{node.type}'", node)
            if node.is_error:
                first_line = next(iter(self.text(node).strip().splitlines()), "")
                if not first_line:
                    return self.error("Unexpected syntax", node)
                return self.error(f"Unexpected token '{ellipsize(first_line, 24)}'", node)
        return self.error("Unexpected syntax", self.root)

    # literals

    def string_value(self, node: Node) -> str:
        """Decode a string literal, raising JsSyntaxError for invalid escapes."""
        raw = self.text(node)[1:-1]

        def replace(match: re.Match[str]) -> str:
            hex_pair, braced, four, line_break, other = match.groups()
            if line_break is not None:
                return ""
            if other is not None:
                return _SIMPLE_ESCAPES.get(other, other)
            code_point = int(hex_pair or braced or four, 16)
            if code_point > MAX_CODE_POINT:
                raise self.error("Code point out of bounds", node)
            return chr(code_point)

        return _join_surrogates(_ESCAPE_RE.sub(replace, raw))

    def number(self, node: Node) -> int | float:
        value = number_value(self.text(node))
        if value is None:
            raise self.error(f"Invalid number '{self.text(node)}'", node)
        return value

    def template(self, node: Node) -> TemplateLiteral:
        """Split a template literal into its raw text chunks and ``${...}`` nodes."""
        quasis: list[str] = []
        substitutions: list[Node] = []
        cursor = node.start_byte + 1
        for child in node.named_children:
            if child.type != "template_substitution":
                continue
            quasis.append(self.data[cursor : child.start_byte].decode("utf-8", errors="replace"))
            substitutions.append(child)
            cursor = child.end_byte
        quasis.append(self.data[cursor : node.end_byte - 1].decode("utf-8", errors="replace"))
        return TemplateLiteral(node=node, quasis=tuple(quasis), substitutions=tuple(substitutions))

    def property_key(self, node: Node | None) -> str | None:
        if node is None:
            return None
        if node.type == "property_identifier":
            return self.text(node)
        if node.type == "string":
            return self.string_value(node)
        if node.type == "number":
            value = self.number(node)
            return str(int(value)) if isinstance(value, float) and value.is_integer() else str(value)
        return None

    def object_entries(self, node: Node) -> dict[str, Node]:
        """Map each static ``key: value`` pair of an object literal to its value node.

        Spreads, computed keys, shorthand properties and methods have no entry.
        """
        entries: dict[str, Node] = {}
        for child in named_children(node):
            if child.type != "pair":
                continue
            key = self.property_key(child.child_by_field_name("key"))
            value = child.child_by_field_name("value")
            if key is not None and value is not None:
                entries[key] = value
        return entries

    def read_object(self, node: Node) -> dict[str, Any]:
        """Read an object literal into a dict, skipping entries that need evaluation."""
        result: dict[str, Any] = {}
        for key, value_node in self.object_entries(node).items():
            value = self.read_literal(value_node)
            if value is not UNSUPPORTED:
                result[key] = value
        return result

    def read_literal(self, node: Node | None) -> Any:
        """Read a static literal or return UNSUPPORTED."""
        node = unwrap(node)
        if node is None:
            return UNSUPPORTED
        kind = node.type
        if kind == "object":
            return self.read_object(node)
        if kind == "array":
            items = (self.read_literal(item) for item in named_children(node))
            return [item for item in items if item is not UNSUPPORTED]
        if kind == "string":
            return self.string_value(node)
        if kind == "number":
            value = self.number(node)
            if isinstance(value, float) and not math.isfinite(value):
                return UNSUPPORTED
            return value
        if kind == "unary_expression":
            operator = node.child_by_field_name("operator")
            argument = unwrap(node.child_by_field_name("argument"))
            if operator is not None and operator.type == "-" and argument is not None:
                if argument.type == "number":
                    value = self.read_literal(argument)
                    return UNSUPPORTED if value is UNSUPPORTED else -value
            return UNSUPPORTED
        if kind == "template_string":
            template = self.template(node)
            return UNSUPPORTED if template.substitutions else template.quasis[0]
        if kind == "true":
            return True
        if kind == "false":
            return False
        if kind == "null":
            return None
        return UNSUPPORTED

    def string_argument(self, call: Node) -> str | None:
        arguments = named_children(call.child_by_field_name("arguments"))
        if len(arguments) == 1 and arguments[0].type == "string":
            return self.string_value(arguments[0])
        return None

    def imports(self) -> tuple[str, ...]:
        """Return module specifiers from import declarations, ``import()`` and ``require()``."""
        sources: list[str] = []
        for node in walk(self.root):
            if node.type == "import_statement":
                source = node.child_by_field_name("source")
                if source is not None and source.type == "string":
                    sources.append(self.string_value(source))
            elif node.type == "call_expression":
                function = node.child_by_field_name("function")
                if function is None:
                    continue
                if function.type == "import" or (
                    function.type == "identifier" and self.text(function) == "require"
                ):
                    specifier = self.string_argument(node)
                    if specifier is not None:
                        sources.append(specifier)
        return tuple(dict.fromkeys(sources))


def parse_source(source: str, *, jsx: bool = True) -> ParsedSource:
    """Parse JavaScript or TypeScript source, raising JsSyntaxError when the tree has errors."""
    parser = Parser(TSX_LANGUAGE if jsx else TYPESCRIPT_LANGUAGE)
    data = source.encode("utf-8", errors="replace")
    parsed = ParsedSource(data, parser.parse(data))
    error = parsed.syntax_error()
    if error is not None:
        raise error
    return parsed
