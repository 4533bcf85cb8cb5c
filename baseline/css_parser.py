"""Structural CSS parser built on tinycss2."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import logging
from typing import Any

import tinycss2

from .exceptions import CssParseError
from .model import CssParseResult, SourceLocation, StructuralFeatureNode

LOGGER = logging.getLogger(__name__)

Node = Any
_BAD_TOKEN_KINDS = frozenset({"bad-string", "bad-url", ")", "]", "}"})


def _parse_contents(content: str | Iterable[Node]) -> list[Node]:
    return tinycss2.parse_blocks_contents(content, skip_comments=True, skip_whitespace=True)


def _find_error(tokens: Iterable[Node] | None) -> Node | None:
    """Return the first tokenizer error nested anywhere in a component value list."""
    for token in tokens or ():
        if token.type == "error" and token.kind in _BAD_TOKEN_KINDS:
            return token
        nested = getattr(token, "content", None)
        if nested is None:
            nested = getattr(token, "arguments", None)
        if isinstance(nested, list):
            error = _find_error(nested)
            if error is not None:
                return error
    return None


def _serialize(tokens: Iterable[Node]) -> str:
    return tinycss2.serialize(tokens).strip()


def _location(node: Node, source: str) -> SourceLocation:
    return SourceLocation(source=source, line=node.source_line, column=node.source_column)


def _raise_for(error: Node, source: str) -> None:
    raise CssParseError(source, error.source_line, error.source_column, error.message)


def _walk(nodes: list[Node], source: str) -> Iterator[StructuralFeatureNode]:
    for node in nodes:
        if node.type == "error":
            _raise_for(node, source)

        if node.type == "declaration":
            error = _find_error(node.value)
            if error is not None:
                _raise_for(error, source)
            yield StructuralFeatureNode(
                kind="declaration",
                name=node.name,
                value=_serialize(node.value),
                location=_location(node, source),
            )
            continue

        if node.type == "at-rule":
            error = _find_error(node.prelude)
            if error is not None:
                _raise_for(error, source)
            yield StructuralFeatureNode(
                kind="at-rule",
                name=node.at_keyword,
                params=_serialize(node.prelude),
                location=_location(node, source),
            )
            if node.content is not None:
                yield from _walk(_parse_contents(node.content), source)
            continue

        if node.type == "qualified-rule":
            error = _find_error(node.prelude)
            if error is not None:
                _raise_for(error, source)
            yield StructuralFeatureNode(
                kind="selector",
                name=_serialize(node.prelude),
                location=_location(node, source),
            )
            yield from _walk(_parse_contents(node.content), source)


def parse_css(css_text: str, source_path: str) -> CssParseResult:
    """Parse CSS text into a flat, depth-first list of structural nodes.

    Top-level declarations are accepted so CSS-in-JS bodies parse without a
    wrapping rule. Raises CssParseError for text that cannot form a rule.
    """
    nodes = list(_walk(_parse_contents(css_text), source_path))
    LOGGER.debug("Parsed %d structural nodes from %s", len(nodes), source_path)
    return CssParseResult(source=source_path, nodes=nodes)
