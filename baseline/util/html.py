"""Single-file component parsing helpers built around BeautifulSoup."""

from __future__ import annotations

import logging
import os
from typing import Any

from bs4 import BeautifulSoup, Tag

from ..constants import DEBUG_ENV

Node = Any
LOGGER = logging.getLogger(__name__)


def parse_document(markup: str) -> BeautifulSoup:
    """Parse markup with the stdlib-backed parser so source positions are kept."""
    return BeautifulSoup(markup, "html.parser")


def top_level_blocks(document: BeautifulSoup, name: str | None = None) -> list[Tag]:
    """Return the document's root elements, optionally filtered by tag name."""
    if name is None:
        return list(document.find_all(recursive=False))
    return list(document.find_all(name, recursive=False))


def attr(node: Node | None, name: str) -> str | None:
    """Get an element attribute by name; boolean attributes read as ``""``."""
    if node is None:
        return None
    attrs = getattr(node, "attrs", None)
    if not isinstance(attrs, dict):
        return None
    value = attrs.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def has_attr(node: Node | None, name: str) -> bool:
    return attr(node, name) is not None


def raw_content(node: Node | None) -> str:
    """Return a block's inner source: raw text for style/script, markup otherwise."""
    if node is None:
        return ""
    if node.name in ("style", "script"):
        return node.get_text()
    return node.decode_contents()


def source_line(node: Node | None) -> int | None:
    line = getattr(node, "sourceline", None)
    return line if isinstance(line, int) else None


def source_column(node: Node | None) -> int | None:
    column = getattr(node, "sourcepos", None)
    return column if isinstance(column, int) else None


def debug_enabled() -> bool:
    """Check debug mode env flag."""
    return os.environ.get(DEBUG_ENV, "").strip() == "1"


def debug_log(message: str) -> None:
    """Emit debug logs to stderr in debug mode only."""
    if debug_enabled():
        LOGGER.debug("%s", message)
