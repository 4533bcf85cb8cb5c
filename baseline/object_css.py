"""Convert JavaScript-style style objects into CSS declaration text."""

from __future__ import annotations

from collections.abc import Mapping
import re

_VENDOR_PREFIX_RE = re.compile(r"^(?:[A-Z]|ms[A-Z])")
_LOWER_UPPER_RE = re.compile(r"([a-z0-9])([A-Z])")
_UPPER_RUN_RE = re.compile(r"([A-Z])([A-Z][a-z])")
_NESTED_KEY_PREFIXES = ("&", ":", "@")
_INDENT = "  "

UNITLESS_PROPERTIES = frozenset(
    {
        "opacity",
        "z-index",
        "font-weight",
        "line-height",
        "flex",
        "flex-grow",
        "flex-shrink",
        "order",
        "zoom",
        "animation-iteration-count",
        "column-count",
        "fill-opacity",
        "flood-opacity",
        "stop-opacity",
        "stroke-dasharray",
        "stroke-dashoffset",
        "stroke-miterlimit",
        "stroke-opacity",
        "stroke-width",
    }
)


def camel_to_kebab(name: str) -> str:
    """Convert camelCase to kebab-case (WebkitTransform -> -webkit-transform)."""
    if _VENDOR_PREFIX_RE.match(name):
        name = f"-{name}"
    name = _LOWER_UPPER_RE.sub(r"\1-\2", name)
    name = _UPPER_RUN_RE.sub(r"\1-\2", name)
    return name.lower()


def format_number(value: int | float) -> str:
    """Render a number the way JavaScript's String() does for finite values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def add_units(prop: str, value: int | float) -> str:
    """Append px to numeric values unless the property is unitless."""
    if prop in UNITLESS_PROPERTIES:
        return format_number(value)
    return f"{format_number(value)}px"


def value_to_css(value: object, prop: str) -> str | None:
    """Convert a style value to CSS text, or None when it cannot be rendered."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return add_units(prop, value)
    if isinstance(value, (list, tuple)):
        parts = [part for part in (value_to_css(item, prop) for item in value) if part is not None]
        return " ".join(parts)
    return None


def _is_nested_key(key: str) -> bool:
    return key.startswith(_NESTED_KEY_PREFIXES)


def object_to_css(obj: Mapping[str, object], indent: str = "") -> str:
    """Convert a style object to CSS, expanding nested selectors and at-rules."""
    lines: list[str] = []

    for key, value in obj.items():
        if _is_nested_key(key):
            if isinstance(value, Mapping):
                lines.append(f"{indent}{key} {{")
                lines.append(object_to_css(value, indent + _INDENT))
                lines.append(f"{indent}}}")
            continue

        prop = camel_to_kebab(key)
        css_value = value_to_css(value, prop)
        if css_value is not None:
            lines.append(f"{indent}{prop}: {css_value};")

    return "\n".join(lines)


def flat_object_to_css(obj: Mapping[str, object]) -> str:
    """Convert a flat style object to CSS declarations (no nesting)."""
    declarations: list[str] = []

    for key, value in obj.items():
        prop = camel_to_kebab(key)
        css_value = value_to_css(value, prop)
        if css_value is not None:
            declarations.append(f"{prop}: {css_value};")

    return "\n".join(declarations)
