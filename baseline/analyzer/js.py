"""CSS-in-JS front-end for JavaScript, TypeScript and JSX sources."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import Any

from tree_sitter import Node

from ..constants import (
    ALL_LIBRARIES,
    DYNAMIC_PLACEHOLDER,
    LIBRARY_IMPORT_SOURCES,
    STITCHES_VARIANT_KEYS,
)
from ..exceptions import JsSyntaxError
from ..model import AnalysisResult, ExtractedStyleFragment, FragmentOrigin, SourceLocation
from ..object_css import flat_object_to_css, object_to_css
from ..util.js import ParsedSource, TemplateLiteral, named_children, parse_source, unwrap
from ..util.text import is_blank

LOGGER = logging.getLogger(__name__)

_TAG_ROOTS = frozenset({"styled", "css", "createGlobalStyle", "keyframes", "injectGlobal"})
_CALL_ROOTS = frozenset({"styled", "css", "globalCss"})


def template_to_css(template: TemplateLiteral) -> str:
    """Join a template's raw text, replacing each ``${...}`` with the placeholder."""
    parts: list[str] = []
    for index, quasi in enumerate(template.quasis):
        parts.append(quasi)
        if index < len(template.substitutions):
            parts.append(DYNAMIC_PLACEHOLDER)
    return "".join(parts)


def strip_theme_tokens(obj: Mapping[str, Any]) -> dict[str, Any]:
    """Drop string values that reference design tokens (``$colors.primary``)."""
    cleaned: dict[str, Any] = {}
    for key, value in obj.items():
        if isinstance(value, str) and value.startswith("$"):
            continue
        if isinstance(value, Mapping):
            value = strip_theme_tokens(value)
        cleaned[key] = value
    return cleaned


class ImportContext:
    """Which CSS-in-JS libraries a module imports."""

    def __init__(self, sources: Sequence[str]) -> None:
        self.sources = tuple(sources)

    def imports_module(self, module: str) -> bool:
        return any(source == module or source.startswith(f"{module}/") for source in self.sources)

    def uses(self, library: str) -> bool:
        return any(self.imports_module(module) for module in LIBRARY_IMPORT_SOURCES[library])

    def prefer(self, default: FragmentOrigin, other: FragmentOrigin) -> FragmentOrigin:
        """Return ``other`` only when it is imported and ``default`` is not."""
        if self.uses(other) and not self.uses(default):
            return other
        return default


def _tagged_library(root: str, imports: ImportContext) -> FragmentOrigin:
    if root == "styled":
        if imports.imports_module("@emotion/styled"):
            return "emotion"
        if imports.uses("vue-styled-components"):
            return "vue-styled-components"
        return "styled-components"
    if root == "css":
        return imports.prefer("emotion", "styled-components")
    if root == "keyframes":
        return imports.prefer("styled-components", "emotion")
    if root == "injectGlobal":
        return imports.prefer("emotion", "styled-components")
    return "styled-components"


def _object_library(root: str, imports: ImportContext) -> FragmentOrigin:
    if root == "globalCss":
        return "stitches"
    if root == "css":
        if imports.uses("stitches"):
            return "stitches"
        if imports.uses("pinceau"):
            return "pinceau"
        return "emotion"
    if imports.uses("pinceau"):
        return "pinceau"
    if imports.uses("vue-styled-components"):
        return "vue-styled-components"
    return "stitches"


_FLAT_ORIGINS = frozenset({"vue-styled-components", "pinceau"})


def _call_chain(function: Node, parsed: ParsedSource) -> tuple[Node | None, list[str], int]:
    """Walk a callee down to its root identifier, collecting member names and inner calls."""
    members: list[str] = []
    calls = 0
    current: Node | None = function
    while current is not None:
        if current.type == "member_expression":
            prop = current.child_by_field_name("property")
            if prop is not None:
                members.append(parsed.text(prop))
            current = current.child_by_field_name("object")
        elif current.type == "call_expression":
            calls += 1
            current = current.child_by_field_name("function")
        elif current.type in ("non_null_expression", "parenthesized_expression"):
            inner = named_children(current)
            current = inner[0] if inner else None
        else:
            break
    if current is None or current.type != "identifier":
        return None, members, calls
    return current, members, calls


class _Extractor:
    def __init__(self, parsed: ParsedSource, source_path: str, imports: ImportContext) -> None:
        self.parsed = parsed
        self.source_path = source_path
        self.imports = imports
        self.fragments: list[ExtractedStyleFragment] = []
        self._consumed_templates: set[int] = set()

    def scan(self) -> None:
        for node in self.parsed.find_all("jsx_attribute", "call_expression"):
            if node.type == "jsx_attribute":
                self._css_prop(node)
            else:
                self._call(node)

    def _location(self, node: Node) -> SourceLocation:
        line, column = self.parsed.position(node)
        return SourceLocation(source=self.source_path, line=line, column=column)

    def _add_template(
        self, anchor: Node, template_node: Node, origin: FragmentOrigin, pattern: str
    ) -> None:
        if template_node.start_byte in self._consumed_templates:
            return
        self._consumed_templates.add(template_node.start_byte)
        template = self.parsed.template(template_node)
        css_text = template_to_css(template)
        if is_blank(css_text):
            return
        self.fragments.append(
            ExtractedStyleFragment(
                css_text=css_text,
                origin=origin,
                pattern=pattern,
                location=self._location(anchor),
                interpolations=len(template.substitutions),
            )
        )

    def _add_object(
        self, anchor: Node, object_node: Node, origin: FragmentOrigin, pattern: str
    ) -> None:
        style = strip_theme_tokens(self.parsed.read_object(object_node))
        has_variants = False
        if origin == "stitches":
            has_variants = any(key in STITCHES_VARIANT_KEYS for key in style)
            style = {key: value for key, value in style.items() if key not in STITCHES_VARIANT_KEYS}
        if origin in _FLAT_ORIGINS:
            css_text = flat_object_to_css(style)
        else:
            css_text = object_to_css(style)
        if is_blank(css_text):
            return
        self.fragments.append(
            ExtractedStyleFragment(
                css_text=css_text,
                origin=origin,
                pattern=pattern,
                location=self._location(anchor),
                has_variants=has_variants,
            )
        )

    def _css_prop(self, attribute: Node) -> None:
        children = named_children(attribute)
        if len(children) != 2 or children[0].type != "property_identifier":
            return
        if self.parsed.text(children[0]) != "css" or children[1].type != "jsx_expression":
            return
        inner = named_children(children[1])
        expression = unwrap(inner[0]) if len(inner) == 1 else None
        if expression is None:
            return
        if expression.type == "object":
            self._add_object(attribute, expression, "emotion", "css-prop-object")
        elif expression.type == "call_expression":
            function = expression.child_by_field_name("function")
            arguments = expression.child_by_field_name("arguments")
            if (
                function is not None
                and function.type == "identifier"
                and self.parsed.text(function) == "css"
                and arguments is not None
                and arguments.type == "template_string"
            ):
                self._add_template(attribute, arguments, "emotion", "css-prop-template")

    def _call(self, node: Node) -> None:
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if function is None or arguments is None:
            return
        anchor, members, calls = _call_chain(function, self.parsed)
        if anchor is None:
            return
        root = self.parsed.text(anchor)
        if root not in _TAG_ROOTS and root not in _CALL_ROOTS:
            return

        if arguments.type == "template_string":
            if root == "styled" and (members or calls):
                self._add_template(anchor, arguments, _tagged_library(root, self.imports), "styled")
            elif root in _TAG_ROOTS and root != "styled" and not members and not calls:
                self._add_template(anchor, arguments, _tagged_library(root, self.imports), root)
            return

        if root not in _CALL_ROOTS or members or calls:
            return
        values = [unwrap(argument) for argument in named_children(arguments)]
        index = 1 if root == "styled" else 0
        if len(values) <= index:
            return
        style = values[index]
        if style is None or style.type != "object":
            return
        pattern = "globalCss" if root == "globalCss" else root
        self._add_object(anchor, style, _object_library(root, self.imports), pattern)


def _keeps(libraries: Sequence[str], origin: str) -> bool:
    return ALL_LIBRARIES in libraries or origin in libraries


def _interpolation_advisory(source_path: str, fragment: ExtractedStyleFragment) -> str:
    line = fragment.location.line if fragment.location is not None else "?"
    noun = "value" if fragment.interpolations == 1 else "values"
    return (
        f"{source_path}:{line}: {fragment.interpolations} dynamic {noun} in "
        f"{fragment.origin} '{fragment.pattern}' not evaluated "
        f"(replaced with {DYNAMIC_PLACEHOLDER})"
    )


def analyze_js(
    source_text: str,
    source_path: str,
    *,
    libraries: Sequence[str] = (ALL_LIBRARIES,),
    ignore_interpolations: bool = False,
    jsx: bool = True,
) -> AnalysisResult:
    """Extract CSS fragments from styled-components, Emotion, Stitches,
    vue-styled-components and Pinceau usages.

    Nothing is evaluated: template interpolations become a placeholder
    comment and object styles keep only their static literal entries.
    """
    try:
        parsed = parse_source(source_text, jsx=jsx)
        extractor = _Extractor(parsed, source_path, ImportContext(parsed.imports()))
        extractor.scan()
    except JsSyntaxError as exc:
        LOGGER.debug("Parsing %s failed: %s", source_path, exc)
        return AnalysisResult(source=source_path, errors=[f"Failed to parse {source_path}: {exc}"])

    fragments = [fragment for fragment in extractor.fragments if _keeps(libraries, fragment.origin)]
    errors: list[str] = []
    if not ignore_interpolations:
        errors.extend(
            _interpolation_advisory(source_path, fragment)
            for fragment in fragments
            if fragment.interpolations
        )
    LOGGER.debug("Extracted %d CSS-in-JS fragments from %s", len(fragments), source_path)
    return AnalysisResult(source=source_path, extracted_styles=fragments, errors=errors)
