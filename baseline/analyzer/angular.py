"""Angular ``@Component`` decorator front-end."""

from __future__ import annotations

import logging

from tree_sitter import Node

from ..constants import ANGULAR_ENCAPSULATION_MODES
from ..exceptions import JsSyntaxError
from ..model import AnalysisResult, ExtractedStyleFragment, SourceLocation
from ..util.js import ParsedSource, named_children, parse_source, unwrap
from .js import template_to_css

LOGGER = logging.getLogger(__name__)

STYLE_URLS_ADVISORY = (
    "Component uses 'styleUrls' - external CSS files not supported. "
    "Use inline 'styles' array or manual annotation."
)


def _component_configs(parsed: ParsedSource) -> list[Node]:
    """Return the configuration object of each ``@Component({...})`` decorator."""
    configs: list[Node] = []
    for decorator in parsed.find_all("decorator"):
        children = named_children(decorator)
        call = children[0] if len(children) == 1 else None
        if call is None or call.type != "call_expression":
            continue
        function = call.child_by_field_name("function")
        if function is None or parsed.text(function) != "Component":
            continue
        arguments = named_children(call.child_by_field_name("arguments"))
        config = unwrap(arguments[0]) if arguments else None
        if config is not None and config.type == "object":
            configs.append(config)
    return configs


def _encapsulation(parsed: ParsedSource, node: Node) -> str | None:
    node = unwrap(node)
    if node is None:
        return None
    if node.type == "member_expression":
        node = node.child_by_field_name("property")
        if node is None:
            return None
    if node.type == "number":
        value = parsed.number(node)
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return ANGULAR_ENCAPSULATION_MODES.get(str(value))
    return ANGULAR_ENCAPSULATION_MODES.get(parsed.text(node))


def _style_elements(node: Node) -> list[Node]:
    """Return the string/template nodes of a ``styles`` value (array or bare literal)."""
    node = unwrap(node)
    if node is None:
        return []
    if node.type == "array":
        return [
            element
            for element in named_children(node)
            if element.type in ("string", "template_string")
        ]
    if node.type in ("string", "template_string"):
        return [node]
    return []


def _style_fragment(
    parsed: ParsedSource, element: Node, source_path: str, encapsulation: str | None
) -> ExtractedStyleFragment | None:
    interpolations = 0
    if element.type == "string":
        css_text = parsed.string_value(element).strip()
    else:
        template = parsed.template(element)
        css_text = template_to_css(template).strip()
        interpolations = len(template.substitutions)
    if not css_text:
        return None
    line, column = parsed.position(element)
    return ExtractedStyleFragment(
        css_text=css_text,
        origin="angular-component",
        pattern="styles",
        location=SourceLocation(source=source_path, line=line, column=column),
        interpolations=interpolations,
        encapsulation=encapsulation,
    )


def _extract(parsed: ParsedSource, source_path: str) -> tuple[list[ExtractedStyleFragment], bool]:
    fragments: list[ExtractedStyleFragment] = []
    uses_style_urls = False
    for config in _component_configs(parsed):
        entries = parsed.object_entries(config)
        if "styleUrls" in entries or "styleUrl" in entries:
            uses_style_urls = True
        encapsulation = (
            _encapsulation(parsed, entries["encapsulation"]) if "encapsulation" in entries else None
        )
        if "styles" not in entries:
            continue
        for element in _style_elements(entries["styles"]):
            fragment = _style_fragment(parsed, element, source_path, encapsulation)
            if fragment is not None:
                fragments.append(fragment)
    return fragments, uses_style_urls


def analyze_angular(source_text: str, source_path: str) -> AnalysisResult:
    """Extract inline component styles tagged with the component's view encapsulation."""
    try:
        fragments, uses_style_urls = _extract(parse_source(source_text, jsx=False), source_path)
    except JsSyntaxError as exc:
        return AnalysisResult(
            source=source_path,
            errors=[f"Failed to parse Angular component {source_path}: {exc}"],
        )

    errors: list[str] = []
    if not fragments and uses_style_urls:
        errors.append(STYLE_URLS_ADVISORY)
    LOGGER.debug("Extracted %d component styles from %s", len(fragments), source_path)
    return AnalysisResult(source=source_path, extracted_styles=fragments, errors=errors)
