"""Vue single-file component front-end."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import re

from bs4.builder import ParserRejectedMarkup

from ..constants import VUE_CSS_IN_JS_MARKERS, VUE_PLAIN_STYLE_LANGS
from ..model import AnalysisResult, ExtractedStyleFragment, SourceLocation
from ..util.html import (
    attr,
    debug_log,
    has_attr,
    parse_document,
    raw_content,
    source_column,
    source_line,
    top_level_blocks,
)

LOGGER = logging.getLogger(__name__)

CSS_IN_JS_ADVISORY = (
    "Detected Vue CSS-in-JS library. "
    "Use 'jsSource' parameter with 'autoDetectJS' for CSS-in-JS extraction."
)
UNTERMINATED_STYLE_ADVISORY = (
    "Unterminated <style> block - add a closing </style> tag; its CSS may be incomplete."
)

_STYLE_OPEN_RE = re.compile(r"<style\b[^>]*>", re.IGNORECASE)
_STYLE_CLOSE_RE = re.compile(r"</style\s*>", re.IGNORECASE)


@dataclass(frozen=True)
class SfcBlock:
    kind: str
    content: str
    attrs: dict[str, str] = field(default_factory=dict)
    line: int | None = None
    column: int | None = None

    @property
    def lang(self) -> str | None:
        return self.attrs.get("lang")


@dataclass(frozen=True)
class SfcDescriptor:
    template: SfcBlock | None = None
    script: SfcBlock | None = None
    script_setup: SfcBlock | None = None
    styles: tuple[SfcBlock, ...] = ()


def parse_sfc(source_text: str) -> SfcDescriptor:
    """Split a component into its top-level template, script and style blocks."""
    document = parse_document(source_text)
    template = None
    script = None
    script_setup = None
    styles: list[SfcBlock] = []

    for node in top_level_blocks(document):
        attrs = {name: attr(node, name) or "" for name in node.attrs}
        block = SfcBlock(
            kind=node.name,
            content=raw_content(node),
            attrs=attrs,
            line=source_line(node),
            column=source_column(node),
        )
        if node.name == "template" and template is None:
            template = block
        elif node.name == "script":
            if has_attr(node, "setup"):
                script_setup = script_setup or block
            else:
                script = script or block
        elif node.name == "style":
            styles.append(block)
        else:
            debug_log(f"Ignoring custom SFC block <{node.name}>")

    return SfcDescriptor(
        template=template,
        script=script,
        script_setup=script_setup,
        styles=tuple(styles),
    )


def analyze_vue(source_text: str, source_path: str) -> AnalysisResult:
    """Extract plain CSS ``<style>`` blocks from a Vue component."""
    try:
        descriptor = parse_sfc(source_text)
    except ParserRejectedMarkup as exc:
        return AnalysisResult(
            source=source_path,
            errors=[f"Failed to parse Vue component {source_path}: {exc}"],
        )
    fragments: list[ExtractedStyleFragment] = []
    errors: list[str] = []
    if len(_STYLE_OPEN_RE.findall(source_text)) > len(_STYLE_CLOSE_RE.findall(source_text)):
        errors.append(UNTERMINATED_STYLE_ADVISORY)

    for style in descriptor.styles:
        lang = style.lang
        if lang and lang.lower() not in VUE_PLAIN_STYLE_LANGS:
            errors.append(
                f'Skipping <style lang="{lang}"> - preprocessors not supported yet. '
                "Use compiled CSS or manual annotation."
            )
            continue
        css_text = style.content.strip()
        if not css_text:
            continue
        fragments.append(
            ExtractedStyleFragment(
                css_text=css_text,
                origin="vue-sfc",
                pattern="style-block",
                location=SourceLocation(source=source_path, line=style.line, column=style.column),
                scoped="scoped" in style.attrs,
                module="module" in style.attrs,
                lang=lang or "css",
            )
        )

    scripts = [block.content for block in (descriptor.script, descriptor.script_setup) if block]
    if any(marker in content for content in scripts for marker in VUE_CSS_IN_JS_MARKERS):
        errors.append(CSS_IN_JS_ADVISORY)

    LOGGER.debug("Extracted %d style blocks from %s", len(fragments), source_path)
    return AnalysisResult(source=source_path, extracted_styles=fragments, errors=errors)
