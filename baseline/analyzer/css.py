"""Plain stylesheet front-end."""

from __future__ import annotations

from ..model import AnalysisResult, ExtractedStyleFragment, SourceLocation
from ..util.text import is_blank


def analyze_css(source_text: str, source_path: str) -> AnalysisResult:
    """Wrap a stylesheet as a single fragment; blank input yields nothing."""
    if is_blank(source_text):
        return AnalysisResult(source=source_path)
    fragment = ExtractedStyleFragment(
        css_text=source_text,
        origin="css",
        pattern="stylesheet",
        location=SourceLocation(source=source_path, line=1, column=0),
    )
    return AnalysisResult(source=source_path, extracted_styles=[fragment])
