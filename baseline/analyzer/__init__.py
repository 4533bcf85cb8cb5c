"""Syntax front-ends that turn host source files into CSS fragments."""

from __future__ import annotations

from collections.abc import Callable

from ..model import AnalysisResult
from .angular import analyze_angular
from .css import analyze_css
from .js import analyze_js
from .vue import analyze_vue, parse_sfc

FrontEnd = Callable[..., AnalysisResult]

FRONT_ENDS: dict[str, FrontEnd] = {
    "css": analyze_css,
    "js": analyze_js,
    "vue": analyze_vue,
    "angular": analyze_angular,
}

__all__ = [
    "FRONT_ENDS",
    "FrontEnd",
    "analyze_angular",
    "analyze_css",
    "analyze_js",
    "analyze_vue",
    "parse_sfc",
]
