"""Text utility helpers."""

from __future__ import annotations


def is_blank(value: str | None) -> bool:
    return not value or not value.strip()


def ellipsize(value: str, width: int) -> str:
    """Shorten long strings while preserving suffix visibility."""
    if width <= 0:
        return ""
    if len(value) <= width:
        return value
    if width <= 1:
        return "…"
    return f"{value[: width - 1]}…"
