"""Console script for pybaseline."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from rich.console import Console

from . import __version__ as _version
from .constants import ALL_LIBRARIES, LIBRARY_IMPORT_SOURCES
from .dataset import FeatureDataset, get_default_dataset
from .exceptions import BaselineError
from .export import EXPORTERS, prepare_export_data
from .http import use_shared_client
from .model import CssInJsConfig, StoryParameters, SummaryEventPayload
from .orchestrator import evaluate_story
from .render_basic import render_basic
from .util.html import debug_enabled

CSS_SUFFIXES = frozenset({".css", ".pcss"})
VUE_SUFFIXES = frozenset({".vue"})
JS_SUFFIXES = frozenset({".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts"})
NO_JSX_SUFFIXES = frozenset({".ts", ".mts", ".cts"})
ANGULAR_MARKER = "@Component("


def classify_source(path: Path, text: str) -> str:
    """Pick the front-end for a file from its extension (and content for Angular)."""
    suffix = path.suffix.lower()
    if suffix in CSS_SUFFIXES:
        return "css"
    if suffix in VUE_SUFFIXES:
        return "vue"
    if suffix in NO_JSX_SUFFIXES and ANGULAR_MARKER in text:
        return "angular"
    if suffix in JS_SUFFIXES:
        return "js"
    raise click.UsageError(f"Unsupported file type: {path}")


def _read_source(path: Path) -> tuple[str, str]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise click.FileError(str(path), hint=str(exc)) from exc
    return classify_source(path, text), text


def _parameters_for(
    kind: str | None,
    text: str | None,
    *,
    features: tuple[str, ...],
    target: str | None,
    css_in_js: CssInJsConfig,
) -> StoryParameters:
    return StoryParameters(
        features=features,
        target=target,
        css=(text,) if kind == "css" and text is not None else (),
        css_in_js=css_in_js,
        js_source=text if kind == "js" else None,
        vue_source=text if kind == "vue" else None,
        angular_source=text if kind == "angular" else None,
    )


def _load_dataset(data_path: str | None) -> FeatureDataset:
    if data_path:
        return FeatureDataset.from_path(data_path)
    with use_shared_client():
        return get_default_dataset()


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug_enabled() else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _emit(payloads: list[SummaryEventPayload], output_format: str) -> str | None:
    if output_format == "text":
        return None
    exports = [prepare_export_data(payload) for payload in payloads]
    if output_format == "json" and len(exports) > 1:
        return json.dumps([data.to_dict() for data in exports], indent=2, ensure_ascii=False)
    return EXPORTERS[output_format](exports[0])


@click.argument(
    "files",
    metavar="[FILES]...",
    nargs=-1,
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(_version, "-v", "--version")
@click.option("-t", "--target", default=None, help="Baseline target, e.g. 2024 or newly.")
@click.option(
    "-f", "--feature", "features", multiple=True, help="Annotate a web-features id manually."
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "csv", "html"]),
    default="text",
    show_default=True,
)
@click.option("--story-id", default=None, help="Story id for reports (defaults to the file path).")
@click.option(
    "--library",
    "libraries",
    multiple=True,
    type=click.Choice([ALL_LIBRARIES, *LIBRARY_IMPORT_SOURCES]),
    help="Only extract CSS-in-JS for these libraries.",
)
@click.option(
    "--data",
    "data_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Local web-features data.json (else $BASELINE_FEATURES_DATA or download).",
)
@click.option("--ignore-interpolations", is_flag=True, help="Hide dynamic-value notes.")
@click.option("--show-source", is_flag=True, help="Print the extracted CSS fragments.")
@click.option("--strict", is_flag=True, help="Exit with status 1 on non-compliant features.")
def main(
    files: tuple[Path, ...],
    target: str | None,
    features: tuple[str, ...],
    output_format: str,
    story_id: str | None,
    libraries: tuple[str, ...],
    data_path: str | None,
    ignore_interpolations: bool,
    show_source: bool,
    strict: bool,
) -> None:
    """
    Check CSS feature usage against Baseline

    \b
    Example usages:
      baseline-check src/Button.module.css
      baseline-check --target 2023 src/Card.tsx src/Nav.vue
      baseline-check --feature grid --feature has --format json
    """
    if not files and not features:
        raise click.UsageError("Provide at least one file or --feature.")
    if output_format in ("csv", "html") and len(files) > 1:
        raise click.UsageError(f"--format {output_format} reports a single file at a time.")

    _configure_logging()
    css_in_js = CssInJsConfig(
        libraries=libraries or (ALL_LIBRARIES,),
        ignore_interpolations=ignore_interpolations,
        show_source=show_source,
    )

    try:
        dataset = _load_dataset(data_path)
        payloads: list[SummaryEventPayload] = []
        sources: list[tuple[Path | None, str | None, str | None]] = [
            (path, *_read_source(path)) for path in files
        ] or [(None, None, None)]
        for path, kind, text in sources:
            parameters = _parameters_for(
                kind, text, features=features, target=target, css_in_js=css_in_js
            )
            payloads.append(
                evaluate_story(
                    story_id or (str(path) if path else "cli"),
                    parameters,
                    dataset=dataset,
                    source_path=str(path) if path else None,
                    jsx=path is None or path.suffix.lower() not in NO_JSX_SUFFIXES,
                )
            )
    except BaselineError as exc:
        raise click.ClickException(str(exc)) from exc

    rendered = _emit(payloads, output_format)
    if rendered is None:
        console = Console()
        for payload in payloads:
            console.print(render_basic(payload))
    else:
        click.echo(rendered)

    if strict and any(
        payload.summary is not None and payload.summary.non_compliant_count
        for payload in payloads
    ):
        click.get_current_context().exit(1)
