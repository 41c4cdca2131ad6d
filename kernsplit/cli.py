from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from kernsplit.config import SplitSettings, load_settings
from kernsplit.layout import Rect
from kernsplit.metrics import metrics_from_settings
from kernsplit.page import Page
from kernsplit.segmentation import collapse_whitespace
from kernsplit.split import SplitResult, split_text
from kernsplit.styles import style_of

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _exit_with_error(exc: Exception) -> None:
    """Print ``exc`` to stderr and exit with status 1."""
    print(f"error: {exc}", file=sys.stderr)
    raise typer.Exit(1)


def _rect(rect: Rect) -> Dict[str, float]:
    return {
        "left": round(rect.left, 2),
        "top": round(rect.top, 2),
        "width": round(rect.width, 2),
        "height": round(rect.height, 2),
    }


def _report(page: Page, result: SplitResult, text: str) -> Dict[str, Any]:
    words_out: List[Dict[str, Any]] = []
    lines_out: List[Dict[str, Any]] = [
        {"index": i, "rect": _rect(page.measure(line)), "words": []}
        for i, line in enumerate(result.lines)
    ]
    line_ids = {id(line): entry for line, entry in zip(result.lines, lines_out)}
    for word in result.words:
        entry = {
            "text": word.get_text(),
            "rect": _rect(page.measure(word)),
            "chars": [
                {
                    "text": char.get_text(),
                    "left": round(page.measure(char).left, 2),
                    "margin_left": style_of(char).get("margin-left"),
                }
                for char in word.find_all("span", recursive=False)
            ],
        }
        words_out.append(entry)
        line_entry = line_ids.get(id(word.parent))
        if line_entry is not None:
            line_entry["words"].append(entry)
    return {
        "text": text,
        "prefers_reduced_motion": result.prefers_reduced_motion,
        "counts": {
            "chars": len(result.chars),
            "words": len(result.words),
            "lines": len(result.lines),
        },
        "lines": lines_out,
    }


def _run_split(
    input_path: Path,
    selector: str,
    width: float,
    font: Optional[str],
    config: Optional[Path],
    emit_html: bool,
) -> None:
    settings: SplitSettings = load_settings(
        config, overrides={"font": font} if font else None
    )
    metrics = metrics_from_settings(settings.font, settings.kerning)
    page = Page(
        input_path.read_text(encoding="utf-8"),
        width=width,
        metrics=metrics,
        settings=settings,
    )
    try:
        container = page.soup.select_one(selector)
        if container is None:
            raise ValueError(f"no element matches {selector!r}")
        text = collapse_whitespace(container.get_text())
        result = split_text(container)
        report = _report(page, result, text)
        if emit_html:
            report["html"] = container.decode_contents()
        print(json.dumps(report, ensure_ascii=False, indent=2))
    finally:
        page.close()


@app.command()
def split(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="HTML file"),
    selector: str = typer.Option("p", "--selector", "-s", help="CSS selector of the container"),
    width: float = typer.Option(800.0, "--width", "-w", help="Viewport width in px"),
    font: Optional[str] = typer.Option(None, "--font", help="PyMuPDF font name for metrics"),
    config: Optional[Path] = typer.Option(None, "--config", help="kernsplit.yaml settings file"),
    emit_html: bool = typer.Option(False, "--html", help="Include the split markup"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Split the selected element and print its lines, words and chars as JSON."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
        logging.captureWarnings(True)
    try:
        _run_split(input_path, selector, width, font, config, emit_html)
    except Exception as exc:
        _exit_with_error(exc)


@app.callback()
def main() -> None:
    """Kerning-preserving text splitting."""


if __name__ == "__main__":
    app()
