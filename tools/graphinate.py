#!/usr/bin/env python3
from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import typer

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
# This script shares its name with the package, so src must come before tools/.
if str(SRC_ROOT) in sys.path:
    sys.path.remove(str(SRC_ROOT))
sys.path.insert(0, str(SRC_ROOT))

from graphinate import (  # noqa: E402
    GraphinateError,
    RenderConfig,
    available_themes,
    load_render_config,
    render_file,
    resolve_theme,
)
from validators import validate_svg  # noqa: E402

app = typer.Typer(
    add_completion=False,
    help="Render Markdown chart descriptions to SVG, list themes, or check output.",
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: GraphinateError) -> None:
    typer.echo(f"ERROR {exc.code}: {exc.message}", err=True)
    typer.echo(f"HINT: {exc.hint}", err=True)
    raise typer.Exit(code=1)


@app.command("render")
def render(
    input_md: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Markdown file with a YAML chart header.",
    ),
    output_svg: Path | None = typer.Option(
        None,
        "--out",
        "-o",
        dir_okay=False,
        help="Output SVG path (defaults to the input name with .svg).",
    ),
    theme: str | None = typer.Option(
        None,
        "--theme",
        "-t",
        help="Theme id overriding the document's theme.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Optional render config YAML (canvas, seed, venn, text).",
    ),
    width: int | None = typer.Option(None, "--width", min=1, help="Canvas width override."),
    height: int | None = typer.Option(None, "--height", min=1, help="Canvas height override."),
    seed: int | None = typer.Option(None, "--seed", min=0, help="Jitter seed override."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log layout decisions."),
) -> None:
    """Render one chart document to SVG."""
    _configure_logging(verbose)
    target = output_svg or input_md.with_suffix(".svg")
    try:
        render_config = load_render_config(config) if config is not None else RenderConfig()
        overrides = {"width": width, "height": height, "seed": seed}
        render_config = replace(
            render_config, **{key: value for key, value in overrides.items() if value is not None}
        )
        render_file(input_md, target, theme_id=theme, config=render_config)
    except GraphinateError as exc:
        _fail(exc)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"ERROR E2199_UNEXPECTED: {exc}", err=True)
        typer.echo("HINT: Check the input document and config.", err=True)
        raise typer.Exit(code=1)
    typer.echo(str(target))


@app.command()
def themes() -> None:
    """List available themes."""
    for theme_id in available_themes():
        theme = resolve_theme(theme_id)
        typer.echo(f"{theme.id}\t{theme.description}")


@app.command()
def validate(
    input_svg: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Path to the SVG to validate.",
    ),
    kind: str | None = typer.Option(
        None,
        "--kind",
        "-k",
        help="Expected chart kind (inferred from groups when omitted).",
    ),
    report: Path | None = typer.Option(
        None,
        "--report",
        "-o",
        dir_okay=False,
        help="Optional path to write the JSON report.",
    ),
) -> None:
    """Check a rendered SVG against the output contract."""
    result = validate_svg(input_svg, kind)
    payload = json.dumps(result.to_dict(), indent=2, sort_keys=True)
    if report is not None:
        report.write_text(payload)
    typer.echo(payload)
    raise typer.Exit(code=0 if result.ok else 1)


if __name__ == "__main__":
    app(prog_name="graphinate")
