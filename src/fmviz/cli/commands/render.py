"""
Render Command - Draw the feature diagram.

Writes a standalone SVG of the laid-out model (fitted to the drawing
surface), or prints the scene as JSON for other front ends.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from ...config import load_settings
from ...core.exceptions import SettingsError
from ...core.types import ViewportSize
from ...engine import FeatureModelEngine
from ...render.svg import render_svg, scene_to_dict
from ..utils import describe_failure, echo_error, echo_info, echo_json, echo_success, echo_warning

logger = logging.getLogger(__name__)


@click.command()
@click.argument("model_file", type=click.Path())
@click.option("-o", "--output", default="feature-model.svg", help="Output SVG file")
@click.option("-q", "--query", default=None, help="Highlight features matching this text")
@click.option("--highlight", "highlights", multiple=True, help="Feature id to highlight (repeatable)")
@click.option("--width", type=float, default=None, help="Viewport width (defaults to the diagram size)")
@click.option("--height", type=float, default=None, help="Viewport height (defaults to the diagram size)")
@click.option("-c", "--config", "config_file", type=click.Path(), default=None, help="Settings YAML file")
@click.option("--json", "json_mode", is_flag=True, help="Print the scene as JSON instead of writing SVG")
def render(
    model_file: str,
    output: str,
    query: Optional[str],
    highlights: Tuple[str, ...],
    width: Optional[float],
    height: Optional[float],
    config_file: Optional[str],
    json_mode: bool,
):
    """
    Lay out MODEL_FILE and draw it.
    """
    from ...io.loader import load_model

    try:
        settings = load_settings(Path(config_file) if config_file else None)
    except SettingsError as e:
        if json_mode:
            echo_json("error", error=str(e))
        else:
            echo_error(str(e))
        sys.exit(1)

    result = load_model(model_file)
    if result.is_err():
        lines = describe_failure(result.error)
        if json_mode:
            echo_json("error", error="\n".join(lines))
        else:
            echo_error(lines[0])
            for line in lines[1:]:
                click.echo(line, err=True)
        sys.exit(1)

    viewport = None
    if width is not None or height is not None:
        if width is None or height is None:
            echo_error("--width and --height must be given together")
            sys.exit(1)
        viewport = ViewportSize(width=width, height=height)

    engine = FeatureModelEngine(settings)
    scene = engine.render(result.value, query=query, highlights=highlights, viewport=viewport)

    if json_mode:
        echo_json("success", scene_to_dict(scene))
        return

    if scene.is_empty:
        echo_warning("No root feature found; the diagram is empty.")

    output_path = Path(output)
    output_path.write_text(render_svg(scene), encoding="utf-8")

    echo_success(f"Generated: {output_path}")
    echo_info(f"{len(scene.layout.positioned)} features, {len(scene.overlays)} constraints drawn")
    if scene.report.omitted:
        echo_warning(f"{len(scene.report.omitted)} feature(s) not reachable from the root were left out")
    if query is not None:
        echo_info(f"{len(scene.hits)} feature(s) matched '{query}'")
