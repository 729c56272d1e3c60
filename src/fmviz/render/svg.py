"""
SVG Export.

Draws a Scene as a standalone SVG document: tree links, feature circles
coloured by type and search emphasis, wrapped labels, and the dashed
constraint curves with their endpoint markers. All content sits in one group
carrying the scene's current viewport transform.
"""

from __future__ import annotations

import textwrap
from typing import Any, Dict, List
from xml.sax.saxutils import escape

from ..config import (
    CONSTRAINT_STROKE,
    DEFAULT_FEATURE_FILL,
    FEATURE_FILL,
    LABEL_WRAP_CHARS,
    LINK_STROKE,
    MARKER_RADIUS,
    MATCH_STROKE,
    NODE_RADIUS,
    NODE_STROKE,
    RELATED_STROKE,
)
from ..engine import Scene
from ..graph.highlight import Emphasis

# stroke colour, stroke width per emphasis
NODE_OUTLINE = {
    Emphasis.MATCH: (MATCH_STROKE, 5),
    Emphasis.RELATED: (RELATED_STROKE, 3),
    Emphasis.NONE: (NODE_STROKE, 2),
}

# attribute values are always written inside double quotes
_QUOTE = {'"': "&quot;"}


def _attrs(**attrs: Any) -> str:
    return " ".join(f'{k.rstrip("_").replace("_", "-")}="{escape(str(v), _QUOTE)}"' for k, v in attrs.items())


def svg_path(d: str, **attrs: Any) -> str:
    return f'<path d="{d}" {_attrs(**attrs)}/>'


def svg_circle(cx: float, cy: float, r: float, **attrs: Any) -> str:
    return f'<circle cx="{cx:.1f}" cy="{cy:.1f}" r="{r:.1f}" {_attrs(**attrs)}/>'


def vertical_link(sx: float, sy: float, tx: float, ty: float) -> str:
    """Cubic link leaving the parent downward and entering the child from above."""
    my = (sy + ty) / 2
    return f"M{sx:.1f},{sy:.1f}C{sx:.1f},{my:.1f} {tx:.1f},{my:.1f} {tx:.1f},{ty:.1f}"


def feature_fill(feature_type: str) -> str:
    return FEATURE_FILL.get(feature_type, DEFAULT_FEATURE_FILL)


def svg_label(x: float, y: float, text: str, width: int = LABEL_WRAP_CHARS) -> str:
    lines = textwrap.wrap(text, width=width) or [text]
    spans = []
    for i, line in enumerate(lines):
        spans.append(f'<tspan x="{x:.1f}" dy="{0 if i == 0 else 1.1}em">{escape(line)}</tspan>')
    # keep multi-line labels vertically centred on the anchor
    shift = (len(lines) - 1) * 1.1 / 2
    return (
        f'<text x="{x:.1f}" y="{y:.1f}" text-anchor="middle" font-size="13" fill="#333" '
        f'transform="translate(0,{-shift * 13:.1f})">{"".join(spans)}</text>'
    )


def render_svg(scene: Scene) -> str:
    viewport = scene.viewport.viewport
    width = max(viewport.width, 1.0)
    height = max(viewport.height, 1.0)
    state = scene.highlights
    shapes: List[str] = []

    if scene.root is not None:
        by_id = scene.layout.by_id
        for parent, child in scene.root.links():
            p, c = by_id[parent.id], by_id[child.id]
            stroke = RELATED_STROKE if state.link_is_related(parent.id, child.id) else LINK_STROKE
            shapes.append(svg_path(vertical_link(p.x, p.y, c.x, c.y), fill="none", stroke=stroke, stroke_width=2))

        for pos in scene.layout.positioned:
            outline, outline_width = NODE_OUTLINE[state.emphasis(pos.id)]
            shapes.append(
                svg_circle(
                    pos.x, pos.y, NODE_RADIUS,
                    fill=feature_fill(pos.feature.type),
                    stroke=outline,
                    stroke_width=outline_width,
                    data_id=pos.id,
                )
            )
            label_y = pos.y - 35 if pos.node.children else pos.y + 40
            shapes.append(svg_label(pos.x, label_y, pos.feature.display_name))

        for curve in scene.overlays:
            style = curve.style
            shapes.append(
                svg_path(
                    curve.path,
                    fill="none",
                    stroke=style.stroke,
                    stroke_width=2,
                    stroke_dasharray=style.dash,
                    opacity=0.9,
                )
            )
            for marker in curve.endpoints:
                shapes.append(
                    svg_circle(
                        marker.position.x, marker.position.y, MARKER_RADIUS,
                        fill=CONSTRAINT_STROKE[marker.kind.value],
                        stroke="#fff",
                        stroke_width=1.5,
                    )
                )

    content = "\n    ".join(shapes)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:.1f}" height="{height:.1f}" '
        f'viewBox="0 0 {width:.1f} {height:.1f}">\n'
        f'  <rect width="100%" height="100%" fill="#fafafa"/>\n'
        f'  <g transform="{scene.viewport.current.to_svg()}">\n'
        f'    {content}\n'
        f'  </g>\n'
        f'</svg>\n'
    )


def scene_to_dict(scene: Scene) -> Dict[str, Any]:
    """JSON-friendly summary of a Scene."""
    box = scene.layout.bounding_box
    current = scene.viewport.current
    fit = scene.viewport.fit
    state = scene.highlights
    return {
        "nodes": [
            {
                "id": p.id,
                "label": p.feature.label,
                "type": p.feature.type,
                "parent": p.parent_id,
                "x": p.x,
                "y": p.y,
                "depth": p.depth,
                "emphasis": state.emphasis(p.id).value,
            }
            for p in scene.layout.positioned
        ],
        "links": [
            {
                "source": parent.id,
                "target": child.id,
                "related": state.link_is_related(parent.id, child.id),
            }
            for parent, child in (scene.root.links() if scene.root is not None else [])
        ],
        "constraints": [
            {
                "a": c.source,
                "b": c.target,
                "type": c.kind.value,
                "path": c.path,
                "control_points": [[pt.x, pt.y] for pt in c.control_points],
            }
            for c in scene.overlays
        ],
        "omitted": list(scene.report.omitted),
        "query": scene.query,
        "hits": list(scene.hits),
        "bounding_box": {"x": box.x, "y": box.y, "width": box.width, "height": box.height},
        "viewport": {
            "width": scene.viewport.viewport.width,
            "height": scene.viewport.viewport.height,
            "current": {"translate_x": current.translate_x, "translate_y": current.translate_y, "scale": current.scale},
            "fit": {"translate_x": fit.translate_x, "translate_y": fit.translate_y, "scale": fit.scale},
        },
    }
