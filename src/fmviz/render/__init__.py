"""Output formats for laid-out scenes."""

from .svg import render_svg, scene_to_dict

__all__ = ["render_svg", "scene_to_dict"]
