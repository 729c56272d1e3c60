"""
Tree Command - Print the feature hierarchy.

Shows the tree the diagram is drawn from, with search matches and their
ancestors/descendants marked, followed by any features that could not be
placed under the root.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from ...config import load_settings
from ...core.exceptions import SettingsError
from ...graph.hierarchy import HierarchyBuilder
from ...graph.highlight import Emphasis, HighlightPropagator
from ...search import search_features
from ..utils import echo_error, load_model_or_report

console = Console()

TYPE_MARKS = {"mandatory": "[green]●[/green]", "optional": "[blue]○[/blue]"}
EMPHASIS_STYLE = {Emphasis.MATCH: "bold red", Emphasis.RELATED: "magenta", Emphasis.NONE: ""}


def _label(feature, emphasis: Emphasis) -> str:
    mark = TYPE_MARKS.get(feature.type, "[dim]·[/dim]")
    name = escape(feature.display_name)
    style = EMPHASIS_STYLE[emphasis]
    text = f"[{style}]{name}[/{style}]" if style else name
    return f"{mark} {text} [dim]({feature.id})[/dim]"


@click.command()
@click.argument("model_file", type=click.Path())
@click.option("-q", "--query", default=None, help="Mark features matching this text")
@click.option("-c", "--config", "config_file", type=click.Path(), default=None, help="Settings YAML file")
def tree(model_file: str, query: Optional[str], config_file: Optional[str]):
    """
    Print the hierarchy of MODEL_FILE.
    """
    try:
        settings = load_settings(Path(config_file) if config_file else None)
    except SettingsError as e:
        echo_error(str(e))
        sys.exit(1)

    model = load_model_or_report(model_file)
    if model is None:
        sys.exit(1)

    report = HierarchyBuilder(settings.root_policy).build_with_report(model.features)
    if report.root is None:
        console.print("[yellow]No root feature found.[/yellow]")
        sys.exit(1)

    hits = search_features(model.features, query)
    state = HighlightPropagator(report.root).expand(hits)

    view = Tree(_label(report.root.feature, state.emphasis(report.root.id)))
    stack = [(report.root, view)]
    while stack:
        node, branch = stack.pop()
        handles = [
            (child, branch.add(_label(child.feature, state.emphasis(child.id))))
            for child in node.children
        ]
        stack.extend(reversed(handles))

    console.print(view)

    if query is not None:
        console.print(f"{len(hits)} feature(s) matched '{query}'")
    if report.omitted:
        console.print(f"[yellow]Not shown ({len(report.omitted)}):[/yellow] {', '.join(report.omitted)}")
