"""
Search Command - Find features by label.

Case-insensitive substring match over labels (ids for unlabelled features),
reported in model order.
"""

from typing import List

import click
from pydantic import BaseModel, Field

from ...search import SearchIndex
from ..utils import echo_json, echo_warning, load_model_or_report


# --- API Models ---
class SearchHit(BaseModel):
    id: str
    label: str
    parent: str | None = None


class SearchResponse(BaseModel):
    query: str
    count: int
    hits: List[SearchHit] = Field(default_factory=list)


@click.command()
@click.argument("model_file", type=click.Path())
@click.argument("query")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search(model_file: str, query: str, as_json: bool):
    """
    Search MODEL_FILE for features matching QUERY.
    """
    model = load_model_or_report(model_file, quiet=as_json)
    if model is None:
        if as_json:
            echo_json("error", error=f"Could not load model: {model_file}")
        raise SystemExit(1)

    by_id = {f.id: f for f in model.features}
    ids = SearchIndex(model.features).search(query)
    response = SearchResponse(
        query=query,
        count=len(ids),
        hits=[SearchHit(id=i, label=by_id[i].label, parent=by_id[i].parent) for i in ids],
    )

    if as_json:
        echo_json("success", response.model_dump())
        return

    if not response.hits:
        echo_warning(f"No features match '{query}'")
        return

    click.echo(f"{response.count} feature{'' if response.count == 1 else 's'} found")
    for hit in response.hits:
        suffix = f"  ↳ {hit.parent}" if hit.parent else ""
        click.echo(f"  {hit.label or hit.id} ({hit.id}){suffix}")
